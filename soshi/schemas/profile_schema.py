from marshmallow import EXCLUDE, pre_load, validate

from soshi.extensions.extensions import ma
from soshi.schemas.auth_schema import strip_strings


class ProfileUpdateSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    first_name = ma.Str(validate=validate.Length(min=1, max=100))
    last_name = ma.Str(validate=validate.Length(min=1, max=100))
    date_of_birth = ma.Date()
    avatar = ma.Str(allow_none=True, validate=validate.Length(max=255))
    nickname = ma.Str(allow_none=True, validate=validate.Length(max=80))
    about_me = ma.Str(allow_none=True)

    @pre_load
    def strip(self, data, **kwargs):
        return strip_strings(data)


class PrivacySchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    is_public = ma.Bool(required=True)


class FollowDecisionSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    status = ma.Str(required=True, validate=validate.OneOf(["accepted", "declined"]))
