from marshmallow import EXCLUDE, pre_load, validate

from soshi.extensions.extensions import ma


def strip_strings(data):
    if not isinstance(data, dict):
        return data
    return {
        key: value.strip() if isinstance(value, str) and key != "password" else value
        for key, value in data.items()
    }


class RegisterSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    email = ma.Email(required=True, validate=validate.Length(max=255))
    password = ma.Str(required=True, validate=validate.Length(min=6, max=128))
    first_name = ma.Str(required=True, validate=validate.Length(min=1, max=100))
    last_name = ma.Str(required=True, validate=validate.Length(min=1, max=100))
    date_of_birth = ma.Date(required=True)
    avatar = ma.Str(load_default=None, allow_none=True, validate=validate.Length(max=255))
    nickname = ma.Str(load_default=None, allow_none=True, validate=validate.Length(max=80))
    about_me = ma.Str(load_default=None, allow_none=True)

    @pre_load
    def strip(self, data, **kwargs):
        return strip_strings(data)


class LoginSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    email = ma.Str(required=True, validate=validate.Length(min=1))
    password = ma.Str(required=True, validate=validate.Length(min=1))


class ChangePasswordSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    current_password = ma.Str(required=True, validate=validate.Length(min=1))
    new_password = ma.Str(required=True, validate=validate.Length(min=6, max=128))
