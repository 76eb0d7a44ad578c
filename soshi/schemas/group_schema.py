from marshmallow import EXCLUDE, validate

from soshi.extensions.extensions import ma
from soshi.models.group_model import EVENT_RESPONSES


class GroupCreateSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    title = ma.Str(required=True, validate=validate.Length(min=1, max=255))
    description = ma.Str(load_default="", validate=validate.Length(max=5000))


class GroupUpdateSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    title = ma.Str(validate=validate.Length(min=1, max=255))
    description = ma.Str(validate=validate.Length(max=5000))


class InviteSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    user_id = ma.Int(required=True, strict=True)


class MemberDecisionSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    status = ma.Str(required=True, validate=validate.OneOf(["accepted", "declined"]))


class EventCreateSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    title = ma.Str(required=True, validate=validate.Length(min=1, max=255))
    description = ma.Str(load_default="", validate=validate.Length(max=5000))
    # RFC3339, e.g. 2026-11-01T18:00:00Z
    event_date = ma.AwareDateTime(required=True, format="iso")


class EventResponseSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    response = ma.Str(required=True, validate=validate.OneOf(list(EVENT_RESPONSES)))
