from marshmallow import EXCLUDE, ValidationError, validate, validates_schema

from soshi.extensions.extensions import ma
from soshi.models.reaction_model import REACTION_TYPES


class CommentCreateSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    content = ma.Str(required=True, validate=validate.Length(min=1, max=5000))
    parent_id = ma.Int(load_default=None, allow_none=True, strict=True)
    image_url = ma.Str(load_default=None, allow_none=True, validate=validate.Length(max=255))

    @validates_schema
    def check_content(self, data, **kwargs):
        if not data.get("content", "").strip():
            raise ValidationError("Comment text is required", "content")


class CommentUpdateSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    content = ma.Str(required=True, validate=validate.Length(min=1, max=5000))
    image_url = ma.Str(allow_none=True, validate=validate.Length(max=255))

    @validates_schema
    def check_content(self, data, **kwargs):
        if not data.get("content", "").strip():
            raise ValidationError("Comment text is required", "content")


class CommentResponseSchema(ma.Schema):
    id = ma.Int()
    post_id = ma.Int()
    parent_id = ma.Int(allow_none=True)
    content = ma.Str(allow_none=True)
    image_url = ma.Str(allow_none=True)
    author = ma.Dict(allow_none=True)
    reactions = ma.Dict(allow_none=True)
    deleted = ma.Bool()
    created_at = ma.Str()
    updated_at = ma.Str()
    replies = ma.List(ma.Nested(lambda: CommentResponseSchema()))


class ReactionSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    type = ma.Str(required=True, validate=validate.OneOf(list(REACTION_TYPES)))
