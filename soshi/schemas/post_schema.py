from marshmallow import EXCLUDE, ValidationError, validate, validates_schema

from soshi.extensions.extensions import ma
from soshi.models.post_model import PostPrivacy


PRIVACY_CHOICES = [privacy.value for privacy in PostPrivacy]


class PostCreateSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    content = ma.Str(required=True, validate=validate.Length(min=1, max=10000))
    privacy = ma.Str(
        load_default=PostPrivacy.PUBLIC.value,
        validate=validate.OneOf(PRIVACY_CHOICES),
    )
    allowed_viewers = ma.List(ma.Int(strict=True), load_default=list)
    image_url = ma.Str(load_default=None, allow_none=True, validate=validate.Length(max=255))
    group_id = ma.Int(load_default=None, allow_none=True, strict=True)

    @validates_schema
    def check_content(self, data, **kwargs):
        if not data.get("content", "").strip():
            raise ValidationError("Content is required", "content")


class PostUpdateSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    content = ma.Str(validate=validate.Length(min=1, max=10000))
    privacy = ma.Str(validate=validate.OneOf(PRIVACY_CHOICES))
    allowed_viewers = ma.List(ma.Int(strict=True))
    image_url = ma.Str(allow_none=True, validate=validate.Length(max=255))

    @validates_schema
    def check_content(self, data, **kwargs):
        if "content" in data and not data["content"].strip():
            raise ValidationError("Content cannot be empty", "content")


class PostQuerySchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    page = ma.Int(load_default=1, validate=validate.Range(min=1))
    limit = ma.Int(load_default=10, validate=validate.Range(min=1))
