from marshmallow import EXCLUDE, post_load, validate

from soshi.extensions.extensions import ma


class ActivityQuerySchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    page = ma.Int(load_default=1, validate=validate.Range(min=1))
    limit = ma.Int(load_default=20, validate=validate.Range(min=1))
    types = ma.Str(load_default="")
    show_hidden = ma.Bool(load_default=False)

    @post_load
    def split_types(self, data, **kwargs):
        data["types"] = [t.strip() for t in data["types"].split(",") if t.strip()]
        return data


class ActivitySettingsSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    show_posts = ma.Bool()
    show_comments = ma.Bool()
    show_likes = ma.Bool()
    show_to_followers_only = ma.Bool()
