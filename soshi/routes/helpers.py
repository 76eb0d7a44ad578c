from flask import request

from soshi.errors import ValidationError
from soshi.schemas.post_schema import PostQuerySchema


def json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON body")
    return data


def paging():
    args = PostQuerySchema().load(request.args)
    return args["page"], args["limit"]
