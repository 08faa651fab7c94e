# snapshare/api/posts/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE

from snapshare.api.users.schemas import UserSummarySchema


class PostCreateSchema(Schema):
    """Form fields of POST /api/posts (the image travels as the multipart `image` file)."""

    class Meta:
        unknown = EXCLUDE

    title = fields.Str(required=True, validate=validate.Length(min=1, max=150),
                       error_messages={"required": "Title is required"})
    caption = fields.Str(load_default="", validate=validate.Length(max=2200))


class PostResponseSchema(Schema):
    post_id = fields.Str(required=True, data_key='id')
    user_id = fields.Str(required=True, data_key='userId')
    user = fields.Nested(UserSummarySchema, allow_none=True)
    title = fields.Str(required=True)
    caption = fields.Str()
    image_url = fields.Str(required=True, data_key='imageUrl')
    like_count = fields.Int(required=True, data_key='likeCount')
    created_at = fields.DateTime(data_key='createdAt')
    updated_at = fields.DateTime(data_key='updatedAt')
