# snapshare/api/likes/schemas.py
from marshmallow import Schema, fields


class LikeToggleSchema(Schema):
    """POST /api/likes/toggle request body."""
    post_id = fields.Str(required=True, data_key='postId',
                         error_messages={"required": "postId is required"})


class LikeToggleResponseSchema(Schema):
    liked = fields.Bool(required=True)
    like_count = fields.Int(required=True, data_key='likeCount')


class LikeCountResponseSchema(Schema):
    post_id = fields.Str(required=True, data_key='postId')
    like_count = fields.Int(required=True, data_key='likeCount')
    liked = fields.Bool(required=True)
