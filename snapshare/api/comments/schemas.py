# snapshare/api/comments/schemas.py
from marshmallow import Schema, fields, validate, pre_load

from snapshare.api.users.schemas import UserSummarySchema


class CommentCreateSchema(Schema):
    """POST /api/comments/<post_id>"""
    text = fields.Str(
        required=True,
        validate=[
            validate.Length(min=1, error="Comment text is required"),
            validate.Length(max=1000, error="Comment must be at most {max} characters"),
        ],
        error_messages={"required": "Comment text is required"},
    )

    @pre_load
    def strip_text(self, data, **kwargs):
        if isinstance(data.get('text'), str):
            data = dict(data, text=data['text'].strip())
        return data


class CommentResponseSchema(Schema):
    comment_id = fields.Str(required=True, data_key='id')
    post_id = fields.Str(required=True, data_key='postId')
    user_id = fields.Str(required=True, data_key='userId')
    user = fields.Nested(UserSummarySchema, allow_none=True)
    text = fields.Str(required=True)
    created_at = fields.DateTime(data_key='createdAt')
