# snapshare/api/follows/schemas.py
from marshmallow import Schema, fields

from snapshare.api.users.schemas import UserSummarySchema


class FollowResponseSchema(Schema):
    """One follow edge with the user on the other end embedded as `user`."""
    follow_id = fields.Str(required=True, data_key='id')
    follower_id = fields.Str(required=True, data_key='followerId')
    following_id = fields.Str(required=True, data_key='followingId')
    user = fields.Nested(UserSummarySchema, allow_none=True)
    created_at = fields.DateTime(data_key='createdAt')
