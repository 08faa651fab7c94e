# snapshare/api/users/schemas.py
from marshmallow import Schema, fields, validate


class UserResponseSchema(Schema):
    """
    User payload returned by the API. The password hash and the storage id
    of the avatar never leave the server.
    """
    user_id = fields.Str(required=True, data_key='id')
    username = fields.Str(required=True)
    email = fields.Str()
    display_name = fields.Str(data_key='displayName')
    avatar_url = fields.Str(allow_none=True, data_key='avatarUrl')
    bio = fields.Str(allow_none=True)
    website = fields.Str(allow_none=True)
    created_at = fields.DateTime(data_key='createdAt')
    updated_at = fields.DateTime(data_key='updatedAt')


class UserSummarySchema(Schema):
    """Author block embedded in posts, comments and follow lists."""
    user_id = fields.Str(required=True, data_key='id')
    username = fields.Str(required=True)
    avatar_url = fields.Str(allow_none=True, data_key='avatarUrl')


class UserUpdateSchema(Schema):
    """PUT /api/users/<user_id>. Only these fields can be changed by the owner."""
    display_name = fields.Str(data_key='displayName', validate=validate.Length(min=1, max=50))
    bio = fields.Str(validate=validate.Length(max=300))
    website = fields.Str(allow_none=True, validate=validate.Length(max=200))
    username = fields.Str()


class PaginationSchema(Schema):
    current_page = fields.Int(data_key='currentPage')
    total_pages = fields.Int(data_key='totalPages')
    total_users = fields.Int(data_key='totalUsers')
    users_per_page = fields.Int(data_key='usersPerPage')
    has_next_page = fields.Bool(data_key='hasNextPage')
    has_prev_page = fields.Bool(data_key='hasPrevPage')


class UserListResponseSchema(Schema):
    users = fields.List(fields.Nested(UserResponseSchema))
    pagination = fields.Nested(PaginationSchema)
