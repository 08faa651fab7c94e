# snapshare/api/auth/schemas.py
from marshmallow import Schema, fields, validate, validates_schema, ValidationError, EXCLUDE


class RegisterSchema(Schema):
    """POST /api/auth/register. Sent as multipart form (with an optional avatar file) or JSON."""

    class Meta:
        unknown = EXCLUDE

    username = fields.Str(required=True, error_messages={"required": "All fields are required"})
    email = fields.Email(required=True, error_messages={"required": "All fields are required"})
    password = fields.Str(
        required=True, load_only=True,
        validate=validate.Length(min=6, error="Password must be at least 6 characters long"),
        error_messages={"required": "All fields are required"},
    )
    display_name = fields.Str(
        required=True, data_key='displayName', validate=validate.Length(min=1, max=50),
        error_messages={"required": "All fields are required"},
    )
    bio = fields.Str(load_default=None, validate=validate.Length(max=300))
    website = fields.Str(load_default=None, validate=validate.Length(max=200))


class LoginSchema(Schema):
    """POST /api/auth/login. Either `username` or `email` identifies the account."""

    class Meta:
        unknown = EXCLUDE

    username = fields.Str(load_default='')
    email = fields.Str(load_default='')
    password = fields.Str(required=True, load_only=True)

    @validates_schema
    def require_login_name(self, data, **kwargs):
        if not (data.get('username') or '').strip() and not (data.get('email') or '').strip():
            raise ValidationError("Password or email/username not given for login", field_name='username')
