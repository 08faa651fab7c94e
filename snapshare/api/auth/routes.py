# snapshare/api/auth/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, set_access_cookies, set_refresh_cookies, unset_jwt_cookies
from marshmallow import ValidationError

from snapshare.api.users.schemas import UserResponseSchema
from snapshare.core.security import current_identity, issue_token, issue_tokens
from snapshare.utils.validators import ensure_image_file
from .schemas import RegisterSchema, LoginSchema

auth_bp = Blueprint('auth_bp', __name__)


def _session_response(user: dict, message: str, status: int):
    """JSON body with the public user plus fresh access/refresh cookies."""
    user_view = current_app.services['users'].public_view(user)
    response = jsonify({"message": message, "user": UserResponseSchema().dump(user_view)})
    access_token, refresh_token = issue_tokens(user)
    set_access_cookies(response, access_token)
    set_refresh_cookies(response, refresh_token)
    return response, status


@auth_bp.route('/register', methods=['POST'])
def register():
    """Creates an account (multipart form with optional `avatar`, or JSON) and logs it in."""
    auth_service = current_app.services['auth']
    payload = request.form.to_dict() if request.form else (request.get_json(silent=True) or {})
    try:
        data = RegisterSchema().load(payload)
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "message": "Invalid registration data", "details": err.messages}), 400

    avatar = None
    avatar_file = request.files.get('avatar')
    if avatar_file is not None and avatar_file.filename:
        avatar = ensure_image_file(avatar_file, current_app.config['ALLOWED_IMAGE_EXTENSIONS'], field='avatar')

    user = auth_service.register(data, avatar)
    return _session_response(user, "User created successfully", 201)


@auth_bp.route('/login', methods=['POST'])
def login():
    auth_service = current_app.services['auth']
    try:
        data = LoginSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "message": "Password or email/username not given for login", "details": err.messages}), 400

    user = auth_service.authenticate(data['username'], data['email'], data['password'])
    return _session_response(user, "Login successful", 200)


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Clears both session cookies. Works without a valid token."""
    response = jsonify({"message": "Logged out successfully"})
    unset_jwt_cookies(response)
    return response, 200


@auth_bp.route('/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh():
    """Issues a new access cookie from a valid refresh cookie."""
    identity = current_identity()
    access_token = issue_token(identity.user_id, {'username': identity.username, 'email': identity.email})
    response = jsonify({"message": "Access token refreshed"})
    set_access_cookies(response, access_token)
    return response, 200


@auth_bp.route('/me', methods=['GET'])
@jwt_required()
def get_current_user():
    user_service = current_app.services['users']
    user = user_service.get_user(current_identity().user_id)
    return jsonify({"user": UserResponseSchema().dump(user_service.public_view(user))}), 200
