# snapshare/api/users/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from snapshare.core.exceptions import AuthorizationError
from snapshare.core.security import current_identity
from snapshare.utils.validators import ensure_image_file, page_params, pagination_meta
from .schemas import UserResponseSchema, UserUpdateSchema, UserListResponseSchema

users_bp = Blueprint('users_bp', __name__)


def _require_self(user_id: str, action: str) -> str:
    identity = current_identity()
    if identity.user_id != user_id:
        raise AuthorizationError(f"You can {action} only your account")
    return identity.user_id


def _page_args():
    return page_params(
        request.args.get('page', 1, type=int),
        request.args.get('limit', None, type=int),
        default_limit=current_app.config['DEFAULT_PAGE_LIMIT'],
        max_limit=current_app.config['MAX_PAGE_LIMIT'],
    )


def _user_list_response(users, page, limit, total):
    user_service = current_app.services['users']
    payload = {
        'users': [user_service.public_view(user) for user in users],
        'pagination': pagination_meta(page, limit, total),
    }
    return jsonify(UserListResponseSchema().dump(payload)), 200


@users_bp.route('', methods=['GET'])
@jwt_required()
def list_users():
    """All users, newest first, `page`/`limit` pagination."""
    page, limit = _page_args()
    users, total = current_app.services['users'].list_users(page, limit)
    return _user_list_response(users, page, limit, total)


@users_bp.route('/search', methods=['GET'])
@jwt_required()
def search_users():
    """Users whose username, display name or bio contains `search`."""
    page, limit = _page_args()
    term = request.args.get('search', '', type=str).strip()
    users, total = current_app.services['users'].search_users(term, page, limit)
    return _user_list_response(users, page, limit, total)


@users_bp.route('/<string:user_id>', methods=['GET'])
@jwt_required()
def get_user(user_id: str):
    user_service = current_app.services['users']
    user = user_service.get_user(user_id)
    return jsonify(UserResponseSchema().dump(user_service.public_view(user))), 200


@users_bp.route('/<string:user_id>', methods=['PUT'])
@jwt_required()
def update_user(user_id: str):
    """Owner-only profile update: displayName, bio, website, username."""
    _require_self(user_id, 'update')
    user_service = current_app.services['users']
    try:
        changes = UserUpdateSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "message": "Invalid profile fields", "details": err.messages}), 400

    updated = user_service.update_profile(user_id, changes)
    return jsonify(UserResponseSchema().dump(user_service.public_view(updated))), 200


@users_bp.route('/update-avatar/<string:user_id>', methods=['PUT'])
@jwt_required()
def update_avatar(user_id: str):
    """Owner-only avatar replacement from a multipart `avatar` file."""
    _require_self(user_id, 'update')
    user_service = current_app.services['users']
    data, filename, content_type = ensure_image_file(
        request.files.get('avatar'), current_app.config['ALLOWED_IMAGE_EXTENSIONS'], field='avatar'
    )
    updated = user_service.update_avatar(user_id, data, filename, content_type)
    return jsonify({
        "message": "Avatar updated successfully",
        "user": UserResponseSchema().dump(user_service.public_view(updated)),
    }), 200


@users_bp.route('/<string:user_id>', methods=['DELETE'])
@jwt_required()
def delete_user(user_id: str):
    """
    Owner-only account deletion. Posts, likes, comments, follow edges and
    stored images go with it; image cleanup failures do not block the delete.
    """
    _require_self(user_id, 'delete')
    deleted = current_app.services['users'].delete_user_account(user_id)
    if not deleted:
        logging.info(f"Account delete requested for an already removed user (user_id: {user_id})")
    return jsonify({"message": "User deleted successfully"}), 200
