# snapshare/api/likes/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from snapshare.core.security import current_identity
from snapshare.utils.validators import ensure_valid_id
from .schemas import LikeToggleSchema, LikeToggleResponseSchema, LikeCountResponseSchema

likes_bp = Blueprint('likes_bp', __name__)


@likes_bp.route('/toggle', methods=['POST'])
@jwt_required()
def toggle_like():
    """Likes the post if the caller has not liked it yet, otherwise removes the like."""
    like_service = current_app.services['likes']
    identity = current_identity()
    try:
        data = LikeToggleSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "message": "postId is required", "details": err.messages}), 400

    result = like_service.toggle_like(identity.user_id, data['post_id'])
    return jsonify(LikeToggleResponseSchema().dump(result)), 200


@likes_bp.route('/<string:post_id>', methods=['GET'])
@jwt_required()
def get_like_status(post_id: str):
    """Exact like count recomputed from the likes collection, plus the caller's own state."""
    like_service = current_app.services['likes']
    identity = current_identity()
    ensure_valid_id(post_id, 'postId')
    payload = {
        'post_id': post_id,
        'like_count': like_service.count_likes(post_id),
        'liked': like_service.is_liked(identity.user_id, post_id),
    }
    return jsonify(LikeCountResponseSchema().dump(payload)), 200
