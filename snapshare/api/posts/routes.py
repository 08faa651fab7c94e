# snapshare/api/posts/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from snapshare.core.security import current_identity
from snapshare.utils.validators import ensure_image_file
from .schemas import PostCreateSchema, PostResponseSchema

posts_bp = Blueprint('posts_bp', __name__)


def _feed_args():
    limit = request.args.get('limit', current_app.config['DEFAULT_PAGE_LIMIT'], type=int)
    limit = max(1, min(limit, current_app.config['MAX_PAGE_LIMIT']))
    cursor = request.args.get('cursor', None, type=str)
    return limit, cursor


@posts_bp.route('', methods=['POST'])
@jwt_required()
def create_post():
    """Multipart upload: `image` file plus `title` and optional `caption` form fields."""
    post_service = current_app.services['posts']
    identity = current_identity()
    image = ensure_image_file(request.files.get('image'), current_app.config['ALLOWED_IMAGE_EXTENSIONS'], field='image')
    try:
        data = PostCreateSchema().load(request.form.to_dict())
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "message": "Title is required", "details": err.messages}), 400

    new_post = post_service.create_post(identity.user_id, data['title'], data['caption'], image)
    return jsonify({"message": "Post created successfully", "post": PostResponseSchema().dump(new_post)}), 201


@posts_bp.route('', methods=['GET'])
@jwt_required()
def get_posts():
    limit, cursor = _feed_args()
    posts, next_cursor = current_app.services['posts'].get_posts(limit, cursor)
    return jsonify({"posts": PostResponseSchema(many=True).dump(posts), "next_cursor": next_cursor}), 200


@posts_bp.route('/user/<string:user_id>', methods=['GET'])
@jwt_required()
def get_user_posts(user_id: str):
    limit, cursor = _feed_args()
    posts, next_cursor = current_app.services['posts'].get_posts_by_user(user_id, limit, cursor)
    return jsonify({"posts": PostResponseSchema(many=True).dump(posts), "next_cursor": next_cursor}), 200


@posts_bp.route('/<string:post_id>', methods=['GET'])
@jwt_required()
def get_post(post_id: str):
    post = current_app.services['posts'].get_post(post_id)
    return jsonify(PostResponseSchema().dump(post)), 200


@posts_bp.route('/<string:post_id>', methods=['DELETE'])
@jwt_required()
def delete_post(post_id: str):
    """Owner-only. Image, likes and comments are removed with the post."""
    current_app.services['posts'].delete_post(post_id, current_identity().user_id)
    return jsonify({"message": "Post deleted successfully"}), 200
