# snapshare/api/comments/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from snapshare.core.security import current_identity
from .schemas import CommentCreateSchema, CommentResponseSchema

comments_bp = Blueprint('comments_bp', __name__)


@comments_bp.route('/<string:post_id>', methods=['POST'])
@jwt_required()
def create_comment(post_id: str):
    comment_service = current_app.services['comments']
    identity = current_identity()
    try:
        data = CommentCreateSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        message = err.messages.get("text", ["Invalid comment"])[0]
        return jsonify({"error_code": "VALIDATION_ERROR", "message": message, "details": err.messages}), 400

    new_comment = comment_service.create_comment(post_id, identity.user_id, data['text'])
    return jsonify(CommentResponseSchema().dump(new_comment)), 201


@comments_bp.route('/<string:post_id>', methods=['GET'])
def get_comments(post_id: str):
    """Public: comments of a post, newest first."""
    comments = current_app.services['comments'].get_comments_for_post(post_id)
    return jsonify(CommentResponseSchema(many=True).dump(comments)), 200


@comments_bp.route('/<string:comment_id>', methods=['DELETE'])
@jwt_required()
def delete_comment(comment_id: str):
    current_app.services['comments'].delete_comment(comment_id, current_identity().user_id)
    return jsonify({"message": "Comment deleted."}), 200
