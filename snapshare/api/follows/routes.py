# snapshare/api/follows/routes.py
from flask import Blueprint, jsonify, current_app
from flask_jwt_extended import jwt_required

from snapshare.core.security import current_identity
from .schemas import FollowResponseSchema

follows_bp = Blueprint('follows_bp', __name__)


@follows_bp.route('/<string:user_id>', methods=['POST'])
@jwt_required()
def follow_user(user_id: str):
    current_app.services['follows'].follow(current_identity().user_id, user_id)
    return jsonify({"message": "User followed successfully."}), 201


@follows_bp.route('/<string:user_id>', methods=['DELETE'])
@jwt_required()
def unfollow_user(user_id: str):
    current_app.services['follows'].unfollow(current_identity().user_id, user_id)
    return jsonify({"message": "Unfollowed successfully."}), 200


@follows_bp.route('/<string:user_id>/followers', methods=['GET'])
def get_followers(user_id: str):
    followers = current_app.services['follows'].get_followers(user_id)
    return jsonify(FollowResponseSchema(many=True).dump(followers)), 200


@follows_bp.route('/<string:user_id>/following', methods=['GET'])
def get_following(user_id: str):
    following = current_app.services['follows'].get_following(user_id)
    return jsonify(FollowResponseSchema(many=True).dump(following)), 200
