# snapshare/api/follows/services.py
import logging
from dataclasses import asdict
from typing import Dict, Any, List
from google.api_core.exceptions import AlreadyExists

from snapshare.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from snapshare.models.follow import Follow, follow_document_id
from snapshare.api.users.services import UserService


class FollowService:
    """
    Follow edges. The document id `{follower_id}_{following_id}` plus
    `create()` keeps at most one edge per ordered pair.
    """

    def __init__(self, db, user_service: UserService):
        self.db = db
        self.users = user_service
        self.follows_ref = db.collection('follows')
        self.users_ref = db.collection('users')

    def follow(self, follower_id: str, following_id: str) -> Dict[str, Any]:
        """
        :raises InvalidInputError: self-follow
        :raises NotFoundError: target user does not exist
        :raises ConflictError: already following
        """
        if follower_id == following_id:
            raise InvalidInputError("You cannot follow yourself.", field='userId')
        if not self.users_ref.document(following_id).get().exists:
            raise NotFoundError('user', following_id)

        follow_id = follow_document_id(follower_id, following_id)
        edge = Follow(follow_id=follow_id, follower_id=follower_id, following_id=following_id)
        try:
            self.follows_ref.document(follow_id).create(asdict(edge))
        except AlreadyExists:
            raise ConflictError("Already following this user.", error_code='ALREADY_FOLLOWING')

        logging.info(f"Follow created ({follower_id} -> {following_id})")
        return asdict(edge)

    def unfollow(self, follower_id: str, following_id: str) -> None:
        follow_ref = self.follows_ref.document(follow_document_id(follower_id, following_id))
        if not follow_ref.get().exists:
            raise NotFoundError('follow')
        follow_ref.delete()
        logging.info(f"Follow removed ({follower_id} -> {following_id})")

    def _edges(self, field: str, user_id: str, other_field: str) -> List[Dict[str, Any]]:
        edges = [doc.to_dict() for doc in self.follows_ref.where(field, '==', user_id).stream()]
        summaries = self.users.get_summaries(e[other_field] for e in edges)
        for edge in edges:
            edge['user'] = summaries.get(edge[other_field])
        return edges

    def get_followers(self, user_id: str) -> List[Dict[str, Any]]:
        """Edges pointing at `user_id`; `user` is the follower."""
        return self._edges('following_id', user_id, 'follower_id')

    def get_following(self, user_id: str) -> List[Dict[str, Any]]:
        """Edges starting at `user_id`; `user` is the followed account."""
        return self._edges('follower_id', user_id, 'following_id')
