# snapshare/api/comments/services.py
import logging
import uuid
from dataclasses import asdict
from firebase_admin import firestore
from typing import Dict, Any, List

from snapshare.core.exceptions import AuthorizationError, NotFoundError
from snapshare.models.comment import Comment
from snapshare.api.users.services import UserService
from snapshare.utils.validators import ensure_valid_id


class CommentService:
    """Comment creation, per-post listing and author-only deletion."""

    def __init__(self, db, user_service: UserService):
        self.db = db
        self.users = user_service
        self.comments_ref = db.collection('comments')
        self.posts_ref = db.collection('posts')

    def create_comment(self, post_id: str, author_id: str, text: str) -> Dict[str, Any]:
        ensure_valid_id(post_id, 'postId')
        if not self.posts_ref.document(post_id).get().exists:
            raise NotFoundError('post', post_id)

        comment_id = str(uuid.uuid4())
        new_comment = Comment(comment_id=comment_id, post_id=post_id, user_id=author_id, text=text)
        comment_data = asdict(new_comment)
        self.comments_ref.document(comment_id).set(comment_data)
        logging.info(f"Comment created (comment_id: {comment_id}, post_id: {post_id})")

        comment_data['user'] = self.users.get_summaries([author_id]).get(author_id)
        return comment_data

    def get_comments_for_post(self, post_id: str) -> List[Dict[str, Any]]:
        """Comments of a post, newest first, each with its author's summary."""
        query = (self.comments_ref.where('post_id', '==', post_id)
                 .order_by("created_at", direction=firestore.Query.DESCENDING))
        comments = [doc.to_dict() for doc in query.stream()]
        summaries = self.users.get_summaries(c['user_id'] for c in comments)
        for comment in comments:
            comment['user'] = summaries.get(comment['user_id'])
        return comments

    def delete_comment(self, comment_id: str, user_id: str) -> None:
        """
        :raises NotFoundError: unknown comment
        :raises AuthorizationError: the caller did not write it
        """
        comment_ref = self.comments_ref.document(comment_id)
        comment_doc = comment_ref.get()
        if not comment_doc.exists:
            raise NotFoundError('comment', comment_id)
        if comment_doc.to_dict().get('user_id') != user_id:
            raise AuthorizationError("Not authorized to delete this comment.")

        comment_ref.delete()
        logging.info(f"Comment deleted (comment_id: {comment_id}, user_id: {user_id})")
