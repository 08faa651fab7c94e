# snapshare/api/posts/services.py
import logging
import uuid
from dataclasses import asdict
from typing import Optional, Dict, Any, Tuple, List
from firebase_admin import firestore

from snapshare.core.exceptions import NotFoundError, ObjectStoreError
from snapshare.models.post import Post
from snapshare.services.cascade_service import CascadeDeletionService
from snapshare.services.storage_service import StorageService
from snapshare.api.users.services import UserService
from snapshare.utils.validators import ensure_valid_id


class PostService:
    """
    Image posts: creation with upload, feeds, lookup and owner deletion.
    Deletion is delegated to the cascade coordinator.
    """

    def __init__(self, db, storage_service: StorageService, cascade_service: CascadeDeletionService,
                 user_service: UserService):
        self.db = db
        self.storage = storage_service
        self.cascade = cascade_service
        self.users = user_service
        self.posts_ref = db.collection('posts')

    def create_post(self, user_id: str, title: str, caption: str, image: tuple) -> Dict[str, Any]:
        """
        Uploads the image and stores the post. An upload failure aborts the
        request; a Firestore failure after the upload removes the blob again.

        :param image: (bytes, filename, content_type)
        """
        stored = self.storage.upload(image[0], image[1], image[2], f"posts/{user_id}")
        post_id = str(uuid.uuid4())
        new_post = Post(
            post_id=post_id,
            user_id=user_id,
            title=title.strip(),
            caption=(caption or "").strip(),
            image_url=stored.url,
            image_public_id=stored.public_id,
        )
        try:
            self.posts_ref.document(post_id).set(asdict(new_post))
        except Exception:
            logging.error(f"Post creation failed, removing uploaded image (user_id: {user_id})", exc_info=True)
            try:
                self.storage.delete(stored.public_id)
            except ObjectStoreError as cleanup_err:
                logging.error(f"Failed to cleanup image after error: {cleanup_err}")
            raise

        logging.info(f"Post created (post_id: {post_id}, user_id: {user_id})")
        return self._with_authors([asdict(new_post)])[0]

    def _with_authors(self, posts: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        summaries = self.users.get_summaries(p['user_id'] for p in posts)
        for post in posts:
            post['user'] = summaries.get(post['user_id'])
        return posts

    def _page(self, query, limit: int, cursor: Optional[str]) -> Tuple[List[Dict[str, Any]], Optional[str]]:
        if cursor:
            cursor_doc = self.posts_ref.document(cursor).get()
            if cursor_doc.exists:
                query = query.start_after(cursor_doc)

        posts = [doc.to_dict() for doc in query.limit(limit).stream()]
        next_cursor = posts[-1]['post_id'] if len(posts) == limit else None
        return self._with_authors(posts), next_cursor

    def get_posts(self, limit: int, cursor: Optional[str]) -> Tuple[List[Dict[str, Any]], Optional[str]]:
        """All posts, newest first, with the author's username and avatar."""
        query = self.posts_ref.order_by("created_at", direction=firestore.Query.DESCENDING)
        return self._page(query, limit, cursor)

    def get_posts_by_user(self, author_id: str, limit: int, cursor: Optional[str]) -> Tuple[List[Dict[str, Any]], Optional[str]]:
        query = (self.posts_ref.where('user_id', '==', author_id)
                 .order_by("created_at", direction=firestore.Query.DESCENDING))
        return self._page(query, limit, cursor)

    def get_post(self, post_id: str) -> Dict[str, Any]:
        ensure_valid_id(post_id, 'postId')
        doc = self.posts_ref.document(post_id).get()
        if not doc.exists:
            raise NotFoundError('post', post_id)
        return self._with_authors([doc.to_dict()])[0]

    def delete_post(self, post_id: str, user_id: str) -> None:
        self.cascade.delete_post(post_id, user_id)
