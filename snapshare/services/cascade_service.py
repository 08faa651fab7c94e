# snapshare/services/cascade_service.py
import logging
from typing import Optional

from snapshare.core.exceptions import AuthorizationError, NotFoundError, ObjectStoreError
from snapshare.services.firestore_service import delete_where
from snapshare.services.storage_service import StorageService
from snapshare.utils.validators import ensure_valid_id


class CascadeDeletionService:
    """
    Removes a user or a post together with everything that references it.

    Firestore has no foreign keys, so dependents are deleted explicitly:
    - image blobs first, best-effort (failures are logged and skipped)
    - dependent documents next, strict (Firestore errors propagate)
    - the user/post document last, so an interrupted cascade leaves the
      record in place and can simply be re-run
    """

    def __init__(self, db, storage_service: StorageService):
        self.db = db
        self.storage = storage_service
        self.users_ref = db.collection('users')
        self.posts_ref = db.collection('posts')
        self.usernames_ref = db.collection('usernames')
        self.emails_ref = db.collection('emails')

    def _destroy_image(self, public_id: Optional[str], owner: str) -> None:
        if not public_id:
            return
        try:
            self.storage.delete(public_id)
        except ObjectStoreError as e:
            logging.warning(f"Image cleanup skipped ({owner}, public_id: {public_id}): {e.__cause__ or e}")

    def _delete_post_dependents(self, post_id: str) -> None:
        delete_where(self.db, 'likes', 'post_id', post_id)
        delete_where(self.db, 'comments', 'post_id', post_id)

    def delete_user(self, user_id: str) -> bool:
        """
        Deletes a user account and all of its posts, likes, comments and follow edges.

        Calling it for an id that no longer exists is a no-op.

        :return: True if a user was deleted, False if there was nothing to delete
        """
        user_ref = self.users_ref.document(user_id)
        user_doc = user_ref.get()
        if not user_doc.exists:
            logging.info(f"User delete skipped, already gone (user_id: {user_id})")
            return False
        user_data = user_doc.to_dict()

        self._destroy_image(user_data.get('avatar_public_id'), f"avatar of {user_id}")

        posts = list(self.posts_ref.where('user_id', '==', user_id).stream())
        for post_doc in posts:
            self._destroy_image(post_doc.to_dict().get('image_public_id'), f"post {post_doc.id}")

        for post_doc in posts:
            self._delete_post_dependents(post_doc.id)
        delete_where(self.db, 'posts', 'user_id', user_id)

        # Likes on other users' posts are removed without adjusting their like_count.
        delete_where(self.db, 'likes', 'user_id', user_id)
        delete_where(self.db, 'comments', 'user_id', user_id)
        delete_where(self.db, 'follows', 'follower_id', user_id)
        delete_where(self.db, 'follows', 'following_id', user_id)

        if user_data.get('username'):
            self.usernames_ref.document(user_data['username']).delete()
        if user_data.get('email'):
            self.emails_ref.document(user_data['email']).delete()

        user_ref.delete()
        logging.info(f"User deleted with cascade (user_id: {user_id}, posts: {len(posts)})")
        return True

    def delete_post(self, post_id: str, requester_id: str) -> None:
        """
        Deletes a post owned by `requester_id`, its image, likes and comments.

        :raises InvalidInputError: malformed post id
        :raises NotFoundError: the post does not exist (also on a second delete)
        :raises AuthorizationError: the requester does not own the post
        """
        ensure_valid_id(post_id, 'postId')
        post_ref = self.posts_ref.document(post_id)
        post_doc = post_ref.get()
        if not post_doc.exists:
            raise NotFoundError('post', post_id)

        post_data = post_doc.to_dict()
        if post_data.get('user_id') != requester_id:
            raise AuthorizationError("Not authorized to delete this post")

        self._destroy_image(post_data.get('image_public_id'), f"post {post_id}")
        self._delete_post_dependents(post_id)
        post_ref.delete()
        logging.info(f"Post deleted with cascade (post_id: {post_id}, user_id: {requester_id})")
