# snapshare/api/likes/services.py
import logging
from dataclasses import asdict, dataclass
from firebase_admin import firestore
from google.api_core.exceptions import AlreadyExists, FailedPrecondition, NotFound

from snapshare.core.exceptions import NotFoundError
from snapshare.models.like import Like, like_document_id
from snapshare.utils.validators import ensure_valid_id


@dataclass(frozen=True)
class LikeToggleResult:
    liked: bool
    like_count: int


class LikeService:
    """
    Like/unlike toggle for posts.

    No transaction wraps the read-then-write. Correctness under concurrent
    requests rests on two store guarantees:
    - the like document id is `{user_id}_{post_id}` and is written with
      `create()`, so a second concurrent insert fails with AlreadyExists
    - `like_count` only moves through `firestore.Increment`, never a
      read-modify-write in Python

    A request that loses the insert race reports liked=True with whatever
    count is stored at that moment and does not increment. The cached
    counter can drift when likes disappear through cascade deletion;
    `count_likes` recomputes the exact value from the likes collection.
    """

    def __init__(self, db):
        self.db = db
        self.posts_ref = db.collection('posts')
        self.likes_ref = db.collection('likes')

    def _current_count(self, post_ref) -> int:
        doc = post_ref.get()
        if not doc.exists:
            return 0
        return max(int(doc.to_dict().get('like_count', 0) or 0), 0)

    def toggle_like(self, user_id: str, post_id: str) -> LikeToggleResult:
        """
        Flips the like state of `user_id` on `post_id`.

        :raises InvalidInputError: post id missing or malformed
        :raises NotFoundError: the post does not exist
        """
        ensure_valid_id(post_id, 'postId')
        post_ref = self.posts_ref.document(post_id)
        if not post_ref.get().exists:
            raise NotFoundError('post', post_id)

        like_ref = self.likes_ref.document(like_document_id(user_id, post_id))
        like_doc = like_ref.get()

        if like_doc.exists:
            try:
                like_ref.delete(option=self.db.write_option(last_update_time=like_doc.update_time))
            except (FailedPrecondition, NotFound):
                # A concurrent unlike removed it first and already decremented.
                logging.info(f"Unlike lost a race, counter left as is (user_id: {user_id}, post_id: {post_id})")
                return LikeToggleResult(liked=False, like_count=self._current_count(post_ref))
            try:
                post_ref.update({'like_count': firestore.Increment(-1)})
            except NotFound:
                raise NotFoundError('post', post_id)
            return LikeToggleResult(liked=False, like_count=self._current_count(post_ref))

        new_like = Like(like_id=like_ref.id, user_id=user_id, post_id=post_id)
        try:
            like_ref.create(asdict(new_like))
        except AlreadyExists:
            # The concurrent winner owns the increment.
            logging.info(f"Like already recorded by a concurrent request (user_id: {user_id}, post_id: {post_id})")
            return LikeToggleResult(liked=True, like_count=self._current_count(post_ref))

        try:
            post_ref.update({'like_count': firestore.Increment(1)})
        except NotFound:
            # The post was deleted after the existence check; drop the like with it.
            logging.info(f"Post removed during like, discarding it (user_id: {user_id}, post_id: {post_id})")
            like_ref.delete()
            raise NotFoundError('post', post_id)
        return LikeToggleResult(liked=True, like_count=self._current_count(post_ref))

    def is_liked(self, user_id: str, post_id: str) -> bool:
        return self.likes_ref.document(like_document_id(user_id, post_id)).get().exists

    def count_likes(self, post_id: str) -> int:
        """Exact number of likes on a post, read from the likes collection."""
        result = self.likes_ref.where('post_id', '==', post_id).count().get()
        return int(result[0][0].value)
