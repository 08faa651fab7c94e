# snapshare/api/users/services.py
import logging
from typing import Optional, Dict, Any, List, Tuple
from firebase_admin import firestore
from google.api_core.exceptions import AlreadyExists

from snapshare.core.exceptions import ConflictError, InvalidInputError, NotFoundError, ObjectStoreError
from snapshare.services.cascade_service import CascadeDeletionService
from snapshare.services.storage_service import StorageService
from snapshare.utils.datetime_utils import now
from snapshare.utils.validators import default_avatar_url, normalize_username

AVATAR_FOLDER = "avatars"


class UserService:
    """
    Profile reads and updates, avatar replacement, listing/search and account deletion.
    Username and email uniqueness is kept through reservation documents
    (`usernames/{username}`, `emails/{email}`) written with `create()`.
    """

    def __init__(self, db, storage_service: StorageService, cascade_service: CascadeDeletionService):
        self.db = db
        self.storage = storage_service
        self.cascade = cascade_service
        self.users_ref = db.collection('users')
        self.usernames_ref = db.collection('usernames')
        self.emails_ref = db.collection('emails')

    # --- uniqueness reservations ---
    def reserve_username(self, username: str, user_id: str) -> None:
        try:
            self.usernames_ref.document(username).create({'user_id': user_id})
        except AlreadyExists:
            raise ConflictError("Username already taken", error_code='USERNAME_TAKEN')

    def reserve_email(self, email: str, user_id: str) -> None:
        try:
            self.emails_ref.document(email).create({'user_id': user_id})
        except AlreadyExists:
            raise ConflictError("Email already registered", error_code='EMAIL_TAKEN')

    def release_username(self, username: str) -> None:
        self.usernames_ref.document(username).delete()

    def release_email(self, email: str) -> None:
        self.emails_ref.document(email).delete()

    # --- reads ---
    @staticmethod
    def public_view(user_data: Dict[str, Any]) -> Dict[str, Any]:
        """Copy of a user document with the generated avatar filled in when none was uploaded."""
        view = dict(user_data)
        if not view.get('avatar_url'):
            view['avatar_url'] = default_avatar_url(view.get('display_name'), view.get('username'))
        return view

    def get_user(self, user_id: str) -> Dict[str, Any]:
        doc = self.users_ref.document(user_id).get()
        if not doc.exists:
            raise NotFoundError('user', user_id)
        return doc.to_dict()

    def find_by_login(self, username: Optional[str], email: Optional[str]) -> Optional[Dict[str, Any]]:
        """Looks a user up by username first, then by email."""
        for field, value in (('username', username), ('email', email)):
            if not value:
                continue
            docs = list(self.users_ref.where(field, '==', value).limit(1).stream())
            if docs:
                return docs[0].to_dict()
        return None

    def get_summaries(self, user_ids) -> Dict[str, Dict[str, Any]]:
        """Username/avatar blocks for a set of user ids; unknown ids are left out."""
        summaries = {}
        for user_id in set(user_ids):
            doc = self.users_ref.document(user_id).get()
            if doc.exists:
                view = self.public_view(doc.to_dict())
                summaries[user_id] = {
                    'user_id': user_id,
                    'username': view.get('username'),
                    'avatar_url': view.get('avatar_url'),
                }
        return summaries

    def list_users(self, page: int, limit: int) -> Tuple[List[Dict[str, Any]], int]:
        """Newest accounts first, offset pagination."""
        total = int(self.users_ref.count().get()[0][0].value)
        query = (self.users_ref.order_by('created_at', direction=firestore.Query.DESCENDING)
                 .offset((page - 1) * limit).limit(limit))
        users = [doc.to_dict() for doc in query.stream()]
        return users, total

    def search_users(self, term: str, page: int, limit: int) -> Tuple[List[Dict[str, Any]], int]:
        """
        Case-insensitive substring match on username, display name and bio.
        Firestore has no substring operator, so matching happens here over the
        newest-first stream.
        """
        if not term:
            return self.list_users(page, limit)

        needle = term.lower()
        matches = []
        for doc in self.users_ref.order_by('created_at', direction=firestore.Query.DESCENDING).stream():
            user = doc.to_dict()
            haystack = (user.get('username'), user.get('display_name'), user.get('bio'))
            if any(value and needle in value.lower() for value in haystack):
                matches.append(user)

        start = (page - 1) * limit
        return matches[start:start + limit], len(matches)

    # --- writes ---
    def update_profile(self, user_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        """
        Applies whitelisted profile changes.

        :raises InvalidInputError: no field given, or the username breaks the format rules
        :raises ConflictError: the new username belongs to someone else
        """
        current = self.get_user(user_id)
        updates = {key: changes[key] for key in ('display_name', 'bio', 'website') if key in changes}

        old_username = current.get('username')
        new_username = None
        username_changed = False
        if 'username' in changes:
            new_username = normalize_username(changes['username'])
            username_changed = new_username != old_username
            if username_changed:
                self.reserve_username(new_username, user_id)
            updates['username'] = new_username

        if not updates:
            raise InvalidInputError("No valid fields to update")

        updates['updated_at'] = now()
        user_ref = self.users_ref.document(user_id)
        try:
            user_ref.update(updates)
        except Exception:
            if username_changed:
                self.release_username(new_username)
            raise

        if username_changed and old_username:
            self.release_username(old_username)

        logging.info(f"User profile updated (user_id: {user_id}, fields: {sorted(updates)})")
        return user_ref.get().to_dict()

    def update_avatar(self, user_id: str, data: bytes, filename: str, content_type: Optional[str]) -> Dict[str, Any]:
        """
        Replaces the user's avatar. The new blob is uploaded and saved on the
        user first; the previous blob is removed afterwards, best-effort.
        """
        current = self.get_user(user_id)
        stored = self.storage.upload(data, filename, content_type, AVATAR_FOLDER)
        user_ref = self.users_ref.document(user_id)
        try:
            user_ref.update({
                'avatar_url': stored.url,
                'avatar_public_id': stored.public_id,
                'updated_at': now(),
            })
        except Exception:
            logging.error(f"Avatar update failed, removing uploaded blob (user_id: {user_id})", exc_info=True)
            self._discard_upload(stored.public_id)
            raise

        if current.get('avatar_public_id'):
            self._discard_upload(current['avatar_public_id'])
        return user_ref.get().to_dict()

    def _discard_upload(self, public_id: str) -> None:
        try:
            self.storage.delete(public_id)
        except ObjectStoreError as e:
            logging.error(f"Failed to clean up uploaded image ({public_id}): {e}")

    def delete_user_account(self, user_id: str) -> bool:
        """Removes the account and everything it owns. Unknown ids are a no-op."""
        return self.cascade.delete_user(user_id)
