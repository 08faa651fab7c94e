# snapshare/api/auth/services.py
import uuid
import logging
from dataclasses import asdict
from typing import Dict, Any, Optional
from werkzeug.security import generate_password_hash, check_password_hash

from snapshare.core.exceptions import AuthError, ConflictError, NotFoundError, ObjectStoreError
from snapshare.models.user import User
from snapshare.services.storage_service import StorageService
from snapshare.api.users.services import UserService, AVATAR_FOLDER
from snapshare.utils.validators import normalize_username


class AuthService:
    """Registration and credential checks. Token issuing lives in snapshare.core.security."""

    def __init__(self, db, user_service: UserService, storage_service: StorageService, default_bio: str):
        self.db = db
        self.users = user_service
        self.storage = storage_service
        self.default_bio = default_bio
        self.users_ref = db.collection('users')

    def register(self, data: Dict[str, Any], avatar: Optional[tuple] = None) -> Dict[str, Any]:
        """
        Creates a user account.

        :param data: fields validated by RegisterSchema
        :param avatar: optional (bytes, filename, content_type) of the uploaded avatar
        :raises InvalidInputError: username format
        :raises ConflictError: username or email already in use
        """
        username = normalize_username(data['username'])
        email = data['email'].strip().lower()
        user_id = str(uuid.uuid4())

        self.users.reserve_username(username, user_id)
        try:
            self.users.reserve_email(email, user_id)
        except ConflictError:
            self.users.release_username(username)
            raise

        stored = None
        try:
            if avatar:
                stored = self.storage.upload(avatar[0], avatar[1], avatar[2], AVATAR_FOLDER)

            bio = (data.get('bio') or '').strip() or self.default_bio
            new_user = User(
                user_id=user_id,
                username=username,
                email=email,
                password_hash=generate_password_hash(data['password']),
                display_name=data['display_name'].strip(),
                avatar_url=stored.url if stored else None,
                avatar_public_id=stored.public_id if stored else None,
                bio=bio,
                website=data.get('website'),
            )
            user_data = asdict(new_user)
            self.users_ref.document(user_id).set(user_data)
        except Exception:
            logging.error(f"Registration failed, releasing reservations (username: {username})", exc_info=True)
            self.users.release_username(username)
            self.users.release_email(email)
            if stored:
                self._discard_upload(stored.public_id)
            raise

        logging.info(f"User registered (user_id: {user_id}, username: {username})")
        return user_data

    def _discard_upload(self, public_id: str) -> None:
        try:
            self.storage.delete(public_id)
        except ObjectStoreError as e:
            logging.error(f"Failed to clean up avatar after registration error ({public_id}): {e}")

    def authenticate(self, username: str, email: str, password: str) -> Dict[str, Any]:
        """
        Resolves the account by username or email and checks the password.

        :raises NotFoundError: no such account
        :raises AuthError: wrong password
        """
        username = (username or '').strip().lower()
        email = (email or '').strip().lower()
        user = self.users.find_by_login(username, email)
        if not user:
            raise NotFoundError('user')
        if not check_password_hash(user.get('password_hash', ''), password):
            raise AuthError("Wrong password", error_code='INVALID_CREDENTIALS')
        logging.info(f"User logged in (user_id: {user['user_id']})")
        return user
