# snapshare/models/user.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from snapshare.utils.datetime_utils import now


@dataclass
class User:
    """
    Document layout of the Firestore 'users' collection.
    `username` and `email` are also reserved in the 'usernames' / 'emails'
    collections, which is what makes them unique.
    """
    user_id: str
    username: str
    email: str
    password_hash: str
    display_name: str
    avatar_url: Optional[str] = None
    avatar_public_id: Optional[str] = None
    bio: Optional[str] = None
    website: Optional[str] = None
    created_at: datetime = field(default_factory=now)
    updated_at: datetime = field(default_factory=now)
