# snapshare/models/like.py
from dataclasses import dataclass, field
from datetime import datetime

from snapshare.utils.datetime_utils import now


def like_document_id(user_id: str, post_id: str) -> str:
    """One document per (user, post): the id itself is the uniqueness constraint."""
    return f"{user_id}_{post_id}"


@dataclass
class Like:
    """Document layout of the Firestore 'likes' collection."""
    like_id: str
    user_id: str
    post_id: str
    created_at: datetime = field(default_factory=now)
