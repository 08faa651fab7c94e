# snapshare/models/follow.py
from dataclasses import dataclass, field
from datetime import datetime

from snapshare.utils.datetime_utils import now


def follow_document_id(follower_id: str, following_id: str) -> str:
    """At most one edge per ordered (follower, following) pair."""
    return f"{follower_id}_{following_id}"


@dataclass
class Follow:
    """Document layout of the Firestore 'follows' collection."""
    follow_id: str
    follower_id: str
    following_id: str
    created_at: datetime = field(default_factory=now)
