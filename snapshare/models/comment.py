# snapshare/models/comment.py
from dataclasses import dataclass, field
from datetime import datetime

from snapshare.utils.datetime_utils import now


@dataclass
class Comment:
    """Document layout of the Firestore 'comments' collection."""
    comment_id: str
    post_id: str
    user_id: str
    text: str
    created_at: datetime = field(default_factory=now)
