# snapshare/models/post.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from snapshare.utils.datetime_utils import now


@dataclass
class Post:
    """
    Document layout of the Firestore 'posts' collection.

    `like_count` is a cached counter maintained with atomic increments by the
    like toggle. Likes removed by cascade deletion do not touch it, so exact
    numbers must be recomputed from the 'likes' collection.
    """
    post_id: str
    user_id: str
    title: str
    image_url: str
    image_public_id: Optional[str] = None
    caption: str = ""
    like_count: int = 0
    created_at: datetime = field(default_factory=now)
    updated_at: datetime = field(default_factory=now)
