# snapshare/utils/__init__.py
"""
Helpers shared across the API packages.
"""

from .datetime_utils import DateTimeUtils, now
from .validators import (
    ensure_valid_id, normalize_username, default_avatar_url,
    ensure_image_file, page_params, pagination_meta
)

__all__ = [
    'DateTimeUtils', 'now',
    'ensure_valid_id', 'normalize_username', 'default_avatar_url',
    'ensure_image_file', 'page_params', 'pagination_meta',
]
