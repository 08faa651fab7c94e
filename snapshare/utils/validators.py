# snapshare/utils/validators.py
import re
import uuid
from urllib.parse import quote
from typing import Optional

from snapshare.core.exceptions import InvalidInputError

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
USERNAME_PATTERN = re.compile(r'^[a-z0-9_]+$')


def ensure_valid_id(value: Optional[str], field: str = 'id') -> str:
    """
    Checks that `value` is a document id issued by this service (a UUID string).

    :raises InvalidInputError: when the value is missing or malformed
    """
    if not value:
        raise InvalidInputError(f"{field} is required", field=field)
    try:
        uuid.UUID(str(value))
    except (ValueError, AttributeError, TypeError):
        raise InvalidInputError(f"{field} is not a valid id", field=field)
    return str(value)


def normalize_username(raw: Optional[str]) -> str:
    """Trims and lowercases a username, then enforces length and charset rules."""
    username = (raw or '').strip().lower()
    if len(username) < USERNAME_MIN_LENGTH:
        raise InvalidInputError(f"Username must be at least {USERNAME_MIN_LENGTH} characters", field='username')
    if len(username) > USERNAME_MAX_LENGTH:
        raise InvalidInputError(f"Username must be at most {USERNAME_MAX_LENGTH} characters", field='username')
    if not USERNAME_PATTERN.match(username):
        raise InvalidInputError("Username can only contain letters, numbers, and underscores", field='username')
    return username


def default_avatar_url(display_name: Optional[str], username: Optional[str]) -> str:
    """Generated placeholder avatar for users who never uploaded one."""
    name = display_name or username or "User"
    return f"https://ui-avatars.com/api/?name={quote(name)}&size=200&background=random&color=fff&bold=true"


def ensure_image_file(file_storage, allowed_extensions, field: str = 'image'):
    """
    Reads an uploaded image from a werkzeug FileStorage.

    :return: (data, filename, content_type)
    :raises InvalidInputError: no file, empty file or disallowed extension
    """
    if file_storage is None or not file_storage.filename:
        raise InvalidInputError(f"{field} file is required", field=field)
    filename = file_storage.filename
    extension = filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''
    if extension not in allowed_extensions:
        allowed = ', '.join(sorted(allowed_extensions))
        raise InvalidInputError(f"{field} must be one of: {allowed}", field=field)
    data = file_storage.read()
    if not data:
        raise InvalidInputError(f"{field} file is empty", field=field)
    return data, filename, file_storage.mimetype


def page_params(page, limit, default_limit: int = 10, max_limit: int = 100):
    """Clamps page/limit query values: page >= 1, 1 <= limit <= max_limit."""
    page = page if page and page > 0 else 1
    limit = limit if limit and limit > 0 else default_limit
    return page, min(limit, max_limit)


def pagination_meta(page: int, limit: int, total: int) -> dict:
    total_pages = -(-total // limit) if limit > 0 else 0
    return {
        'current_page': page,
        'total_pages': total_pages,
        'total_users': total,
        'users_per_page': limit,
        'has_next_page': page < total_pages,
        'has_prev_page': page > 1,
    }
