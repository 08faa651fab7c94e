# snapshare/utils/datetime_utils.py
"""
Timestamp helpers. Everything stored in Firestore is a timezone-aware UTC datetime.
"""
from datetime import datetime, timezone


class DateTimeUtils:

    @staticmethod
    def now() -> datetime:
        """Current time as a UTC timezone-aware datetime."""
        return datetime.now(timezone.utc)


now = DateTimeUtils.now
