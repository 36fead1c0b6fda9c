from datetime import datetime, date
import os
import pytz

APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Asia/Kolkata")


def local_now() -> datetime:
    """Timezone-aware current time in the configured application timezone."""
    return datetime.now(pytz.timezone(APP_TIMEZONE))


def local_today() -> date:
    return local_now().date()

__all__ = ['APP_TIMEZONE', 'local_now', 'local_today']
