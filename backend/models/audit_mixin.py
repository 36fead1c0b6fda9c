from sqlalchemy import Column, DateTime

from utils import local_now


class TimestampMixin:
    """Mixin that provides created/updated timestamps.

    Rows are hard-deleted together with their source document, so no
    soft-delete columns are carried here.
    """
    # DateTime(timezone=True) ensures the timezone info is persisted in the database.
    created_at = Column(DateTime(timezone=True), default=local_now)
    updated_at = Column(DateTime(timezone=True), onupdate=local_now)
