"""Base repository class with common functionality."""

from sqlalchemy.orm import Session


class BaseRepository:
    """Base repository class bound to a caller-owned session."""

    def __init__(self, session: Session):
        self.session = session

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        # The session belongs to the caller's session scope
        return None
