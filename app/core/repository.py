"""Base repository pattern implementation.

This module provides a generic read-side repository that domain-specific
repositories build on.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy.orm import Query, Session

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType]):
    """Generic repository with common read operations.

    Example:
        ```python
        class OrderRepository(BaseRepository[Order]):
            def __init__(self, db: Session):
                super().__init__(db, Order)
        ```
    """

    def __init__(self, db: Session, model: type[ModelType]):
        """Initialize repository with database session and model class.

        Args:
            db: SQLAlchemy session.
            model: The model class this repository operates on.
        """
        self.db = db
        self.model = model

    def query(self) -> "Query[Any]":
        return self.db.query(self.model)
