"""
Base repository pattern for database operations.

Provides common CRUD operations with SQLAlchemy ORM.
"""

from typing import TypeVar, Generic, Type, Optional, Any

from sqlalchemy.orm import Session

from wealth_mngr.db.models import Base


ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common CRUD operations.

    Generic repository pattern that can be extended for specific models.
    Provides type-safe database operations.
    """

    def __init__(self, model: Type[ModelType], session: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Database session
        """
        self.model = model
        self.session = session

    def create(self, **kwargs) -> ModelType:
        """
        Create a new record.

        Args:
            **kwargs: Field values for the new record

        Returns:
            Created model instance

        Raises:
            IntegrityError: If unique constraint violation
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        self.session.flush()
        return instance

    def get_by_id(self, id: Any) -> Optional[ModelType]:
        """
        Get record by primary key.

        Args:
            id: Primary key value

        Returns:
            Model instance or None if not found
        """
        return self.session.get(self.model, id)

    def update(self, id: Any, **kwargs) -> Optional[ModelType]:
        """
        Update record by primary key.

        Args:
            id: Primary key value
            **kwargs: Fields to update

        Returns:
            Updated model instance or None if not found
        """
        instance = self.get_by_id(id)
        if not instance:
            return None

        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

        self.session.flush()
        return instance

    def delete(self, id: Any) -> bool:
        """
        Delete record by primary key.

        Args:
            id: Primary key value

        Returns:
            True if deleted, False if not found
        """
        instance = self.get_by_id(id)
        if not instance:
            return False

        self.session.delete(instance)
        self.session.flush()
        return True

    def delete_all(self) -> int:
        """
        Delete every record.

        Returns:
            Number of records deleted
        """
        deleted = self.session.query(self.model).delete()
        self.session.flush()
        return deleted
