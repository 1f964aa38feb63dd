"""
Repository base class.
Services read and write models only through repositories; anything that
checks a row and then writes it uses get_for_update() inside
transaction.atomic().
"""
from typing import Generic, TypeVar, Optional
from django.db.models import QuerySet, Model
import logging

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=Model)


class BaseRepository(Generic[T]):
    """Data access for one model"""

    def __init__(self, model: type[T]):
        self.model = model

    def get_queryset(self) -> QuerySet[T]:
        return self.model.objects.all()

    def get_all(self, **filters) -> QuerySet[T]:
        return self.get_queryset().filter(**filters)

    def get_by_id(self, id: int, **filters) -> Optional[T]:
        """Unlocked read; None when the row does not exist"""
        return self.get_all(id=id, **filters).first()

    def get_for_update(self, id: int, **filters) -> Optional[T]:
        """
        Read a row and hold a row lock on it until the surrounding
        transaction ends. Must be called inside transaction.atomic().
        """
        return self.model.objects.select_for_update().filter(id=id, **filters).first()

    def create(self, **kwargs) -> T:
        return self.model.objects.create(**kwargs)

    def delete(self, instance: T) -> None:
        logger.info(f"Deleting {self.model.__name__} {instance.pk}")
        instance.delete()

    def exists(self, **filters) -> bool:
        return self.get_all(**filters).exists()

    def count(self, **filters) -> int:
        return self.get_all(**filters).count()
