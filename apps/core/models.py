from django.db import models
from django.db.models.signals import post_delete, pre_delete
from django.utils import timezone

from .managers import SoftDeleteModelManager, SoftDeleteQuerySet


class BaseModel(models.Model):
    """
    An abstract base class that provides created_at and updated_at fields
    """

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class AllObjectsManager(models.Manager):
    """Manager that includes all records, including soft-deleted ones."""

    def get_queryset(self):
        return SoftDeleteQuerySet(self.model, using=self._db)


class SoftDeleteBaseModel(BaseModel):
    """
    An abstract base model that provides soft delete functionality.
    """

    deleted_at = models.DateTimeField(null=True, blank=True)

    # The default manager hides soft-deleted rows; `all_objects` sees everything.
    objects = SoftDeleteModelManager()
    all_objects = AllObjectsManager()

    class Meta:
        abstract = True

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def delete(self, hard_delete=False, *args, **kwargs):
        """
        Mark this object as deleted by setting the deleted_at field.

        Args:
            hard_delete (bool): If True, permanently delete the record
        """
        if hard_delete:
            return super().delete(*args, **kwargs)

        pre_delete.send(sender=self.__class__, instance=self)
        self.deleted_at = timezone.now()
        self.save(update_fields=self.soft_delete_update_fields())
        post_delete.send(sender=self.__class__, instance=self)

    def soft_delete_update_fields(self):
        """Fields written by a soft delete. Subclasses extend this list."""
        return ["deleted_at", "updated_at"]

    def restore(self):
        """
        Restore a soft-deleted object
        """
        self.deleted_at = None
        self.save(update_fields=["deleted_at", "updated_at"])
