import logging

from django.contrib.contenttypes.models import ContentType
from django.db import models

from .conf import comments_settings

logger = logging.getLogger(comments_settings.LOGGER_NAME)


class ThreadQuerySet(models.QuerySet):
    """
    QuerySet for Thread with lookups by commented object.
    """

    def for_model(self, model):
        """Threads attached to instances of the given model class."""
        return self.filter(content_type=ContentType.objects.get_for_model(model))

    def open(self):
        return self.filter(closed_at__isnull=True)

    def closed(self):
        return self.filter(closed_at__isnull=False)


class ThreadManager(models.Manager.from_queryset(ThreadQuerySet)):
    """
    Manager that hands out the single thread attached to a model instance.
    """

    def get_for_object(self, obj):
        """
        Return the thread for ``obj`` or None if nobody has commented yet.
        """
        content_type = ContentType.objects.get_for_model(obj)
        return self.filter(content_type=content_type, object_id=str(obj.pk)).first()

    def unsaved_for_object(self, obj):
        """
        Build, without saving, the thread ``obj`` would get.
        """
        return self.model(
            content_type=ContentType.objects.get_for_model(obj),
            object_id=str(obj.pk),
        )

    def for_object(self, obj):
        """
        Return the thread for ``obj``, creating it on first use.

        Object IDs are stored as strings so integer and UUID primary keys both work.
        """
        if obj.pk is None:
            raise ValueError("Cannot attach a comment thread to an unsaved object.")

        content_type = ContentType.objects.get_for_model(obj)
        thread, created = self.get_or_create(
            content_type=content_type,
            object_id=str(obj.pk),
        )
        if created:
            logger.debug(f"Created thread {thread.pk} for {content_type.app_label}.{content_type.model} {obj.pk}")
        return thread


class CommentQuerySet(models.QuerySet):
    """
    QuerySet for Comment with soft-delete and ordering helpers.
    """

    def with_related(self):
        """
        Optimize foreign key access.
        Use this for any query that will access the thread, creator or editor.
        """
        return self.select_related('thread', 'creator', 'editor')

    def active(self):
        """Comments that are not soft-deleted."""
        return self.filter(deleted_at__isnull=True)

    def deleted(self):
        """Soft-deleted comments."""
        return self.filter(deleted_at__isnull=False)

    def chronological(self):
        return self.order_by('created_at', 'pk')

    def latest_first(self):
        return self.order_by('-created_at', '-pk')
