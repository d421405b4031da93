"""
Models used as comment targets in the test suite.
"""
import uuid

from django.db import models
from django.utils import timezone


class Article(models.Model):
    """
    An article with an integer primary key.
    """
    title = models.CharField(max_length=200)
    content = models.TextField(blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        app_label = 'tests'
        ordering = ['-created_at']

    def __str__(self):
        return self.title


class Note(models.Model):
    """
    A model with a UUID primary key that is not listed in COMMENTABLE_MODELS.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    text = models.TextField(blank=True)

    class Meta:
        app_label = 'tests'

    def __str__(self):
        return self.text[:20]
