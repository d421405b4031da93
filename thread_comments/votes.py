"""
Vote ledger for comments.

The lifecycle code never touches vote storage directly; it goes through the
ledger configured by ``VOTE_LEDGER``. The default ledger stores one
``CommentVote`` row per (comment, voter) pair.

To plug in a different store, subclass ``BaseVoteLedger`` and point
``THREAD_COMMENTS_CONFIG['VOTE_LEDGER']`` at it.
"""
import logging
from typing import NamedTuple, Optional

from django.core.exceptions import ImproperlyConfigured
from django.db import transaction
from django.db.models import Count, Q
from django.utils.module_loading import import_string

from .conf import comments_settings

logger = logging.getLogger(comments_settings.LOGGER_NAME)

UP = 'up'
DOWN = 'down'
DIRECTIONS = (UP, DOWN)


class VoteTally(NamedTuple):
    up: int
    down: int


class BaseVoteLedger:
    """Interface for per-user up/down vote state on a subject."""

    def cast_vote(self, subject, user, direction: str) -> bool:
        """
        Record ``user``'s vote on ``subject``.

        Casting the opposite vote replaces the previous one; casting the
        same vote again changes nothing.
        """
        raise NotImplementedError

    def clear_vote(self, subject, user) -> bool:
        """Remove ``user``'s vote on ``subject``, if any."""
        raise NotImplementedError

    def get_vote(self, subject, user) -> Optional[str]:
        raise NotImplementedError

    def votes(self, subject, direction: str):
        """Votes on ``subject`` in one direction."""
        raise NotImplementedError

    def tally(self, subject) -> VoteTally:
        raise NotImplementedError

    @staticmethod
    def check_direction(direction):
        if direction not in DIRECTIONS:
            raise ValueError(f"Invalid vote direction '{direction}'. Must be one of: {', '.join(DIRECTIONS)}")


class ModelVoteLedger(BaseVoteLedger):
    """Vote ledger backed by the CommentVote model."""

    def _queryset(self, subject):
        from .models import CommentVote
        return CommentVote.objects.filter(comment=subject)

    def cast_vote(self, subject, user, direction):
        from .models import CommentVote
        self.check_direction(direction)

        with transaction.atomic():
            vote, created = CommentVote.objects.select_for_update().get_or_create(
                comment=subject,
                voter=user,
                defaults={'is_upvote': direction == UP},
            )
            if created:
                logger.info(f"{user} cast {direction} vote on comment {subject.pk}")
            elif vote.is_upvote != (direction == UP):
                vote.is_upvote = direction == UP
                vote.save(update_fields=['is_upvote', 'updated_at'])
                logger.info(f"{user} changed vote on comment {subject.pk} to {direction}")
            else:
                logger.debug(f"{user} already cast {direction} vote on comment {subject.pk}")
        return True

    def clear_vote(self, subject, user):
        deleted, _details = self._queryset(subject).filter(voter=user).delete()
        if deleted:
            logger.info(f"{user} cleared vote on comment {subject.pk}")
        return True

    def get_vote(self, subject, user):
        if subject.pk is None or user is None or user.pk is None:
            return None
        is_upvote = self._queryset(subject).filter(voter=user).values_list('is_upvote', flat=True).first()
        if is_upvote is None:
            return None
        return UP if is_upvote else DOWN

    def votes(self, subject, direction):
        from .models import CommentVote
        self.check_direction(direction)
        if subject.pk is None:
            return CommentVote.objects.none()
        return self._queryset(subject).filter(is_upvote=direction == UP).select_related('voter')

    def tally(self, subject):
        if subject.pk is None:
            return VoteTally(0, 0)
        counts = self._queryset(subject).aggregate(
            up=Count('pk', filter=Q(is_upvote=True)),
            down=Count('pk', filter=Q(is_upvote=False)),
        )
        return VoteTally(counts['up'], counts['down'])


def get_vote_ledger():
    """
    Return an instance of the configured vote ledger.
    """
    path = comments_settings.VOTE_LEDGER
    try:
        ledger_class = import_string(path) if isinstance(path, str) else path
    except ImportError as e:
        raise ImproperlyConfigured(f"Could not import VOTE_LEDGER '{path}': {e}")

    ledger = ledger_class()
    if not isinstance(ledger, BaseVoteLedger):
        raise ImproperlyConfigured(
            f"VOTE_LEDGER must be a subclass of BaseVoteLedger, got {ledger_class!r}"
        )
    return ledger
