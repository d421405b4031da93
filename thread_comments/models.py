from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
import logging

from .conf import comments_settings
from .managers import CommentQuerySet, ThreadManager

logger = logging.getLogger(comments_settings.LOGGER_NAME)


class AbstractTimestampedModel(models.Model):
    """Base class with timestamp fields."""
    created_at = models.DateTimeField(_('Created at'), default=timezone.now)
    updated_at = models.DateTimeField(_('Updated at'), auto_now=True)

    class Meta:
        abstract = True


class Thread(AbstractTimestampedModel):
    """
    The comment thread attached to a single commentable object.

    Works with ANY model that has ANY primary key type (int, UUID, custom).
    The object_id CharField handles all PK types by storing them as strings.
    """

    content_type = models.ForeignKey(
        ContentType,
        on_delete=models.CASCADE,
        verbose_name=_('Content type'),
        related_name='comment_threads'
    )
    object_id = models.CharField(
        _('Object ID'),
        max_length=255,
        db_index=True
    )
    content_object = GenericForeignKey('content_type', 'object_id')

    closed_at = models.DateTimeField(_('Closed at'), null=True, blank=True)
    closer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='closed_comment_threads',
        verbose_name=_('Closed by')
    )

    objects = ThreadManager()

    class Meta:
        verbose_name = _('Thread')
        verbose_name_plural = _('Threads')
        ordering = ('-created_at',)
        permissions = [('moderate_thread', _('Can moderate comment threads'))]
        constraints = [
            models.UniqueConstraint(
                fields=['content_type', 'object_id'],
                name='unique_thread_per_object',
            )
        ]

    def __str__(self):
        content_object = self.content_object
        if content_object is None:
            return _("Thread {pk}").format(pk=self.pk)
        return _("Thread for {object}").format(object=content_object)

    @property
    def is_closed(self):
        return self.closed_at is not None

    def close(self, user=None):
        """
        Close the thread to new comments.

        Returns False if the thread was already closed.
        """
        if self.is_closed:
            return False
        self.closed_at = timezone.now()
        self.closer = user
        self.save(update_fields=['closed_at', 'closer', 'updated_at'])
        logger.info(f"Thread {self.pk} closed by {user}")
        return True

    def reopen(self, user=None):
        """
        Reopen a closed thread.

        Returns False if the thread was not closed.
        """
        if not self.is_closed:
            return False
        self.closed_at = None
        self.closer = None
        self.save(update_fields=['closed_at', 'closer', 'updated_at'])
        logger.info(f"Thread {self.pk} reopened by {user}")
        return True

    @property
    def subscribers(self):
        """Users subscribed to this thread."""
        return get_user_model().objects.filter(thread_subscriptions__thread=self)

    def is_subscribed(self, user):
        if user is None or user.pk is None:
            return False
        return self.subscriptions.filter(subscriber=user).exists()

    def subscribe(self, user):
        """
        Subscribe a user to new comment notifications.

        Returns False if the user was already subscribed.
        """
        _subscription, created = Subscription.objects.get_or_create(thread=self, subscriber=user)
        return created

    def unsubscribe(self, user):
        """
        Remove a user's subscription.

        Returns False if the user was not subscribed.
        """
        deleted, _details = self.subscriptions.filter(subscriber=user).delete()
        return deleted > 0

    def ordered_comments(self):
        return self.comments.chronological()

    def latest_comment(self):
        return self.comments.latest_first().first()


class Subscription(models.Model):
    """
    A user's subscription to new comments on a thread.
    """

    thread = models.ForeignKey(
        Thread,
        on_delete=models.CASCADE,
        related_name='subscriptions',
        verbose_name=_('Thread')
    )
    subscriber = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='thread_subscriptions',
        verbose_name=_('Subscriber')
    )
    created_at = models.DateTimeField(_('Created at'), auto_now_add=True)

    class Meta:
        verbose_name = _('Subscription')
        verbose_name_plural = _('Subscriptions')
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['thread', 'subscriber'],
                name='unique_thread_subscription',
                violation_error_message=_('This user is already subscribed to this thread.')
            )
        ]

    def __str__(self):
        return _("{user} subscribed to {thread}").format(
            user=self.subscriber.get_username(),
            thread=self.thread
        )


class Comment(AbstractTimestampedModel):
    """
    A comment on a thread.

    Comments are never hard-deleted through the public API: ``delete_by``
    and ``undelete_by`` toggle ``deleted_at`` and record the acting user
    as ``editor``.
    """

    thread = models.ForeignKey(
        Thread,
        on_delete=models.CASCADE,
        related_name='comments',
        verbose_name=_('Thread')
    )
    creator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='thread_comments',
        verbose_name=_('Creator')
    )
    editor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='edited_thread_comments',
        verbose_name=_('Editor')
    )
    body = models.TextField(_('Body'))
    deleted_at = models.DateTimeField(_('Deleted at'), null=True, blank=True)

    objects = CommentQuerySet.as_manager()

    class Meta:
        verbose_name = _('Comment')
        verbose_name_plural = _('Comments')
        ordering = ('created_at', 'id')
        indexes = [
            models.Index(fields=['thread', 'created_at'], name='comment_thread_created_idx'),
            models.Index(fields=['creator'], name='comment_creator_idx'),
            models.Index(fields=['deleted_at'], name='comment_deleted_idx'),
        ]

    def __str__(self):
        return _("Comment by {user} on {thread}").format(
            user=self.creator.get_username() if self.creator_id else _('Unknown'),
            thread=self.thread if self.thread_id else _('no thread')
        )

    def clean(self):
        """
        Validate the comment body.
        """
        super().clean()

        if not self.body or not self.body.strip():
            raise ValidationError({
                'body': ValidationError(
                    _('Comment body cannot be empty or contain only whitespace.'),
                    code='blank'
                )
            })

        max_length = comments_settings.MAX_COMMENT_LENGTH
        if max_length and len(self.body) > max_length:
            raise ValidationError({
                'body': ValidationError(
                    _('Comment exceeds maximum length of %(max_length)s characters.'),
                    code='max_length',
                    params={'max_length': max_length}
                )
            })

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    @property
    def is_modified(self):
        return self.editor_id is not None

    @property
    def is_latest(self):
        """True if no newer comment exists in the thread."""
        if self.pk is None:
            return False
        latest = self.thread.latest_comment()
        return latest is not None and latest.pk == self.pk

    def is_creator(self, user):
        return user is not None and user.pk is not None and self.creator_id == user.pk

    # ------------------------------------------------------------------
    # Soft delete
    # ------------------------------------------------------------------

    def delete_by(self, user):
        """
        Soft-delete the comment on behalf of ``user``.

        Returns False if the comment is already deleted.
        """
        if self.is_deleted:
            return False
        self.deleted_at = timezone.now()
        self.editor = user
        self.save(update_fields=['deleted_at', 'editor', 'updated_at'])
        logger.info(f"Comment {self.pk} deleted by {user}")
        return True

    def undelete_by(self, user):
        """
        Restore a soft-deleted comment on behalf of ``user``.

        Returns False if the comment is not deleted.
        """
        if not self.is_deleted:
            return False
        self.deleted_at = None
        self.editor = user
        self.save(update_fields=['deleted_at', 'editor', 'updated_at'])
        logger.info(f"Comment {self.pk} undeleted by {user}")
        return True

    # ------------------------------------------------------------------
    # Votes (delegated to the configured vote ledger)
    # ------------------------------------------------------------------

    def can_receive_vote_from(self, user):
        """
        A vote needs a saved comment and a saved voter. Whether the voter may
        vote at all is decided by the thread policy.
        """
        return not (self.pk is None or user is None or user.pk is None)

    def upvote_from(self, user):
        from .votes import UP
        return self._vote_from(user, UP)

    def downvote_from(self, user):
        from .votes import DOWN
        return self._vote_from(user, DOWN)

    def _vote_from(self, user, direction):
        from .votes import get_vote_ledger
        if not self.can_receive_vote_from(user):
            logger.debug(f"Rejected {direction} vote on comment {self.pk} from {user}")
            return False
        return get_vote_ledger().cast_vote(self, user, direction)

    def unvote_from(self, user):
        from .votes import get_vote_ledger
        if not self.can_receive_vote_from(user):
            return False
        return get_vote_ledger().clear_vote(self, user)

    def get_vote_by(self, user):
        """Return UP, DOWN or None for ``user``'s vote on this comment."""
        from .votes import get_vote_ledger
        return get_vote_ledger().get_vote(self, user)

    def get_upvotes(self):
        from .votes import UP, get_vote_ledger
        return get_vote_ledger().votes(self, UP)

    def get_downvotes(self):
        from .votes import DOWN, get_vote_ledger
        return get_vote_ledger().votes(self, DOWN)

    @property
    def vote_tally(self):
        from .votes import get_vote_ledger
        return get_vote_ledger().tally(self)

    @property
    def upvotes(self):
        return self.vote_tally.up

    @property
    def downvotes(self):
        return self.vote_tally.down


class CommentVote(models.Model):
    """
    Storage for the default vote ledger: one vote per user per comment.
    """

    comment = models.ForeignKey(
        Comment,
        on_delete=models.CASCADE,
        related_name='votes',
        verbose_name=_('Comment')
    )
    voter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='comment_votes',
        verbose_name=_('Voter')
    )
    is_upvote = models.BooleanField(_('Is upvote'), default=True)
    created_at = models.DateTimeField(_('Created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('Updated at'), auto_now=True)

    class Meta:
        verbose_name = _('Comment vote')
        verbose_name_plural = _('Comment votes')
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['comment', 'voter'],
                name='unique_comment_vote',
                violation_error_message=_('You have already voted on this comment.')
            )
        ]
        indexes = [
            models.Index(fields=['comment', 'is_upvote'], name='commentvote_direction_idx'),
        ]

    def __str__(self):
        return _("{user} {direction} comment {comment}").format(
            user=self.voter.get_username(),
            direction=_('upvoted') if self.is_upvote else _('downvoted'),
            comment=self.comment_id
        )
