"""
Comment lifecycle operations.

These functions perform state transitions and validation only. Callers are
expected to check ``thread_comments.permissions.can_perform`` first; the API
views do this before any of these functions run.

Every failed transition raises ``django.core.exceptions.ValidationError``
and leaves the database and the passed-in instances unchanged.
"""
import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils.translation import gettext_lazy as _

from .conf import comments_settings
from .models import Comment, Thread
from .signals import (
    comment_created,
    comment_deleted,
    comment_undeleted,
    comment_updated,
    comment_voted,
    thread_closed,
    thread_reopened,
)
from .votes import BaseVoteLedger, UP

logger = logging.getLogger(comments_settings.LOGGER_NAME)


def build_comment(thread, creator, body=''):
    """
    Return an unsaved comment on ``thread`` by ``creator``.
    """
    return Comment(thread=thread, creator=creator, body=body)


def check_double_post(comment):
    """
    Reject ``comment`` if its body repeats the newest comment in the thread.
    """
    previous = comment.thread.comments.latest_first()
    if comment.pk is not None:
        previous = previous.exclude(pk=comment.pk)
    previous = previous.only('pk', 'body').first()

    if previous is not None and previous.body == comment.body:
        raise ValidationError(
            _('This comment is identical to the previous one. Double posting is not allowed.'),
            code='double_posted'
        )


def save_new_comment(comment):
    """
    Validate and persist a comment built with ``build_comment``.

    The thread row is locked while the double-post guard runs so two
    identical submissions cannot both pass it.
    """
    with transaction.atomic():
        thread = Thread.objects.select_for_update().get(pk=comment.thread_id)
        if thread.is_closed:
            raise ValidationError(
                _('This thread is closed to new comments.'),
                code='thread_closed'
            )
        comment.full_clean()
        check_double_post(comment)
        comment.save()

    logger.info(f"Comment {comment.pk} created on thread {comment.thread_id} by {comment.creator}")
    comment_created.send(sender=Comment, comment=comment, user=comment.creator)
    return comment


def create_comment(thread, creator, body):
    """
    Create a comment on ``thread``.

    Raises:
        ValidationError: blank or too long body, closed thread, double post
    """
    return save_new_comment(build_comment(thread, creator, body))


def update_comment(comment, editor, body):
    """
    Replace a comment's body and record ``editor`` as the last editor.

    The editor is recorded even when it is the comment's creator.
    """
    previous_body, previous_editor = comment.body, comment.editor

    comment.body = body
    comment.editor = editor
    try:
        comment.full_clean()
    except ValidationError:
        comment.body, comment.editor = previous_body, previous_editor
        raise

    comment.save(update_fields=['body', 'editor', 'updated_at'])
    logger.info(f"Comment {comment.pk} updated by {editor}")
    comment_updated.send(sender=Comment, comment=comment, user=editor)
    return comment


def delete_comment(comment, user):
    """
    Soft-delete ``comment``.

    Raises:
        ValidationError: if the comment is already deleted
    """
    if not comment.delete_by(user):
        raise ValidationError(
            _('This comment has already been deleted.'),
            code='already_deleted'
        )
    comment_deleted.send(sender=Comment, comment=comment, user=user)
    return comment


def undelete_comment(comment, user):
    """
    Restore a soft-deleted ``comment``.

    Raises:
        ValidationError: if the comment is not deleted
    """
    if not comment.undelete_by(user):
        raise ValidationError(
            _('This comment is not deleted.'),
            code='not_deleted'
        )
    comment_undeleted.send(sender=Comment, comment=comment, user=user)
    return comment


def vote_on_comment(comment, user, direction):
    """
    Record an upvote or downvote from ``user``.

    Voting twice in the same direction is a no-op; voting the other way
    replaces the earlier vote.
    """
    BaseVoteLedger.check_direction(direction)

    if direction == UP:
        voted = comment.upvote_from(user)
    else:
        voted = comment.downvote_from(user)

    if not voted:
        raise ValidationError(
            _('Your vote could not be recorded.'),
            code='vote_rejected'
        )
    comment_voted.send(sender=Comment, comment=comment, user=user, direction=direction)
    return comment


def unvote_comment(comment, user):
    """
    Clear ``user``'s vote on ``comment``. Clearing a missing vote is a no-op.
    """
    if not comment.unvote_from(user):
        raise ValidationError(
            _('Your vote could not be removed.'),
            code='vote_rejected'
        )
    comment_voted.send(sender=Comment, comment=comment, user=user, direction=None)
    return comment


def close_thread(thread, user):
    if not thread.close(user):
        raise ValidationError(_('This thread is already closed.'), code='thread_closed')
    thread_closed.send(sender=Thread, thread=thread, user=user)
    return thread


def reopen_thread(thread, user):
    if not thread.reopen(user):
        raise ValidationError(_('This thread is not closed.'), code='thread_open')
    thread_reopened.send(sender=Thread, thread=thread, user=user)
    return thread


def subscribe(thread, user):
    if not thread.subscribe(user):
        raise ValidationError(_('You are already subscribed to this thread.'), code='already_subscribed')
    logger.info(f"{user} subscribed to thread {thread.pk}")
    return thread


def unsubscribe(thread, user):
    if not thread.unsubscribe(user):
        raise ValidationError(_('You are not subscribed to this thread.'), code='not_subscribed')
    logger.info(f"{user} unsubscribed from thread {thread.pk}")
    return thread
