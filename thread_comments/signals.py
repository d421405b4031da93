import logging

from django.dispatch import receiver, Signal

from .conf import comments_settings

logger = logging.getLogger(comments_settings.LOGGER_NAME)

# Comment lifecycle signals, sent with comment= and user=
comment_created = Signal()
comment_updated = Signal()
comment_deleted = Signal()
comment_undeleted = Signal()

# Sent with comment=, user= and direction= (None when a vote is cleared)
comment_voted = Signal()

# Thread signals, sent with thread= and user=
thread_closed = Signal()
thread_reopened = Signal()


def trigger_notifications(comment):
    """
    Notify thread subscribers about a newly created comment.

    Args:
        comment: Comment instance
    """
    if not comments_settings.SEND_NOTIFICATIONS:
        return

    # Import here to avoid circular imports
    from .notifications import notify_new_comment

    notify_new_comment(comment)


@receiver(comment_created)
def on_comment_created(sender, comment, user, **kwargs):
    """
    Handle a new comment: subscribe the creator if configured, then notify.
    """
    if comments_settings.AUTO_SUBSCRIBE_ON_COMMENT and comment.thread.subscribe(user):
        logger.debug(f"Auto-subscribed {user} to thread {comment.thread_id}")

    trigger_notifications(comment)
