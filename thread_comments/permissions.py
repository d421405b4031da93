"""
Authorization policy for comment threads.

Every decision goes through ``can_perform(action, user, thread, comment)``.
The policy is a pure function of the user's capabilities on the thread and
the current state of the thread and comment; it never writes anything.

Capabilities come from the configured ``CAPABILITY_RESOLVER``:

    THREAD_COMMENTS_CONFIG = {
        'CAPABILITY_RESOLVER': 'myapp.comments.resolve_capabilities',
    }

A resolver takes ``(user, thread)`` and returns a ``Capabilities`` triple.
"""
import logging
from typing import NamedTuple

from .conf import comments_settings
from .exceptions import AuthorizationError

logger = logging.getLogger(comments_settings.LOGGER_NAME)


class Capabilities(NamedTuple):
    can_read: bool = False
    can_edit: bool = False
    is_admin: bool = False

    @property
    def is_moderator(self):
        return self.can_edit or self.is_admin


NO_CAPABILITIES = Capabilities()

COMMENT_ACTIONS = frozenset([
    'edit', 'update', 'delete', 'undelete', 'upvote', 'downvote', 'unvote',
])
THREAD_ACTIONS = frozenset([
    'show', 'new', 'create', 'close', 'reopen', 'subscribe', 'unsubscribe',
])
ACTIONS = COMMENT_ACTIONS | THREAD_ACTIONS


def auth_capabilities(user, thread):
    """
    Default resolver based on django.contrib.auth.

    - can_read: any active user
    - can_edit: users with the ``thread_comments.moderate_thread`` permission
    - is_admin: superusers
    """
    return Capabilities(
        can_read=bool(user.is_active),
        can_edit=user.has_perm('thread_comments.moderate_thread'),
        is_admin=bool(user.is_superuser),
    )


def flag_capabilities(user, thread):
    """
    Resolver that reads ``can_read``, ``can_edit`` and ``is_admin`` attributes
    straight from the user object. Missing attributes count as False.
    """
    return Capabilities(
        can_read=bool(getattr(user, 'can_read', False)),
        can_edit=bool(getattr(user, 'can_edit', False)),
        is_admin=bool(getattr(user, 'is_admin', False)),
    )


def get_capabilities(user, thread):
    """
    Resolve ``user``'s capabilities on ``thread``.

    Anonymous users have none, whatever the resolver says.
    """
    if user is None or not getattr(user, 'is_authenticated', False):
        return NO_CAPABILITIES
    return comments_settings.CAPABILITY_RESOLVER(user, thread)


# ============================================================================
# RULES
# ============================================================================

def _can_read(caps):
    if caps.can_read:
        return True
    return comments_settings.MODERATORS_CAN_READ and caps.is_moderator


def _creator_may(setting, user, comment):
    """
    Whether the comment's creator may act on it under COMMENT_EDITING or
    COMMENT_DELETION.
    """
    if not comment.is_creator(user):
        return False
    mode = getattr(comments_settings, setting)
    if mode == 'none':
        return False
    return mode == 'any' or comment.is_latest


def _moderator_may(caps, allowed_modes):
    return caps.is_moderator and comments_settings.MODERATOR_PERMISSIONS in allowed_modes


def _rule_show(caps, user, thread, comment):
    return _can_read(caps)


def _rule_create(caps, user, thread, comment):
    return _can_read(caps) and not thread.is_closed


def _rule_edit(caps, user, thread, comment):
    if not _can_read(caps):
        return False
    return (
        _creator_may('COMMENT_EDITING', user, comment)
        or _moderator_may(caps, ('edit',))
    )


def _has_delete_rights(caps, user, comment):
    return (
        _creator_may('COMMENT_DELETION', user, comment)
        or _moderator_may(caps, ('edit', 'delete'))
    )


def _rule_delete(caps, user, thread, comment):
    if not _can_read(caps) or comment.is_deleted:
        return False
    return _has_delete_rights(caps, user, comment)


def _rule_undelete(caps, user, thread, comment):
    if not _can_read(caps) or not comment.is_deleted:
        return False
    if _moderator_may(caps, ('edit', 'delete')):
        return True
    # A creator cannot restore a comment somebody else removed
    if comment.is_modified and comment.editor_id != comment.creator_id:
        return False
    return _creator_may('COMMENT_DELETION', user, comment)


def _rule_vote(directions):
    def rule(caps, user, thread, comment):
        if not _can_read(caps):
            return False
        if comments_settings.COMMENT_VOTING not in directions:
            return False
        return not comment.is_creator(user)
    return rule


def _rule_close(caps, user, thread, comment):
    return _can_read(caps) and caps.is_moderator and not thread.is_closed


def _rule_reopen(caps, user, thread, comment):
    return _can_read(caps) and caps.is_moderator and thread.is_closed


RULES = {
    'show': _rule_show,
    'new': _rule_create,
    'create': _rule_create,
    'subscribe': _rule_show,
    'unsubscribe': _rule_show,
    'close': _rule_close,
    'reopen': _rule_reopen,
    'edit': _rule_edit,
    'update': _rule_edit,
    'delete': _rule_delete,
    'undelete': _rule_undelete,
    'upvote': _rule_vote(('both', 'up')),
    'downvote': _rule_vote(('both',)),
    'unvote': _rule_vote(('both', 'up')),
}


def can_perform(action, user, thread, comment=None):
    """
    Decide whether ``user`` may perform ``action`` on ``thread`` / ``comment``.

    Args:
        action: One of ACTIONS
        user: User instance, AnonymousUser or None
        thread: Thread instance
        comment: Comment instance (required for comment actions)

    Returns:
        bool

    Raises:
        ValueError: for an unknown action or a comment action without a comment
    """
    rule = RULES.get(action)
    if rule is None:
        raise ValueError(f"Unknown comment action '{action}'. Must be one of: {', '.join(sorted(ACTIONS))}")
    if action in COMMENT_ACTIONS:
        if comment is None:
            raise ValueError(f"Action '{action}' requires a comment")
        if comment.thread_id != thread.pk:
            return False

    caps = get_capabilities(user, thread)
    return rule(caps, user, thread, comment)


def authorize(action, user, thread, comment=None):
    """
    Like ``can_perform`` but raises AuthorizationError on denial.
    """
    if not can_perform(action, user, thread, comment):
        logger.warning(
            f"Denied '{action}' on thread {thread.pk}"
            + (f" comment {comment.pk}" if comment is not None else "")
            + f" for {user}"
        )
        raise AuthorizationError(action=action)
