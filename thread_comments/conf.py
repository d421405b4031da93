from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string
from django.utils.translation import gettext_lazy as _

# Default settings that can be overridden by THREAD_COMMENTS_CONFIG
DEFAULTS = {
    # ============================================================================
    # MODEL CONFIGURATION
    # ============================================================================

    # Models whose instances can get a comment thread through the API
    # Format: ['app_label.ModelName', 'another_app.AnotherModel'] (empty = any model)
    'COMMENTABLE_MODELS': [],

    # ============================================================================
    # PERMISSIONS
    # ============================================================================

    # Callable (or dotted path) taking (user, thread) and returning a
    # thread_comments.permissions.Capabilities triple
    'CAPABILITY_RESOLVER': 'thread_comments.permissions.auth_capabilities',

    # If True, users with can_edit or is_admin may read threads without can_read
    'MODERATORS_CAN_READ': False,

    # What moderators (can_edit / is_admin) may do to other users' comments
    # Options:
    #   'edit'   - edit, delete and undelete
    #   'delete' - delete and undelete only
    #   'none'   - nothing beyond their own comments
    'MODERATOR_PERMISSIONS': 'edit',

    # When creators may edit their own comments
    # Options: 'any' (always), 'latest' (only the newest comment in the thread), 'none'
    'COMMENT_EDITING': 'any',

    # When creators may delete or undelete their own comments
    # Options: 'any', 'latest', 'none'
    'COMMENT_DELETION': 'any',

    # ============================================================================
    # CONTENT SETTINGS
    # ============================================================================

    # Maximum allowed length for comment bodies (in characters, None = unlimited)
    'MAX_COMMENT_LENGTH': 3000,

    # ============================================================================
    # VOTING
    # ============================================================================

    # Options: 'both' (up and down), 'up' (upvotes only), 'none' (voting disabled)
    'COMMENT_VOTING': 'both',

    # Dotted path to the vote ledger class
    'VOTE_LEDGER': 'thread_comments.votes.ModelVoteLedger',

    # ============================================================================
    # NOTIFICATIONS
    # ============================================================================

    # Email thread subscribers when a comment is posted
    'SEND_NOTIFICATIONS': True,

    # Sender address (None = Django's DEFAULT_FROM_EMAIL)
    'DEFAULT_FROM_EMAIL': None,

    # Email subject, can use {creator} and {thread} placeholders
    'NOTIFICATION_SUBJECT': _('{creator} commented on {thread}'),

    # HTML template; a sibling .txt template is used for the plain text part
    'NOTIFICATION_EMAIL_TEMPLATE': 'thread_comments/email/new_comment.html',

    # Subscribe comment creators to the thread they post in
    'AUTO_SUBSCRIBE_ON_COMMENT': False,

    # Used in email links when django.contrib.sites is not configured
    'SITE_DOMAIN': None,
    'SITE_NAME': None,
    'USE_HTTPS': False,

    # ============================================================================
    # LOGGING
    # ============================================================================

    # Logger name for thread-comments
    'LOGGER_NAME': 'thread_comments',
}

CHOICES = {
    'MODERATOR_PERMISSIONS': ('edit', 'delete', 'none'),
    'COMMENT_EDITING': ('any', 'latest', 'none'),
    'COMMENT_DELETION': ('any', 'latest', 'none'),
    'COMMENT_VOTING': ('both', 'up', 'none'),
}


class CommentsSettings:
    """
    A settings object for thread-comments that handles default vs user settings.

    User settings are read from ``settings.THREAD_COMMENTS_CONFIG`` on every
    access, so ``override_settings`` takes effect without reloading.

    Usage:
        from thread_comments.conf import comments_settings

        max_length = comments_settings.MAX_COMMENT_LENGTH
    """

    def __init__(self, user_settings=None, defaults=None):
        self._user_settings = user_settings
        self.defaults = defaults or DEFAULTS

    @property
    def user_settings(self):
        if self._user_settings is not None:
            return self._user_settings
        return getattr(settings, 'THREAD_COMMENTS_CONFIG', {})

    def __getattr__(self, attr):
        if attr not in self.defaults:
            raise AttributeError(f"Invalid thread-comments setting: '{attr}'")

        value = self.user_settings.get(attr, self.defaults[attr])

        if attr == 'CAPABILITY_RESOLVER':
            return self._load_callable(attr, value)

        if attr == 'DEFAULT_FROM_EMAIL' and not value:
            return getattr(settings, 'DEFAULT_FROM_EMAIL', None)

        return value

    def _load_callable(self, attr, path):
        """
        Resolve a setting that may be a callable or a dotted path to one.
        """
        if callable(path):
            return path

        try:
            func = import_string(path)
        except ImportError as e:
            raise ImproperlyConfigured(f"Could not import {attr} '{path}': {e}")

        if not callable(func):
            raise ImproperlyConfigured(
                f"{attr} must be callable, got {type(func)}"
            )
        return func

    @property
    def as_dict(self):
        """
        Return all settings as a dictionary.
        """
        return {key: getattr(self, key) for key in self.defaults}

    def validate(self):
        """
        Validate settings for common configuration errors.
        Raises ImproperlyConfigured for invalid settings.
        """
        errors = []

        for key, valid in CHOICES.items():
            value = getattr(self, key)
            if value not in valid:
                errors.append(f"{key} must be one of {list(valid)}, got '{value}'")

        max_length = self.MAX_COMMENT_LENGTH
        if max_length is not None and max_length <= 0:
            errors.append(f"MAX_COMMENT_LENGTH must be positive, got {max_length}")

        if self.SEND_NOTIFICATIONS and not self.NOTIFICATION_EMAIL_TEMPLATE:
            errors.append("NOTIFICATION_EMAIL_TEMPLATE must be set when SEND_NOTIFICATIONS is True")

        if errors:
            raise ImproperlyConfigured(
                "Invalid thread-comments configuration:\n" +
                "\n".join(f"  - {error}" for error in errors)
            )


comments_settings = CommentsSettings(defaults=DEFAULTS)
