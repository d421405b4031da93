from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _
import logging


class ThreadCommentsConfig(AppConfig):
    name = 'thread_comments'
    verbose_name = _('Comment threads')
    default_auto_field = 'django.db.models.BigAutoField'

    def ready(self):

        # Import signals to register the notification receivers
        import thread_comments.signals

        from .conf import comments_settings
        comments_settings.validate()

        logger = logging.getLogger(comments_settings.LOGGER_NAME)
        logger.info('Thread comments initialized')
