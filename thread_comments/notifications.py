"""
Email notifications for thread-comments.

When a comment is created, every subscriber of its thread except the
comment's creator receives the same message. One email is sent per new
comment with all recipients in BCC.
"""
import logging
from typing import List

from django.contrib.sites.models import Site
from django.core.exceptions import ImproperlyConfigured
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

from .conf import comments_settings

logger = logging.getLogger(comments_settings.LOGGER_NAME)


class CommentNotificationService:
    """Service for sending new comment notifications to thread subscribers."""

    @property
    def enabled(self):
        return comments_settings.SEND_NOTIFICATIONS

    @property
    def from_email(self):
        return comments_settings.DEFAULT_FROM_EMAIL

    def notify_new_comment(self, comment):
        """
        Notify thread subscribers about a new comment.

        Args:
            comment: Comment instance

        Returns:
            int: Number of emails sent (0 or 1)
        """
        if not self.enabled:
            return 0

        recipients = self.get_recipients(comment)

        if not recipients:
            logger.debug(f"No recipients for comment {comment.pk}")
            return 0

        context = self._get_notification_context(comment)

        subject = str(comments_settings.NOTIFICATION_SUBJECT).format(
            creator=context['creator_name'],
            thread=str(comment.thread)
        )

        try:
            sent = self._send_notification_email(
                recipients=recipients,
                subject=subject,
                template=comments_settings.NOTIFICATION_EMAIL_TEMPLATE,
                context=context
            )
        except Exception:
            logger.exception(f"Failed to send notification for comment {comment.pk}")
            return 0

        logger.info(f"Sent new comment notification for comment {comment.pk} to {len(recipients)} recipients")
        return sent

    def get_recipient_users(self, comment):
        """
        Subscribers of the comment's thread, minus the comment's creator.
        Override this method to customize recipient logic.
        """
        return comment.thread.subscribers.exclude(pk=comment.creator_id).order_by('pk')

    def get_recipients(self, comment) -> List[str]:
        """
        Email addresses of the recipient users, deduplicated, skipping users
        without an address.
        """
        recipients = []
        for user in self.get_recipient_users(comment):
            email = getattr(user, 'email', '')
            if email and email not in recipients:
                recipients.append(email)
        return recipients

    def _get_notification_context(self, comment) -> dict:
        """
        Build context dictionary for email templates.
        """
        try:
            site = Site.objects.get_current()
            domain = site.domain
            site_name = site.name
        except (Site.DoesNotExist, ImproperlyConfigured):
            domain = comments_settings.SITE_DOMAIN or 'example.com'
            site_name = comments_settings.SITE_NAME or 'Our Site'

        creator = comment.creator
        creator_name = creator.get_full_name() if hasattr(creator, 'get_full_name') else ''

        return {
            'site_name': site_name,
            'domain': domain,
            'protocol': 'https' if comments_settings.USE_HTTPS else 'http',
            'comment': comment,
            'thread': comment.thread,
            'content_object': comment.thread.content_object,
            'creator': creator,
            'creator_name': creator_name or creator.get_username(),
        }

    def _send_notification_email(
        self,
        recipients: List[str],
        subject: str,
        template: str,
        context: dict
    ) -> int:
        """
        Render the HTML template and its .txt sibling and send one message.
        """
        html_body = render_to_string(template, context)
        text_body = render_to_string(template.replace('.html', '.txt'), context)

        msg = EmailMultiAlternatives(
            subject=subject,
            body=text_body,
            from_email=self.from_email,
            bcc=recipients
        )
        msg.attach_alternative(html_body, "text/html")
        return msg.send(fail_silently=False)


# Global notification service instance
notification_service = CommentNotificationService()


def notify_new_comment(comment):
    """Notify thread subscribers about a new comment."""
    return notification_service.notify_new_comment(comment)
