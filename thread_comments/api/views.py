import logging

from django.apps import apps
from django.core.exceptions import NON_FIELD_ERRORS, ValidationError
from django.db import transaction
from django.http import Http404
from django.shortcuts import get_object_or_404
from django.utils.translation import gettext_lazy as _
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.settings import api_settings

from .. import lifecycle
from ..conf import comments_settings
from ..models import Comment, Thread
from ..permissions import can_perform
from ..votes import DOWN, UP
from .filtersets import CommentFilterSet
from .permissions import ThreadPolicyPermission
from .serializers import (
    CommentBodySerializer,
    CommentSerializer,
    ThreadSerializer,
    comment_payload,
)

logger = logging.getLogger(comments_settings.LOGGER_NAME)


def get_commentable_model(app_label, model):
    """
    Resolve ``app_label`` / ``model`` to a model class if it may be commented on.
    """
    try:
        model_class = apps.get_model(app_label, model)
    except (LookupError, ValueError):
        return None

    allowed = comments_settings.COMMENTABLE_MODELS
    if allowed and model_class._meta.label_lower not in {label.lower() for label in allowed}:
        return None
    return model_class


def validation_errors(exc):
    """
    Convert a Django ValidationError into a DRF style error dict.
    """
    if hasattr(exc, 'error_dict'):
        errors = exc.message_dict
    else:
        errors = {NON_FIELD_ERRORS: exc.messages}

    if NON_FIELD_ERRORS in errors:
        errors[api_settings.NON_FIELD_ERRORS_KEY] = errors.pop(NON_FIELD_ERRORS)
    return errors


class CommentActionMixin:
    """
    Shared response handling for actions that complete with the affected
    comment plus an ``errors`` object, whether or not the action succeeded.
    """
    policy_actions = {}

    def comment_response(self, comment, errors=None, status_code=status.HTTP_200_OK):
        return Response(
            comment_payload(comment, errors, context=self.get_serializer_context()),
            status=status_code
        )

    def run_transition(self, comment, transition, *args):
        """
        Run a lifecycle transition and respond with the comment.
        Validation failures are reported in ``errors`` with the comment
        reloaded from the database.
        """
        try:
            with transaction.atomic():
                transition(comment, *args)
        except ValidationError as e:
            logger.info(f"Rejected {self.action} on comment {comment.pk}: {e.messages}")
            comment.refresh_from_db()
            return self.comment_response(comment, validation_errors(e))
        return self.comment_response(comment)


class ThreadViewSet(CommentActionMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    API endpoints for a comment thread: show it, post to it, close or reopen
    it, and manage the current user's subscription.
    """
    queryset = Thread.objects.select_related('content_type', 'closer')
    serializer_class = ThreadSerializer
    permission_classes = [ThreadPolicyPermission]
    policy_actions = {
        'retrieve': 'show',
        'for_object': 'show',
        'new_comment': 'new',
        'create_comment': 'create',
        'close': 'close',
        'reopen': 'reopen',
        'subscribe': 'subscribe',
        'unsubscribe': 'unsubscribe',
    }

    @action(
        detail=False,
        methods=['get'],
        url_path=r'for/(?P<app_label>[\w]+)/(?P<model>[\w]+)/(?P<object_id>[^/.]+)',
        url_name='for-object'
    )
    def for_object(self, request, app_label=None, model=None, object_id=None):
        """
        Return the thread attached to a commentable object, creating it on
        first access.
        """
        model_class = get_commentable_model(app_label, model)
        if model_class is None:
            raise Http404(_("This model cannot be commented on."))

        try:
            obj = get_object_or_404(model_class, pk=object_id)
        except (ValueError, ValidationError):
            raise Http404(_("Invalid object ID."))

        thread = Thread.objects.get_for_object(obj)
        if thread is None:
            # The thread is only saved once the user may see it.
            self.check_object_permissions(request, Thread.objects.unsaved_for_object(obj))
            thread = Thread.objects.for_object(obj)
        else:
            self.check_object_permissions(request, thread)
        return Response(self.get_serializer(thread).data)

    @action(detail=True, methods=['get'], url_path='comments/new', url_name='new-comment')
    def new_comment(self, request, pk=None):
        """
        Return a blank comment for the thread, confirming the user may post.
        """
        thread = self.get_object()
        comment = lifecycle.build_comment(thread, request.user)
        return self.comment_response(comment)

    @action(detail=True, methods=['post'], url_path='comments', url_name='comments')
    def create_comment(self, request, pk=None):
        """
        Post a new comment to the thread.

        A rejected comment (blank, too long, double post, closed thread) is
        returned unsaved with its ``errors``.
        """
        thread = self.get_object()
        serializer = CommentBodySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        comment = lifecycle.build_comment(thread, request.user, serializer.validated_data['body'])
        try:
            lifecycle.save_new_comment(comment)
        except ValidationError as e:
            logger.info(f"Rejected comment on thread {thread.pk} by {request.user}: {e.messages}")
            return self.comment_response(comment, validation_errors(e))

        return self.comment_response(comment, status_code=status.HTTP_201_CREATED)

    def _thread_response(self, thread, errors=None):
        data = dict(self.get_serializer(thread).data)
        data['errors'] = errors or {}
        return Response(data, status=status.HTTP_200_OK)

    def _run_thread_transition(self, transition):
        thread = self.get_object()
        try:
            transition(thread, self.request.user)
        except ValidationError as e:
            thread.refresh_from_db()
            return self._thread_response(thread, validation_errors(e))
        return self._thread_response(thread)

    @action(detail=True, methods=['put'])
    def close(self, request, pk=None):
        return self._run_thread_transition(lifecycle.close_thread)

    @action(detail=True, methods=['put'])
    def reopen(self, request, pk=None):
        return self._run_thread_transition(lifecycle.reopen_thread)

    @action(detail=True, methods=['put'])
    def subscribe(self, request, pk=None):
        return self._run_thread_transition(lifecycle.subscribe)

    @action(detail=True, methods=['put'])
    def unsubscribe(self, request, pk=None):
        return self._run_thread_transition(lifecycle.unsubscribe)


class CommentViewSet(CommentActionMixin, viewsets.GenericViewSet):
    """
    API endpoints for a single comment: edit, update, soft delete, undelete
    and voting. Every action is checked against the thread policy before
    anything is changed.
    """
    serializer_class = CommentSerializer
    permission_classes = [ThreadPolicyPermission]
    filterset_class = CommentFilterSet
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    ordering_fields = ['created_at', 'updated_at']
    ordering = ['created_at', 'id']
    policy_actions = {
        'edit': 'edit',
        'update': 'update',
        'delete_comment': 'delete',
        'undelete': 'undelete',
        'upvote': 'upvote',
        'downvote': 'downvote',
        'unvote': 'unvote',
    }

    def get_queryset(self):
        return Comment.objects.with_related()

    def list(self, request):
        """
        List comments on the threads the current user can read.
        """
        queryset = self.filter_queryset(self.get_queryset())

        threads = Thread.objects.filter(pk__in=queryset.values('thread_id'))
        readable = [
            thread.pk for thread in threads.iterator()
            if can_perform('show', request.user, thread)
        ]
        queryset = queryset.filter(thread_id__in=readable)

        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = self.get_serializer(page, many=True)
            return self.get_paginated_response(serializer.data)

        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)

    @action(detail=True, methods=['get'])
    def edit(self, request, pk=None):
        """
        Return the comment, confirming the user may edit it.
        """
        return self.comment_response(self.get_object())

    def update(self, request, pk=None):
        comment = self.get_object()
        serializer = CommentBodySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return self.run_transition(
            comment, lifecycle.update_comment, request.user, serializer.validated_data['body']
        )

    @action(detail=True, methods=['put'], url_path='delete', url_name='delete')
    def delete_comment(self, request, pk=None):
        return self.run_transition(self.get_object(), lifecycle.delete_comment, request.user)

    @action(detail=True, methods=['put'])
    def undelete(self, request, pk=None):
        return self.run_transition(self.get_object(), lifecycle.undelete_comment, request.user)

    @action(detail=True, methods=['put'])
    def upvote(self, request, pk=None):
        return self.run_transition(self.get_object(), lifecycle.vote_on_comment, request.user, UP)

    @action(detail=True, methods=['put'])
    def downvote(self, request, pk=None):
        return self.run_transition(self.get_object(), lifecycle.vote_on_comment, request.user, DOWN)

    @action(detail=True, methods=['put'])
    def unvote(self, request, pk=None):
        return self.run_transition(self.get_object(), lifecycle.unvote_comment, request.user)
