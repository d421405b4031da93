from django.contrib.auth import get_user_model
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from ..formatting import render_comment_body
from ..models import Comment, Thread

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """
    Minimal public representation of a comment author or editor.
    """
    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ('id', 'username', 'display_name')
        read_only_fields = fields

    def get_display_name(self, obj) -> str:
        full_name = obj.get_full_name() if hasattr(obj, 'get_full_name') else ''
        return full_name or obj.get_username()


class CommentBodySerializer(serializers.Serializer):
    """
    Input for create and update. Only the shape of the payload is checked
    here; content rules live on the model.
    """
    body = serializers.CharField(
        allow_blank=True,
        trim_whitespace=False,
        required=False,
        default='',
        help_text=_("Comment text")
    )


class CommentSerializer(serializers.ModelSerializer):
    """
    Read-only representation of a comment, including vote counts from the
    configured vote ledger.
    """
    creator = UserSerializer(read_only=True)
    editor = UserSerializer(read_only=True)
    formatted_body = serializers.SerializerMethodField()
    is_deleted = serializers.BooleanField(read_only=True)
    is_modified = serializers.BooleanField(read_only=True)
    upvotes = serializers.SerializerMethodField()
    downvotes = serializers.SerializerMethodField()
    current_user_vote = serializers.SerializerMethodField()

    class Meta:
        model = Comment
        fields = (
            'id', 'thread', 'body', 'formatted_body', 'creator', 'editor',
            'is_deleted', 'deleted_at', 'is_modified', 'created_at', 'updated_at',
            'upvotes', 'downvotes', 'current_user_vote',
        )
        read_only_fields = fields

    def _tally(self, obj):
        cache = self.context.setdefault('_vote_tallies', {})
        key = obj.pk
        if key is None or key not in cache:
            tally = obj.vote_tally
            if key is None:
                return tally
            cache[key] = tally
        return cache[key]

    def get_formatted_body(self, obj) -> str:
        return render_comment_body(obj.body)

    def get_upvotes(self, obj) -> int:
        return self._tally(obj).up

    def get_downvotes(self, obj) -> int:
        return self._tally(obj).down

    def get_current_user_vote(self, obj):
        request = self.context.get('request')
        if request is None or not request.user.is_authenticated:
            return None
        return obj.get_vote_by(request.user)


class ThreadSerializer(serializers.ModelSerializer):
    """
    A thread with its comments in chronological order.
    """
    content_type = serializers.SerializerMethodField()
    is_closed = serializers.BooleanField(read_only=True)
    closer = UserSerializer(read_only=True)
    is_subscribed = serializers.SerializerMethodField()
    comment_count = serializers.SerializerMethodField()
    comments = serializers.SerializerMethodField()

    class Meta:
        model = Thread
        fields = (
            'id', 'content_type', 'object_id', 'is_closed', 'closed_at', 'closer',
            'is_subscribed', 'comment_count', 'comments', 'created_at',
        )
        read_only_fields = fields

    def get_content_type(self, obj) -> str:
        return f"{obj.content_type.app_label}.{obj.content_type.model}"

    def get_is_subscribed(self, obj) -> bool:
        request = self.context.get('request')
        if request is None or not request.user.is_authenticated:
            return False
        return obj.is_subscribed(request.user)

    def get_comment_count(self, obj) -> int:
        return obj.comments.active().count()

    def get_comments(self, obj):
        comments = obj.ordered_comments().with_related()
        return CommentSerializer(comments, many=True, context=self.context).data


def comment_payload(comment, errors=None, context=None):
    """
    Response body for comment actions: the comment plus an ``errors`` object
    that is empty when the action succeeded.
    """
    data = dict(CommentSerializer(comment, context=context or {}).data)
    data['errors'] = errors or {}
    return data
