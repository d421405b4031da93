from django.contrib import admin
from django.db.models import Count, Q
from django.urls import NoReverseMatch, reverse
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import Comment, CommentVote, Subscription, Thread


class DeletedCommentsFilter(admin.SimpleListFilter):
    """
    Filter comments by soft-deleted state.
    """
    title = _('deleted')
    parameter_name = 'deleted'

    def lookups(self, request, model_admin):
        return (
            ('yes', _('Deleted')),
            ('no', _('Not deleted')),
        )

    def queryset(self, request, queryset):
        if self.value() == 'yes':
            return queryset.deleted()
        if self.value() == 'no':
            return queryset.active()
        return queryset


class SubscriptionInline(admin.TabularInline):
    model = Subscription
    extra = 0
    raw_id_fields = ('subscriber',)
    readonly_fields = ('created_at',)


@admin.register(Thread)
class ThreadAdmin(admin.ModelAdmin):
    list_display = (
        'id', 'content_object_link', 'is_closed', 'comment_count', 'created_at',
    )
    list_filter = ('created_at', 'closed_at')
    search_fields = ('object_id',)
    raw_id_fields = ('closer',)
    readonly_fields = ('content_type', 'object_id', 'content_object_link', 'created_at', 'updated_at')
    inlines = [SubscriptionInline]
    actions = ['close_threads', 'reopen_threads']

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('content_type').annotate(
            comment_count=Count('comments', distinct=True)
        )

    @admin.display(description=_('Comments'), ordering='comment_count')
    def comment_count(self, obj):
        return obj.comment_count

    @admin.display(description=_('Closed'), boolean=True)
    def is_closed(self, obj):
        return obj.is_closed

    @admin.display(description=_('Content Object'))
    def content_object_link(self, obj):
        """
        Link to the admin change page of the content object.
        """
        ct = obj.content_type
        try:
            url = reverse(f"admin:{ct.app_label}_{ct.model}_change", args=[obj.object_id])
        except NoReverseMatch:
            return str(obj.content_object or _('(deleted)'))
        return format_html('<a href="{}">{}</a>', url, str(obj.content_object))

    @admin.action(description=_("Close selected threads"))
    def close_threads(self, request, queryset):
        closed = sum(1 for thread in queryset if thread.close(request.user))
        self.message_user(
            request,
            _("Successfully closed %(count)d threads.") % {'count': closed}
        )

    @admin.action(description=_("Reopen selected threads"))
    def reopen_threads(self, request, queryset):
        reopened = sum(1 for thread in queryset if thread.reopen(request.user))
        self.message_user(
            request,
            _("Successfully reopened %(count)d threads.") % {'count': reopened}
        )


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = (
        'id', 'body_snippet', 'creator', 'editor', 'thread',
        'created_at', 'is_deleted', 'upvote_count', 'downvote_count',
    )
    list_filter = (DeletedCommentsFilter, 'created_at', 'updated_at')
    search_fields = ('body', 'creator__username', 'editor__username')
    date_hierarchy = 'created_at'
    raw_id_fields = ('thread', 'creator', 'editor')
    readonly_fields = ('created_at', 'updated_at', 'deleted_at')
    fieldsets = (
        (_('Comment'), {
            'fields': ('thread', 'body')
        }),
        (_('Users'), {
            'fields': ('creator', 'editor')
        }),
        (_('Status'), {
            'fields': ('deleted_at', 'created_at', 'updated_at')
        }),
    )
    actions = ['soft_delete_comments', 'undelete_comments']

    def get_queryset(self, request):
        """
        Select related users and annotate vote counts to avoid N+1 queries.
        """
        return super().get_queryset(request).select_related(
            'thread', 'creator', 'editor'
        ).annotate(
            upvote_count=Count('votes', filter=Q(votes__is_upvote=True), distinct=True),
            downvote_count=Count('votes', filter=Q(votes__is_upvote=False), distinct=True),
        )

    @admin.display(description=_('Body'))
    def body_snippet(self, obj):
        """Display a snippet of the comment body."""
        if len(obj.body) > 50:
            return f"{obj.body[:50]}..."
        return obj.body

    @admin.display(description=_('Deleted'), boolean=True)
    def is_deleted(self, obj):
        return obj.is_deleted

    @admin.display(description=_('Upvotes'), ordering='upvote_count')
    def upvote_count(self, obj):
        return obj.upvote_count

    @admin.display(description=_('Downvotes'), ordering='downvote_count')
    def downvote_count(self, obj):
        return obj.downvote_count

    @admin.action(description=_("Delete selected comments (soft)"))
    def soft_delete_comments(self, request, queryset):
        deleted = sum(1 for comment in queryset if comment.delete_by(request.user))
        self.message_user(
            request,
            _("Successfully deleted %(count)d comments.") % {'count': deleted}
        )

    @admin.action(description=_("Undelete selected comments"))
    def undelete_comments(self, request, queryset):
        restored = sum(1 for comment in queryset if comment.undelete_by(request.user))
        self.message_user(
            request,
            _("Successfully undeleted %(count)d comments.") % {'count': restored}
        )


@admin.register(CommentVote)
class CommentVoteAdmin(admin.ModelAdmin):
    list_display = ('id', 'comment', 'voter', 'is_upvote', 'created_at')
    list_filter = ('is_upvote', 'created_at')
    search_fields = ('voter__username',)
    raw_id_fields = ('comment', 'voter')


@admin.register(Subscription)
class SubscriptionAdmin(admin.ModelAdmin):
    list_display = ('id', 'thread', 'subscriber', 'created_at')
    list_filter = ('created_at',)
    search_fields = ('subscriber__username', 'subscriber__email')
    raw_id_fields = ('thread', 'subscriber')
