import django_filters
from django.utils.translation import gettext_lazy as _

from ..models import Comment


class CommentFilterSet(django_filters.FilterSet):
    """
    FilterSet for the comment list endpoint.
    """
    thread = django_filters.NumberFilter(
        field_name='thread_id',
        help_text=_("Filter by thread ID")
    )

    creator = django_filters.NumberFilter(
        field_name='creator_id',
        help_text=_("Filter by creator user ID")
    )

    is_deleted = django_filters.BooleanFilter(
        field_name='deleted_at',
        lookup_expr='isnull',
        exclude=True,
        help_text=_("Filter by soft-deleted state")
    )

    created_after = django_filters.DateTimeFilter(
        field_name='created_at',
        lookup_expr='gte',
        help_text=_("Filter comments created after this date/time")
    )
    created_before = django_filters.DateTimeFilter(
        field_name='created_at',
        lookup_expr='lte',
        help_text=_("Filter comments created before this date/time")
    )

    class Meta:
        model = Comment
        fields = ['thread', 'creator', 'is_deleted', 'created_after', 'created_before']
