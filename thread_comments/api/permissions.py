from rest_framework import permissions

from ..exceptions import AuthorizationError
from ..models import Thread
from ..permissions import authorize


class ThreadPolicyPermission(permissions.BasePermission):
    """
    Checks every object-level request against the comment thread policy.

    Views map their DRF action names to policy actions through a
    ``policy_actions`` dict; unmapped actions are denied.
    """

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        action = view.policy_actions.get(view.action)
        if action is None:
            return False

        if isinstance(obj, Thread):
            thread, comment = obj, None
        else:
            thread, comment = obj.thread, obj

        try:
            authorize(action, request.user, thread, comment)
        except AuthorizationError as e:
            self.message = e.message
            return False
        return True
