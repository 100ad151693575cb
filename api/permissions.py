"""
Permission classes for visibility-gated endpoints.

- BaseResourcePermission: authenticated + object-level check must be implemented
- PrivilegeGatePermission: "who may act" gate for mutating requests
- EntityVisibilityPermission: gate + visibility entry matching on reads
"""
import logging

from rest_framework import permissions

from .privileges import RoleKind
from .visibility import is_visible

logger = logging.getLogger(__name__)


ROLE_LABELS = {
    RoleKind.SYSTEM_ADMIN: 'system admin',
    RoleKind.WORLD_ADMIN: 'world admin',
    RoleKind.DM: 'DM',
    RoleKind.PLAYER: 'player',
}

ACTION_VERBS = {
    'POST': 'create',
    'PUT': 'update',
    'PATCH': 'update',
    'DELETE': 'delete',
}


def describe_roles(kinds):
    """
    Human readable list of role kinds.

    Example:
        >>> describe_roles([RoleKind.WORLD_ADMIN, RoleKind.DM])
        'World admin or DM'
    """
    labels = [ROLE_LABELS[kind] for kind in kinds]
    if not labels:
        return 'Privileged'
    if len(labels) == 1:
        text = labels[0]
    else:
        text = f"{', '.join(labels[:-1])} or {labels[-1]}"
    return text[0].upper() + text[1:]


def get_request_context(request, view):
    """Visibility context of the request, built lazily by the view."""
    getter = getattr(view, 'get_visibility_context', None)
    if getter is None:
        return None
    return getter()


class BaseResourcePermission(permissions.BasePermission):
    """
    Base permission class that enforces object-level permission checks.

    Defense in depth:
    - has_permission(): View-level check (can user access endpoint?)
    - has_object_permission(): Object-level check (can user access THIS object?)

    IMPORTANT: DRF only calls has_object_permission() if the object is fetched
    via get_object(). Always use standard DRF patterns:
    - ✓ Correct: self.get_object() in retrieve/update/destroy
    - ✗ Wrong: Model.objects.get(pk=pk) (bypasses object-level check!)

    Subclasses MUST implement has_object_permission() or this will raise
    NotImplementedError as a safety guard.
    """

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement has_object_permission(). "
            f"This is required for defense-in-depth security."
        )


class PrivilegeGatePermission(BaseResourcePermission):
    """
    Hard gate for mutating requests, checked before any visibility work.

    The view declares which role kinds may write:

        class RaceViewSet(VisibilityViewSet):
            write_role_kinds = (RoleKind.WORLD_ADMIN, RoleKind.SYSTEM_ADMIN)
            resource_label = 'races'

    Safe methods (GET/HEAD/OPTIONS) pass the gate; their data visibility is
    handled by the queryset and object-level checks.
    """

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            return False

        if request.method in permissions.SAFE_METHODS:
            return True

        allowed = getattr(view, 'write_role_kinds', ())
        context = get_request_context(request, view)
        if context is not None and context.has_any_role(allowed):
            return True

        label = getattr(view, 'resource_label', 'resources')
        verb = ACTION_VERBS.get(request.method, 'modify')
        self.message = f"{describe_roles(allowed)} role required to {verb} {label}"
        logger.info(
            f"PrivilegeGatePermission: denied {request.method} on {label} "
            f"for user {request.user.pk}"
        )
        return False

    def has_object_permission(self, request, view, obj):
        return True


class EntityVisibilityPermission(PrivilegeGatePermission):
    """
    Privilege gate plus visibility entry matching for single-entity reads.

    Returns False (403, not 404) when the entity exists but none of its
    visibility entries match the caller's context.
    """

    def has_object_permission(self, request, view, obj):
        if request.method not in permissions.SAFE_METHODS:
            return True

        context = get_request_context(request, view)
        if is_visible(obj.visibility.all(), context):
            return True

        label = getattr(view, 'resource_name', obj.__class__.__name__)
        self.message = f"{label} is not visible in this context"
        logger.info(
            f"EntityVisibilityPermission: {label} {obj.pk} hidden from user {request.user.pk}"
        )
        return False
