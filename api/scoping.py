"""
Queryset scoping modes and the world scope filter.

Scoping modes make the data visibility pattern of each viewset explicit,
preventing typos and making scoping intentions clear.
"""
from enum import Enum


class QuerysetScoping(Enum):
    """
    Explicit scoping modes for VisibilityViewSet queryset filtering.

    These modes define "what rows exist" (data visibility), while
    permission classes define "who may act" (authorization).

    GLOBAL: All authenticated users see all records
        - No world or visibility entry filtering
        - Example: Races, location/NPC/organisation types

    WORLD_WITH_VISIBILITY: Filter by world scope AND visibility entries
        - Bypass contexts: world scope only, every entry attached
        - Everyone else: only entities with at least one matching entry
        - Example: Locations, NPCs, organisations
    """

    GLOBAL = 'global'
    WORLD_WITH_VISIBILITY = 'world_with_visibility'


def apply_world_scope(queryset, context, field='world'):
    """
    Restrict a listing queryset to the world scope of the context.

    - Explicit world_scope list: field__in=world_scope
    - Single world_id: field=world_id
    - Neither: queryset unchanged

    This narrows by world only; per-entry campaign/player visibility is
    applied by api.visibility.

    Args:
        queryset: Base queryset (possibly already filtered)
        context: VisibilityContext, or None
        field: Name of the world FK on the model (default: 'world')

    Returns:
        QuerySet: Scoped queryset
    """
    if context is None:
        return queryset

    if context.world_scope:
        if len(context.world_scope) == 1:
            return queryset.filter(**{f'{field}_id': context.world_scope[0]})
        return queryset.filter(**{f'{field}_id__in': list(context.world_scope)})

    if context.world_id:
        return queryset.filter(**{f'{field}_id': context.world_id})

    return queryset
