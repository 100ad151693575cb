"""
Visibility entry logic for locations, NPCs and organisations.

A visibility entry grants access to its owning entity:
- campaign and player both null: public (anyone who can see the world)
- campaign set: members with that active campaign
- player set: that player

Entries form a union: one matching entry is enough, and a non-matching entry
never revokes access granted by another.
"""
from dataclasses import dataclass
from typing import Iterable, List

from django.db.models import Exists, OuterRef, Prefetch, Q

from .utils import same_id


# ============================================================================
# Grants
# ============================================================================


@dataclass(frozen=True)
class PublicGrant:
    def matches(self, context) -> bool:
        return True


@dataclass(frozen=True)
class CampaignGrant:
    campaign_id: str

    def matches(self, context) -> bool:
        return same_id(self.campaign_id, context.campaign_id)


@dataclass(frozen=True)
class PlayerGrant:
    player_id: str

    def matches(self, context) -> bool:
        return same_id(self.player_id, context.player_id)


def _entry_value(entry, name):
    if isinstance(entry, dict):
        return entry.get(name)
    return getattr(entry, name, None)


def grants_for_entry(entry) -> List:
    """
    Convert one stored entry (model instance or dict) into grants.

    An entry carrying both a campaign and a player yields both grants.
    """
    campaign_id = _entry_value(entry, 'campaign_id')
    player_id = _entry_value(entry, 'player_id')

    if campaign_id is None and player_id is None:
        return [PublicGrant()]

    grants = []
    if campaign_id is not None:
        grants.append(CampaignGrant(str(campaign_id)))
    if player_id is not None:
        grants.append(PlayerGrant(str(player_id)))
    return grants


# ============================================================================
# Matcher (single entity reads)
# ============================================================================


def entry_matches(entry, context) -> bool:
    return any(grant.matches(context) for grant in grants_for_entry(entry))


def is_visible(entries: Iterable, context) -> bool:
    """
    Decide whether an entity with the given entries is visible in context.

    Visible iff bypass is on, or at least one entry matches.
    No context means no access.
    """
    if context is None:
        return False
    if context.bypass_visibility:
        return True
    return any(entry_matches(entry, context) for entry in entries)


# ============================================================================
# Fetch composition (listings and detail loads)
# ============================================================================


def visibility_entry_q(context) -> Q:
    """
    Predicate selecting the entries that could satisfy the viewer:
    their active campaign, themselves, or public entries.
    """
    condition = Q(campaign__isnull=True, player__isnull=True)
    if context is not None and context.campaign_id:
        condition |= Q(campaign_id=context.campaign_id)
    if context is not None and context.player_id is not None:
        condition |= Q(player_id=context.player_id)
    return condition


def visibility_prefetch(context, entry_model, related_name='visibility'):
    """
    Prefetch for an entity's visibility entries.

    Bypass contexts get every entry; everyone else only the entries relevant
    to them, so no grant for another campaign or player leaks.
    """
    queryset = entry_model.objects.select_related('campaign', 'player').order_by('id')
    if not (context and context.bypass_visibility):
        queryset = queryset.filter(visibility_entry_q(context))
    return Prefetch(related_name, queryset=queryset)


def filter_visible(queryset, context, entry_model, owner_field):
    """
    Require at least one matching entry (inner-join semantics).

    Bypass contexts are returned unchanged.
    """
    if context is not None and context.bypass_visibility:
        return queryset
    matching = entry_model.objects.filter(
        visibility_entry_q(context),
        **{owner_field: OuterRef('pk')}
    )
    return queryset.filter(Exists(matching))


def with_visibility(queryset, context, entry_model, owner_field, related_name='visibility',
                    required=None):
    """
    Compose entry prefetching and (optionally) the required-entry filter.

    Args:
        queryset: Entity queryset
        context: VisibilityContext
        entry_model: Concrete visibility entry model
        owner_field: FK name from entry to entity
        related_name: Reverse accessor on the entity (default: 'visibility')
        required: Force the required-entry filter on/off; defaults to on for
            non-bypass contexts

    Returns:
        QuerySet: Queryset with entries prefetched
    """
    queryset = queryset.prefetch_related(visibility_prefetch(context, entry_model, related_name))
    if required is None:
        required = not (context and context.bypass_visibility)
    if required:
        queryset = filter_visible(queryset, context, entry_model, owner_field)
    return queryset


# ============================================================================
# Default visibility
# ============================================================================


def public_entry():
    return {'campaign_id': None, 'player_id': None}


def resolve_default_visibility(context) -> List[dict]:
    """
    Entries attached to a new entity when the creator supplies none.

    First matching rule wins:
    1. World admin: one public entry
    2. Active campaign: that campaign
    3. DM managing campaigns: one entry per managed campaign
    4. Player: that player only
    5. Otherwise: no entries
    """
    if context is None:
        return []
    if context.is_world_admin:
        return [public_entry()]
    if context.campaign_id:
        return [{'campaign_id': context.campaign_id, 'player_id': None}]
    if context.managed_campaign_ids:
        return [
            {'campaign_id': campaign_id, 'player_id': None}
            for campaign_id in context.managed_campaign_ids
        ]
    if context.player_id is not None:
        return [{'campaign_id': None, 'player_id': context.player_id}]
    return []


# ============================================================================
# Synchronizer
# ============================================================================


def _first_present(entry, *names):
    for name in names:
        value = _entry_value(entry, name)
        if value is not None and value != '':
            return value
    return None


def _pk(value):
    return getattr(value, 'pk', value)


def normalize_visibility_entries(entries) -> List[dict]:
    """
    Normalize caller-supplied entries to {'campaign_id', 'player_id'} and dedupe.

    Accepts camelCase (campaignId/playerId), snake_case (campaign_id/player_id)
    and model-style keys (campaign/player, values may be model instances).
    First occurrence wins.

    Example:
        >>> normalize_visibility_entries([{'campaignId': 'c1'}, {'campaign_id': 'c1'}])
        [{'campaign_id': 'c1', 'player_id': None}]
    """
    seen = set()
    normalized = []
    for entry in entries or []:
        campaign_id = _pk(_first_present(entry, 'campaignId', 'campaign_id', 'campaign'))
        player_id = _pk(_first_present(entry, 'playerId', 'player_id', 'player'))
        key = (
            str(campaign_id) if campaign_id is not None else None,
            str(player_id) if player_id is not None else None,
        )
        if key in seen:
            continue
        seen.add(key)
        normalized.append({'campaign_id': campaign_id, 'player_id': player_id})
    return normalized


def sync_visibility_entries(store, owner_id, entries):
    """
    Replace the full entry set of an owner (never a merge).

    Args:
        store: api.providers.VisibilityEntryStore for the owner's entry model
        owner_id: Owning entity pk
        entries: Candidate entries in any accepted shape

    Returns:
        list: Created entry instances
    """
    normalized = normalize_visibility_entries(entries)
    return store.swap(owner_id, normalized)
