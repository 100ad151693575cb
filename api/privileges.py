"""
Privilege resolution for the visibility engine.

Turns raw role names into role kinds and, for DMs, the set of campaigns and
worlds they manage. Everything here is pure: role data is fetched by the
collaborators in api.providers and passed in.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence, Tuple


class RoleKind(Enum):
    """
    Fixed privilege hierarchy.

    SYSTEM_ADMIN: Platform administrator
    WORLD_ADMIN: Administers shared worlds and their lore
    DM: Runs one or more campaigns
    PLAYER: Anyone else
    """

    SYSTEM_ADMIN = 'system_admin'
    WORLD_ADMIN = 'world_admin'
    DM = 'dm'
    PLAYER = 'player'


ROLE_SYNONYMS = {
    RoleKind.SYSTEM_ADMIN: ('System Admin', 'System Administrator', 'Admin'),
    RoleKind.WORLD_ADMIN: ('WorldAdmin', 'World Admin'),
    RoleKind.DM: ('DM', 'Dungeon Master'),
}

_SYNONYM_LOOKUP = {
    synonym.casefold(): kind
    for kind, synonyms in ROLE_SYNONYMS.items()
    for synonym in synonyms
}


def role_kind_for_name(name) -> RoleKind:
    """
    Map a single role name to its RoleKind (case-insensitive).

    Unknown names map to RoleKind.PLAYER.
    """
    if not name:
        return RoleKind.PLAYER
    return _SYNONYM_LOOKUP.get(str(name).strip().casefold(), RoleKind.PLAYER)


def resolve_role_kinds(role_names: Iterable[str]) -> frozenset:
    """
    Resolve role names into the set of privileged role kinds they grant.

    PLAYER is never part of the result; an empty set means a plain player.
    """
    kinds = {role_kind_for_name(name) for name in role_names}
    kinds.discard(RoleKind.PLAYER)
    return frozenset(kinds)


def unique(values) -> Tuple:
    """Distinct, non-empty values in first-occurrence order."""
    seen = set()
    result = []
    for value in values:
        if value is None or value == '':
            continue
        if value in seen:
            continue
        seen.add(value)
        result.append(value)
    return tuple(result)


@dataclass(frozen=True)
class PrivilegeSet:
    """Resolved privileges for one user within one request."""

    role_names: Tuple[str, ...]
    role_kinds: frozenset
    managed_campaign_ids: Tuple = ()
    managed_world_ids: Tuple = ()

    @property
    def is_system_admin(self) -> bool:
        return RoleKind.SYSTEM_ADMIN in self.role_kinds

    @property
    def is_world_admin(self) -> bool:
        return RoleKind.WORLD_ADMIN in self.role_kinds

    @property
    def is_dm(self) -> bool:
        return RoleKind.DM in self.role_kinds

    def has_any(self, kinds: Iterable[RoleKind]) -> bool:
        return any(kind in self.role_kinds for kind in kinds)


def resolve_privileges(
    role_names: Sequence[str],
    campaign_assignments: Optional[Sequence] = None,
) -> PrivilegeSet:
    """
    Resolve system role names (and optional campaign role assignments) into a PrivilegeSet.

    Args:
        role_names: System role names assigned to the user (duplicates allowed)
        campaign_assignments: CampaignRoleAssignment records; only consulted when
            the user holds a DM system role

    Returns:
        PrivilegeSet: Flags are independent; a user may be system admin, world
        admin and DM at the same time.
    """
    names = unique(str(name) for name in role_names)
    kinds = resolve_role_kinds(names)

    managed_campaign_ids = ()
    managed_world_ids = ()

    if RoleKind.DM in kinds and campaign_assignments:
        dm_assignments = [
            assignment for assignment in campaign_assignments
            if role_kind_for_name(assignment.role_name) == RoleKind.DM
        ]
        managed_campaign_ids = unique(a.campaign_id for a in dm_assignments)
        managed_world_ids = unique(a.world_id for a in dm_assignments)

    return PrivilegeSet(
        role_names=names,
        role_kinds=kinds,
        managed_campaign_ids=managed_campaign_ids,
        managed_world_ids=managed_world_ids,
    )
