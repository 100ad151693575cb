"""
Per-request Visibility Context.

The context bundles the caller's privilege flags and scope (active campaign,
world, character, managed campaigns) and is the single input to every
visibility decision downstream:

- api.scoping: listing filters
- api.visibility: entry matching and default visibility
- notes.visibility: note level filtering

A context is built fresh for each request, never shared or persisted.
"""
import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from django.conf import settings

from .privileges import PrivilegeSet, resolve_privileges, unique
from .providers import CampaignLookup, RoleMembershipProvider
from .utils import normalize_id, parse_uuid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScopeHints:
    """Request-supplied scope hints, already normalized (absent = None)."""

    campaign_id: Optional[str] = None
    world_id: Optional[str] = None
    character_id: Optional[str] = None

    @classmethod
    def from_raw(cls, campaign_id=None, world_id=None, character_id=None):
        return cls(
            campaign_id=parse_uuid(campaign_id),
            world_id=parse_uuid(world_id),
            character_id=normalize_id(character_id),
        )


@dataclass(frozen=True)
class VisibilityContext:
    role_names: Tuple[str, ...] = ()
    is_system_admin: bool = False
    is_world_admin: bool = False
    is_dm: bool = False
    bypass_visibility: bool = False
    campaign_id: Optional[str] = None
    character_id: Optional[str] = None
    world_id: Optional[str] = None
    player_id: Optional[int] = None
    managed_campaign_ids: Tuple = ()
    managed_world_ids: Tuple = ()
    world_scope: Optional[Tuple] = None
    restrict_all: bool = False
    role_kinds: frozenset = field(default_factory=frozenset)

    def has_any_role(self, kinds) -> bool:
        return any(kind in self.role_kinds for kind in kinds)


def derive_bypass(privileges: PrivilegeSet, dm_bypass=None) -> bool:
    """
    Bypass is tied to privilege: system and world admins always bypass,
    DMs bypass when VISIBILITY_DM_BYPASS is on, players never do.
    """
    if dm_bypass is None:
        dm_bypass = getattr(settings, 'VISIBILITY_DM_BYPASS', True)
    if privileges.is_system_admin or privileges.is_world_admin:
        return True
    return privileges.is_dm and bool(dm_bypass)


def assemble_context(privileges: PrivilegeSet, hints: ScopeHints, player_id=None,
                     world_id=None, dm_bypass=None) -> VisibilityContext:
    """
    Assemble a VisibilityContext from resolved privileges and scope hints.

    Pure: the world id resolved from the active campaign (if any) is passed in.
    """
    world_id = hints.world_id or world_id
    is_admin = privileges.is_system_admin or privileges.is_world_admin

    world_scope = None
    if not is_admin:
        world_scope = unique([world_id, *privileges.managed_world_ids]) or None

    restrict_all = (
        not privileges.role_kinds
        and not hints.campaign_id
        and not privileges.managed_campaign_ids
    )

    return VisibilityContext(
        role_names=privileges.role_names,
        is_system_admin=privileges.is_system_admin,
        is_world_admin=privileges.is_world_admin,
        is_dm=privileges.is_dm,
        bypass_visibility=derive_bypass(privileges, dm_bypass),
        campaign_id=hints.campaign_id,
        character_id=hints.character_id,
        world_id=world_id,
        player_id=player_id,
        managed_campaign_ids=privileges.managed_campaign_ids,
        managed_world_ids=privileges.managed_world_ids,
        world_scope=world_scope,
        restrict_all=restrict_all,
        role_kinds=privileges.role_kinds,
    )


class ContextBuilder:
    """
    Builds the VisibilityContext for one authenticated user.

    Collaborators are injectable so tests can substitute fakes.

    Campaign and world hints are taken as given: membership of the active
    campaign is not checked here. Entry matching decides what the hint unlocks.

    Example:
        >>> builder = ContextBuilder()
        >>> context = builder.build(request.user, ScopeHints.from_raw(campaign_id=cid))
    """

    def __init__(self, membership=None, campaigns=None, dm_bypass=None):
        self.membership = membership or RoleMembershipProvider()
        self.campaigns = campaigns or CampaignLookup()
        self.dm_bypass = dm_bypass

    def resolve_privileges(self, user_id) -> PrivilegeSet:
        role_names = self.membership.list_system_roles(user_id)
        privileges = resolve_privileges(role_names)
        if privileges.is_dm:
            assignments = self.membership.list_campaign_role_assignments(user_id)
            privileges = resolve_privileges(role_names, assignments)
        return privileges

    def build(self, user, hints: ScopeHints = None) -> VisibilityContext:
        hints = hints or ScopeHints()
        user_id = getattr(user, 'pk', None)

        if user_id is None:
            privileges = resolve_privileges([])
        else:
            privileges = self.resolve_privileges(user_id)

        world_id = None
        if hints.campaign_id and not hints.world_id:
            world_id = self.campaigns.get_world_id(hints.campaign_id)

        context = assemble_context(
            privileges,
            hints,
            player_id=user_id,
            world_id=world_id,
            dm_bypass=self.dm_bypass,
        )
        logger.debug(
            f"VisibilityContext: user={user_id} roles={sorted(k.value for k in context.role_kinds)} "
            f"campaign={context.campaign_id} world={context.world_id} "
            f"bypass={context.bypass_visibility} restrict_all={context.restrict_all}"
        )
        return context


def build_visibility_context(user, hints: ScopeHints = None) -> VisibilityContext:
    """Build a context with the default ORM-backed collaborators."""
    return ContextBuilder().build(user, hints)
