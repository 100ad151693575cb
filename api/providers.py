"""
Collaborators consumed by the visibility engine.

- RoleMembershipProvider: system roles and campaign role assignments for a user
- CampaignLookup: campaign -> world resolution
- VisibilityEntryStore: delete / bulk insert / fetch of an owner's visibility entries

These are the only places the engine touches the database.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CampaignRoleAssignment:
    campaign_id: str
    world_id: Optional[str]
    role_name: str


def _as_id(value):
    return str(value) if value is not None else None


class RoleMembershipProvider:
    """Reads role assignments from api.UserSystemRole and campaigns.UserCampaignRole."""

    def list_system_roles(self, user_id) -> List[str]:
        from .models import UserSystemRole

        return list(
            UserSystemRole.objects
            .filter(user_id=user_id)
            .order_by('role__name')
            .values_list('role__name', flat=True)
            .distinct()
        )

    def list_campaign_role_assignments(self, user_id) -> List[CampaignRoleAssignment]:
        from campaigns.models import UserCampaignRole

        rows = (
            UserCampaignRole.objects
            .filter(user_id=user_id)
            .order_by('assigned_at', 'id')
            .values_list('campaign_id', 'campaign__world_id', 'role__name')
        )
        return [
            CampaignRoleAssignment(
                campaign_id=_as_id(campaign_id),
                world_id=_as_id(world_id),
                role_name=role_name,
            )
            for campaign_id, world_id, role_name in rows
        ]


class CampaignLookup:
    """Resolves the owning world of a campaign. Never raises for unknown campaigns."""

    def get_world_id(self, campaign_id) -> Optional[str]:
        from campaigns.models import Campaign

        if not campaign_id:
            return None
        try:
            world_id = Campaign.objects.values_list('world_id', flat=True).get(pk=campaign_id)
        except (Campaign.DoesNotExist, ValidationError, ValueError):
            logger.info(f"CampaignLookup: campaign {campaign_id} not found, world scope left empty")
            return None
        except DatabaseError:
            logger.warning(
                f"CampaignLookup: lookup of campaign {campaign_id} failed, world scope left empty",
                exc_info=True
            )
            return None
        return _as_id(world_id)


class VisibilityEntryStore:
    """
    Storage primitives for one concrete visibility entry model.

    Args:
        model: Concrete VisibilityEntry subclass (e.g. LocationVisibility)
        owner_field: FK name pointing at the owning entity (e.g. 'location')

    Example:
        >>> store = VisibilityEntryStore(LocationVisibility, 'location')
        >>> store.swap(location.pk, [{'campaign_id': campaign.pk, 'player_id': None}])
    """

    def __init__(self, model, owner_field):
        self.model = model
        self.owner_field = owner_field

    @property
    def owner_id_field(self):
        return f'{self.owner_field}_id'

    def delete_all(self, owner_id):
        return self.model.objects.filter(**{self.owner_id_field: owner_id}).delete()

    def bulk_insert(self, owner_id, entries):
        if not entries:
            return []
        return self.model.objects.bulk_create([
            self.model(**{
                self.owner_id_field: owner_id,
                'campaign_id': entry['campaign_id'],
                'player_id': entry['player_id'],
            })
            for entry in entries
        ])

    def find_by_owner(self, owner_id, join_predicate=None):
        queryset = self.model.objects.filter(**{self.owner_id_field: owner_id})
        if join_predicate is not None:
            queryset = queryset.filter(join_predicate)
        return queryset.order_by('id')

    def swap(self, owner_id, entries):
        """
        Replace every entry of the owner with `entries` in one transaction.

        Readers never observe the owner with zero entries mid-update.
        """
        with transaction.atomic():
            self.delete_all(owner_id)
            created = self.bulk_insert(owner_id, entries)
        logger.debug(
            f"{self.model.__name__}: replaced entries of {self.owner_field} {owner_id} "
            f"({len(created)} entries)"
        )
        return created
