import uuid

from django.db import models
from django.contrib.auth import get_user_model

User = get_user_model()


# ============================================================================
# Taxonomy
# ============================================================================


class TaxonomyModel(models.Model):
    """Shared fields for location / NPC / organisation types."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True, db_index=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ['name']

    def __str__(self):
        return self.name


class LocationType(TaxonomyModel):
    class Meta(TaxonomyModel.Meta):
        verbose_name = "Location Type"
        verbose_name_plural = "Location Types"


class NpcType(TaxonomyModel):
    class Meta(TaxonomyModel.Meta):
        verbose_name = "NPC Type"
        verbose_name_plural = "NPC Types"


class OrganisationType(TaxonomyModel):
    class Meta(TaxonomyModel.Meta):
        verbose_name = "Organisation Type"
        verbose_name_plural = "Organisation Types"


class Race(models.Model):
    """
    Playable or NPC race. Shared across worlds, no visibility entries.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True, db_index=True)
    description = models.TextField(blank=True)
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_races'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Race"
        verbose_name_plural = "Races"
        ordering = ['name']

    def __str__(self):
        return self.name


# ============================================================================
# Visibility entries
# ============================================================================


class VisibilityEntry(models.Model):
    """
    Grant making the owning entity visible.

    - campaign and player both null: public within the world
    - campaign set: visible to members with that active campaign
    - player set: visible to that player

    campaign and player are independent (both may be set). The entries of an
    entity form a union. Concrete subclasses add the owner FK.
    """
    campaign = models.ForeignKey(
        'campaigns.Campaign',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='+'
    )
    player = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ['id']

    @property
    def is_public(self):
        return self.campaign_id is None and self.player_id is None

    def __str__(self):
        if self.is_public:
            return "public"
        parts = []
        if self.campaign_id:
            parts.append(f"campaign={self.campaign_id}")
        if self.player_id:
            parts.append(f"player={self.player_id}")
        return ', '.join(parts)


# ============================================================================
# Entities
# ============================================================================


class WorldEntity(models.Model):
    """Shared fields for world-bound, visibility-gated lore entities."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True)
    world = models.ForeignKey(
        'campaigns.World',
        on_delete=models.CASCADE,
        related_name='%(class)ss'
    )
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_%(class)ss'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['name']

    def __str__(self):
        return self.name


class Location(WorldEntity):
    summary = models.CharField(max_length=255, blank=True)
    type = models.ForeignKey(
        LocationType,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='locations'
    )

    class Meta(WorldEntity.Meta):
        verbose_name = "Location"
        verbose_name_plural = "Locations"
        indexes = [
            models.Index(fields=['world', 'name'], name='lore_location_world_name_idx'),
        ]


class Npc(WorldEntity):
    demeanor = models.CharField(max_length=255, blank=True)
    type = models.ForeignKey(
        NpcType,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='npcs'
    )
    race = models.ForeignKey(
        Race,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='npcs'
    )

    class Meta(WorldEntity.Meta):
        verbose_name = "NPC"
        verbose_name_plural = "NPCs"
        indexes = [
            models.Index(fields=['world', 'name'], name='lore_npc_world_name_idx'),
        ]


class Organisation(WorldEntity):
    motto = models.CharField(max_length=255, blank=True)
    type = models.ForeignKey(
        OrganisationType,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='organisations'
    )
    locations = models.ManyToManyField(
        Location,
        through='OrganisationLocation',
        related_name='organisations',
        blank=True
    )

    class Meta(WorldEntity.Meta):
        verbose_name = "Organisation"
        verbose_name_plural = "Organisations"
        indexes = [
            models.Index(fields=['world', 'name'], name='lore_org_world_name_idx'),
        ]


class OrganisationLocation(models.Model):
    organisation = models.ForeignKey(Organisation, on_delete=models.CASCADE)
    location = models.ForeignKey(Location, on_delete=models.CASCADE)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=['organisation', 'location'],
                name='unique_organisation_location'
            ),
        ]


class EntityRelationship(models.Model):
    """Directed link between two entities of the same kind (ally, rival, parent, ...)."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    relationship_type = models.CharField(max_length=100, blank=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ['created_at']


class NpcRelationship(EntityRelationship):
    npc = models.ForeignKey(Npc, on_delete=models.CASCADE, related_name='relationships')
    related_npc = models.ForeignKey(Npc, on_delete=models.CASCADE, related_name='+')

    class Meta(EntityRelationship.Meta):
        verbose_name = "NPC Relationship"
        verbose_name_plural = "NPC Relationships"


class OrganisationRelationship(EntityRelationship):
    organisation = models.ForeignKey(Organisation, on_delete=models.CASCADE, related_name='relationships')
    related_organisation = models.ForeignKey(Organisation, on_delete=models.CASCADE, related_name='+')

    class Meta(EntityRelationship.Meta):
        verbose_name = "Organisation Relationship"
        verbose_name_plural = "Organisation Relationships"


class LocationVisibility(VisibilityEntry):
    location = models.ForeignKey(Location, on_delete=models.CASCADE, related_name='visibility')

    class Meta(VisibilityEntry.Meta):
        verbose_name = "Location Visibility"
        verbose_name_plural = "Location Visibility"
        constraints = [
            models.UniqueConstraint(
                fields=['location', 'campaign', 'player'],
                name='unique_location_visibility'
            ),
        ]


class NpcVisibility(VisibilityEntry):
    npc = models.ForeignKey(Npc, on_delete=models.CASCADE, related_name='visibility')

    class Meta(VisibilityEntry.Meta):
        verbose_name = "NPC Visibility"
        verbose_name_plural = "NPC Visibility"
        constraints = [
            models.UniqueConstraint(
                fields=['npc', 'campaign', 'player'],
                name='unique_npc_visibility'
            ),
        ]


class OrganisationVisibility(VisibilityEntry):
    organisation = models.ForeignKey(Organisation, on_delete=models.CASCADE, related_name='visibility')

    class Meta(VisibilityEntry.Meta):
        verbose_name = "Organisation Visibility"
        verbose_name_plural = "Organisation Visibility"
        constraints = [
            models.UniqueConstraint(
                fields=['organisation', 'campaign', 'player'],
                name='unique_organisation_visibility'
            ),
        ]
