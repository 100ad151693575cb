from django.db.models import Prefetch
from api.privileges import RoleKind
from api.viewsets import TaxonomyViewSet, VisibilityViewSet
from api.scoping import QuerysetScoping
from .filters import LocationFilter, NpcFilter, OrganisationFilter
from .models import (
    Location,
    LocationType,
    LocationVisibility,
    Npc,
    NpcRelationship,
    NpcType,
    NpcVisibility,
    Organisation,
    OrganisationRelationship,
    OrganisationType,
    OrganisationVisibility,
    Race,
)
from .serializers import (
    LocationSerializer,
    LocationTypeSerializer,
    LocationWriteSerializer,
    NpcDetailSerializer,
    NpcListSerializer,
    NpcTypeSerializer,
    NpcWriteSerializer,
    OrganisationDetailSerializer,
    OrganisationSerializer,
    OrganisationTypeSerializer,
    OrganisationWriteSerializer,
    RaceSerializer,
    check_locations_in_world,
)


class LocationViewSet(VisibilityViewSet):
    """
    ViewSet for Location CRUD with visibility filtering.

    - List: world scope + at least one matching visibility entry
    - Retrieve: 403 when no entry matches the caller's context
    - Create/Update/Delete: system admin, world admin or DM
    """
    queryset = Location.objects.all()
    serializer_class = LocationSerializer
    write_serializer_class = LocationWriteSerializer
    filterset_class = LocationFilter
    search_fields = ['name', 'summary', 'description']
    ordering_fields = ['name', 'created_at', 'updated_at']
    ordering = ['name']

    queryset_scoping = QuerysetScoping.WORLD_WITH_VISIBILITY
    visibility_model = LocationVisibility
    visibility_owner_field = 'location'
    write_role_kinds = (RoleKind.SYSTEM_ADMIN, RoleKind.WORLD_ADMIN, RoleKind.DM)
    resource_name = 'Location'
    resource_label = 'locations'
    select_related_fields = ['type', 'created_by']
    prefetch_related_fields = ['organisations']


class OrganisationViewSet(VisibilityViewSet):
    """
    ViewSet for Organisation CRUD with visibility filtering.

    Same rules as locations; `locationIds` on write replaces the linked locations.
    Retrieve embeds the organisation's relationships.
    """
    queryset = Organisation.objects.all()
    serializer_class = OrganisationDetailSerializer
    list_serializer_class = OrganisationSerializer
    write_serializer_class = OrganisationWriteSerializer
    filterset_class = OrganisationFilter
    search_fields = ['name', 'motto', 'description']
    ordering_fields = ['name', 'created_at', 'updated_at']
    ordering = ['name']

    queryset_scoping = QuerysetScoping.WORLD_WITH_VISIBILITY
    visibility_model = OrganisationVisibility
    visibility_owner_field = 'organisation'
    write_role_kinds = (RoleKind.SYSTEM_ADMIN, RoleKind.WORLD_ADMIN, RoleKind.DM)
    resource_name = 'Organisation'
    resource_label = 'organisations'
    select_related_fields = ['type', 'created_by']
    prefetch_related_fields = ['locations']

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action != 'list':
            queryset = queryset.prefetch_related(
                Prefetch(
                    'relationships',
                    queryset=OrganisationRelationship.objects.select_related('related_organisation')
                )
            )
        return queryset

    def get_create_kwargs(self, serializer):
        kwargs = super().get_create_kwargs(serializer)
        # The world may come from the active context rather than the body
        check_locations_in_world(kwargs[self.world_field], serializer.validated_data.get('locations'))
        return kwargs


class NpcViewSet(VisibilityViewSet):
    """
    ViewSet for NPC CRUD with visibility filtering.

    - Retrieve embeds the NPC's relationships and its notes, filtered by note
      visibility level
    - Create/Update/Delete: world admin or DM
    """
    queryset = Npc.objects.all()
    serializer_class = NpcDetailSerializer
    list_serializer_class = NpcListSerializer
    write_serializer_class = NpcWriteSerializer
    filterset_class = NpcFilter
    search_fields = ['name', 'demeanor', 'description']
    ordering_fields = ['name', 'created_at', 'updated_at']
    ordering = ['name']

    queryset_scoping = QuerysetScoping.WORLD_WITH_VISIBILITY
    visibility_model = NpcVisibility
    visibility_owner_field = 'npc'
    write_role_kinds = (RoleKind.WORLD_ADMIN, RoleKind.DM)
    resource_name = 'NPC'
    resource_label = 'NPCs'
    select_related_fields = ['type', 'race', 'created_by']

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action != 'list':
            from notes.models import NpcNote

            queryset = queryset.prefetch_related(
                Prefetch('notes', queryset=NpcNote.objects.select_related('author').order_by('created_at')),
                Prefetch('relationships', queryset=NpcRelationship.objects.select_related('related_npc'))
            )
        return queryset


# ============================================================================
# Taxonomy
# ============================================================================


class LocationTypeViewSet(TaxonomyViewSet):
    queryset = LocationType.objects.all()
    serializer_class = LocationTypeSerializer
    resource_name = 'Location type'
    resource_label = 'location types'


class NpcTypeViewSet(TaxonomyViewSet):
    queryset = NpcType.objects.all()
    serializer_class = NpcTypeSerializer
    resource_name = 'NPC type'
    resource_label = 'NPC types'


class OrganisationTypeViewSet(TaxonomyViewSet):
    queryset = OrganisationType.objects.all()
    serializer_class = OrganisationTypeSerializer
    resource_name = 'Organisation type'
    resource_label = 'organisation types'


class RaceViewSet(TaxonomyViewSet):
    queryset = Race.objects.select_related('created_by')
    serializer_class = RaceSerializer
    search_fields = ['name']
    resource_name = 'Race'
    resource_label = 'races'
