"""
Base ViewSet classes with automatic visibility filtering.

Provides clean separation of concerns:
- Queryset filtering: "what rows exist" (world scope + visibility entries)
- Permission classes: "who may act" (privilege gates)
- has_object_permission(): visibility entry matching on detail reads

Every response uses the {success, data, message} envelope.
"""
import logging

from django.db import transaction
from django.http import Http404
from rest_framework import exceptions, status, viewsets
from rest_framework.permissions import IsAuthenticated

from campaigns.models import World
from .context import ContextBuilder, ScopeHints
from .middleware import extract_scope_hints
from .permissions import EntityVisibilityPermission, PrivilegeGatePermission
from .privileges import RoleKind
from .providers import VisibilityEntryStore
from .responses import envelope
from .scoping import QuerysetScoping, apply_world_scope
from .utils import has_model_field
from .visibility import resolve_default_visibility, sync_visibility_entries, with_visibility

logger = logging.getLogger(__name__)


BODY_HINT_KEYS = {
    'campaign_id': ('campaignId', 'campaign_id'),
    'character_id': ('characterId', 'character_id'),
    'world_id': ('worldId', 'world_id'),
}


class VisibilityContextMixin:
    """
    Builds and caches the request's VisibilityContext.

    Hints: request.active_context (headers / query, set by
    ActiveContextMiddleware), falling back to the request body.
    """

    context_builder_class = ContextBuilder

    def get_scope_hints(self):
        request = self.request
        hints = dict(getattr(request, 'active_context', None) or extract_scope_hints(request))

        data = getattr(request, 'data', None)
        if hasattr(data, 'get'):
            for hint, keys in BODY_HINT_KEYS.items():
                if hints.get(hint):
                    continue
                for key in keys:
                    value = data.get(key)
                    if isinstance(value, str) and value.strip():
                        hints[hint] = value
                        break

        return ScopeHints.from_raw(**hints)

    def get_visibility_context(self):
        request = self.request
        cached = getattr(request, '_visibility_context', None)
        if cached is not None:
            return cached
        context = self.context_builder_class().build(request.user, self.get_scope_hints())
        request._visibility_context = context
        return context


class VisibilityViewSet(VisibilityContextMixin, viewsets.ModelViewSet):
    """
    Base ViewSet with automatic visibility filtering.

    Configuration attributes (override in subclass):
    - queryset_scoping: QuerysetScoping enum (default: WORLD_WITH_VISIBILITY)
    - visibility_model: Concrete visibility entry model (e.g. LocationVisibility)
    - visibility_owner_field: FK from entry to entity (e.g. 'location')
    - write_role_kinds: RoleKinds allowed to create/update/delete
    - resource_name / resource_label: Singular / plural names for messages
    - select_related_fields / prefetch_related_fields: Query optimizations

    ⚠️  Always use self.get_object() in detail actions so has_object_permission()
    runs the visibility matcher. Model.objects.get(pk=pk) BYPASSES it.

    Example usage:
        class LocationViewSet(VisibilityViewSet):
            queryset = Location.objects.all()
            visibility_model = LocationVisibility
            visibility_owner_field = 'location'
            write_role_kinds = (RoleKind.SYSTEM_ADMIN, RoleKind.WORLD_ADMIN, RoleKind.DM)
            resource_name = 'Location'
            resource_label = 'locations'
    """

    permission_classes = [IsAuthenticated, EntityVisibilityPermission]
    queryset_scoping = QuerysetScoping.WORLD_WITH_VISIBILITY
    visibility_model = None
    visibility_owner_field = None
    world_field = 'world'
    write_role_kinds = (RoleKind.SYSTEM_ADMIN, RoleKind.WORLD_ADMIN)
    resource_name = 'Resource'
    resource_label = 'resources'
    select_related_fields = []
    prefetch_related_fields = []
    list_serializer_class = None
    write_serializer_class = None

    def get_serializer_class(self):
        if self.action == 'list' and self.list_serializer_class:
            return self.list_serializer_class
        if self.action in ('create', 'update', 'partial_update') and self.write_serializer_class:
            return self.write_serializer_class
        return super().get_serializer_class()

    def get_queryset(self):
        """
        Apply queryset scoping based on configuration.

        Scoping modes:
        - GLOBAL: No filtering
        - WORLD_WITH_VISIBILITY: World scope + required matching entry on
          listings; detail loads only prefetch matching entries so the
          object-level check can answer 403 rather than 404

        Returns:
            QuerySet: Filtered queryset
        """
        queryset = super().get_queryset()

        if self.select_related_fields:
            queryset = queryset.select_related(*self.select_related_fields)
        if self.prefetch_related_fields:
            queryset = queryset.prefetch_related(*self.prefetch_related_fields)

        if self.queryset_scoping == QuerysetScoping.GLOBAL:
            return queryset

        context = self.get_visibility_context()
        is_listing = self.action == 'list'

        if self.queryset_scoping == QuerysetScoping.WORLD_WITH_VISIBILITY:
            if not is_listing:
                return with_visibility(
                    queryset, context, self.visibility_model, self.visibility_owner_field,
                    required=False
                )

            if context.restrict_all and not context.bypass_visibility:
                return queryset.none()

            queryset = apply_world_scope(queryset, context, self.world_field)
            return with_visibility(
                queryset, context, self.visibility_model, self.visibility_owner_field
            )

        # Unknown scoping mode - fail safe
        return queryset.none()

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context['visibility_context'] = self.get_visibility_context()
        return context

    def get_object(self):
        try:
            return super().get_object()
        except Http404:
            raise exceptions.NotFound(f"{self.resource_name} not found")

    def get_visibility_store(self):
        if self.visibility_model is None:
            return None
        return VisibilityEntryStore(self.visibility_model, self.visibility_owner_field)

    # ------------------------------------------------------------------
    # Write helpers
    # ------------------------------------------------------------------

    def resolve_world(self, serializer):
        """
        World for a new entity: body, then active world, then first world in scope.

        Raises:
            ValidationError: When no world can be determined
        """
        world = serializer.validated_data.get(self.world_field)
        if world is not None:
            return world

        context = self.get_visibility_context()
        world_id = context.world_id or (context.world_scope[0] if context.world_scope else None)
        world = World.objects.filter(pk=world_id).first() if world_id else None
        if world is None:
            raise exceptions.ValidationError(
                {'worldId': [f"worldId is required for {self.resource_label}"]}
            )
        return world

    def get_create_kwargs(self, serializer):
        model = self.queryset.model
        kwargs = {}
        if has_model_field(model, 'created_by'):
            kwargs['created_by'] = self.request.user
        if has_model_field(model, self.world_field):
            kwargs[self.world_field] = self.resolve_world(serializer)
        return kwargs

    def perform_create(self, serializer):
        """
        Create the entity and its visibility entries atomically.

        Without an explicit (non-empty) visibility list the default entries
        for the caller's context are attached.
        """
        entries = serializer.validated_data.pop('visibility', None)

        with transaction.atomic():
            instance = serializer.save(**self.get_create_kwargs(serializer))

            store = self.get_visibility_store()
            if store is not None:
                if not entries:
                    entries = resolve_default_visibility(self.get_visibility_context())
                sync_visibility_entries(store, instance.pk, entries)

        logger.info(
            f"{self.resource_name} {instance.pk} created by user {self.request.user.pk}"
        )
        return instance

    def perform_update(self, serializer):
        """Update the entity; a supplied visibility list fully replaces the entries."""
        entries = serializer.validated_data.pop('visibility', None)

        with transaction.atomic():
            instance = serializer.save()

            store = self.get_visibility_store()
            if store is not None and entries is not None:
                sync_visibility_entries(store, instance.pk, entries)

        return instance

    def hydrate(self, instance):
        """Reload an instance through the detail queryset (fresh visibility entries)."""
        queryset = self.get_queryset()
        return queryset.get(pk=instance.pk)

    def detail_data(self, instance):
        serializer_class = super().get_serializer_class()
        return serializer_class(instance, context=self.get_serializer_context()).data

    # ------------------------------------------------------------------
    # Enveloped actions
    # ------------------------------------------------------------------

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        serializer = self.get_serializer(queryset, many=True)
        return envelope(serializer.data)

    def retrieve(self, request, *args, **kwargs):
        instance = self.get_object()
        return envelope(self.detail_data(instance))

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        instance = self.perform_create(serializer)
        return envelope(
            self.detail_data(self.hydrate(instance)),
            f"{self.resource_name} created",
            status=status.HTTP_201_CREATED
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        instance = self.perform_update(serializer)
        return envelope(self.detail_data(self.hydrate(instance)), f"{self.resource_name} updated")

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        self.perform_destroy(instance)
        logger.info(f"{self.resource_name} {kwargs.get(self.lookup_field)} deleted by user {request.user.pk}")
        return envelope(None, f"{self.resource_name} deleted")


class TaxonomyViewSet(VisibilityViewSet):
    """
    ViewSet for global lookup tables (types, races).

    Everyone authenticated can read; only world and system admins may write.
    """
    queryset_scoping = QuerysetScoping.GLOBAL
    permission_classes = [IsAuthenticated, PrivilegeGatePermission]
    write_role_kinds = (RoleKind.WORLD_ADMIN, RoleKind.SYSTEM_ADMIN)
    ordering = ['name']
