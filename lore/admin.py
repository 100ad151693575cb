from django.contrib import admin
from .models import (
    Location,
    LocationType,
    LocationVisibility,
    Npc,
    NpcRelationship,
    NpcType,
    NpcVisibility,
    Organisation,
    OrganisationLocation,
    OrganisationRelationship,
    OrganisationType,
    OrganisationVisibility,
    Race,
)


class VisibilityInline(admin.TabularInline):
    extra = 0
    fields = ['campaign', 'player', 'created_at']
    readonly_fields = ['created_at']
    raw_id_fields = ['campaign', 'player']


class LocationVisibilityInline(VisibilityInline):
    model = LocationVisibility


class NpcVisibilityInline(VisibilityInline):
    model = NpcVisibility


class OrganisationVisibilityInline(VisibilityInline):
    model = OrganisationVisibility


class OrganisationLocationInline(admin.TabularInline):
    model = OrganisationLocation
    extra = 0
    raw_id_fields = ['location']


class RelationshipInline(admin.TabularInline):
    extra = 0
    readonly_fields = ['created_at']


class NpcRelationshipInline(RelationshipInline):
    model = NpcRelationship
    fk_name = 'npc'
    fields = ['related_npc', 'relationship_type', 'description', 'created_at']
    raw_id_fields = ['related_npc']


class OrganisationRelationshipInline(RelationshipInline):
    model = OrganisationRelationship
    fk_name = 'organisation'
    fields = ['related_organisation', 'relationship_type', 'description', 'created_at']
    raw_id_fields = ['related_organisation']


class WorldEntityAdmin(admin.ModelAdmin):
    list_display = ['name', 'world', 'type', 'created_by', 'updated_at']
    list_filter = ['world', 'type']
    search_fields = ['name', 'description']
    readonly_fields = ['created_at', 'updated_at']
    raw_id_fields = ['created_by']


@admin.register(Location)
class LocationAdmin(WorldEntityAdmin):
    inlines = [LocationVisibilityInline]


@admin.register(Npc)
class NpcAdmin(WorldEntityAdmin):
    list_display = WorldEntityAdmin.list_display + ['race']
    inlines = [NpcVisibilityInline, NpcRelationshipInline]


@admin.register(Organisation)
class OrganisationAdmin(WorldEntityAdmin):
    inlines = [OrganisationVisibilityInline, OrganisationLocationInline, OrganisationRelationshipInline]


@admin.register(LocationType, NpcType, OrganisationType)
class TaxonomyAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']


@admin.register(Race)
class RaceAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_by', 'created_at']
    search_fields = ['name']
