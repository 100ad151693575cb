from rest_framework import serializers
from api.serializers import InputAliasMixin, VisibilityEntryInputSerializer, VisibilityEntrySerializer
from campaigns.models import World
from .models import (
    Location,
    LocationType,
    Npc,
    NpcRelationship,
    NpcType,
    Organisation,
    OrganisationRelationship,
    OrganisationType,
    Race,
)


# ============================================================================
# Taxonomy
# ============================================================================


class TaxonomySerializer(serializers.ModelSerializer):
    """Serializer for location / NPC / organisation types"""

    class Meta:
        fields = ['id', 'name', 'description', 'created_at']
        read_only_fields = ['id', 'created_at']


class LocationTypeSerializer(TaxonomySerializer):
    class Meta(TaxonomySerializer.Meta):
        model = LocationType


class NpcTypeSerializer(TaxonomySerializer):
    class Meta(TaxonomySerializer.Meta):
        model = NpcType


class OrganisationTypeSerializer(TaxonomySerializer):
    class Meta(TaxonomySerializer.Meta):
        model = OrganisationType


class RaceSerializer(serializers.ModelSerializer):
    """Serializer for Race"""
    created_by_name = serializers.SerializerMethodField()

    class Meta:
        model = Race
        fields = ['id', 'name', 'description', 'created_by', 'created_by_name', 'created_at']
        read_only_fields = ['id', 'created_by', 'created_at']

    def get_created_by_name(self, obj):
        return obj.created_by.username if obj.created_by else None


class RelatedNameSerializer(serializers.Serializer):
    """Lightweight {id, name} representation for nested relations"""
    id = serializers.UUIDField(read_only=True)
    name = serializers.CharField(read_only=True)


def check_locations_in_world(world, locations):
    """
    Raise a 400 when any linked location belongs to another world.

    Raises:
        ValidationError: {'locations': [...]} naming the foreign location ids
    """
    foreign = [str(location.pk) for location in locations or [] if location.world_id != world.pk]
    if foreign:
        raise serializers.ValidationError(
            {'locations': [f"Locations not in this world: {', '.join(foreign)}"]}
        )


# ============================================================================
# Entities (read)
# ============================================================================


class EntityReadSerializer(serializers.ModelSerializer):
    """
    Base read serializer for world entities.

    `visibility` contains only the entries prefetched for the caller's
    context (all entries for bypass contexts).
    """
    world_id = serializers.UUIDField(read_only=True)
    type = RelatedNameSerializer(read_only=True)
    visibility = VisibilityEntrySerializer(many=True, read_only=True)
    created_by_name = serializers.SerializerMethodField()

    base_fields = [
        'id',
        'name',
        'description',
        'world_id',
        'type',
        'visibility',
        'created_by',
        'created_by_name',
        'created_at',
        'updated_at',
    ]

    def get_created_by_name(self, obj):
        return obj.created_by.username if obj.created_by else None


class LocationSerializer(EntityReadSerializer):
    organisations = RelatedNameSerializer(many=True, read_only=True)

    class Meta:
        model = Location
        fields = EntityReadSerializer.base_fields + ['summary', 'organisations']
        read_only_fields = fields


class NpcRelationshipSerializer(serializers.ModelSerializer):
    related_npc = RelatedNameSerializer(read_only=True)

    class Meta:
        model = NpcRelationship
        fields = ['id', 'related_npc', 'relationship_type', 'description', 'created_at']
        read_only_fields = fields


class OrganisationRelationshipSerializer(serializers.ModelSerializer):
    related_organisation = RelatedNameSerializer(read_only=True)

    class Meta:
        model = OrganisationRelationship
        fields = ['id', 'related_organisation', 'relationship_type', 'description', 'created_at']
        read_only_fields = fields


class OrganisationSerializer(EntityReadSerializer):
    locations = RelatedNameSerializer(many=True, read_only=True)

    class Meta:
        model = Organisation
        fields = EntityReadSerializer.base_fields + ['motto', 'locations']
        read_only_fields = fields


class OrganisationDetailSerializer(OrganisationSerializer):
    """Organisation detail including its relationships to other organisations."""
    relationships = OrganisationRelationshipSerializer(many=True, read_only=True)

    class Meta(OrganisationSerializer.Meta):
        fields = OrganisationSerializer.Meta.fields + ['relationships']
        read_only_fields = fields


class NpcListSerializer(EntityReadSerializer):
    race = RelatedNameSerializer(read_only=True)

    class Meta:
        model = Npc
        fields = EntityReadSerializer.base_fields + ['demeanor', 'race']
        read_only_fields = fields


class NpcDetailSerializer(NpcListSerializer):
    """NPC detail including its relationships and the notes visible in the caller's context."""
    relationships = NpcRelationshipSerializer(many=True, read_only=True)
    notes = serializers.SerializerMethodField()

    class Meta(NpcListSerializer.Meta):
        fields = NpcListSerializer.Meta.fields + ['relationships', 'notes']
        read_only_fields = fields

    def get_notes(self, obj):
        from notes.serializers import NpcNoteSerializer
        from notes.visibility import filter_notes_for_context

        notes = filter_notes_for_context(obj.notes.all(), self.context.get('visibility_context'))
        return NpcNoteSerializer(notes, many=True, context=self.context).data


# ============================================================================
# Entities (write)
# ============================================================================


class EntityWriteSerializer(InputAliasMixin, serializers.ModelSerializer):
    """
    Base create/update serializer for world entities.

    Accepts camelCase keys (worldId, typeId, ...). `visibility` is an optional
    list of entries; when present it fully replaces the entity's entries.
    """
    input_aliases = {
        'worldId': 'world',
        'world_id': 'world',
        'typeId': 'type',
        'type_id': 'type',
    }

    world = serializers.PrimaryKeyRelatedField(
        queryset=World.objects.all(),
        required=False
    )
    visibility = VisibilityEntryInputSerializer(many=True, required=False)

    base_fields = ['name', 'description', 'world', 'type', 'visibility']

    def validate_name(self, value):
        if not value or not value.strip():
            raise serializers.ValidationError("name is required")
        return value.strip()


class LocationWriteSerializer(EntityWriteSerializer):
    class Meta:
        model = Location
        fields = EntityWriteSerializer.base_fields + ['summary']


class NpcWriteSerializer(EntityWriteSerializer):
    input_aliases = {
        **EntityWriteSerializer.input_aliases,
        'raceId': 'race',
        'race_id': 'race',
    }

    class Meta:
        model = Npc
        fields = EntityWriteSerializer.base_fields + ['demeanor', 'race']


class OrganisationWriteSerializer(EntityWriteSerializer):
    """Organisation write serializer; `locations` replaces all linked locations."""
    input_aliases = {
        **EntityWriteSerializer.input_aliases,
        'locationIds': 'locations',
        'location_ids': 'locations',
    }

    locations = serializers.PrimaryKeyRelatedField(
        queryset=Location.objects.all(),
        many=True,
        required=False
    )

    class Meta:
        model = Organisation
        fields = EntityWriteSerializer.base_fields + ['motto', 'locations']

    def validate(self, attrs):
        """Linked locations must belong to the organisation's world."""
        world = attrs.get('world') or getattr(self.instance, 'world', None)
        if world is not None:
            check_locations_in_world(world, attrs.get('locations'))
        return attrs
