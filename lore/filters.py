import django_filters
from .models import Location, Npc, Organisation


class WorldEntityFilter(django_filters.FilterSet):
    """
    Filter for world entities with support for:
    - Type filtering
    - Name search (case-insensitive contains)

    World scoping is not a filter: it comes from the visibility context.
    """

    name = django_filters.CharFilter(
        field_name='name',
        lookup_expr='icontains',
        help_text="Filter by name (contains, case-insensitive)"
    )

    type = django_filters.UUIDFilter(
        field_name='type__id',
        help_text="Filter by type ID"
    )


class LocationFilter(WorldEntityFilter):
    class Meta:
        model = Location
        fields = ['name', 'type']


class NpcFilter(WorldEntityFilter):
    race = django_filters.UUIDFilter(
        field_name='race__id',
        help_text="Filter by race ID"
    )

    class Meta:
        model = Npc
        fields = ['name', 'type', 'race']


class OrganisationFilter(WorldEntityFilter):
    location = django_filters.UUIDFilter(
        field_name='locations__id',
        distinct=True,
        help_text="Filter organisations present at a location"
    )

    class Meta:
        model = Organisation
        fields = ['name', 'type', 'location']
