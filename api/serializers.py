from rest_framework import serializers
from django.contrib.auth import get_user_model
from campaigns.models import Campaign

User = get_user_model()


class InputAliasMixin:
    """
    Accept alternate (camelCase) input keys for serializer fields.

    Subclasses declare `input_aliases = {'worldId': 'world', ...}`; an alias
    is only used when the canonical key is absent.
    """
    input_aliases = {}

    def to_internal_value(self, data):
        if self.input_aliases and hasattr(data, 'items'):
            data = dict(data.items())
            for alias, field_name in self.input_aliases.items():
                if alias in data and field_name not in data:
                    data[field_name] = data.pop(alias)
                else:
                    data.pop(alias, None)
        return super().to_internal_value(data)


class VisibilityEntryInputSerializer(InputAliasMixin, serializers.Serializer):
    """
    One caller-supplied visibility entry.

    Both fields are optional and independent; an entry with neither is public.
    """
    input_aliases = {
        'campaignId': 'campaign',
        'campaign_id': 'campaign',
        'playerId': 'player',
        'player_id': 'player',
    }

    campaign = serializers.PrimaryKeyRelatedField(
        queryset=Campaign.objects.all(),
        required=False,
        allow_null=True
    )
    player = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.all(),
        required=False,
        allow_null=True
    )


class VisibilityEntrySerializer(serializers.Serializer):
    """Read-only representation of a stored visibility entry."""
    id = serializers.IntegerField(read_only=True)
    campaign_id = serializers.UUIDField(read_only=True, allow_null=True)
    campaign_name = serializers.CharField(source='campaign.name', read_only=True, default=None)
    player_id = serializers.IntegerField(read_only=True, allow_null=True)
    player_username = serializers.CharField(source='player.username', read_only=True, default=None)
    is_public = serializers.SerializerMethodField()

    def get_is_public(self, obj):
        return obj.campaign_id is None and obj.player_id is None
