from rest_framework import serializers
from api.serializers import InputAliasMixin
from .models import NpcNote, NoteVisibilityLevel


class NpcNoteSerializer(serializers.ModelSerializer):
    """Read serializer for NPC notes"""
    npc_id = serializers.UUIDField(read_only=True)
    author_id = serializers.IntegerField(read_only=True, allow_null=True)
    author_username = serializers.CharField(source='author.username', read_only=True, default=None)

    class Meta:
        model = NpcNote
        fields = [
            'id',
            'npc_id',
            'author_id',
            'author_username',
            'content',
            'visibility_level',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class NpcNoteWriteSerializer(InputAliasMixin, serializers.Serializer):
    """
    Create/update payload for NPC notes.

    The level is accepted as free text so the view can answer unknown,
    forbidden and scope-less levels with the right status codes.
    """
    input_aliases = {
        'visibilityLevel': 'visibility_level',
    }

    content = serializers.CharField(required=False, trim_whitespace=False)
    visibility_level = serializers.CharField(required=False)

    def validate_content(self, value):
        if not value or not value.strip():
            raise serializers.ValidationError("content is required")
        return value

    def validate(self, attrs):
        if self.instance is None:
            if 'content' not in attrs:
                raise serializers.ValidationError({'content': ["content is required"]})
            attrs.setdefault('visibility_level', NoteVisibilityLevel.PRIVATE)
        return attrs
