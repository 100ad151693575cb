from django.contrib import admin
from .models import NpcNote


@admin.register(NpcNote)
class NpcNoteAdmin(admin.ModelAdmin):
    list_display = ['npc', 'author', 'visibility_level', 'created_at', 'updated_at']
    list_filter = ['visibility_level', 'created_at']
    search_fields = ['content', 'npc__name', 'author__username']
    readonly_fields = ['author', 'created_at', 'updated_at']
    raw_id_fields = ['npc']
