from django.contrib import admin
from .models import Campaign, CampaignRole, UserCampaignRole, World


class UserCampaignRoleInline(admin.TabularInline):
    model = UserCampaignRole
    extra = 1
    fields = ['user', 'role', 'assigned_at']
    readonly_fields = ['assigned_at']
    raw_id_fields = ['user']


@admin.register(World)
class WorldAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_by', 'created_at']
    search_fields = ['name']


@admin.register(Campaign)
class CampaignAdmin(admin.ModelAdmin):
    list_display = ['name', 'world', 'status', 'created_at']
    list_filter = ['status', 'world']
    search_fields = ['name', 'world__name']
    inlines = [UserCampaignRoleInline]


@admin.register(CampaignRole)
class CampaignRoleAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']
