from django.contrib import admin
from .models import SystemRole, UserSystemRole


class UserSystemRoleInline(admin.TabularInline):
    model = UserSystemRole
    extra = 1
    fields = ['user', 'assigned_at']
    readonly_fields = ['assigned_at']
    raw_id_fields = ['user']


@admin.register(SystemRole)
class SystemRoleAdmin(admin.ModelAdmin):
    list_display = ['name', 'role_kind', 'user_count', 'created_at']
    search_fields = ['name']
    inlines = [UserSystemRoleInline]

    def role_kind(self, obj):
        from .privileges import role_kind_for_name
        return role_kind_for_name(obj.name).value

    def user_count(self, obj):
        return obj.assignments.count()
