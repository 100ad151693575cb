from django.db import models
from django.contrib.auth import get_user_model

User = get_user_model()


class SystemRole(models.Model):
    """
    Platform-wide role (e.g. 'System Admin', 'World Admin', 'DM').

    Role names are free text; the visibility engine maps them onto a fixed set
    of role kinds through case-insensitive synonym tables (see api.privileges).
    """
    name = models.CharField(
        max_length=100,
        unique=True,
        db_index=True,
        help_text="Role name (e.g., 'System Admin', 'World Admin', 'Dungeon Master')"
    )
    description = models.TextField(
        blank=True,
        help_text="Optional description of the role"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "System Role"
        verbose_name_plural = "System Roles"
        ordering = ['name']

    def __str__(self):
        return self.name


class UserSystemRole(models.Model):
    """
    Assignment of a system role to a user.
    A user may hold any number of system roles at once.
    """
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='system_role_assignments'
    )
    role = models.ForeignKey(
        SystemRole,
        on_delete=models.CASCADE,
        related_name='assignments'
    )
    assigned_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "User System Role"
        verbose_name_plural = "User System Roles"
        constraints = [
            models.UniqueConstraint(fields=['user', 'role'], name='unique_user_system_role'),
        ]
        indexes = [
            models.Index(fields=['user'], name='api_usersysrole_user_idx'),
        ]

    def __str__(self):
        return f"{self.user} - {self.role.name}"
