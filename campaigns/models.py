import uuid

from django.db import models
from django.contrib.auth import get_user_model

User = get_user_model()


class World(models.Model):
    """
    Top-level shared setting containing campaigns and lore entities.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(
        max_length=255,
        db_index=True,
        help_text="Name of the world"
    )
    description = models.TextField(blank=True)
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_worlds'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "World"
        verbose_name_plural = "Worlds"
        ordering = ['name']

    def __str__(self):
        return self.name


class Campaign(models.Model):
    """
    A run of play within a world, with its own role assignments (DM, Player).
    """

    STATUS_CHOICES = [
        ('planning', 'Planning'),
        ('active', 'Active'),
        ('paused', 'Paused'),
        ('completed', 'Completed'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    world = models.ForeignKey(
        World,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='campaigns',
        help_text="World this campaign is played in (optional)"
    )
    name = models.CharField(
        max_length=255,
        db_index=True,
        help_text="Name of the campaign"
    )
    description = models.TextField(blank=True)
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default='planning',
        db_index=True
    )
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_campaigns'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Campaign"
        verbose_name_plural = "Campaigns"
        ordering = ['name']
        indexes = [
            models.Index(fields=['world'], name='campaigns_world_idx'),
        ]

    def __str__(self):
        return self.name


class CampaignRole(models.Model):
    """
    Campaign-level role name (e.g. 'DM', 'Dungeon Master', 'Player').
    """
    name = models.CharField(
        max_length=100,
        unique=True,
        db_index=True
    )
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Campaign Role"
        verbose_name_plural = "Campaign Roles"
        ordering = ['name']

    def __str__(self):
        return self.name


class UserCampaignRole(models.Model):
    """
    Assignment of a user to a campaign under a campaign role.
    """
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='campaign_role_assignments'
    )
    campaign = models.ForeignKey(
        Campaign,
        on_delete=models.CASCADE,
        related_name='role_assignments'
    )
    role = models.ForeignKey(
        CampaignRole,
        on_delete=models.CASCADE,
        related_name='assignments'
    )
    assigned_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "User Campaign Role"
        verbose_name_plural = "User Campaign Roles"
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'campaign', 'role'],
                name='unique_user_campaign_role'
            ),
        ]
        indexes = [
            models.Index(fields=['user'], name='campaigns_ucr_user_idx'),
            models.Index(fields=['campaign'], name='campaigns_ucr_campaign_idx'),
        ]

    def __str__(self):
        return f"{self.user} - {self.role.name} @ {self.campaign.name}"
