import uuid

from django.db import models
from django.contrib.auth import get_user_model

User = get_user_model()


class NoteVisibilityLevel(models.TextChoices):
    """
    Who may read a note (bypass contexts read everything):

    PRIVATE: The author only
    PARTY: Anyone with an active campaign
    DM: Nobody without bypass
    """
    PRIVATE = 'Private', 'Private'
    PARTY = 'Party', 'Party'
    DM = 'DM', 'DM'


class NpcNote(models.Model):
    """
    Free-text note attached to an NPC.
    The author is fixed at creation; content and level may change.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    npc = models.ForeignKey(
        'lore.Npc',
        on_delete=models.CASCADE,
        related_name='notes',
        help_text="NPC this note is about"
    )

    author = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='npc_notes',
        help_text="User who wrote the note"
    )

    content = models.TextField(help_text="Note text")

    visibility_level = models.CharField(
        max_length=10,
        choices=NoteVisibilityLevel.choices,
        default=NoteVisibilityLevel.PRIVATE,
        db_index=True
    )

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['npc', 'visibility_level'], name='notes_npc_level_idx'),
        ]
        verbose_name = "NPC Note"
        verbose_name_plural = "NPC Notes"

    def __str__(self):
        return f"{self.npc} - {self.visibility_level} note by {self.author}"
