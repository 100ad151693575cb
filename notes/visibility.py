"""
Note visibility filtering for NPC notes.

Independent of visibility entries: notes are gated by their level alone.

Read rules (bypass contexts see every note):
- DM: never returned
- Private: only to the author
- Party: only when the caller has an active campaign (any campaign)
- Anything else: excluded

Write rules (bypass contexts may write any level):
- DM: forbidden (403)
- Party: requires an active campaign (400)
"""
from rest_framework.exceptions import ValidationError

from api.exceptions import InvalidVisibilityRequest, VisibilityDenied
from api.utils import same_id
from .models import NoteVisibilityLevel


def _note_value(note, name):
    if isinstance(note, dict):
        return note.get(name)
    return getattr(note, name, None)


def note_is_visible(note, context) -> bool:
    if context is None:
        return False
    if context.bypass_visibility:
        return True

    level = _note_value(note, 'visibility_level')
    if level == NoteVisibilityLevel.DM:
        return False
    if level == NoteVisibilityLevel.PRIVATE:
        return same_id(_note_value(note, 'author_id'), context.player_id)
    if level == NoteVisibilityLevel.PARTY:
        return bool(context.campaign_id)
    return False


def filter_notes_for_context(notes, context):
    """Notes from `notes` readable in `context`, order preserved."""
    if notes is None:
        return []
    return [note for note in notes if note_is_visible(note, context)]


def check_note_level_write(level, context):
    """
    Validate that the caller may write a note at `level`.

    Raises:
        ValidationError: Unknown level
        VisibilityDenied: DM level without bypass
        InvalidVisibilityRequest: Party level without an active campaign
    """
    if level not in NoteVisibilityLevel.values:
        raise ValidationError(
            {'visibility_level': [f"Unknown visibility level '{level}'"]}
        )
    if context is not None and context.bypass_visibility:
        return
    if level == NoteVisibilityLevel.DM:
        raise VisibilityDenied('Players cannot create DM-only notes')
    if level == NoteVisibilityLevel.PARTY and not (context and context.campaign_id):
        raise InvalidVisibilityRequest('Party notes require an active campaign')
