"""
Notes attached to NPCs.

Routes are nested under the NPC:
- GET/POST           /npcs/<npc_id>/notes/
- GET/PATCH/DELETE   /npcs/<npc_id>/notes/<id>/

The NPC itself must be visible in the caller's context before any note
operation runs. Notes are then gated by their own visibility level.
"""
import logging

from django.db import transaction
from rest_framework import exceptions, status, viewsets
from rest_framework.permissions import IsAuthenticated

from api.exceptions import VisibilityDenied
from api.responses import envelope
from api.utils import same_id
from api.viewsets import VisibilityContextMixin
from api.visibility import is_visible, with_visibility
from lore.models import Npc, NpcVisibility
from .models import NpcNote
from .serializers import NpcNoteSerializer, NpcNoteWriteSerializer
from .visibility import check_note_level_write, filter_notes_for_context, note_is_visible

logger = logging.getLogger(__name__)


class NpcNoteViewSet(VisibilityContextMixin, viewsets.GenericViewSet):
    """
    ViewSet for NPC notes.

    - List: notes readable in the caller's context
    - Create: any caller who can see the NPC; DM level needs bypass, Party
      level needs an active campaign
    - Update/Delete: the author, or a bypass context
    """
    permission_classes = [IsAuthenticated]
    serializer_class = NpcNoteSerializer
    lookup_field = 'pk'

    def get_queryset(self):
        return NpcNote.objects.filter(npc_id=self.kwargs['npc_id']).select_related('author')

    def get_npc(self):
        """
        Load the parent NPC and check it against the caller's context.

        Raises:
            NotFound: Unknown NPC
            VisibilityDenied: NPC not visible in this context
        """
        npc = getattr(self, '_npc', None)
        if npc is not None:
            return npc

        context = self.get_visibility_context()
        queryset = with_visibility(Npc.objects.all(), context, NpcVisibility, 'npc', required=False)
        npc = queryset.filter(pk=self.kwargs['npc_id']).first()
        if npc is None:
            raise exceptions.NotFound("NPC not found")
        if not is_visible(npc.visibility.all(), context):
            logger.info(f"User {self.request.user.pk} denied access to NPC {npc.pk}")
            raise VisibilityDenied("NPC is not visible in this context")

        self._npc = npc
        return npc

    def get_note(self):
        npc = self.get_npc()
        note = self.get_queryset().filter(pk=self.kwargs[self.lookup_field]).first()
        if note is None or note.npc_id != npc.pk:
            raise exceptions.NotFound("Note not found")
        return note

    def check_author(self, note):
        context = self.get_visibility_context()
        if context.bypass_visibility:
            return
        if not same_id(note.author_id, context.player_id):
            raise VisibilityDenied("Only the author can modify this note")

    def ensure_readable(self, note):
        """Written note must still be readable by its writer, otherwise roll back."""
        if not note_is_visible(note, self.get_visibility_context()):
            raise VisibilityDenied("Note visibility does not match current context")

    def list(self, request, npc_id=None):
        self.get_npc()
        notes = filter_notes_for_context(self.get_queryset(), self.get_visibility_context())
        return envelope(self.get_serializer(notes, many=True).data)

    def retrieve(self, request, npc_id=None, pk=None):
        note = self.get_note()
        if not note_is_visible(note, self.get_visibility_context()):
            raise VisibilityDenied("Note is not visible in this context")
        return envelope(self.get_serializer(note).data)

    def create(self, request, npc_id=None):
        npc = self.get_npc()
        context = self.get_visibility_context()

        serializer = NpcNoteWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        check_note_level_write(data['visibility_level'], context)

        with transaction.atomic():
            note = NpcNote.objects.create(
                npc=npc,
                author=request.user,
                content=data['content'],
                visibility_level=data['visibility_level']
            )
            self.ensure_readable(note)

        logger.info(f"Note {note.pk} ({note.visibility_level}) created on NPC {npc.pk} by user {request.user.pk}")
        return envelope(self.get_serializer(note).data, "Note created", status=status.HTTP_201_CREATED)

    def update(self, request, npc_id=None, pk=None, partial=False):
        note = self.get_note()
        self.check_author(note)
        context = self.get_visibility_context()

        serializer = NpcNoteWriteSerializer(note, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        if 'visibility_level' in data:
            check_note_level_write(data['visibility_level'], context)

        with transaction.atomic():
            for field in ('content', 'visibility_level'):
                if field in data:
                    setattr(note, field, data[field])
            note.save()
            self.ensure_readable(note)

        return envelope(self.get_serializer(note).data, "Note updated")

    def partial_update(self, request, npc_id=None, pk=None):
        return self.update(request, npc_id=npc_id, pk=pk, partial=True)

    def destroy(self, request, npc_id=None, pk=None):
        note = self.get_note()
        self.check_author(note)
        note.delete()
        logger.info(f"Note {pk} on NPC {npc_id} deleted by user {request.user.pk}")
        return envelope(None, "Note deleted")
