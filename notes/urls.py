from django.urls import path
from .views import NpcNoteViewSet

note_list = NpcNoteViewSet.as_view({
    'get': 'list',
    'post': 'create',
})

note_detail = NpcNoteViewSet.as_view({
    'get': 'retrieve',
    'put': 'update',
    'patch': 'partial_update',
    'delete': 'destroy',
})

urlpatterns = [
    path('npcs/<uuid:npc_id>/notes/', note_list, name='npc-note-list'),
    path('npcs/<uuid:npc_id>/notes/<uuid:pk>/', note_detail, name='npc-note-detail'),
]
