from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import (
    LocationTypeViewSet,
    LocationViewSet,
    NpcTypeViewSet,
    NpcViewSet,
    OrganisationTypeViewSet,
    OrganisationViewSet,
    RaceViewSet,
)

router = DefaultRouter()
router.register(r'locations', LocationViewSet, basename='location')
router.register(r'location-types', LocationTypeViewSet, basename='location-type')
router.register(r'organisations', OrganisationViewSet, basename='organisation')
router.register(r'organisation-types', OrganisationTypeViewSet, basename='organisation-type')
router.register(r'npcs', NpcViewSet, basename='npc')
router.register(r'npc-types', NpcTypeViewSet, basename='npc-type')
router.register(r'races', RaceViewSet, basename='race')

urlpatterns = [
    path('', include(router.urls)),
]
