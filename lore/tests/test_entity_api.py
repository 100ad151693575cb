"""
API tests for locations, NPCs and organisations.

Tests cover:
- Default visibility on create (world admin, DM managing campaigns)
- Listing and detail visibility (union of entries, 403 vs 404)
- Privilege gates for mutations
- Full replace of visibility entries on update
- Relationships embedded in NPC and organisation details
"""
import uuid

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from api.tests.factories import assign_campaign_role, make_campaign, make_user, make_world
from lore.models import (
    Location,
    LocationVisibility,
    Npc,
    NpcRelationship,
    NpcVisibility,
    Organisation,
    OrganisationRelationship,
    OrganisationVisibility,
)


class LoreApiTestCase(TestCase):
    """Shared world: campaigns C1..C3, a world admin, a DM of C1+C2 and players."""

    def setUp(self):
        self.client = APIClient()

        self.world = make_world('Faerun')
        self.c1 = make_campaign(self.world, 'C1')
        self.c2 = make_campaign(self.world, 'C2')
        self.c3 = make_campaign(self.world, 'C3')

        self.system_admin = make_user('sysadmin', 'System Admin')
        self.world_admin = make_user('worldadmin', 'World Admin')

        self.dm = make_user('dm', 'Dungeon Master')
        assign_campaign_role(self.dm, self.c1, 'DM')
        assign_campaign_role(self.dm, self.c2, 'DM')

        self.player_c1 = make_user('player_c1')
        assign_campaign_role(self.player_c1, self.c1, 'Player')
        self.player_c3 = make_user('player_c3')
        assign_campaign_role(self.player_c3, self.c3, 'Player')

    def as_user(self, user):
        self.client.force_authenticate(user=user)

    def in_campaign(self, campaign):
        return {'HTTP_X_ACTIVE_CAMPAIGN': str(campaign.pk)}

    def ids(self, response):
        return {item['id'] for item in response.data['data']}


class LocationApiTestCase(LoreApiTestCase):

    def test_world_admin_location_is_public_to_players(self):
        """World admin creates a location without visibility: one public entry, players see it."""
        self.as_user(self.world_admin)
        response = self.client.post(
            '/api/v1/locations/',
            {'name': 'Waterdeep', 'worldId': str(self.world.pk)},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['message'], 'Location created')
        location_id = response.data['data']['id']
        entries = LocationVisibility.objects.filter(location_id=location_id)
        self.assertEqual(entries.count(), 1)
        self.assertTrue(entries.get().is_public)

        self.as_user(self.player_c3)
        response = self.client.get(f'/api/v1/locations/{location_id}/', **self.in_campaign(self.c3))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['name'], 'Waterdeep')

        response = self.client.get('/api/v1/locations/', **self.in_campaign(self.c3))
        self.assertIn(location_id, self.ids(response))

    def test_player_without_campaign_lists_nothing(self):
        location = Location.objects.create(world=self.world, name='Neverwinter')
        LocationVisibility.objects.create(location=location)

        self.as_user(self.player_c1)
        response = self.client.get('/api/v1/locations/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'], [])

    def test_player_sees_location_granted_to_them(self):
        location = Location.objects.create(world=self.world, name='Hidden Cave')
        LocationVisibility.objects.create(location=location, player=self.player_c1)

        self.as_user(self.player_c1)
        response = self.client.get(f'/api/v1/locations/{location.pk}/', **self.in_campaign(self.c1))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']['visibility']), 1)

    def test_listing_is_limited_to_the_active_world(self):
        other_world = make_world('Krynn')
        elsewhere = Location.objects.create(world=other_world, name='Palanthas')
        LocationVisibility.objects.create(location=elsewhere)
        here = Location.objects.create(world=self.world, name='Baldur\'s Gate')
        LocationVisibility.objects.create(location=here)

        self.as_user(self.player_c1)
        response = self.client.get('/api/v1/locations/', **self.in_campaign(self.c1))

        self.assertEqual(self.ids(response), {str(here.pk)})

    def test_missing_location_is_404(self):
        self.as_user(self.world_admin)
        response = self.client.get(f'/api/v1/locations/{uuid.uuid4()}/')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'success': False, 'data': None, 'message': 'Location not found'})

    def test_player_cannot_create_location(self):
        self.as_user(self.player_c1)
        response = self.client.post(
            '/api/v1/locations/',
            {'name': 'My House', 'worldId': str(self.world.pk)},
            format='json',
            **self.in_campaign(self.c1)
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(
            response.data['message'],
            'System admin, world admin or DM role required to create locations'
        )
        self.assertFalse(Location.objects.filter(name='My House').exists())

    def test_world_is_required(self):
        self.as_user(self.world_admin)
        response = self.client.post('/api/v1/locations/', {'name': 'Nowhere'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('worldId is required for locations', response.data['message'])

    def test_explicit_visibility_is_used_and_deduplicated(self):
        self.as_user(self.world_admin)
        response = self.client.post(
            '/api/v1/locations/',
            {
                'name': 'Candlekeep',
                'worldId': str(self.world.pk),
                'visibility': [
                    {'campaignId': str(self.c3.pk)},
                    {'campaign_id': str(self.c3.pk)},
                    {'playerId': self.player_c1.pk},
                ],
            },
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        entries = LocationVisibility.objects.filter(location_id=response.data['data']['id'])
        self.assertEqual(
            sorted((str(e.campaign_id), e.player_id) for e in entries),
            sorted([(str(self.c3.pk), None), ('None', self.player_c1.pk)])
        )

    def test_update_replaces_visibility(self):
        location = Location.objects.create(world=self.world, name='Ruins')
        LocationVisibility.objects.create(location=location, campaign=self.c1)
        LocationVisibility.objects.create(location=location, campaign=self.c2)

        self.as_user(self.dm)
        response = self.client.patch(
            f'/api/v1/locations/{location.pk}/',
            {'visibility': [{'campaignId': str(self.c3.pk)}]},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Location updated')
        self.assertEqual(
            list(LocationVisibility.objects.filter(location=location).values_list('campaign_id', flat=True)),
            [self.c3.pk]
        )

    def test_update_without_visibility_keeps_entries(self):
        location = Location.objects.create(world=self.world, name='Ruins')
        LocationVisibility.objects.create(location=location, campaign=self.c1)

        self.as_user(self.dm)
        response = self.client.patch(f'/api/v1/locations/{location.pk}/', {'summary': 'Crumbling'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(LocationVisibility.objects.filter(location=location).count(), 1)
        location.refresh_from_db()
        self.assertEqual(location.summary, 'Crumbling')

    def test_delete_cascades_entries(self):
        location = Location.objects.create(world=self.world, name='Doomed')
        LocationVisibility.objects.create(location=location)

        self.as_user(self.system_admin)
        response = self.client.delete(f'/api/v1/locations/{location.pk}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Location deleted')
        self.assertFalse(Location.objects.filter(pk=location.pk).exists())
        self.assertFalse(LocationVisibility.objects.filter(location_id=location.pk).exists())

    def test_unauthenticated_request_rejected(self):
        response = self.client.get('/api/v1/locations/')

        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))
        self.assertFalse(response.data['success'])


class NpcApiTestCase(LoreApiTestCase):

    def create_npc_as_dm(self):
        self.as_user(self.dm)
        response = self.client.post('/api/v1/npcs/', {'name': 'Strahd'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.data['data']['id']

    def test_dm_npc_defaults_to_managed_campaigns(self):
        """DM managing C1 and C2 creates an NPC without visibility or active campaign."""
        npc_id = self.create_npc_as_dm()

        npc = Npc.objects.get(pk=npc_id)
        self.assertEqual(npc.world, self.world)
        self.assertEqual(
            set(NpcVisibility.objects.filter(npc=npc).values_list('campaign_id', flat=True)),
            {self.c1.pk, self.c2.pk}
        )

    def test_player_in_managed_campaign_sees_npc(self):
        npc_id = self.create_npc_as_dm()

        self.as_user(self.player_c1)
        detail = self.client.get(f'/api/v1/npcs/{npc_id}/', **self.in_campaign(self.c1))
        listing = self.client.get('/api/v1/npcs/', **self.in_campaign(self.c1))

        self.assertEqual(detail.status_code, status.HTTP_200_OK)
        self.assertIn(npc_id, self.ids(listing))
        # Only the entry relevant to the caller is exposed
        self.assertEqual(
            [entry['campaign_id'] for entry in detail.data['data']['visibility']],
            [str(self.c1.pk)]
        )

    def test_player_in_other_campaign_is_denied(self):
        npc_id = self.create_npc_as_dm()

        self.as_user(self.player_c3)
        detail = self.client.get(f'/api/v1/npcs/{npc_id}/', **self.in_campaign(self.c3))
        listing = self.client.get('/api/v1/npcs/', **self.in_campaign(self.c3))

        self.assertEqual(detail.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(detail.data['message'], 'NPC is not visible in this context')
        self.assertEqual(listing.status_code, status.HTTP_200_OK)
        self.assertNotIn(npc_id, self.ids(listing))

    def test_dm_active_campaign_beats_managed_campaigns(self):
        self.as_user(self.dm)
        response = self.client.post(
            '/api/v1/npcs/', {'name': 'Ireena'}, format='json', **self.in_campaign(self.c2)
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(
            list(NpcVisibility.objects.filter(npc_id=response.data['data']['id'])
                 .values_list('campaign_id', flat=True)),
            [self.c2.pk]
        )

    def test_system_admin_cannot_create_npcs(self):
        self.as_user(self.system_admin)
        response = self.client.post(
            '/api/v1/npcs/', {'name': 'Nope', 'worldId': str(self.world.pk)}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'World admin or DM role required to create NPCs')

    def test_player_cannot_delete_npc(self):
        npc_id = self.create_npc_as_dm()

        self.as_user(self.player_c1)
        response = self.client.delete(f'/api/v1/npcs/{npc_id}/', **self.in_campaign(self.c1))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Npc.objects.filter(pk=npc_id).exists())

    def test_filter_by_name(self):
        for name in ('Strahd', 'Rahadin'):
            npc = Npc.objects.create(world=self.world, name=name)
            NpcVisibility.objects.create(npc=npc)

        self.as_user(self.world_admin)
        response = self.client.get('/api/v1/npcs/?name=strahd')

        self.assertEqual([item['name'] for item in response.data['data']], ['Strahd'])

    def test_detail_embeds_relationships(self):
        strahd = Npc.objects.create(world=self.world, name='Strahd')
        rahadin = Npc.objects.create(world=self.world, name='Rahadin')
        NpcVisibility.objects.create(npc=strahd, campaign=self.c1)
        NpcRelationship.objects.create(
            npc=strahd,
            related_npc=rahadin,
            relationship_type='servant',
            description='Chamberlain of Castle Ravenloft'
        )

        self.as_user(self.player_c1)
        detail = self.client.get(f'/api/v1/npcs/{strahd.pk}/', **self.in_campaign(self.c1))
        listing = self.client.get('/api/v1/npcs/', **self.in_campaign(self.c1))

        self.assertEqual(detail.status_code, status.HTTP_200_OK)
        relationships = detail.data['data']['relationships']
        self.assertEqual(len(relationships), 1)
        self.assertEqual(relationships[0]['related_npc'], {'id': str(rahadin.pk), 'name': 'Rahadin'})
        self.assertEqual(relationships[0]['relationship_type'], 'servant')
        self.assertNotIn('relationships', listing.data['data'][0])


class OrganisationApiTestCase(LoreApiTestCase):

    def test_create_with_locations(self):
        tavern = Location.objects.create(world=self.world, name='Yawning Portal')

        self.as_user(self.world_admin)
        response = self.client.post(
            '/api/v1/organisations/',
            {
                'name': 'Harpers',
                'worldId': str(self.world.pk),
                'locationIds': [str(tavern.pk)],
            },
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        organisation = Organisation.objects.get(pk=response.data['data']['id'])
        self.assertEqual(list(organisation.locations.all()), [tavern])
        self.assertEqual(response.data['data']['locations'][0]['name'], 'Yawning Portal')

    def test_locations_must_share_the_world(self):
        elsewhere = Location.objects.create(world=make_world('Krynn'), name='Palanthas')

        self.as_user(self.world_admin)
        response = self.client.post(
            '/api/v1/organisations/',
            {'name': 'Zhentarim', 'worldId': str(self.world.pk), 'locationIds': [str(elsewhere.pk)]},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Organisation.objects.filter(name='Zhentarim').exists())

    def test_locations_must_share_the_active_world(self):
        """World taken from X-Active-World is checked against the linked locations."""
        elsewhere = Location.objects.create(world=make_world('Krynn'), name='Palanthas')

        self.as_user(self.world_admin)
        response = self.client.post(
            '/api/v1/organisations/',
            {'name': 'Zhentarim', 'locationIds': [str(elsewhere.pk)]},
            format='json',
            HTTP_X_ACTIVE_WORLD=str(self.world.pk)
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertFalse(Organisation.objects.filter(name='Zhentarim').exists())

    def test_active_world_with_local_locations_is_accepted(self):
        tavern = Location.objects.create(world=self.world, name='Yawning Portal')

        self.as_user(self.world_admin)
        response = self.client.post(
            '/api/v1/organisations/',
            {'name': 'Harpers', 'locationIds': [str(tavern.pk)]},
            format='json',
            HTTP_X_ACTIVE_WORLD=str(self.world.pk)
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Organisation.objects.get(name='Harpers').world, self.world)

    def test_detail_embeds_relationships(self):
        harpers = Organisation.objects.create(world=self.world, name='Harpers')
        zhentarim = Organisation.objects.create(world=self.world, name='Zhentarim')
        OrganisationVisibility.objects.create(organisation=harpers)
        OrganisationRelationship.objects.create(
            organisation=harpers,
            related_organisation=zhentarim,
            relationship_type='rival'
        )

        self.as_user(self.player_c1)
        detail = self.client.get(f'/api/v1/organisations/{harpers.pk}/', **self.in_campaign(self.c1))
        listing = self.client.get('/api/v1/organisations/', **self.in_campaign(self.c1))

        self.assertEqual(detail.status_code, status.HTTP_200_OK)
        self.assertEqual(
            [
                (item['related_organisation'], item['relationship_type'])
                for item in detail.data['data']['relationships']
            ],
            [({'id': str(zhentarim.pk), 'name': 'Zhentarim'}, 'rival')]
        )
        self.assertNotIn('relationships', listing.data['data'][0])
