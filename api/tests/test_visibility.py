"""
Tests for visibility entry logic.

Tests cover:
- Grant conversion and union semantics of the matcher
- Default visibility priority order
- Entry normalization, dedupe and the synchronizer (idempotent full replace)
- Queryset composition for listings (required matching entry, filtered prefetch)
"""
import uuid

from django.test import SimpleTestCase, TestCase

from api.context import VisibilityContext
from api.providers import VisibilityEntryStore
from api.visibility import (
    CampaignGrant,
    PlayerGrant,
    PublicGrant,
    filter_visible,
    grants_for_entry,
    is_visible,
    normalize_visibility_entries,
    resolve_default_visibility,
    sync_visibility_entries,
    with_visibility,
)
from api.tests.factories import make_campaign, make_user, make_world
from lore.models import Location, LocationVisibility


C1 = str(uuid.uuid4())
C2 = str(uuid.uuid4())


def player_context(campaign_id=None, player_id=1, **kwargs):
    return VisibilityContext(campaign_id=campaign_id, player_id=player_id, **kwargs)


class GrantTestCase(SimpleTestCase):

    def test_public_entry(self):
        self.assertEqual(grants_for_entry({'campaign_id': None, 'player_id': None}), [PublicGrant()])

    def test_entry_with_both_fields_yields_both_grants(self):
        grants = grants_for_entry({'campaign_id': C1, 'player_id': 5})

        self.assertEqual(grants, [CampaignGrant(C1), PlayerGrant('5')])

    def test_grant_matching(self):
        context = player_context(campaign_id=C1, player_id=5)

        self.assertTrue(PublicGrant().matches(context))
        self.assertTrue(CampaignGrant(C1).matches(context))
        self.assertFalse(CampaignGrant(C2).matches(context))
        self.assertTrue(PlayerGrant('5').matches(context))
        self.assertFalse(PlayerGrant('6').matches(context))

    def test_campaign_grant_never_matches_absent_campaign(self):
        self.assertFalse(CampaignGrant(C1).matches(player_context(campaign_id=None)))


class IsVisibleTestCase(SimpleTestCase):

    def test_no_context_means_no_access(self):
        self.assertFalse(is_visible([{'campaign_id': None, 'player_id': None}], None))

    def test_bypass_sees_entities_without_entries(self):
        self.assertTrue(is_visible([], VisibilityContext(bypass_visibility=True)))

    def test_no_entries_is_invisible(self):
        self.assertFalse(is_visible([], player_context(campaign_id=C1)))

    def test_union_one_matching_entry_is_enough(self):
        entries = [
            {'campaign_id': C2, 'player_id': None},
            {'campaign_id': C1, 'player_id': None},
        ]

        self.assertTrue(is_visible(entries, player_context(campaign_id=C1)))

    def test_non_matching_entry_never_revokes(self):
        entries = [
            {'campaign_id': None, 'player_id': None},
            {'campaign_id': C2, 'player_id': 99},
        ]

        self.assertTrue(is_visible(entries, player_context(campaign_id=C1)))

    def test_player_entry_matches_only_that_player(self):
        entries = [{'campaign_id': None, 'player_id': 5}]

        self.assertTrue(is_visible(entries, player_context(player_id=5)))
        self.assertFalse(is_visible(entries, player_context(player_id=6)))


class DefaultVisibilityTestCase(SimpleTestCase):

    def test_world_admin_beats_campaign(self):
        context = VisibilityContext(is_world_admin=True, campaign_id=C1, player_id=1)

        self.assertEqual(
            resolve_default_visibility(context),
            [{'campaign_id': None, 'player_id': None}]
        )

    def test_active_campaign_beats_managed_campaigns(self):
        context = VisibilityContext(is_dm=True, campaign_id=C1, managed_campaign_ids=(C1, C2))

        self.assertEqual(resolve_default_visibility(context), [{'campaign_id': C1, 'player_id': None}])

    def test_managed_campaigns_one_entry_each(self):
        context = VisibilityContext(is_dm=True, managed_campaign_ids=(C1, C2), player_id=1)

        self.assertEqual(
            resolve_default_visibility(context),
            [{'campaign_id': C1, 'player_id': None}, {'campaign_id': C2, 'player_id': None}]
        )

    def test_player_fallback(self):
        self.assertEqual(
            resolve_default_visibility(VisibilityContext(player_id=4)),
            [{'campaign_id': None, 'player_id': 4}]
        )

    def test_nothing_to_go_on(self):
        self.assertEqual(resolve_default_visibility(VisibilityContext()), [])
        self.assertEqual(resolve_default_visibility(None), [])


class NormalizeEntriesTestCase(SimpleTestCase):

    def test_accepts_every_key_style(self):
        entries = normalize_visibility_entries([
            {'campaignId': C1},
            {'campaign_id': C2, 'player_id': 3},
            {'playerId': 4},
            {},
        ])

        self.assertEqual(entries, [
            {'campaign_id': C1, 'player_id': None},
            {'campaign_id': C2, 'player_id': 3},
            {'campaign_id': None, 'player_id': 4},
            {'campaign_id': None, 'player_id': None},
        ])

    def test_duplicates_keep_first_occurrence(self):
        entries = normalize_visibility_entries([
            {'campaignId': C1},
            {'campaign_id': uuid.UUID(C1)},
            {'player_id': None},
            {},
        ])

        self.assertEqual(entries, [
            {'campaign_id': C1, 'player_id': None},
            {'campaign_id': None, 'player_id': None},
        ])

    def test_none_is_empty(self):
        self.assertEqual(normalize_visibility_entries(None), [])


class SynchronizerTestCase(TestCase):

    def setUp(self):
        self.world = make_world()
        self.c1 = make_campaign(self.world, 'Curse of Strahd')
        self.c2 = make_campaign(self.world, 'Tomb of Annihilation')
        self.player = make_user('player')
        self.location = Location.objects.create(world=self.world, name='Barovia')
        self.store = VisibilityEntryStore(LocationVisibility, 'location')

    def pairs(self):
        return sorted(
            (str(entry.campaign_id), entry.player_id)
            for entry in LocationVisibility.objects.filter(location=self.location)
        )

    def test_duplicate_entries_persist_once(self):
        sync_visibility_entries(
            self.store, self.location.pk,
            [{'campaignId': str(self.c1.pk)}, {'campaignId': str(self.c1.pk)}]
        )

        self.assertEqual(LocationVisibility.objects.filter(location=self.location).count(), 1)

    def test_sync_is_idempotent(self):
        entries = [{'campaignId': str(self.c1.pk)}, {'playerId': self.player.pk}]

        sync_visibility_entries(self.store, self.location.pk, entries)
        first = self.pairs()
        sync_visibility_entries(self.store, self.location.pk, entries)

        self.assertEqual(self.pairs(), first)
        self.assertEqual(len(first), 2)

    def test_sync_fully_replaces(self):
        sync_visibility_entries(self.store, self.location.pk, [{'campaignId': str(self.c1.pk)}])
        sync_visibility_entries(self.store, self.location.pk, [{'campaignId': str(self.c2.pk)}])

        self.assertEqual(self.pairs(), [(str(self.c2.pk), None)])

    def test_empty_list_clears_entries(self):
        sync_visibility_entries(self.store, self.location.pk, [{}])
        sync_visibility_entries(self.store, self.location.pk, [])

        self.assertEqual(self.pairs(), [])

    def test_find_by_owner_with_predicate(self):
        from django.db.models import Q

        sync_visibility_entries(self.store, self.location.pk, [{}, {'campaignId': str(self.c1.pk)}])

        public = self.store.find_by_owner(self.location.pk, Q(campaign__isnull=True))

        self.assertEqual(public.count(), 1)
        self.assertEqual(self.store.find_by_owner(self.location.pk).count(), 2)


class QuerysetCompositionTestCase(TestCase):

    def setUp(self):
        self.world = make_world()
        self.c1 = make_campaign(self.world, 'C1')
        self.c2 = make_campaign(self.world, 'C2')
        self.store = VisibilityEntryStore(LocationVisibility, 'location')

        self.public = Location.objects.create(world=self.world, name='Public')
        self.store.swap(self.public.pk, [{'campaign_id': None, 'player_id': None}])

        self.only_c2 = Location.objects.create(world=self.world, name='Only C2')
        self.store.swap(self.only_c2.pk, [{'campaign_id': self.c2.pk, 'player_id': None}])

        self.mixed = Location.objects.create(world=self.world, name='Mixed')
        self.store.swap(self.mixed.pk, [
            {'campaign_id': self.c1.pk, 'player_id': None},
            {'campaign_id': self.c2.pk, 'player_id': None},
        ])

        self.no_entries = Location.objects.create(world=self.world, name='Hidden')

    def test_filter_requires_a_matching_entry(self):
        context = VisibilityContext(campaign_id=str(self.c1.pk), player_id=1)

        names = set(filter_visible(Location.objects.all(), context, LocationVisibility, 'location')
                    .values_list('name', flat=True))

        self.assertEqual(names, {'Public', 'Mixed'})

    def test_prefetch_only_exposes_matching_entries(self):
        context = VisibilityContext(campaign_id=str(self.c1.pk), player_id=1)

        location = with_visibility(
            Location.objects.all(), context, LocationVisibility, 'location'
        ).get(pk=self.mixed.pk)

        self.assertEqual([entry.campaign_id for entry in location.visibility.all()], [self.c1.pk])

    def test_bypass_sees_everything_with_all_entries(self):
        context = VisibilityContext(bypass_visibility=True)

        locations = with_visibility(Location.objects.all(), context, LocationVisibility, 'location')

        self.assertEqual(locations.count(), 4)
        self.assertEqual(len(locations.get(pk=self.mixed.pk).visibility.all()), 2)

    def test_optional_filter_keeps_unmatched_rows(self):
        context = VisibilityContext(campaign_id=str(self.c1.pk), player_id=1)

        location = with_visibility(
            Location.objects.all(), context, LocationVisibility, 'location', required=False
        ).get(pk=self.only_c2.pk)

        self.assertEqual(list(location.visibility.all()), [])
        self.assertFalse(is_visible(location.visibility.all(), context))
