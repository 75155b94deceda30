from datetime import datetime

import pytest

from score_engine.catalog import ActivityCatalog, search
from score_engine.errors import InvalidConfiguration
from score_engine.ledger import EntryLedger
from score_engine.preferences import PreferencesService
from score_engine.schema import Activity, Preferences
from score_engine.store import InMemoryStore


def test_upsert_assigns_next_sort_order():
    catalog = ActivityCatalog(InMemoryStore())
    first = catalog.upsert(Activity(name="Walk"))
    second = catalog.upsert(Activity(name="Read"))
    assert (first.sort_order, second.sort_order) == (0, 1)
    assert [a.name for a in catalog.list()] == ["Walk", "Read"]


def test_upsert_updates_in_place_and_validates():
    catalog = ActivityCatalog(InMemoryStore())
    walk = catalog.upsert(Activity(name="Walk"))
    walk.points_per_unit = 3
    catalog.upsert(walk)
    assert catalog.get(walk.id).points_per_unit == 3

    with pytest.raises(InvalidConfiguration):
        catalog.upsert(Activity(name="Bad", daily_cap=-1))
    with pytest.raises(InvalidConfiguration):
        catalog.upsert(Activity(name="Bad", unit_type="litres"))


def test_list_hides_archived_and_reorder():
    catalog = ActivityCatalog(InMemoryStore())
    walk = catalog.upsert(Activity(name="Walk"))
    read = catalog.upsert(Activity(name="Read"))
    old = catalog.upsert(Activity(name="Old", is_archived=True))

    catalog.reorder([read.id, walk.id])

    assert [a.name for a in catalog.list()] == ["Read", "Walk"]
    assert old.id in {a.id for a in catalog.list(include_archived=True)}


def test_delete_cascades_to_entries():
    store = InMemoryStore()
    catalog = ActivityCatalog(store)
    ledger = EntryLedger(store)
    walk = catalog.upsert(Activity(name="Walk"))
    read = catalog.upsert(Activity(name="Read"))
    ledger.append(walk.id, datetime(2024, 1, 10, 9), 1)
    ledger.append(walk.id, datetime(2024, 1, 10, 10), 1)
    ledger.append(read.id, datetime(2024, 1, 10, 11), 1)

    assert catalog.delete(walk.id) == 2
    assert catalog.get(walk.id) is None
    assert [e.activity_id for e in ledger.query()] == [read.id]


def test_reset_all_data_preserves_preferences():
    store = InMemoryStore()
    prefs = PreferencesService(store)
    prefs.update_preferences(Preferences(day_cutoff_hour=9, haptics_on=False, sounds_on=False, accent_color_hex="#123456"))
    catalog = ActivityCatalog(store)
    walk = catalog.upsert(Activity(name="Walk"))
    EntryLedger(store).append(walk.id, datetime(2024, 1, 10, 9), 1)

    catalog.reset_all_data()

    assert catalog.list(include_archived=True) == []
    assert store.query_entries() == []
    assert prefs.get() == Preferences(day_cutoff_hour=9, haptics_on=False, sounds_on=False, accent_color_hex="#123456")


def test_update_preferences_rejects_bad_cutoff():
    store = InMemoryStore()
    prefs = PreferencesService(store)
    with pytest.raises(InvalidConfiguration):
        prefs.update_preferences(Preferences(day_cutoff_hour=24))
    assert prefs.cutoff_hour() == 4


def test_search_matches_name_category_and_emoji():
    water = Activity(name="Drink Water", emoji="💧", category="Wellness")
    journal = Activity(name="Evening Journal", emoji="📓", category="Reflection")
    yoga = Activity(name="Morning Yoga", emoji="🧘", category="Mindfulness")
    cafe = Activity(name="Café visit", category="Social")
    catalog = [water, journal, yoga, cafe]

    assert search(catalog, "  ") == catalog
    assert search(catalog, "JOURNAL") == [journal]
    assert search(catalog, "mindful") == [yoga]
    assert search(catalog, "🧘") == [yoga]
    assert search(catalog, "cafe") == [cafe]
