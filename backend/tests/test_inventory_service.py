"""Tests for read-only inventory queries and reminders."""
from medstock.services import inventory_service
from medstock.services.inventory_service import RecordView

from conftest import make_medicine


def test_search_exact_name_hit_and_miss(scenario_store):
    assert inventory_service.search_exact_name(scenario_store, "B").id == 102
    assert inventory_service.search_exact_name(scenario_store, "b") is None
    assert inventory_service.search_exact_name(scenario_store, "C") is None


def test_expiry_wildcards(main_store):
    main_store.insert(make_medicine(1, "A", month=1, year=2024))
    main_store.insert(make_medicine(2, "B", month=7, year=2024))
    main_store.insert(make_medicine(3, "C", month=7, year=2025))

    assert inventory_service.search_by_expiry(main_store, 0, 0).ids() == [1, 2, 3]
    assert inventory_service.search_by_expiry(main_store).ids() == [1, 2, 3]
    assert inventory_service.search_by_expiry(main_store, 0, 2024).ids() == [1, 2]
    assert inventory_service.search_by_expiry(main_store, 7, 0).ids() == [2, 3]
    assert inventory_service.search_by_expiry(main_store, 7, 2025).ids() == [3]
    assert inventory_service.search_by_expiry(main_store, 3, 2025).ids() == []


def test_low_stock_threshold_is_inclusive(main_store):
    main_store.insert(make_medicine(1, "A", quantity=0))
    main_store.insert(make_medicine(2, "B", quantity=20))
    main_store.insert(make_medicine(3, "C", quantity=21))

    assert inventory_service.low_stock(main_store, 20).ids() == [1, 2]
    assert inventory_service.low_stock(main_store, 0).ids() == [1]


def test_expiring_on_or_before_ignores_month(main_store):
    main_store.insert(make_medicine(1, "A", month=12, year=2024))
    main_store.insert(make_medicine(2, "B", month=1, year=2025))
    main_store.insert(make_medicine(3, "C", month=8, year=2023))

    assert inventory_service.expiring_on_or_before(main_store, 2024).ids() == [1, 3]
    assert inventory_service.expiring_on_or_before(main_store, 2022).ids() == []


def test_views_are_restartable_and_follow_store_changes(main_store):
    main_store.insert(make_medicine(1, "A", quantity=1))
    view = inventory_service.low_stock(main_store, 5)
    assert isinstance(view, RecordView)

    assert view.ids() == [1]
    assert view.ids() == [1]

    main_store.insert(make_medicine(2, "B", quantity=2))
    assert [m.name for m in view] == ["A", "B"]
    assert bool(view)
    assert not inventory_service.low_stock(main_store, 0)


def test_queries_do_not_mutate(scenario_store):
    before = [m.model_dump() for m in scenario_store]
    list(inventory_service.search_by_expiry(scenario_store, 0, 0))
    list(inventory_service.low_stock(scenario_store, 1000))
    list(inventory_service.expiring_on_or_before(scenario_store, 9999))
    assert [m.model_dump() for m in scenario_store] == before


def test_end_to_end_scenario(scenario_store):
    assert inventory_service.low_stock(scenario_store, 50).ids() == [102]
    assert inventory_service.expiring_on_or_before(scenario_store, 2024).ids() == [102]

    scenario_store.sort_by_expiry_soonest()
    assert [m.id for m in scenario_store] == [102, 101]
    # views follow the current sort order
    assert inventory_service.search_by_expiry(scenario_store).ids() == [102, 101]
