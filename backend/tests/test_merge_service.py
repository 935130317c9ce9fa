"""Tests for merging a branch store into the main store."""
import sys
import threading

from medstock.core.exceptions import CapacityExceededError
from medstock.models.store import MedicineStore, UpdateField
from medstock.services.merge_service import CAPACITY, DUPLICATE, MERGED, MergeReport, merge_into

from conftest import make_medicine


def test_duplicate_names_are_skipped(main_store, branch_store):
    main_store.insert(make_medicine(1, "X"))
    branch_store.insert(make_medicine(11, "X"))
    branch_store.insert(make_medicine(12, "Y"))

    report = merge_into(main_store, branch_store)

    assert isinstance(report, MergeReport)
    assert [m.name for m in main_store] == ["X", "Y"]
    assert report.merged == ["Y"]
    assert report.skipped_duplicate == ["X"]
    assert report.skipped_capacity == []
    assert main_store.get(1).id == 1  # original X untouched


def test_merge_stops_at_capacity():
    main = MedicineStore(3, label="main")
    branch = MedicineStore(5, label="branch")
    main.insert(make_medicine(1, "A"))
    main.insert(make_medicine(2, "B"))
    branch.insert(make_medicine(11, "C"))
    branch.insert(make_medicine(12, "D"))

    report = merge_into(main, branch)

    assert report.merged_count == 1
    assert report.merged == ["C"]
    assert report.skipped_capacity == ["D"]
    assert report.skipped_capacity_count == 1
    assert len(main) == 3


def test_duplicates_before_the_full_point_still_count_as_duplicates():
    main = MedicineStore(2, label="main")
    branch = MedicineStore(5, label="branch")
    main.insert(make_medicine(1, "A"))
    branch.insert(make_medicine(11, "A"))
    branch.insert(make_medicine(12, "B"))
    branch.insert(make_medicine(13, "C"))
    branch.insert(make_medicine(14, "A"))

    report = merge_into(main, branch)

    assert report.skipped_duplicate == ["A"]
    assert report.merged == ["B"]
    assert report.skipped_capacity == ["C", "A"]


def test_branch_is_never_modified(main_store, branch_store):
    branch_store.insert(make_medicine(11, "Y"))
    branch_store.insert(make_medicine(12, "Z"))
    before = [m.model_dump() for m in branch_store]

    merge_into(main_store, branch_store)

    assert [m.model_dump() for m in branch_store] == before
    assert len(branch_store) == 2


def test_merged_records_are_independent_copies(main_store, branch_store):
    branch_store.insert(make_medicine(11, "Y", quantity=4))
    merge_into(main_store, branch_store)

    main_store.update(11, UpdateField.QUANTITY, 0)

    assert main_store.get(11) is not branch_store.get(11)
    assert branch_store.get(11).quantity == 4
    assert branch_store.get(11).available


def test_names_repeated_within_branch_merge_once(main_store, branch_store):
    branch_store.insert(make_medicine(11, "Y"))
    branch_store.insert(make_medicine(12, "Y"))

    report = merge_into(main_store, branch_store)

    assert report.merged == ["Y"]
    assert report.skipped_duplicate == ["Y"]
    assert main_store.find_by_id(12) is None


def test_id_clash_is_skipped_as_duplicate(main_store, branch_store):
    main_store.insert(make_medicine(5, "A"))
    branch_store.insert(make_medicine(5, "B"))

    report = merge_into(main_store, branch_store)

    assert report.merged == []
    assert report.skipped_duplicate == ["B"]
    assert len(main_store) == 1


def test_second_merge_is_all_duplicates(main_store, branch_store):
    branch_store.insert(make_medicine(11, "Y"))
    merge_into(main_store, branch_store)
    report = merge_into(main_store, branch_store)
    assert report.merged == []
    assert report.skipped_duplicate == ["Y"]


def test_outcomes_follow_branch_order():
    main = MedicineStore(3, label="main")
    branch = MedicineStore(5, label="branch")
    main.insert(make_medicine(1, "A"))
    branch.insert(make_medicine(11, "B"))
    branch.insert(make_medicine(12, "A"))
    branch.insert(make_medicine(13, "C"))
    branch.insert(make_medicine(14, "D"))
    branch.insert(make_medicine(15, "A"))

    report = merge_into(main, branch)

    assert report.outcomes == [
        ("B", MERGED),
        ("A", DUPLICATE),
        ("C", MERGED),
        ("D", CAPACITY),
        ("A", CAPACITY),
    ]


def test_merge_alongside_concurrent_main_inserts():
    main = MedicineStore(30, label="main")
    branch = MedicineStore(50, label="branch")
    for i in range(1, 21):
        branch.insert(make_medicine(1000 + i, f"B{i}"))
    before = [m.model_dump() for m in branch]
    reports = []

    def add_local(start):
        for i in range(start, 26, 4):
            try:
                main.insert(make_medicine(i, f"L{i}"))
            except CapacityExceededError:
                pass

    previous = sys.getswitchinterval()
    sys.setswitchinterval(1e-6)
    try:
        threads = [threading.Thread(target=add_local, args=(n,)) for n in range(1, 5)]
        threads.append(threading.Thread(target=lambda: reports.append(merge_into(main, branch))))
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=30)
    finally:
        sys.setswitchinterval(previous)

    assert not any(t.is_alive() for t in threads)
    ids = [m.id for m in main]
    names = [m.name for m in main]
    assert len(ids) == len(set(ids))
    assert len(names) == len(set(names))
    assert len(main) <= main.capacity

    report = reports[0]
    assert report.skipped_duplicate == []
    assert report.merged_count + report.skipped_capacity_count == 20
    assert [name for name, _ in report.outcomes] == [f"B{i}" for i in range(1, 21)]
    assert all(name in names for name in report.merged)
    assert [m.model_dump() for m in branch] == before
