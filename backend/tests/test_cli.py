"""Tests for the console readers and a scripted menu session."""
import pytest

from medstock.cli import InventoryShell, main, parse_arguments, read_bounded_int, read_token
from medstock.core.config import settings
from medstock.models.store import MedicineStore


def scripted(*answers):
    """Input function replaying answers in order; fails loudly if the shell asks for more."""
    queue = list(answers)

    def _input(prompt):
        if not queue:
            raise AssertionError(f"Unexpected prompt: {prompt!r}")
        return queue.pop(0)

    return _input


class Recorder:
    def __init__(self):
        self.lines = []

    def __call__(self, text):
        self.lines.extend(str(text).splitlines())

    @property
    def text(self):
        return "\n".join(self.lines)


# ============================================================================
# Readers
# ============================================================================

class TestReadBoundedInt:
    def test_reprompts_on_non_numeric(self):
        out = Recorder()
        value = read_bounded_int("n: ", 1, 10, scripted("abc", "", "7"), out)
        assert value == 7
        assert out.lines.count("Invalid input. Please enter an integer value.") == 2

    def test_clamps_low_with_warning(self):
        out = Recorder()
        assert read_bounded_int("n: ", 1, 12, scripted("-4"), out) == 1
        assert out.lines == ["Value too small. Using 1."]

    def test_clamps_high_with_warning(self):
        out = Recorder()
        assert read_bounded_int("n: ", 1, 12, scripted("99"), out) == 12
        assert out.lines == ["Value too large. Using 12."]

    def test_inverted_bounds_do_not_clamp(self):
        out = Recorder()
        assert read_bounded_int("n: ", 5, 1, scripted("42"), out) == 42
        assert out.lines == []


class TestReadToken:
    def test_takes_first_word(self):
        assert read_token("name: ", 50, scripted("  Dolo650 extra words")) == "Dolo650"

    def test_truncates_to_max_len_minus_one(self):
        assert read_token("name: ", 5, scripted("Paracetamol")) == "Para"

    def test_reprompts_on_blank(self):
        assert read_token("name: ", 50, scripted("   ", "Zinc")) == "Zinc"


# ============================================================================
# Shell session
# ============================================================================

@pytest.fixture
def stores():
    return MedicineStore(200, label="main"), MedicineStore(50, label="branch")


def run_shell(stores, *answers):
    main_store, branch_store = stores
    out = Recorder()
    InventoryShell(main_store, branch_store, scripted(*answers), out).run()
    return out


def test_add_then_low_stock_and_expiry(stores):
    out = run_shell(
        stores,
        "1", "2",
        "101", "A", "HealCo", "120", "11", "2025", "5", "0",
        "102", "B", "CureLabs", "0", "4", "2024", "8", "1",
        "7", "50",
        "8", "2024",
        "14",
    )
    main_store, _ = stores
    assert [m.id for m in main_store] == [101, 102]
    assert main_store.get(101).available
    assert not main_store.get(102).available
    assert main_store.get(102).prescription_required
    assert "Low stock: ID 102 Name B Qty 0" in out.lines
    assert "Expiring on/before 2024: ID 102 Name B Expiry 04/2024" in out.lines
    assert "Low stock: ID 101 Name A Qty 120" not in out.lines
    assert out.lines[-1] == "Exiting program."


def test_duplicate_id_reasks_for_same_slot(stores):
    main_store, _ = stores
    run_shell(
        stores,
        "0",
        "1", "1",
        "101",  # taken by the sample data
        "300", "New", "Co", "5", "1", "2030", "2", "0",
        "14",
    )
    assert len(main_store) == 6
    assert main_store.get(300).name == "New"


def test_update_delete_and_not_found(stores):
    main_store, _ = stores
    out = run_shell(
        stores,
        "0",
        "3", "104", "3", "15",  # quantity update makes Amoxicillin available
        "3", "999",
        "4", "103",
        "4", "103",
        "14",
    )
    assert main_store.get(104).available
    assert main_store.find_by_id(103) is None
    assert "Medicine with id 999 not found." in out.lines
    assert "Medicine id 103 deleted." in out.lines
    assert "Medicine with id 103 not found" in out.lines


def test_sort_search_and_toggle(stores):
    main_store, _ = stores
    out = run_shell(
        stores,
        "0",
        "9",
        "5", "Ibuprofen",
        "5", "Aspirin",
        "11", "101",
        "14",
    )
    assert [m.id for m in main_store] == [104, 103, 102, 101, 105]
    assert "Sorted by expiry date (soonest first)." in out.lines
    assert "Name: Ibuprofen" in out.lines
    assert "Medicine 'Aspirin' not found." in out.lines
    assert "Toggled availability for id 101. Now Not Available" in out.lines


def test_merge_flow(stores):
    main_store, branch_store = stores
    out = run_shell(stores, "12", "0", "13", "12", "14")
    assert "Branch list empty. Use branch sample add first." in out.lines
    assert "Duplicate 'Paracetamol' skipped." in out.lines
    assert "Merged 'Dolo650' into main DB." in out.lines
    dolo = out.lines.index("Merged 'Dolo650' into main DB.")
    paracetamol = out.lines.index("Duplicate 'Paracetamol' skipped.")
    zincovit = out.lines.index("Merged 'Zincovit' into main DB.")
    assert dolo < paracetamol < zincovit
    assert "Merge complete. Main med count: 7" in out.lines
    assert len(branch_store) == 3


def test_empty_store_messages(stores):
    out = run_shell(stores, "2", "3", "9", "10", "14")
    assert "No medicines in database." in out.lines
    assert "No medicines to update." in out.lines
    assert out.lines.count("Not enough medicines to sort.") == 2


def test_main_entry_point_exits_cleanly(monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", scripted("14"))
    assert main(["--sample"]) == 0
    assert "Exiting program." in capsys.readouterr().out


def test_log_level_defaults_to_setting():
    assert parse_arguments([]).log_level == settings.LOG_LEVEL
    assert parse_arguments(["--log-level", "DEBUG"]).log_level == "DEBUG"
