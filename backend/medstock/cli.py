"""
Console shell for the medicine stock tracker.

Reads bounded integers and single-word tokens from the terminal, runs one
store operation per menu choice and prints the outcome. Failed operations
are reported and the menu comes back; nothing here exits on a domain error.
"""
import argparse
import logging
import sys
from typing import Callable, Optional

from medstock.core.config import settings
from medstock.core.exceptions import InventoryError
from medstock.display import format_expiry, render_record, render_table
from medstock.models.medicine import Medicine
from medstock.models.store import MedicineStore, UpdateField
from medstock.services import inventory_service
from medstock.services.merge_service import DUPLICATE, MERGED, merge_into
from medstock.services.seed_service import branch_add_sample, populate_sample_data

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]

EXIT_CHOICE = 14

MENU = """
Main Menu
0. Populate sample data (quick test)
1. Add medicines
2. Display all medicines
3. Update medicine by id
4. Delete medicine by id
5. Search by name
6. Search by expiry month/year
7. Low-stock reminder
8. Expiry reminder (by year)
9. Sort by expiry date (soonest)
10. Sort by name (A-Z)
11. Toggle availability
12. Merge branch data into main
13. Add branch sample data
14. Exit"""


def read_bounded_int(
    prompt: str,
    minimum: int,
    maximum: int,
    input_fn: Optional[InputFn] = None,
    output: Optional[OutputFn] = None,
) -> int:
    """
    Prompt until an integer is entered, then clamp it into [minimum, maximum].

    Clamping prints a warning instead of rejecting the value. When
    minimum > maximum no clamping happens at all.
    """
    input_fn = input_fn or input
    output = output or print
    while True:
        raw = input_fn(prompt)
        try:
            value = int(raw.strip())
        except ValueError:
            output("Invalid input. Please enter an integer value.")
            continue
        if minimum <= maximum:
            if value < minimum:
                output(f"Value too small. Using {minimum}.")
                value = minimum
            if value > maximum:
                output(f"Value too large. Using {maximum}.")
                value = maximum
        return value


def read_token(
    prompt: str,
    max_len: int,
    input_fn: Optional[InputFn] = None,
) -> str:
    """First whitespace-separated word of the reply, cut to max_len - 1 characters."""
    input_fn = input_fn or input
    while True:
        parts = input_fn(prompt).split()
        if parts:
            token = parts[0]
            return token[: max_len - 1] if max_len > 1 else token


class InventoryShell:
    """Menu loop over a main store and a branch store."""

    def __init__(
        self,
        main: MedicineStore,
        branch: MedicineStore,
        input_fn: Optional[InputFn] = None,
        output: Optional[OutputFn] = None,
    ):
        self.main = main
        self.branch = branch
        self.input_fn = input_fn or input
        self.output = output or print
        self._actions = {
            0: self.populate_sample,
            1: self.add_medicines,
            2: self.display_all,
            3: self.update_by_id,
            4: self.delete_by_id,
            5: self.search_by_name,
            6: self.search_by_expiry,
            7: self.low_stock_reminder,
            8: self.expiry_reminder,
            9: self.sort_by_expiry,
            10: self.sort_by_name,
            11: self.toggle_availability,
            12: self.merge_branch,
            13: self.branch_sample,
        }

    # input helpers bound to this shell's streams
    def _int(self, prompt: str, minimum: int, maximum: int) -> int:
        return read_bounded_int(prompt, minimum, maximum, self.input_fn, self.output)

    def _token(self, prompt: str, max_len: int) -> str:
        return read_token(prompt, max_len, self.input_fn)

    def _id(self, prompt: str) -> int:
        return self._int(prompt, 1, settings.MAX_MEDICINE_ID)

    def run(self) -> None:
        self.output("Smart Medicine Reminder & Stock Tracker")
        self.output("First, you may populate sample data (option 0) for quick testing.")
        while True:
            self.output(MENU)
            choice = self._int("Enter choice: ", 0, EXIT_CHOICE)
            if choice == EXIT_CHOICE:
                self.output("Exiting program.")
                return
            try:
                self._actions[choice]()
            except InventoryError as e:
                logger.debug(f"Menu choice {choice} failed: {e.message}")
                self.output(e.message)

    # ------------------------------------------------------------------
    # Menu actions
    # ------------------------------------------------------------------

    def populate_sample(self) -> None:
        added = populate_sample_data(self.main)
        if added:
            self.output(f"Added {added} sample medicines (IDs: 101..105).")
        else:
            self.output("Sample data already present; not adding.")

    def add_medicines(self) -> None:
        if self.main.is_full:
            self.output("Medicine database full; cannot add more.")
            return
        count = self._int("How many medicines to add? ", 1, self.main.free_slots)
        added = 0
        while added < count:
            if self.main.is_full:
                self.output("Medicine database full; cannot add more.")
                break
            medicine_id = self._id("Enter medicine id (integer): ")
            if self.main.find_by_id(medicine_id) is not None:
                self.output("ID already exists. Skipping this entry.")
                continue
            medicine = Medicine.new(
                id=medicine_id,
                name=self._token("Enter medicine name (no spaces): ", settings.MAX_NAME_LEN),
                company=self._token("Enter company name (no spaces): ", settings.MAX_COMPANY_LEN),
                quantity=self._int("Enter quantity in stock: ", 0, settings.MAX_QUANTITY),
                expiry_month=self._int("Enter expiry month (1-12): ", 1, 12),
                expiry_year=self._int(
                    "Enter expiry year (e.g., 2025): ", settings.MIN_EXPIRY_YEAR, settings.MAX_EXPIRY_YEAR
                ),
                price=self._int("Enter price per unit (integer): ", 0, settings.MAX_PRICE),
                prescription_required=bool(self._int("Is this prescription-only? 1=Yes 0=No: ", 0, 1)),
            )
            self.main.insert(medicine)
            added += 1
            self.output(f"Medicine added. Current total medicines: {len(self.main)}")

    def display_all(self) -> None:
        self.output(render_table(self.main))

    def update_by_id(self) -> None:
        if len(self.main) == 0:
            self.output("No medicines to update.")
            return
        medicine_id = self._id("Enter medicine id to update: ")
        medicine = self.main.get(medicine_id)
        if medicine is None:
            self.output(f"Medicine with id {medicine_id} not found.")
            return
        self.output(f"Updating medicine ID {medicine.id} ({medicine.name})")
        choice = self._int(
            "Which field? 1:Name 2:Company 3:Quantity 4:Expiry 5:Price 6:Toggle Prescription 7:Back : ",
            1, 7,
        )
        if choice == 1:
            self.main.update(medicine_id, UpdateField.NAME, self._token("Enter new name: ", settings.MAX_NAME_LEN))
        elif choice == 2:
            self.main.update(
                medicine_id, UpdateField.COMPANY, self._token("Enter new company: ", settings.MAX_COMPANY_LEN)
            )
        elif choice == 3:
            self.main.update(
                medicine_id, UpdateField.QUANTITY, self._int("Enter new quantity: ", 0, settings.MAX_QUANTITY)
            )
        elif choice == 4:
            month = self._int("Enter new expiry month (1-12): ", 1, 12)
            year = self._int("Enter new expiry year: ", settings.MIN_EXPIRY_YEAR, settings.MAX_EXPIRY_YEAR)
            self.main.update(medicine_id, UpdateField.EXPIRY, (month, year))
        elif choice == 5:
            self.main.update(medicine_id, UpdateField.PRICE, self._int("Enter new price: ", 0, settings.MAX_PRICE))
        elif choice == 6:
            self.main.update(medicine_id, UpdateField.TOGGLE_PRESCRIPTION)
            self.output("Prescription flag toggled.")
        else:
            self.output("Back to menu.")
        self.output(f"Update complete for id {medicine_id}.")

    def delete_by_id(self) -> None:
        if len(self.main) == 0:
            self.output("No medicines to delete.")
            return
        medicine_id = self._id("Enter medicine id to delete: ")
        self.main.delete(medicine_id)
        self.output(f"Medicine id {medicine_id} deleted.")

    def search_by_name(self) -> None:
        if len(self.main) == 0:
            self.output("Database empty.")
            return
        name = self._token("Enter exact name to search: ", settings.MAX_NAME_LEN)
        medicine = inventory_service.search_exact_name(self.main, name)
        if medicine is None:
            self.output(f"Medicine '{name}' not found.")
            return
        self.output(render_record(medicine))

    def search_by_expiry(self) -> None:
        if len(self.main) == 0:
            self.output("Database empty.")
            return
        month = self._int("Enter expiry month (1-12) or 0 to skip month: ", 0, 12)
        year = self._int("Enter expiry year (e.g., 2024) or 0 to skip year: ", 0, settings.MAX_EXPIRY_YEAR)
        found = False
        for medicine in inventory_service.search_by_expiry(self.main, month, year):
            self.output(render_record(medicine))
            found = True
        if not found:
            self.output("No medicines match the expiry filter.")

    def low_stock_reminder(self) -> None:
        if len(self.main) == 0:
            self.output("Database empty.")
            return
        threshold = self._int(
            f"Enter low-stock threshold (e.g., {settings.DEFAULT_LOW_STOCK_THRESHOLD}): ",
            0, settings.MAX_QUANTITY,
        )
        found = False
        for m in inventory_service.low_stock(self.main, threshold):
            self.output(f"Low stock: ID {m.id} Name {m.name} Qty {m.quantity}")
            found = True
        if not found:
            self.output(f"No medicines with quantity <= {threshold}")

    def expiry_reminder(self) -> None:
        year = self._int(
            "Enter year to check expiry on/before: ", settings.MIN_EXPIRY_YEAR, settings.MAX_EXPIRY_YEAR
        )
        if len(self.main) == 0:
            self.output("Database empty.")
            return
        found = False
        for m in inventory_service.expiring_on_or_before(self.main, year):
            self.output(f"Expiring on/before {year}: ID {m.id} Name {m.name} Expiry {format_expiry(m)}")
            found = True
        if not found:
            self.output(f"No medicines expiring on/before {year}")

    def sort_by_expiry(self) -> None:
        if len(self.main) < 2:
            self.output("Not enough medicines to sort.")
            return
        self.main.sort_by_expiry_soonest()
        self.output("Sorted by expiry date (soonest first).")

    def sort_by_name(self) -> None:
        if len(self.main) < 2:
            self.output("Not enough medicines to sort.")
            return
        self.main.sort_by_name_ascending()
        self.output("Sorted by name (A-Z).")

    def toggle_availability(self) -> None:
        if len(self.main) == 0:
            self.output("No medicines.")
            return
        medicine_id = self._id("Enter medicine id to toggle availability: ")
        available = self.main.toggle_availability(medicine_id)
        state = "Available" if available else "Not Available"
        self.output(f"Toggled availability for id {medicine_id}. Now {state}")

    def merge_branch(self) -> None:
        if len(self.branch) == 0:
            self.output("Branch list empty. Use branch sample add first.")
            return
        report = merge_into(self.main, self.branch)
        for name, outcome in report.outcomes:
            if outcome == DUPLICATE:
                self.output(f"Duplicate '{name}' skipped.")
            elif outcome == MERGED:
                self.output(f"Merged '{name}' into main DB.")
        if report.skipped_capacity:
            self.output(f"Main DB full; {report.skipped_capacity_count} medicine(s) not merged.")
        self.output(f"Merge complete. Main med count: {len(self.main)}")

    def branch_sample(self) -> None:
        added = branch_add_sample(self.branch)
        self.output(f"Branch sample data added ({added} items).")


def parse_arguments(argv=None):
    """Parse command line arguments for the console shell"""
    parser = argparse.ArgumentParser(description="Smart Medicine Reminder & Stock Tracker")
    parser.add_argument("--sample", action="store_true",
                        help="Load the sample medicines into the main store before showing the menu")
    parser.add_argument("--branch-sample", action="store_true",
                        help="Load the branch sample medicines before showing the menu")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL,
                        help="Logging level for diagnostics and audit lines (default: LOG_LEVEL setting)")
    return parser.parse_args(argv)


def main(argv: Optional[list] = None) -> int:
    args = parse_arguments(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    main_store = MedicineStore(settings.MAX_MEDICINES, label="main")
    branch_store = MedicineStore(settings.MAX_BRANCH, label="branch")
    if args.sample:
        populate_sample_data(main_store)
    if args.branch_sample:
        branch_add_sample(branch_store)

    try:
        InventoryShell(main_store, branch_store).run()
    except (EOFError, KeyboardInterrupt):
        print("\nExiting program.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
