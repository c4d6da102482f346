"""
Expense ledger: a fixed number of (label, yearly value) slots.

Occupied slots are always packed at the front in the order they were
added; blank slots trail. Indices handed to edit/delete are 1-based over
the occupied slots only.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum

import pandas as pd

from .errors import IndexOutOfRange, InvalidArgument, LedgerFull
from .periods import Frequency, safe_div

logger = logging.getLogger(__name__)

CAPACITY = 16


@dataclass(frozen=True)
class ExpenseRecord:
    label: str = ""
    yearly_value: float = 0.0

    @property
    def is_blank(self):
        return not (self.label or "").strip() and self.yearly_value == 0

    @property
    def display_label(self):
        return self.label if (self.label or "").strip() else "(no label)"


BLANK = ExpenseRecord()


class ImportMode(Enum):
    OVERWRITE = "overwrite"
    APPEND = "append"


def parse_expense_line(line):
    """
    Parse one "label,value" line.

    Returns an ExpenseRecord, or None when the line does not have exactly two
    fields or the value is not a finite, non-negative number.
    """
    fields = line.split(",")
    if len(fields) != 2:
        return None
    try:
        value = float(fields[1].strip())
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return ExpenseRecord(fields[0].strip(), value)


class Ledger:
    """Bounded, ordered table of yearly expenses."""

    def __init__(self, capacity=CAPACITY):
        self.capacity = capacity
        self._slots = [BLANK] * capacity

    @classmethod
    def from_records(cls, records, capacity=CAPACITY):
        """Rebuild a ledger from stored slots, blanks included."""
        records = list(records)
        if len(records) > capacity:
            raise InvalidArgument(f"{len(records)} records do not fit in {capacity} slots")
        ledger = cls(capacity)
        for i, record in enumerate(records):
            _check_value(record.yearly_value)
            ledger._slots[i] = record
        ledger.compact()
        return ledger

    # -- read-only views ----------------------------------------------

    @property
    def slots(self):
        """All slots, blanks included, as a tuple."""
        return tuple(self._slots)

    @property
    def entries(self):
        """Occupied slots in display order."""
        return [r for r in self._slots if not r.is_blank]

    @property
    def count(self):
        return sum(1 for r in self._slots if not r.is_blank)

    @property
    def total(self):
        return sum(r.yearly_value for r in self._slots)

    @property
    def is_full(self):
        return self._first_blank() is None

    def __len__(self):
        return self.count

    def __iter__(self):
        return iter(self.entries)

    def __getitem__(self, index):
        """1-based access to the occupied entries."""
        return self._slots[self._slot_for(index)]

    def __eq__(self, other):
        if not isinstance(other, Ledger):
            return NotImplemented
        return self.capacity == other.capacity and self._slots == other._slots

    def __repr__(self):
        return f"Ledger(count={self.count}, total={self.total:.2f})"

    def to_frame(self):
        """Occupied entries with their periodic amounts and share of the total."""
        total = self.total
        rows = [{
            'ID': i,
            'Expense': r.display_label,
            'Yearly': r.yearly_value,
            'Monthly': r.yearly_value / 12,
            'Weekly': r.yearly_value / 52,
            'Share': safe_div(r.yearly_value, total),
        } for i, r in enumerate(self.entries, start=1)]
        return pd.DataFrame(rows, columns=['ID', 'Expense', 'Yearly', 'Monthly', 'Weekly', 'Share'])

    # -- mutations ------------------------------------------------------

    def add(self, label, value, frequency=Frequency.YEARLY):
        """
        Store a new expense in the first blank slot.

        value is converted to yearly using frequency before it is stored.
        Returns the 1-based position of the new entry, or None when the
        record would be blank (empty label and zero value).
        Raises LedgerFull if every slot is taken.
        """
        _check_value(value)
        record = ExpenseRecord(label or "", frequency.to_yearly(float(value)))
        if record.is_blank:
            logger.info("No new expense added: empty label and zero value")
            return None

        slot = self._first_blank()
        if slot is None:
            raise LedgerFull(f"All {self.capacity} expense slots are in use.")
        self._slots[slot] = record
        logger.info("Added expense %r (%.2f/yr) in slot %d", record.display_label,
                    record.yearly_value, slot + 1)
        return slot + 1

    def edit(self, index, label=None, value=None, frequency=Frequency.YEARLY):
        """
        Replace the label and/or value of the index-th entry.

        None keeps the current label or value; a new value is converted to
        yearly using frequency. Returns False, leaving the entry alone, when
        nothing changes or the result would be blank.
        """
        slot = self._slot_for(index)
        current = self._slots[slot]

        new_label = current.label if label is None else label
        if value is None:
            new_value = current.yearly_value
        else:
            _check_value(value)
            new_value = frequency.to_yearly(float(value))

        updated = ExpenseRecord(new_label, new_value)
        if updated == current or updated.is_blank:
            logger.warning("Expense %d was not updated", index)
            return False

        self._slots[slot] = updated
        logger.info("Updated expense %d: %r (%.2f/yr)", index, updated.display_label,
                    updated.yearly_value)
        return True

    def delete(self, index):
        """Remove the index-th entry and close the gap. Returns the removed record."""
        slot = self._slot_for(index)
        removed = self._slots[slot]
        self._slots[slot] = BLANK
        self.compact()
        logger.info("Deleted expense %d: %r", index, removed.display_label)
        return removed

    def wipe(self):
        self._slots = [BLANK] * self.capacity
        self.compact()
        logger.info("Wiped all expenses")

    def import_lines(self, lines, mode=ImportMode.APPEND):
        """
        Load "label,value" lines (yearly values).

        OVERWRITE clears the table and fills slot i from line i; a malformed
        line leaves its slot blank. APPEND puts each valid line in the next
        blank slot. Lines beyond capacity are ignored either way.

        Returns the number of records written.
        """
        written = 0
        skipped = 0

        if mode is ImportMode.OVERWRITE:
            self._slots = [BLANK] * self.capacity
            for slot, line in zip(range(self.capacity), lines):
                record = parse_expense_line(line)
                if record is None or record.is_blank:
                    skipped += 1
                    continue
                self._slots[slot] = record
                written += 1
        else:
            for line in lines:
                slot = self._first_blank()
                if slot is None:
                    break
                record = parse_expense_line(line)
                if record is None or record.is_blank:
                    skipped += 1
                    continue
                self._slots[slot] = record
                written += 1

        self.compact()
        if skipped:
            logger.warning("Skipped %d malformed expense line(s)", skipped)
        logger.info("Imported %d expense(s) (%s)", written, mode.value)
        return written

    def compact(self):
        """Move occupied slots to the front, keeping their order, and blank the rest."""
        occupied = [r for r in self._slots if not r.is_blank]
        self._slots = occupied + [BLANK] * (self.capacity - len(occupied))

    # -- helpers --------------------------------------------------------

    def _first_blank(self):
        for i, record in enumerate(self._slots):
            if record.is_blank:
                return i
        return None

    def _slot_for(self, index):
        count = self.count
        if isinstance(index, bool) or not isinstance(index, int) or not 1 <= index <= count:
            raise IndexOutOfRange(index, count)
        occupied = [i for i, r in enumerate(self._slots) if not r.is_blank]
        return occupied[index - 1]


def _check_value(value):
    if not value >= 0 or not math.isfinite(value):
        raise InvalidArgument(f"Expense amount must be a non-negative number, got {value}")
