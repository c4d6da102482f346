"""
Financial report: salary, taxes and expenses side by side.

A ReportView is built once from a TaxResult and a Ledger and then only
rendered: as a DataFrame, as CSV (lossless) or as a box-drawn text table.
"""

import io
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

import pandas as pd

from .periods import safe_div

logger = logging.getLogger(__name__)

TITLE = "FINANCIAL REPORT"
COLUMNS = ['Yearly', 'Monthly', 'Weekly', 'Pctge']

# Cell widths of the text table
LABEL_WIDTH = 33
AMOUNT_WIDTH = 13
PCT_WIDTH = 7


class LineKind(Enum):
    HEADER = "header"       # gross salary, net salary, overall balance
    ITEM = "item"           # one tax or one expense
    TOTAL = "total"         # total taxes, total expenses


@dataclass(frozen=True)
class ReportLine:
    name: str
    yearly: float
    monthly: float
    weekly: float
    fraction: float
    kind: LineKind = LineKind.ITEM

    @classmethod
    def derive(cls, name, yearly, salary, kind=LineKind.ITEM):
        return cls(name, yearly, yearly / 12, yearly / 52, safe_div(yearly, salary), kind)


@dataclass(frozen=True)
class ReportView:
    lines: List[ReportLine]
    salary: float
    generated_at: Optional[datetime] = field(default=None, compare=False)

    @property
    def overall_balance(self):
        return self.lines[-1].yearly

    def to_frame(self):
        frame = pd.DataFrame(
            [(line.yearly, line.monthly, line.weekly, line.fraction) for line in self.lines],
            index=pd.Index([line.name for line in self.lines], name=TITLE, dtype=object),
            columns=COLUMNS,
            dtype=float,
        )
        return frame


# ============================================================
# COMPOSITION
# ============================================================

def compose(result, ledger, salary=None, generated_at=None):
    """
    Build the report lines.

    result: TaxResult
    ledger: Ledger; only occupied entries are listed
    salary: base for the percentage column (default: result.gross_salary)
    generated_at: timestamp shown on the text table (default: now)
    """
    if salary is None:
        salary = result.gross_salary
    if generated_at is None:
        generated_at = datetime.now()

    expense_total = ledger.total
    balance = result.net_salary - expense_total

    lines = [
        ReportLine.derive("Gross salary", result.gross_salary, salary, LineKind.HEADER),
        ReportLine.derive("Income Tax", result.income_tax, salary),
        ReportLine.derive("USC", result.universal_social_charge, salary),
        ReportLine.derive("PRSI", result.social_insurance, salary),
        ReportLine.derive("Total taxes", result.total_tax, salary, LineKind.TOTAL),
        ReportLine.derive("Net Salary", result.net_salary, salary, LineKind.HEADER),
    ]
    lines += [ReportLine.derive(r.label, r.yearly_value, salary) for r in ledger.entries]
    lines += [
        ReportLine.derive("Total Expenses", expense_total, salary, LineKind.TOTAL),
        ReportLine.derive("Overall balance", balance, salary, LineKind.HEADER),
    ]
    logger.debug("Composed report: %d expense line(s), balance %.2f",
                 ledger.count, balance)
    return ReportView(lines, salary, generated_at)


# ============================================================
# CSV
# ============================================================

def to_csv(view):
    """Machine-readable export; fractions are raw, not percent-formatted."""
    return view.to_frame().to_csv(lineterminator="\n")


def parse_csv(text):
    """
    Read a CSV export back into a ReportView.

    The line kinds follow from the fixed layout: six salary lines, the
    expenses, then total expenses and the overall balance.
    """
    frame = pd.read_csv(io.StringIO(text), index_col=0, keep_default_na=False,
                        float_precision="round_trip")
    if list(frame.columns) != COLUMNS or len(frame) < 8:
        raise ValueError("Not a financial report export")

    n = len(frame)
    kinds = [LineKind.ITEM] * n
    for i in (0, 5, n - 1):
        kinds[i] = LineKind.HEADER
    for i in (4, n - 2):
        kinds[i] = LineKind.TOTAL

    lines = [
        ReportLine(str(name), float(row.Yearly), float(row.Monthly), float(row.Weekly),
                   float(row.Pctge), kind)
        for (name, row), kind in zip(frame.iterrows(), kinds)
    ]
    return ReportView(lines, lines[0].yearly)


# ============================================================
# TEXT TABLE
# ============================================================

def format_currency(value):
    sign = "-" if value < 0 else ""
    return f"{sign}€{abs(value):,.2f}"


def format_percent(fraction):
    return f"{fraction:.1%}"


def _rule(left, fill, joint, right):
    cells = [LABEL_WIDTH, AMOUNT_WIDTH, AMOUNT_WIDTH, AMOUNT_WIDTH, PCT_WIDTH]
    return left + fill + (fill + joint).join(fill * w for w in cells) + fill + right + "\n"


def _row(line):
    if line.kind is LineKind.ITEM:
        label = "¦ " + line.name[:LABEL_WIDTH - 2].ljust(LABEL_WIDTH - 2)
    elif line.kind is LineKind.HEADER:
        label = line.name.upper()[:LABEL_WIDTH].ljust(LABEL_WIDTH)
    else:
        label = line.name[:LABEL_WIDTH].ljust(LABEL_WIDTH)

    amounts = "".join(f"│{format_currency(v):>{AMOUNT_WIDTH}} "
                      for v in (line.yearly, line.monthly, line.weekly))
    return f"║ {label} {amounts}│{format_percent(line.fraction):>{PCT_WIDTH}} ║\n"


def to_table(view):
    """Human-readable export, framed with box-drawing characters."""
    top = _rule("╔", "═", "╤", "╗")
    mid = _rule("╟", "─", "┼", "╢")
    bottom = _rule("╚", "═", "╧", "╝")

    stamp = ""
    if view.generated_at is not None:
        stamp = f"{view.generated_at.day} {view.generated_at:%b @ %H:%M}"
    width = len(top) - 1
    half = (width - 1) // 2
    title = f"{TITLE:<{half}} {stamp:>{width - half - 1}}\n"

    heading = (f"║ {'Item':<{LABEL_WIDTH}} │ "
               + " │ ".join(f"{c:>{AMOUNT_WIDTH - 1}}" for c in COLUMNS[:3])
               + f" │ {COLUMNS[3]:>{PCT_WIDTH - 1}} ║\n")

    out = [title, top, heading]
    last = len(view.lines) - 1
    for i, line in enumerate(view.lines):
        if line.kind is LineKind.HEADER:
            out.append(mid)
            out.append(_row(line))
            if i != last:
                out.append(mid)
        else:
            out.append(_row(line))
    out.append(bottom)
    return "".join(out)
