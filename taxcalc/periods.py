"""
Pay periods and the safe division used by every percentage column.
"""

from enum import Enum


class Frequency(Enum):
    """How often an amount is paid. The value is the number of periods per year."""
    YEARLY = 1
    MONTHLY = 12
    BIWEEKLY = 26
    WEEKLY = 52

    @property
    def label(self):
        return {
            Frequency.YEARLY: "Yearly",
            Frequency.MONTHLY: "Monthly",
            Frequency.BIWEEKLY: "Bi-weekly",
            Frequency.WEEKLY: "Weekly",
        }[self]

    def to_yearly(self, amount):
        return amount * self.value

    def from_yearly(self, yearly):
        return yearly / self.value


def safe_div(numerator, denominator):
    """Divide, returning 0 when the denominator is 0."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


def breakdown(yearly, frequencies=(Frequency.YEARLY, Frequency.MONTHLY,
                                   Frequency.BIWEEKLY, Frequency.WEEKLY)):
    """Split a yearly amount into per-period amounts keyed by label."""
    return {f.label: f.from_yearly(yearly) for f in frequencies}
