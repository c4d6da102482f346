"""Exceptions raised by the TaxCalc core."""


class TaxCalcError(Exception):
    """Base class for all TaxCalc failures."""


class InvalidArgument(TaxCalcError, ValueError):
    """A profile field or ledger value is outside its domain."""


class IndexOutOfRange(TaxCalcError, IndexError):
    """A ledger index is not in 1..count."""

    def __init__(self, index, count):
        self.index = index
        self.count = count
        if count == 0:
            msg = "Table is empty."
        else:
            msg = f"Please enter a number between 1 and {count} (got {index})."
        super().__init__(msg)


class LedgerFull(TaxCalcError):
    """No blank slot is left for a new expense."""


class ConfigParseError(TaxCalcError, ValueError):
    """A saved configuration does not have the expected structure."""
