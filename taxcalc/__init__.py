from .errors import (
    ConfigParseError,
    IndexOutOfRange,
    InvalidArgument,
    LedgerFull,
    TaxCalcError,
)
from .expenses import CAPACITY, ExpenseRecord, ImportMode, Ledger
from .periods import Frequency, safe_div
from .report import ReportLine, ReportView, compose
from .session import Session
from .tax_model import (
    IT_2026,
    PRSI_2026,
    USC_2026,
    IncomeTaxParams,
    PRSIParams,
    TaxProfile,
    TaxResult,
    USCParams,
    compute,
)

__all__ = [
    "CAPACITY",
    "IT_2026",
    "PRSI_2026",
    "USC_2026",
    "ConfigParseError",
    "ExpenseRecord",
    "Frequency",
    "ImportMode",
    "IncomeTaxParams",
    "IndexOutOfRange",
    "InvalidArgument",
    "Ledger",
    "LedgerFull",
    "PRSIParams",
    "ReportLine",
    "ReportView",
    "Session",
    "TaxCalcError",
    "TaxProfile",
    "TaxResult",
    "USCParams",
    "compose",
    "compute",
    "safe_div",
]
