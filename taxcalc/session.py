"""In-memory state for one user: the last salary calculation and the expense ledger."""

import logging
from dataclasses import dataclass, field

from .expenses import Ledger
from .report import compose
from .tax_model import USC_2026, TaxProfile, TaxResult, USCParams, compute

logger = logging.getLogger(__name__)


@dataclass
class Session:
    profile: TaxProfile = field(default_factory=TaxProfile)
    usc: USCParams = USC_2026
    result: TaxResult = field(default_factory=TaxResult.empty)
    ledger: Ledger = field(default_factory=Ledger)

    @property
    def has_salary(self):
        return self.result.gross_salary > 0

    @property
    def has_expenses(self):
        return self.ledger.count > 0

    @property
    def is_empty(self):
        return not self.has_salary and not self.has_expenses

    def recalculate(self, profile, effective_date=None):
        """
        Replace the profile and result with a fresh calculation.

        The session is left untouched if the profile is invalid.
        """
        result = compute(profile, self.usc, effective_date)
        self.profile = profile
        self.result = result
        logger.info("Salary updated: gross %.2f, net %.2f", result.gross_salary, result.net_salary)
        return result

    def readiness(self):
        """What is still missing before a full report makes sense."""
        return {'Salary': self.has_salary, 'Expenses': self.has_expenses}

    def report(self, generated_at=None):
        return compose(self.result, self.ledger, generated_at=generated_at)
