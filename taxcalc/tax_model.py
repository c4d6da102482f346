"""
Irish Take-Home Pay Model
=========================
Income tax, USC and PRSI for a single PAYE earner under Budget 2026 rules.

Based on:
- Income tax standard rate cut-off points 2026
- USC Standard Rates and Thresholds 2026
- PRSI Class A (rate increase from 1 October 2026)

Three components, each a pure function of the person's declared facts:
  1. Income Tax: 20% up to the standard rate cut-off point, 40% above
  2. USC: banded levy, vectorised over one or many incomes
  3. PRSI: flat rate on all income once weekly pay passes the exemption
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date

import numpy as np

from .errors import InvalidArgument
from .periods import safe_div

logger = logging.getLogger(__name__)

MAX_AGE = 122

# ============================================================
# TAX PARAMETERS
# ============================================================

@dataclass(frozen=True)
class IncomeTaxParams:
    """Standard rate cut-off points and the two income tax rates."""
    single_band: float = 44_000.0           # single, no dependent child
    lone_parent_band: float = 48_000.0      # single with a child
    married_band: float = 53_000.0          # married / civil union, one income
    partner_band_cap: float = 35_000.0      # max increase for a second income
    standard_rate: float = 0.20
    higher_rate: float = 0.40


@dataclass(frozen=True)
class USCParams:
    """
    USC rate and band structure.

    thresholds are the upper limits of every band except the last, which is
    open-ended; so there is always one more rate than thresholds.
    """
    thresholds: tuple = (12_012.0, 28_700.0, 70_044.0, 100_000.0)
    rates: tuple = (0.005, 0.02, 0.03, 0.08, 0.08)
    exemption_threshold: float = 13_000.0
    # Self-employed income over €100k
    surcharge_threshold: float = 100_000.0
    self_employed_rate: float = 0.11
    # Over 70 or medical card holders earning €60k or less
    reduced_rate_ceiling: float = 60_000.0
    reduced_rate_age: int = 70
    reduced_rate: float = 0.02

    def __post_init__(self):
        thresholds = tuple(float(t) for t in self.thresholds)
        rates = tuple(float(r) for r in self.rates)
        if len(rates) != len(thresholds) + 1:
            raise InvalidArgument(
                f"USC needs {len(thresholds) + 1} rates for {len(thresholds)} thresholds, "
                f"got {len(rates)}")
        if any(b <= a for a, b in zip(thresholds, thresholds[1:])) or \
                (thresholds and thresholds[0] <= 0):
            raise InvalidArgument(f"USC thresholds must be positive and ascending: {thresholds}")
        if any(r < 0 for r in rates):
            raise InvalidArgument(f"USC rates must be non-negative: {rates}")
        object.__setattr__(self, 'thresholds', thresholds)
        object.__setattr__(self, 'rates', rates)


@dataclass(frozen=True)
class PRSIParams:
    """Class A employee PRSI."""
    weekly_threshold: float = 352.0
    rate: float = 0.042
    increased_rate: float = 0.0435
    rate_change_date: date = field(default=date(2026, 10, 1))

    def rate_on(self, effective_date):
        return self.increased_rate if effective_date >= self.rate_change_date else self.rate


IT_2026 = IncomeTaxParams()
USC_2026 = USCParams()
PRSI_2026 = PRSIParams()


# ============================================================
# PROFILE AND RESULT
# ============================================================

@dataclass(frozen=True)
class TaxProfile:
    """Everything a computation needs to know about the person."""
    gross_yearly_salary: float = 0.0
    is_married: bool = False
    has_child: bool = False
    partner_yearly_income: float = 0.0
    age: int = 0
    is_self_employed: bool = False
    has_medical_card: bool = False

    def validate(self):
        if not self.gross_yearly_salary >= 0:
            raise InvalidArgument(f"Salary must be a non-negative number, got {self.gross_yearly_salary}")
        if not self.partner_yearly_income >= 0:
            raise InvalidArgument(
                f"Partner income must be a non-negative number, got {self.partner_yearly_income}")
        if isinstance(self.age, bool) or not isinstance(self.age, int) \
                or not 0 <= self.age <= MAX_AGE:
            raise InvalidArgument(f"Age must be a whole number between 0 and {MAX_AGE}, got {self.age!r}")


@dataclass(frozen=True)
class TaxResult:
    """Yearly amounts from one computation."""
    gross_salary: float
    income_tax: float
    universal_social_charge: float
    social_insurance: float

    @property
    def total_tax(self):
        return self.income_tax + self.universal_social_charge + self.social_insurance

    @property
    def net_salary(self):
        return self.gross_salary - self.total_tax

    @property
    def effective_rate(self):
        return safe_div(self.total_tax, self.gross_salary)

    @classmethod
    def empty(cls):
        """The result shown before any salary has been entered."""
        return cls(0.0, 0.0, 0.0, 0.0)

    def as_dict(self):
        return {
            'gross': self.gross_salary,
            'income_tax': self.income_tax,
            'usc': self.universal_social_charge,
            'prsi': self.social_insurance,
            'total_tax': self.total_tax,
            'net_pay': self.net_salary,
        }


# ============================================================
# INCOME TAX
# ============================================================

def income_tax_band(profile, params=IT_2026):
    """Standard rate cut-off point for this household."""
    if profile.is_married:
        return params.married_band + min(profile.partner_yearly_income, params.partner_band_cap)
    if profile.has_child:
        return params.lone_parent_band
    return params.single_band


def calc_income_tax(salary, band, params=IT_2026):
    """20% on income up to the band, 40% on the rest."""
    return (min(salary, band) * params.standard_rate
            + max(0.0, salary - band) * params.higher_rate)


# ============================================================
# USC
# ============================================================

def usc_params_for(profile, base=USC_2026):
    """
    Apply the personal USC modifiers to a base rate table.

    Self-employment only counts above €100k, and the reduced rate only at
    €60k or less, so the two never overlap. Between €60k and €100k the
    base table applies whatever the person's age or medical card.

    Returns a new USCParams; base is left alone.
    """
    salary = profile.gross_yearly_salary

    if salary > base.surcharge_threshold and profile.is_self_employed:
        rates = base.rates[:-1] + (base.self_employed_rate,)
        return replace(base, rates=rates)

    if salary <= base.reduced_rate_ceiling and (
            profile.age >= base.reduced_rate_age or profile.has_medical_card):
        rates = base.rates[:2] + (base.reduced_rate,) * (len(base.rates) - 2)
        return replace(base, rates=rates)

    return base


def calc_usc(incomes, params=USC_2026):
    """
    Vectorised USC calculation.

    incomes: a single income or an array of incomes.
    Returns a float for a scalar input, otherwise an array of the same shape.
    """
    incomes = np.asarray(incomes, dtype=float)

    lower = np.array((0.0,) + params.thresholds)
    upper = np.array(params.thresholds + (np.inf,))
    rates = np.array(params.rates)

    # Slice of each income falling inside each band
    in_band = np.clip(incomes[..., np.newaxis] - lower, 0, upper - lower)
    usc = (in_band * rates).sum(axis=-1)

    usc = np.where(incomes > params.exemption_threshold, usc, 0.0)
    if usc.ndim == 0:
        return float(usc)
    return usc


# ============================================================
# PRSI
# ============================================================

def calc_prsi(salary, effective_date, params=PRSI_2026):
    """Nothing below the weekly threshold, the full rate on all income above it."""
    if salary / 52 <= params.weekly_threshold:
        return 0.0
    return salary * params.rate_on(effective_date)


# ============================================================
# TAKE-HOME
# ============================================================

def compute(profile, usc=USC_2026, effective_date=None,
            it_params=IT_2026, prsi_params=PRSI_2026):
    """
    Calculate income tax, USC and PRSI for one person.

    profile: TaxProfile
    usc: base USC table; the personal modifiers are applied on top of it
    effective_date: date deciding the PRSI rate (default: today, read on
        every call)

    Returns: TaxResult
    Raises: InvalidArgument for a negative salary or partner income, or an
        age outside 0..122
    """
    profile.validate()
    if effective_date is None:
        effective_date = date.today()

    salary = float(profile.gross_yearly_salary)

    band = income_tax_band(profile, it_params)
    income_tax = calc_income_tax(salary, band, it_params)
    usc_amount = calc_usc(salary, usc_params_for(profile, usc))
    prsi = calc_prsi(salary, effective_date, prsi_params)

    result = TaxResult(salary, income_tax, usc_amount, prsi)
    logger.debug("Computed %s on %s: band=%.2f it=%.2f usc=%.2f prsi=%.2f",
                 salary, effective_date, band, income_tax, usc_amount, prsi)
    return result


def describe_modifiers(profile, it_params=IT_2026, usc=USC_2026):
    """
    Plain-English notes on which personal circumstances changed the bands.

    Returns: dict with 'income_tax' and 'usc' entries, each a (headline, detail)
    pair; detail is '' when nothing was modified.
    """
    band = income_tax_band(profile, it_params)

    if profile.is_married:
        incomes = "two incomes" if profile.partner_yearly_income > 0 else "one income"
        it_note = f"Married, {incomes}"
    elif profile.has_child:
        it_note = "Lone parent"
    else:
        it_note = f"No modifiers, default cutoff @ €{it_params.single_band:,.0f}"

    it_detail = ""
    if band != it_params.single_band:
        it_detail = (f"Cutoff point up by €{band - it_params.single_band:,.0f} "
                     f"to €{band:,.0f}")

    salary = profile.gross_yearly_salary
    self_employed = salary > usc.surcharge_threshold and profile.is_self_employed
    reduced = salary <= usc.reduced_rate_ceiling and (
        profile.age >= usc.reduced_rate_age or profile.has_medical_card)

    if self_employed:
        usc_note = f"Self-employment over €{usc.surcharge_threshold:,.0f}"
        usc_detail = (f"Rate @ {usc.self_employed_rate:.0%} for all income "
                      f"> €{usc.surcharge_threshold:,.0f}")
    elif reduced:
        over_under = "Over" if profile.age >= usc.reduced_rate_age else "Under"
        with_card = " with medical card" if profile.has_medical_card else ""
        usc_note = f"{over_under} {usc.reduced_rate_age}{with_card}"
        usc_detail = (f"Rate @ {usc.reduced_rate:.0%} for all income "
                      f"above €{usc.thresholds[0]:,.0f}")
    else:
        usc_note = "No modifiers, default USC rates"
        usc_detail = ""

    return {'income_tax': (it_note, it_detail), 'usc': (usc_note, usc_detail)}
