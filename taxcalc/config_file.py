"""
Saved configuration: eight positional, comma-separated lines.

    1  TaxCalc Config @ <timestamp>
    2  salYear,incomeTax,USC,PRSI,totalTax,salNet
    3  isMarried,hasChild,partnerIncome
    4  USC thresholds
    5  USC rates
    6  isSelfEmployed,age,hasMedCard
    7  expense labels   (one per slot)
    8  expense values   (one per slot)

Numbers are written with repr() so they read back bit for bit.
"""

import logging
import math
from datetime import datetime

from .errors import ConfigParseError, InvalidArgument
from .expenses import CAPACITY, ExpenseRecord, Ledger
from .session import Session
from .tax_model import TaxProfile, TaxResult, USCParams

logger = logging.getLogger(__name__)

HEADER = "TaxCalc Config @ "
N_LINES = 8

# Field separator plus every character str.splitlines() breaks on
_LABEL_UNSAFE = str.maketrans(dict.fromkeys(
    ",\n\r\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029", " "))


def _join(values):
    return ",".join(repr(float(v)) for v in values)


def _clean_label(label):
    cleaned = (label or "").translate(_LABEL_UNSAFE)
    if cleaned != (label or ""):
        logger.warning("Expense label %r saved as %r", label, cleaned)
    return cleaned


def encode(session, now=None):
    """Render a session as config file text."""
    if now is None:
        now = datetime.now()
    result, profile, usc = session.result, session.profile, session.usc
    slots = session.ledger.slots

    lines = [
        f"{HEADER}{now:%Y-%m-%d %H:%M:%S}",
        _join([result.gross_salary, result.income_tax, result.universal_social_charge,
               result.social_insurance, result.total_tax, result.net_salary]),
        f"{profile.is_married},{profile.has_child},{float(profile.partner_yearly_income)!r}",
        _join(usc.thresholds),
        _join(usc.rates),
        f"{profile.is_self_employed},{profile.age},{profile.has_medical_card}",
        ",".join(_clean_label(r.label) for r in slots),
        _join(r.yearly_value for r in slots),
    ]
    return "\n".join(lines) + "\n"


# ============================================================
# DECODING
# ============================================================

def _fields(lines, number, expected=None):
    try:
        raw = lines[number - 1]
    except IndexError:
        raise ConfigParseError(f"Line {number} is missing") from None
    fields = raw.split(",")
    if expected is not None and len(fields) != expected:
        raise ConfigParseError(f"Line {number}: expected {expected} fields, found {len(fields)}")
    return fields


def _float(text, number):
    try:
        value = float(text.strip())
    except ValueError:
        raise ConfigParseError(f"Line {number}: {text!r} is not a number") from None
    if not math.isfinite(value):
        raise ConfigParseError(f"Line {number}: {text!r} is not a finite number")
    return value


def _int(text, number):
    try:
        return int(text.strip())
    except ValueError:
        raise ConfigParseError(f"Line {number}: {text!r} is not a whole number") from None


def _bool(text, number):
    word = text.strip().lower()
    if word not in ("true", "false"):
        raise ConfigParseError(f"Line {number}: {text!r} is not True or False")
    return word == "true"


def decode(text):
    """
    Parse config file text into a new Session.

    Raises ConfigParseError on any structural or value problem; nothing is
    returned unless the whole file is valid.
    """
    lines = text.splitlines()
    if len(lines) < N_LINES:
        raise ConfigParseError(f"Expected {N_LINES} lines, found {len(lines)}")

    gross, income_tax, usc_amount, prsi, total_tax, net = (
        _float(f, 2) for f in _fields(lines, 2, 6))
    married, child, partner = _fields(lines, 3, 3)
    thresholds = [_float(f, 4) for f in _fields(lines, 4)]
    rates = [_float(f, 5) for f in _fields(lines, 5)]
    self_employed, age, med_card = _fields(lines, 6, 3)
    labels = _fields(lines, 7, CAPACITY)
    values = [_float(f, 8) for f in _fields(lines, 8, CAPACITY)]

    result = TaxResult(gross, income_tax, usc_amount, prsi)
    if not math.isclose(result.total_tax, total_tax, abs_tol=0.005) or \
            not math.isclose(result.net_salary, net, abs_tol=0.005):
        raise ConfigParseError("Line 2: totals do not add up")

    try:
        profile = TaxProfile(
            gross_yearly_salary=gross,
            is_married=_bool(married, 3),
            has_child=_bool(child, 3),
            partner_yearly_income=_float(partner, 3),
            age=_int(age, 6),
            is_self_employed=_bool(self_employed, 6),
            has_medical_card=_bool(med_card, 6),
        )
        profile.validate()
        usc = USCParams(thresholds=tuple(thresholds), rates=tuple(rates))
        ledger = Ledger.from_records(ExpenseRecord(label, value) for label, value in zip(labels, values))
    except InvalidArgument as exc:
        raise ConfigParseError(str(exc)) from exc

    logger.info("Loaded config: gross %.2f, %d expense(s)", gross, ledger.count)
    return Session(profile=profile, usc=usc, result=result, ledger=ledger)
