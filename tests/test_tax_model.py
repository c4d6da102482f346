"""
Unit tests for the take-home pay model.

Expected figures are worked by hand from the Budget 2026 bands.
"""

from dataclasses import replace
from datetime import date

import numpy as np
import pytest

from taxcalc.errors import InvalidArgument
from taxcalc.tax_model import (
    IT_2026,
    PRSI_2026,
    USC_2026,
    TaxProfile,
    TaxResult,
    USCParams,
    calc_income_tax,
    calc_prsi,
    calc_usc,
    compute,
    describe_modifiers,
    income_tax_band,
    usc_params_for,
)

BEFORE_SWITCH = date(2026, 9, 30)
SWITCH_DAY = date(2026, 10, 1)


@pytest.fixture
def single_50k():
    return TaxProfile(gross_yearly_salary=50_000.0, age=30)


class TestIncomeTax:

    def test_band_single(self, single_50k):
        assert income_tax_band(single_50k) == 44_000

    def test_band_lone_parent(self):
        assert income_tax_band(TaxProfile(has_child=True)) == 48_000

    def test_band_married_adds_partner_income(self):
        profile = TaxProfile(is_married=True, partner_yearly_income=10_000)
        assert income_tax_band(profile) == 63_000

    def test_band_married_partner_capped(self):
        profile = TaxProfile(is_married=True, partner_yearly_income=80_000)
        assert income_tax_band(profile) == 88_000

    def test_child_ignored_when_married(self):
        profile = TaxProfile(is_married=True, has_child=True)
        assert income_tax_band(profile) == 53_000

    @pytest.mark.parametrize("band", [44_000, 48_000, 53_000, 88_000])
    def test_exactly_at_band_is_all_standard_rate(self, band):
        assert calc_income_tax(band, band) == pytest.approx(band * 0.20)

    def test_above_band(self):
        assert calc_income_tax(50_000, 44_000) == pytest.approx(11_200)

    def test_monotonic_in_salary(self):
        salaries = np.linspace(0, 200_000, 2_001)
        taxes = [calc_income_tax(s, 44_000) for s in salaries]
        assert all(b >= a for a, b in zip(taxes, taxes[1:]))


class TestUSC:

    @pytest.mark.parametrize("salary", [0, 5_000, 12_012, 12_999.99, 13_000])
    def test_exempt_up_to_13000(self, salary):
        assert calc_usc(salary) == 0

    def test_just_over_exemption_pays_from_first_euro(self):
        assert calc_usc(13_001) == pytest.approx(12_012 * 0.005 + (13_001 - 12_012) * 0.02)

    def test_standard_50k(self):
        assert calc_usc(50_000) == pytest.approx(1_032.82)

    def test_above_top_threshold(self):
        expected = (12_012 * 0.005 + 16_688 * 0.02 + 41_344 * 0.03
                    + 29_956 * 0.08 + 50_000 * 0.08)
        assert calc_usc(150_000) == pytest.approx(expected)

    @pytest.mark.parametrize("threshold", [12_012, 28_700, 70_044, 100_000])
    def test_continuous_at_thresholds(self, threshold):
        params = replace(USC_2026, exemption_threshold=0.0)
        eps = 0.01
        below = calc_usc(threshold - eps, params)
        at = calc_usc(threshold, params)
        above = calc_usc(threshold + eps, params)
        assert at - below <= eps * max(params.rates) + 1e-9
        assert above - at <= eps * max(params.rates) + 1e-9

    def test_vectorised_matches_scalar(self):
        incomes = np.array([0, 13_000, 20_000, 50_000, 99_999, 250_000], dtype=float)
        result = calc_usc(incomes)
        assert isinstance(result, np.ndarray)
        np.testing.assert_allclose(result, [calc_usc(x) for x in incomes])

    def test_self_employed_surcharge_over_100k(self):
        profile = TaxProfile(gross_yearly_salary=150_000, age=40, is_self_employed=True)
        params = usc_params_for(profile)
        assert params.rates == (0.005, 0.02, 0.03, 0.08, 0.11)
        assert calc_usc(150_000, params) == pytest.approx(9_530.62)

    def test_self_employed_at_or_below_100k_pays_standard(self):
        profile = TaxProfile(gross_yearly_salary=90_000, age=40, is_self_employed=True)
        assert usc_params_for(profile) == USC_2026

    @pytest.mark.parametrize("age, card", [(70, False), (85, False), (40, True)])
    def test_reduced_rate(self, age, card):
        profile = TaxProfile(gross_yearly_salary=50_000, age=age, has_medical_card=card)
        params = usc_params_for(profile)
        assert params.rates == (0.005, 0.02, 0.02, 0.02, 0.02)
        assert calc_usc(50_000, params) == pytest.approx(60.06 + 333.76 + 21_300 * 0.02)

    def test_no_modifier_between_60k_and_100k(self):
        profile = TaxProfile(gross_yearly_salary=65_000, age=75, has_medical_card=True,
                             is_self_employed=True)
        assert usc_params_for(profile) == USC_2026

    def test_self_employment_wins_over_age(self):
        profile = TaxProfile(gross_yearly_salary=120_000, age=80, is_self_employed=True)
        assert usc_params_for(profile).rates[-1] == 0.11

    def test_modifiers_do_not_touch_base(self):
        usc_params_for(TaxProfile(gross_yearly_salary=30_000, age=90))
        assert USC_2026.rates == (0.005, 0.02, 0.03, 0.08, 0.08)

    def test_params_reject_wrong_rate_count(self):
        with pytest.raises(InvalidArgument):
            USCParams(rates=(0.005, 0.02))

    def test_params_reject_descending_thresholds(self):
        with pytest.raises(InvalidArgument):
            USCParams(thresholds=(28_700, 12_012, 70_044, 100_000))


class TestPRSI:

    def test_exempt_at_weekly_threshold(self):
        assert calc_prsi(352 * 52, BEFORE_SWITCH) == 0

    def test_charged_on_whole_income_above_threshold(self):
        salary = 352 * 52 + 1
        assert calc_prsi(salary, BEFORE_SWITCH) == pytest.approx(salary * 0.042)

    def test_rate_switches_on_1_october_2026(self):
        assert calc_prsi(50_000, BEFORE_SWITCH) == pytest.approx(2_100)
        assert calc_prsi(50_000, SWITCH_DAY) == pytest.approx(2_175)
        assert calc_prsi(50_000, date(2027, 3, 1)) == pytest.approx(2_175)

    def test_rate_on(self):
        assert PRSI_2026.rate_on(BEFORE_SWITCH) == 0.042
        assert PRSI_2026.rate_on(SWITCH_DAY) == 0.0435


class TestCompute:

    def test_single_50k_scenario(self, single_50k):
        result = compute(single_50k, effective_date=BEFORE_SWITCH)

        assert result.income_tax == pytest.approx(11_200)
        assert result.universal_social_charge == pytest.approx(1_032.82)
        assert result.social_insurance == pytest.approx(2_100)
        assert result.total_tax == pytest.approx(14_332.82)
        assert result.net_salary == pytest.approx(35_667.18)

    def test_totals_add_up(self):
        profile = TaxProfile(gross_yearly_salary=123_456, is_married=True,
                             partner_yearly_income=20_000, age=50, is_self_employed=True)
        r = compute(profile, effective_date=SWITCH_DAY)
        assert r.total_tax == r.income_tax + r.universal_social_charge + r.social_insurance
        assert r.net_salary == r.gross_salary - r.total_tax

    def test_zero_salary(self):
        r = compute(TaxProfile(), effective_date=BEFORE_SWITCH)
        assert r == TaxResult.empty()
        assert r.effective_rate == 0

    def test_defaults_to_today(self, single_50k):
        r = compute(single_50k)
        assert r.social_insurance == pytest.approx(50_000 * PRSI_2026.rate_on(date.today()))

    @pytest.mark.parametrize("kwargs", [
        {'gross_yearly_salary': -1},
        {'gross_yearly_salary': float('nan')},
        {'partner_yearly_income': -0.01},
        {'age': -1},
        {'age': 123},
        {'age': 30.5},
    ])
    def test_invalid_profile(self, kwargs):
        with pytest.raises(InvalidArgument):
            compute(TaxProfile(**kwargs), effective_date=BEFORE_SWITCH)

    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            compute(TaxProfile(age=200))


class TestDescribeModifiers:

    def test_single_no_modifiers(self, single_50k):
        notes = describe_modifiers(single_50k)
        assert notes['income_tax'] == ("No modifiers, default cutoff @ €44,000", "")
        assert notes['usc'] == ("No modifiers, default USC rates", "")

    def test_married_two_incomes(self):
        notes = describe_modifiers(TaxProfile(gross_yearly_salary=70_000, is_married=True,
                                              partner_yearly_income=20_000))
        assert notes['income_tax'] == ("Married, two incomes",
                                       "Cutoff point up by €29,000 to €73,000")

    def test_over_70_with_card(self):
        notes = describe_modifiers(TaxProfile(gross_yearly_salary=30_000, age=72,
                                              has_medical_card=True))
        assert notes['usc'][0] == "Over 70 with medical card"
        assert "2%" in notes['usc'][1]

    def test_self_employed(self):
        notes = describe_modifiers(TaxProfile(gross_yearly_salary=200_000, age=40,
                                              is_self_employed=True))
        assert notes['usc'] == ("Self-employment over €100,000",
                                "Rate @ 11% for all income > €100,000")

    def test_it_params_are_budget_2026(self):
        assert (IT_2026.single_band, IT_2026.lone_parent_band, IT_2026.married_band,
                IT_2026.partner_band_cap) == (44_000, 48_000, 53_000, 35_000)
