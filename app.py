#!/usr/bin/env python3
"""
TaxCalc: Interactive Interface
==============================
Streamlit app wrapping the taxcalc engine: take-home pay, expenses and a
combined report you can download.

Run with:
    streamlit run app.py
"""

import os
from dataclasses import replace
from datetime import date, datetime

import numpy as np
import pandas as pd
import streamlit as st

from taxcalc import (
    CAPACITY, IT_2026, PRSI_2026, Frequency, ImportMode, Session, TaxCalcError,
    TaxProfile, compute,
)
from taxcalc import report, storage
from taxcalc.config_file import decode, encode
from taxcalc.logging_config import setup_logger
from taxcalc.periods import breakdown, safe_div
from taxcalc.tax_model import calc_usc, describe_modifiers

logger = setup_logger("taxcalc", level=os.getenv("TAXCALC_LOG_LEVEL"))

FREQUENCIES = {f.label: f for f in Frequency}
EXPENSES_PATH = "expenses.csv"
REPORTS_DIR = "reports"

# ── Page config ──────────────────────────────────────────────

st.set_page_config(
    page_title="TaxCalc",
    page_icon="🧾",
    layout="wide",
)

if "session" not in st.session_state:
    st.session_state.session = Session()
session = st.session_state.session
today = date.today()


def euro(x):
    return report.format_currency(x)


# ── Sidebar: current parameters ──────────────────────────────

with st.sidebar:
    st.markdown("## Budget 2026 Rates")

    st.markdown("**Income Tax cut-off (20% → 40%)**")
    it_df = pd.DataFrame({
        'Status': ['Single', 'Lone parent', 'Married (1 income)', 'Married (2 incomes)'],
        'Cut-off': [euro(IT_2026.single_band), euro(IT_2026.lone_parent_band),
                    euro(IT_2026.married_band),
                    f"up to {euro(IT_2026.married_band + IT_2026.partner_band_cap)}"],
    })
    st.dataframe(it_df, hide_index=True, use_container_width=True)

    st.markdown("**USC Bands**")
    usc = session.usc
    lower = (0.0,) + usc.thresholds
    usc_df = pd.DataFrame({
        'Rate': [f"{r:.1%}" for r in usc.rates],
        'From': [euro(x) for x in lower],
        'To': [euro(x) for x in usc.thresholds] + ['-'],
    })
    st.dataframe(usc_df, hide_index=True, use_container_width=True)

    st.markdown(f"**PRSI:** {PRSI_2026.rate_on(today):.2%} on all income "
                f"over {euro(PRSI_2026.weekly_threshold)}/week")

    st.divider()
    st.caption("For educational purposes only. Tax calculations may not cover all "
               "scenarios; always consult revenue.ie or a tax professional.")


# ── Main content ─────────────────────────────────────────────

st.title("TaxCalc")
st.markdown("Work out your Irish take-home pay, track your recurring expenses "
            "and see what is left over.")

tab_salary, tab_expenses, tab_report, tab_bands, tab_config = st.tabs([
    "Take-Home Calculator",
    "Expenses",
    "Report",
    "Tax Bands",
    "Configuration",
])

# ==============================================================
# TAB 1: TAKE-HOME CALCULATOR
# ==============================================================

with tab_salary:
    st.header("Salary Calculation")

    with st.form("salary_form"):
        c1, c2 = st.columns(2)
        with c1:
            amount = st.number_input("Gross salary (€)", min_value=0.0,
                                     value=float(session.profile.gross_yearly_salary),
                                     step=1_000.0)
            freq_label = st.selectbox("Frequency", ['Yearly', 'Monthly', 'Bi-weekly'])
            married = st.checkbox("Married or in a civil union",
                                  value=session.profile.is_married)
            child = st.checkbox("At least one child (if not married)",
                                value=session.profile.has_child)
            partner = st.number_input("Partner's annual gross income (€, if married)",
                                      min_value=0.0,
                                      value=float(session.profile.partner_yearly_income),
                                      step=1_000.0)
        with c2:
            age = st.number_input("Age", min_value=0, max_value=122,
                                  value=int(session.profile.age))
            med_card = st.checkbox("Medical card holder", value=session.profile.has_medical_card)
            self_emp = st.checkbox("Self-employed", value=session.profile.is_self_employed)
            st.caption("Age and medical card only matter at €60,000 or less; "
                       "self-employment only above €100,000.")
        submitted = st.form_submit_button("Calculate")

    if submitted:
        salary_year = FREQUENCIES[freq_label].to_yearly(amount)
        profile = TaxProfile(
            gross_yearly_salary=salary_year,
            is_married=married,
            has_child=child and not married,
            partner_yearly_income=partner if married else 0.0,
            age=int(age),
            is_self_employed=self_emp,
            has_medical_card=med_card,
        )
        try:
            session.recalculate(profile)
            st.success("Salary updated!")
        except TaxCalcError as exc:
            st.error(str(exc))

    if not session.has_salary:
        st.info("No tax report generated. Enter your salary above.")
    else:
        res = session.result
        m1, m2, m3, m4 = st.columns(4)
        with m1:
            st.metric("Net Take-Home", euro(res.net_salary))
        with m2:
            st.metric("Monthly Net", euro(res.net_salary / 12))
        with m3:
            st.metric("Total Tax", euro(res.total_tax))
        with m4:
            st.metric("Effective Rate", f"{res.effective_rate:.1%}")

        rows = []
        for label, value in [('Gross salary', res.gross_salary),
                             ('Income Tax', res.income_tax),
                             ('USC', res.universal_social_charge),
                             ('PRSI', res.social_insurance),
                             ('Total', res.total_tax),
                             ('Net salary', res.net_salary)]:
            row = {'Item': label}
            row.update({k: euro(v) for k, v in breakdown(value).items()})
            row['Pctge'] = f"{safe_div(value, res.gross_salary):.1%}"
            rows.append(row)
        st.dataframe(pd.DataFrame(rows), hide_index=True, use_container_width=True)

        st.subheader("Modifiers")
        notes = describe_modifiers(session.profile, usc=session.usc)
        for key in ('income_tax', 'usc'):
            headline, detail = notes[key]
            st.markdown(f"**{headline}**" + (f": {detail}" if detail else ""))

        # Effective rate chart across income levels
        st.divider()
        st.subheader("Effective Tax Rate by Income")
        incomes = np.arange(10_000, 200_001, 5_000)
        rate_rows = []
        for inc in incomes:
            th = compute(replace(session.profile, gross_yearly_salary=float(inc)),
                         session.usc, today)
            rate_rows.append({'Income': int(inc), 'Effective rate (%)': th.effective_rate * 100})
        base_usc = calc_usc(incomes, session.usc)
        chart_df = pd.DataFrame(rate_rows).set_index('Income')
        chart_df['USC at base rates (%)'] = base_usc / incomes * 100
        st.line_chart(chart_df)


# ==============================================================
# TAB 2: EXPENSES
# ==============================================================

with tab_expenses:
    st.header("Expenses Manager")
    ledger = session.ledger

    exp_df = ledger.to_frame()
    if exp_df.empty:
        st.info("No expenses yet.")
    else:
        display_df = exp_df.copy()
        for col in ('Yearly', 'Monthly', 'Weekly'):
            display_df[col] = display_df[col].apply(euro)
        display_df['Share'] = display_df['Share'].apply(lambda x: f"{x:.1%}")
        st.dataframe(display_df, hide_index=True, use_container_width=True)
        st.markdown(f"**Total:** {euro(ledger.total)} / year "
                    f"({ledger.count} of {CAPACITY} slots used)")

    col_add, col_edit = st.columns(2)

    with col_add:
        st.subheader("Add")
        with st.form("add_expense", clear_on_submit=True):
            new_label = st.text_input("Label")
            new_value = st.number_input("Amount (€)", min_value=0.0, step=10.0)
            new_freq = st.selectbox("Timeframe", list(FREQUENCIES), key="add_freq")
            if st.form_submit_button("Add expense"):
                try:
                    slot = ledger.add(new_label, new_value, FREQUENCIES[new_freq])
                    if slot is None:
                        st.warning("No new expense added.")
                    else:
                        st.success(f"New expense added: {new_label or '(no label)'}")
                except TaxCalcError as exc:
                    st.error(str(exc))

        st.subheader("Import list")
        upload = st.file_uploader("CSV file with label,value lines (yearly)", type=["csv", "txt"])
        method = st.radio("Method", ["Append to existing records", "Overwrite existing records"])
        mode = ImportMode.OVERWRITE if method.startswith("Overwrite") else ImportMode.APPEND
        if upload is not None and st.button("Import"):
            lines = upload.getvalue().decode("utf-8-sig").splitlines()
            n = ledger.import_lines(lines, mode)
            st.success(f"Import successful! {n} expense(s) loaded.")

        import_path = st.text_input("...or a file on disk", value=EXPENSES_PATH)
        if st.button("Import from file"):
            try:
                n = storage.import_expenses(import_path, ledger, mode)
                st.success(f"Import successful! {n} expense(s) loaded.")
            except FileNotFoundError as exc:
                st.error(str(exc))

    with col_edit:
        if ledger.count == 0:
            st.caption("Table is empty, nothing to edit or delete.")
        else:
            st.subheader("Edit")
            with st.form("edit_expense"):
                idx = st.number_input("ID", min_value=1, max_value=ledger.count, step=1)
                keep_label = st.checkbox("Keep label", value=True)
                upd_label = st.text_input("New label")
                keep_value = st.checkbox("Keep amount", value=True)
                upd_value = st.number_input("New amount (€)", min_value=0.0, step=10.0)
                upd_freq = st.selectbox("Timeframe", list(FREQUENCIES), key="edit_freq")
                if st.form_submit_button("Update"):
                    try:
                        changed = ledger.edit(
                            int(idx),
                            None if keep_label else upd_label,
                            None if keep_value else upd_value,
                            FREQUENCIES[upd_freq],
                        )
                        if changed:
                            st.success("Expense updated.")
                        else:
                            st.warning("Item was not updated.")
                    except TaxCalcError as exc:
                        st.error(str(exc))

            st.subheader("Delete")
            del_idx = st.number_input("ID to delete", min_value=1, max_value=ledger.count,
                                      step=1, key="del_idx")
            if st.button("Delete expense"):
                try:
                    removed = ledger.delete(int(del_idx))
                    st.success(f"Expense deleted: {removed.display_label}")
                except TaxCalcError as exc:
                    st.error(str(exc))

            confirm = st.text_input("Type YES to wipe every expense")
            if st.button("Wipe list") and confirm == "YES":
                ledger.wipe()
                st.success("All expenses deleted.")


# ==============================================================
# TAB 3: REPORT
# ==============================================================

with tab_report:
    generated = datetime.now()
    st.header(f"Personal tax and expenses report: {generated.day} {generated:%b @ %H:%M}")

    ready = session.readiness()
    if not all(ready.values()):
        st.warning("Not enough information")
        for item, done in ready.items():
            st.markdown(f"{'✅' if done else '❌'} {item}")
        st.caption("Please complete the missing task(s) before accessing the report.")
    else:
        view = session.report(generated)
        frame = view.to_frame()
        shown = frame.copy()
        for col in ('Yearly', 'Monthly', 'Weekly'):
            shown[col] = shown[col].apply(euro)
        shown['Pctge'] = shown['Pctge'].apply(report.format_percent)
        st.dataframe(shown, use_container_width=True)

        balance = view.overall_balance
        if balance < 0:
            st.error(f"You spend {euro(-balance)} a year more than you take home.")
        else:
            st.success(f"{euro(balance)} a year ({euro(balance / 12)} a month) left over.")

        d1, d2, d3 = st.columns(3)
        with d1:
            st.download_button("Download CSV", report.to_csv(view),
                               file_name="report.csv", mime="text/csv")
        with d2:
            st.download_button("Download TXT", report.to_table(view),
                               file_name="report.txt", mime="text/plain")
        with d3:
            if st.button("Save both to disk"):
                csv_path = os.path.join(REPORTS_DIR, "report.csv")
                txt_path = os.path.join(REPORTS_DIR, "report.txt")
                storage.save_report_csv(csv_path, view)
                storage.save_report_txt(txt_path, view)
                st.success(f"Saved to {os.path.abspath(REPORTS_DIR)}")


# ==============================================================
# TAB 4: TAX BANDS
# ==============================================================

with tab_bands:
    st.header("Tax rates in Ireland (Budget 2026)")

    st.subheader("Income Tax")
    st.markdown(f"{IT_2026.standard_rate:.0%} up to the cut-off point, "
                f"{IT_2026.higher_rate:.0%} above it. Cut-offs: single "
                f"{euro(IT_2026.single_band)}, lone parent {euro(IT_2026.lone_parent_band)}, "
                f"married one income {euro(IT_2026.married_band)}, two incomes up to "
                f"{euro(IT_2026.married_band + IT_2026.partner_band_cap)}.")

    st.subheader("Universal Social Charge (USC)")
    st.markdown(f"Exemption for incomes up to {euro(usc.exemption_threshold)}.  \n"
                f"Reduced rate (medical card or over {usc.reduced_rate_age}, "
                f"≤ {euro(usc.reduced_rate_ceiling)}/yr): {usc.reduced_rate:.0%} on all "
                f"income above {euro(usc.thresholds[0])}.  \n"
                f"Self-employed income: {usc.self_employed_rate:.0%} on all income above "
                f"{euro(usc.surcharge_threshold)}.")

    st.subheader("Pay Related Social Insurance (PRSI)")
    note = "" if today >= PRSI_2026.rate_change_date else \
        f" Rate up to {PRSI_2026.increased_rate:.2%} from {PRSI_2026.rate_change_date:%d %B %Y}."
    st.markdown(f"Class A employees: {PRSI_2026.rate_on(today):.2%} of whole income. "
                f"Exemption under {euro(PRSI_2026.weekly_threshold)}/week.{note}")

    st.caption("More information: revenue.ie and citizensinformation.ie")


# ==============================================================
# TAB 5: CONFIGURATION
# ==============================================================

with tab_config:
    st.header("Export/import configuration")
    config_path = os.path.abspath(storage.DEFAULT_CONFIG_PATH)
    st.markdown(f"Configuration is saved to and loaded from `{config_path}`.")

    e1, e2 = st.columns(2)
    with e1:
        if st.button("Export configuration to file"):
            if storage.export_config(config_path, session):
                st.success("Configuration successfully exported!")
            else:
                st.warning("No data to save")
        if not session.is_empty:
            st.download_button("Download configuration", encode(session),
                               file_name="config.txt", mime="text/plain")

    with e2:
        if st.button("Import configuration from file"):
            try:
                st.session_state.session = storage.import_config(config_path)
                st.success("Configuration successfully imported!")
            except (TaxCalcError, FileNotFoundError) as exc:
                st.error(str(exc))

        uploaded = st.file_uploader("…or upload a config file", type=["txt"], key="cfg_upload")
        if uploaded is not None and st.button("Load uploaded configuration"):
            try:
                st.session_state.session = decode(uploaded.getvalue().decode("utf-8-sig"))
                st.success("Configuration successfully imported!")
            except TaxCalcError as exc:
                st.error(str(exc))
