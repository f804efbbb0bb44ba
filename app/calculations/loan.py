"""
Loan EMI Calculations

Computes the equated monthly installment (EMI) for a fixed-rate loan and
its month-by-month amortization table, using the standard annuity formula:

    EMI = P * r * (1 + r)^n / ((1 + r)^n - 1)

where P is the principal, r the monthly rate and n the number of months.
Callers are expected to pass a positive principal and tenure and a
non-negative rate.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from dateutil.relativedelta import relativedelta

from app.calculations.rounding import percent_of, round_money

TENURE_UNITS = ("months", "years")


@dataclass
class MonthlyPayment:
    """One row of the amortization table."""

    month: int
    emi: float
    principal: float
    interest: float
    balance: float
    payment_date: Optional[date] = None


@dataclass
class LoanResult:
    """Loan summary plus the full amortization table."""

    emi: float
    total_interest: float
    total_payable: float
    tenure_months: int
    monthly_rate: float  # decimal, e.g. 0.0070833 for 8.5% p.a.
    principal_share: float  # percent of total payable
    interest_share: float
    schedule: List[MonthlyPayment] = field(default_factory=list)


def tenure_in_months(tenure: float, tenure_unit: str = "months") -> int:
    """
    Convert a loan tenure to a whole number of months.

    Fractional months are rounded to the nearest month, with a minimum of one.

    Raises:
        ValueError: If tenure_unit is not "months" or "years"
    """
    if tenure_unit not in TENURE_UNITS:
        raise ValueError(f"Unknown tenure unit: {tenure_unit}")

    months = tenure * 12 if tenure_unit == "years" else tenure
    return max(1, math.floor(months + 0.5))


def calculate_emi(principal: float, monthly_rate: float, months: int) -> float:
    """
    Calculate the equated monthly installment.

    Args:
        principal: Loan principal amount
        monthly_rate: Monthly interest rate as decimal (annual % / 12 / 100)
        months: Number of monthly installments

    Returns:
        Unrounded monthly installment
    """
    if monthly_rate == 0:
        return principal / months

    factor = (1 + monthly_rate) ** months
    return principal * monthly_rate * factor / (factor - 1)


def generate_amortization_schedule(
    principal: float,
    monthly_rate: float,
    emi: float,
    months: int,
    start_date: Optional[date] = None,
) -> List[MonthlyPayment]:
    """
    Generate the month-by-month amortization table.

    The running balance is carried unrounded; only the reported row values
    are rounded. A row's reported principal is the drop in the reported
    balance, so the rounded principal column adds back up to the loan amount.

    Args:
        principal: Loan principal amount
        monthly_rate: Monthly interest rate as decimal
        emi: Unrounded monthly installment
        months: Number of monthly installments
        start_date: Date of first payment (rows are undated when omitted)

    Returns:
        List of amortization rows, one per month
    """
    schedule = []
    balance = principal
    reported_balance = round_money(principal)
    reported_emi = round_money(emi)

    for month in range(1, months + 1):
        interest = balance * monthly_rate
        principal_paid = emi - interest
        balance -= principal_paid

        # Floating-point drift can leave a tiny negative balance at the end
        closing_balance = round_money(max(0.0, balance))

        schedule.append(
            MonthlyPayment(
                month=month,
                emi=reported_emi,
                principal=round_money(reported_balance - closing_balance),
                interest=round_money(interest),
                balance=closing_balance,
                payment_date=(
                    start_date + relativedelta(months=month - 1) if start_date else None
                ),
            )
        )
        reported_balance = closing_balance

    return schedule


def compute_loan(
    principal: float,
    annual_rate: float,
    tenure: float,
    tenure_unit: str = "months",
    start_date: Optional[date] = None,
) -> LoanResult:
    """
    Compute EMI, totals and the amortization table for a loan.

    Args:
        principal: Loan principal amount (> 0)
        annual_rate: Annual interest rate in percent (e.g., 8.5 for 8.5%)
        tenure: Loan tenure (> 0)
        tenure_unit: "months" or "years"
        start_date: Optional first payment date used to date each row

    Returns:
        LoanResult with monetary values rounded to 2 decimal places
    """
    months = tenure_in_months(tenure, tenure_unit)
    monthly_rate = annual_rate / 12 / 100

    emi = calculate_emi(principal, monthly_rate, months)

    if monthly_rate == 0:
        total_payable = principal
        total_interest = 0.0
    else:
        total_payable = emi * months
        total_interest = total_payable - principal

    schedule = generate_amortization_schedule(
        principal, monthly_rate, emi, months, start_date
    )
    principal_share = percent_of(principal, total_payable)

    return LoanResult(
        emi=round_money(emi),
        total_interest=round_money(total_interest),
        total_payable=round_money(total_payable),
        tenure_months=months,
        monthly_rate=monthly_rate,
        principal_share=round_money(principal_share),
        interest_share=round_money(100 - principal_share),
        schedule=schedule,
    )
