"""
Salary Breakdown Calculations

Net pay from gross pay plus a list of allowances and deductions.
Allowances are applied first; percentage deductions are then taken from
gross + allowances, not from gross alone.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from app.calculations.rounding import percent_of, round_money

FIXED = "fixed"
PERCENTAGE = "percentage"
COMPONENT_KINDS = (FIXED, PERCENTAGE)
SALARY_PERIODS = ("monthly", "yearly")


@dataclass(frozen=True)
class SalaryComponent:
    """An allowance or deduction line."""

    name: str
    value: float
    kind: str = FIXED  # "fixed" amount or "percentage" of the base


@dataclass
class ComponentBreakdown:
    """Resolved amount of one component and its share of the base."""

    name: str
    amount: float
    percentage: float


@dataclass
class SalaryResult:
    """Monthly salary breakdown."""

    gross_salary: float  # monthly
    total_allowances: float
    total_deductions: float
    salary_before_deductions: float
    net_salary: float
    monthly_net: float
    yearly_net: float
    allowances: List[ComponentBreakdown] = field(default_factory=list)
    deductions: List[ComponentBreakdown] = field(default_factory=list)


# Templates for a new salary form; zero-valued lines are skipped until filled in
DEFAULT_ALLOWANCES = [
    SalaryComponent("House Rent Allowance", 0, PERCENTAGE),
    SalaryComponent("Transport Allowance", 0, FIXED),
    SalaryComponent("Medical Allowance", 0, FIXED),
    SalaryComponent("Special Allowance", 0, FIXED),
]

DEFAULT_DEDUCTIONS = [
    SalaryComponent("Provident Fund", 12, PERCENTAGE),
    SalaryComponent("Income Tax", 0, FIXED),
    SalaryComponent("Insurance", 0, FIXED),
    SalaryComponent("Other Deductions", 0, FIXED),
]


def resolve_components(
    components: Iterable[SalaryComponent], base: float
) -> Tuple[float, List[ComponentBreakdown]]:
    """
    Resolve components against a base amount.

    Percentage components are taken from base; fixed components are used
    as-is. Components with a value of zero or less are skipped.

    Args:
        components: Allowance or deduction lines
        base: Amount percentage components are computed against

    Returns:
        Tuple of (unrounded total, per-component breakdown)

    Raises:
        ValueError: If a component has an unknown kind
    """
    total = 0.0
    breakdown = []

    for component in components:
        if component.kind not in COMPONENT_KINDS:
            raise ValueError(f"Unknown component kind: {component.kind}")
        if component.value <= 0:
            continue

        if component.kind == PERCENTAGE:
            amount = base * component.value / 100
        else:
            amount = component.value

        total += amount
        breakdown.append(
            ComponentBreakdown(
                name=component.name,
                amount=round_money(amount),
                percentage=round_money(percent_of(amount, base)),
            )
        )

    return total, breakdown


def compute_salary(
    gross_salary: float,
    period: str,
    allowances: Iterable[SalaryComponent],
    deductions: Iterable[SalaryComponent],
) -> SalaryResult:
    """
    Compute net salary from gross pay, allowances and deductions.

    Args:
        gross_salary: Gross pay for the period (>= 0)
        period: "monthly" or "yearly"; yearly gross is spread over 12 months
        allowances: Lines added to gross; percentages are of monthly gross
        deductions: Lines subtracted; percentages are of gross + allowances

    Returns:
        SalaryResult in monthly terms with values rounded to 2 decimal places

    Raises:
        ValueError: If period or a component kind is not recognised
    """
    if period not in SALARY_PERIODS:
        raise ValueError(f"Unknown salary period: {period}")

    monthly_gross = gross_salary / 12 if period == "yearly" else gross_salary

    total_allowances, allowance_breakdown = resolve_components(
        allowances, monthly_gross
    )
    salary_before_deductions = monthly_gross + total_allowances

    total_deductions, deduction_breakdown = resolve_components(
        deductions, salary_before_deductions
    )
    net_salary = salary_before_deductions - total_deductions

    return SalaryResult(
        gross_salary=round_money(monthly_gross),
        total_allowances=round_money(total_allowances),
        total_deductions=round_money(total_deductions),
        salary_before_deductions=round_money(salary_before_deductions),
        net_salary=round_money(net_salary),
        monthly_net=round_money(net_salary),
        yearly_net=round_money(net_salary * 12),
        allowances=allowance_breakdown,
        deductions=deduction_breakdown,
    )
