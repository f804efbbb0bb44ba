"""
Progressive Income Tax Calculations

Country-agnostic marginal-bracket tax estimate. Only the slice of taxable
income that falls inside a bracket is taxed at that bracket's rate.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from app.calculations.formatting import format_currency
from app.calculations.rounding import percent_of, round_money


@dataclass(frozen=True)
class TaxBracket:
    """A taxable income range and its marginal rate."""

    lower: float
    upper: Optional[float]  # None for the top, unbounded bracket
    rate: float  # percent, e.g. 22 for 22%


@dataclass(frozen=True)
class TaxConfig:
    """A named bracket table with an optional flat standard deduction."""

    name: str
    currency: str
    brackets: Sequence[TaxBracket]
    standard_deduction: Optional[float] = None


@dataclass
class BracketBreakdown:
    """Tax attributable to a single bracket."""

    label: str
    rate: float
    taxable_amount: float
    tax_amount: float


@dataclass
class TaxResult:
    """Tax estimate for one income figure."""

    gross_income: float
    total_deductions: float
    taxable_income: float
    tax_amount: float
    effective_rate: float  # percent of taxable income
    net_income: float
    breakdown: List[BracketBreakdown] = field(default_factory=list)


TAX_CONFIGS: Dict[str, TaxConfig] = {
    "us": TaxConfig(
        name="United States (2024)",
        currency="USD",
        standard_deduction=14600,
        brackets=(
            TaxBracket(0, 11600, 10),
            TaxBracket(11600, 47150, 12),
            TaxBracket(47150, 100525, 22),
            TaxBracket(100525, 191950, 24),
            TaxBracket(191950, 243725, 32),
            TaxBracket(243725, 609350, 35),
            TaxBracket(609350, None, 37),
        ),
    ),
    "uk": TaxConfig(
        name="United Kingdom (2024-25)",
        currency="GBP",
        standard_deduction=12570,
        brackets=(
            TaxBracket(0, 12570, 0),
            TaxBracket(12570, 50270, 20),
            TaxBracket(50270, 125140, 40),
            TaxBracket(125140, None, 45),
        ),
    ),
    "india": TaxConfig(
        name="India - New Regime (2024-25)",
        currency="INR",
        standard_deduction=50000,
        brackets=(
            TaxBracket(0, 300000, 0),
            TaxBracket(300000, 600000, 5),
            TaxBracket(600000, 900000, 10),
            TaxBracket(900000, 1200000, 15),
            TaxBracket(1200000, 1500000, 20),
            TaxBracket(1500000, None, 30),
        ),
    ),
    "custom": TaxConfig(
        name="Custom",
        currency="USD",
        brackets=(
            TaxBracket(0, 10000, 10),
            TaxBracket(10000, 40000, 20),
            TaxBracket(40000, 80000, 30),
            TaxBracket(80000, None, 40),
        ),
    ),
}


def get_tax_config(key: str) -> TaxConfig:
    """
    Look up a built-in tax configuration.

    Raises:
        KeyError: If no configuration is registered under key
    """
    return TAX_CONFIGS[key.lower()]


def validate_tax_config(config: TaxConfig) -> None:
    """
    Check that a bracket table is usable by compute_tax().

    Brackets must be non-empty, ascending and contiguous (each lower bound
    equals the previous upper bound), with only the last one unbounded.

    Raises:
        ValueError: Describing the first problem found
    """
    if not config.brackets:
        raise ValueError("Tax config must have at least one bracket")

    if config.standard_deduction is not None and config.standard_deduction < 0:
        raise ValueError("Standard deduction cannot be negative")

    last_index = len(config.brackets) - 1
    for index, bracket in enumerate(config.brackets):
        if not 0 <= bracket.rate <= 100:
            raise ValueError(f"Bracket {index + 1}: rate must be between 0 and 100")

        if bracket.upper is None:
            if index != last_index:
                raise ValueError(
                    f"Bracket {index + 1}: only the last bracket may be unbounded"
                )
        elif bracket.upper <= bracket.lower:
            raise ValueError(
                f"Bracket {index + 1}: upper bound must exceed lower bound"
            )

        if index == 0:
            if bracket.lower < 0:
                raise ValueError("Bracket 1: lower bound cannot be negative")
        elif bracket.lower != config.brackets[index - 1].upper:
            raise ValueError(
                f"Bracket {index + 1}: must start where bracket {index} ends"
            )


def bracket_label(bracket: TaxBracket, currency: str) -> str:
    """Human-readable range for a bracket, e.g. "$11,600 - $47,150"."""
    lower = format_currency(bracket.lower, currency, decimals=0)
    if bracket.upper is None:
        return f"Above {lower}"
    return f"{lower} - {format_currency(bracket.upper, currency, decimals=0)}"


def compute_tax(
    annual_income: float, extra_deductions: float, config: TaxConfig
) -> TaxResult:
    """
    Estimate income tax against a progressive bracket table.

    Args:
        annual_income: Gross annual income (>= 0)
        extra_deductions: Deductions on top of the config's standard deduction
        config: Bracket table to apply

    Returns:
        TaxResult with monetary values rounded to 2 decimal places. Brackets
        the income does not reach are left out of the breakdown.
    """
    total_deductions = extra_deductions + (config.standard_deduction or 0)
    taxable_income = max(0.0, annual_income - total_deductions)

    tax_amount = 0.0
    breakdown = []

    for bracket in config.brackets:
        if taxable_income <= bracket.lower:
            continue

        upper = bracket.upper if bracket.upper is not None else float("inf")
        taxable_in_bracket = min(taxable_income, upper) - bracket.lower
        tax_for_bracket = taxable_in_bracket * bracket.rate / 100
        tax_amount += tax_for_bracket

        if taxable_in_bracket > 0:
            breakdown.append(
                BracketBreakdown(
                    label=bracket_label(bracket, config.currency),
                    rate=bracket.rate,
                    taxable_amount=round_money(taxable_in_bracket),
                    tax_amount=round_money(tax_for_bracket),
                )
            )

    effective_rate = percent_of(tax_amount, taxable_income)
    # Deductions lower taxable income, not the gross used for net income
    net_income = annual_income - tax_amount

    return TaxResult(
        gross_income=round_money(annual_income),
        total_deductions=round_money(total_deductions),
        taxable_income=round_money(taxable_income),
        tax_amount=round_money(tax_amount),
        effective_rate=round_money(effective_rate),
        net_income=round_money(net_income),
        breakdown=breakdown,
    )
