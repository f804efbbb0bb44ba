"""
Calculator API endpoints.

These endpoints validate raw inputs, run a calculation engine and return
the result alongside display-formatted currency strings.
"""

import logging
from dataclasses import asdict
from datetime import date
from typing import Dict, List, Literal, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from app.calculations import loan, salary, tax
from app.calculations.formatting import format_currency, format_percent
from app.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter()


# =============================================================================
# LOAN
# =============================================================================


class LoanCalculationInput(BaseModel):
    """Input for loan EMI calculation."""

    principal: float = Field(gt=0, le=settings.max_amount, allow_inf_nan=False)
    interest_rate: float = Field(ge=0)  # annual, percent
    tenure: float = Field(gt=0, allow_inf_nan=False)
    tenure_unit: Literal["months", "years"] = "years"
    start_date: Optional[date] = None
    currency: Optional[str] = None


class MonthlyPaymentRow(BaseModel):
    """One row of the amortization table."""

    month: int
    emi: float
    principal: float
    interest: float
    balance: float
    payment_date: Optional[date] = None


class LoanResponse(BaseModel):
    """Loan summary and amortization table."""

    emi: float
    total_interest: float
    total_payable: float
    tenure_months: int
    monthly_rate: float
    principal_share: float
    interest_share: float
    schedule: List[MonthlyPaymentRow]
    formatted: Dict[str, str]


@router.post("/loan", response_model=LoanResponse)
async def calculate_loan(inputs: LoanCalculationInput):
    """Calculate EMI and the month-by-month amortization table."""

    if inputs.interest_rate > settings.max_interest_rate:
        raise HTTPException(
            status_code=400,
            detail=f"Interest rate cannot exceed {settings.max_interest_rate}%",
        )

    months = loan.tenure_in_months(inputs.tenure, inputs.tenure_unit)
    if months > settings.max_tenure_months:
        raise HTTPException(
            status_code=400,
            detail=f"Tenure cannot exceed {settings.max_tenure_months} months",
        )

    result = loan.compute_loan(
        principal=inputs.principal,
        annual_rate=inputs.interest_rate,
        tenure=inputs.tenure,
        tenure_unit=inputs.tenure_unit,
        start_date=inputs.start_date,
    )
    logger.debug(
        "Loan calculated: principal=%s rate=%s months=%s emi=%s",
        inputs.principal,
        inputs.interest_rate,
        months,
        result.emi,
    )

    currency = inputs.currency or settings.default_currency
    return LoanResponse(
        **asdict(result),
        formatted={
            "emi": format_currency(result.emi, currency),
            "total_interest": format_currency(result.total_interest, currency),
            "total_payable": format_currency(result.total_payable, currency),
        },
    )


# =============================================================================
# TAX
# =============================================================================


class TaxBracketSchema(BaseModel):
    """Tax bracket schema."""

    lower: float = Field(ge=0, le=settings.max_amount, allow_inf_nan=False)
    upper: Optional[float] = Field(
        default=None, le=settings.max_amount, allow_inf_nan=False
    )
    rate: float = Field(ge=0, le=100)


class TaxConfigSchema(BaseModel):
    """Tax configuration schema."""

    name: str = "Custom"
    currency: str = "USD"
    brackets: List[TaxBracketSchema] = Field(min_length=1)
    standard_deduction: Optional[float] = Field(
        default=None, ge=0, le=settings.max_amount, allow_inf_nan=False
    )


class TaxCalculationInput(BaseModel):
    """
    Input for tax calculation.

    Either a built-in config_key or a full custom config may be given; a
    custom config takes precedence.
    """

    annual_income: float = Field(ge=0, le=settings.max_amount, allow_inf_nan=False)
    deductions: float = Field(
        default=0.0, ge=0, le=settings.max_amount, allow_inf_nan=False
    )
    config_key: Optional[str] = None
    config: Optional[TaxConfigSchema] = None


class BracketRow(BaseModel):
    """Tax attributable to one bracket."""

    label: str
    rate: float
    taxable_amount: float
    tax_amount: float


class TaxResponse(BaseModel):
    """Tax estimate response."""

    config_name: str
    currency: str
    gross_income: float
    total_deductions: float
    taxable_income: float
    tax_amount: float
    effective_rate: float
    net_income: float
    breakdown: List[BracketRow]
    formatted: Dict[str, str]


def _config_from_schema(schema: TaxConfigSchema) -> tax.TaxConfig:
    return tax.TaxConfig(
        name=schema.name,
        currency=schema.currency.upper(),
        standard_deduction=schema.standard_deduction,
        brackets=tuple(
            tax.TaxBracket(lower=b.lower, upper=b.upper, rate=b.rate)
            for b in schema.brackets
        ),
    )


def _resolve_tax_config(inputs: TaxCalculationInput) -> tax.TaxConfig:
    """Pick the config for a request, falling back to the default table."""
    if inputs.config is not None:
        config = _config_from_schema(inputs.config)
        try:
            tax.validate_tax_config(config)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return config

    key = inputs.config_key or settings.default_tax_config
    try:
        return tax.get_tax_config(key)
    except KeyError:
        logger.warning(
            "Unknown tax config %r, using %r", key, settings.default_tax_config
        )
        return tax.get_tax_config(settings.default_tax_config)


@router.post("/tax", response_model=TaxResponse)
async def calculate_tax(inputs: TaxCalculationInput):
    """Estimate income tax against a progressive bracket table."""

    config = _resolve_tax_config(inputs)
    result = tax.compute_tax(inputs.annual_income, inputs.deductions, config)
    logger.debug(
        "Tax calculated: config=%s income=%s tax=%s",
        config.name,
        inputs.annual_income,
        result.tax_amount,
    )

    return TaxResponse(
        config_name=config.name,
        currency=config.currency,
        **asdict(result),
        formatted={
            "taxable_income": format_currency(result.taxable_income, config.currency),
            "tax_amount": format_currency(result.tax_amount, config.currency),
            "net_income": format_currency(result.net_income, config.currency),
            "effective_rate": format_percent(result.effective_rate),
        },
    )


@router.get("/tax/configs")
async def list_tax_configs():
    """List the built-in tax configurations."""
    return {key: asdict(config) for key, config in tax.TAX_CONFIGS.items()}


# =============================================================================
# SALARY
# =============================================================================


class SalaryComponentSchema(BaseModel):
    """Allowance or deduction line."""

    name: str
    value: float = Field(ge=0, le=settings.max_amount, allow_inf_nan=False)
    kind: Literal["fixed", "percentage"] = "fixed"


class SalaryCalculationInput(BaseModel):
    """Input for salary calculation."""

    gross_salary: float = Field(ge=0, le=settings.max_amount, allow_inf_nan=False)
    period: Literal["monthly", "yearly"] = "monthly"
    allowances: List[SalaryComponentSchema] = Field(default_factory=list)
    deductions: List[SalaryComponentSchema] = Field(default_factory=list)
    currency: Optional[str] = None


class ComponentRow(BaseModel):
    """Resolved component amount."""

    name: str
    amount: float
    percentage: float


class SalaryResponse(BaseModel):
    """Salary breakdown response."""

    gross_salary: float
    total_allowances: float
    total_deductions: float
    salary_before_deductions: float
    net_salary: float
    monthly_net: float
    yearly_net: float
    allowances: List[ComponentRow]
    deductions: List[ComponentRow]
    formatted: Dict[str, str]


def _components(rows: List[SalaryComponentSchema]) -> List[salary.SalaryComponent]:
    return [salary.SalaryComponent(row.name, row.value, row.kind) for row in rows]


@router.post("/salary", response_model=SalaryResponse)
async def calculate_salary(inputs: SalaryCalculationInput):
    """Calculate net salary from gross pay, allowances and deductions."""

    result = salary.compute_salary(
        gross_salary=inputs.gross_salary,
        period=inputs.period,
        allowances=_components(inputs.allowances),
        deductions=_components(inputs.deductions),
    )
    logger.debug(
        "Salary calculated: gross=%s period=%s net=%s",
        inputs.gross_salary,
        inputs.period,
        result.monthly_net,
    )

    currency = inputs.currency or settings.default_currency
    return SalaryResponse(
        **asdict(result),
        formatted={
            "monthly_net": format_currency(result.monthly_net, currency),
            "yearly_net": format_currency(result.yearly_net, currency),
            "total_allowances": format_currency(result.total_allowances, currency),
            "total_deductions": format_currency(result.total_deductions, currency),
        },
    )


@router.get("/salary/defaults")
async def salary_defaults():
    """Default allowance and deduction templates for a new salary form."""
    return {
        "allowances": [asdict(c) for c in salary.DEFAULT_ALLOWANCES],
        "deductions": [asdict(c) for c in salary.DEFAULT_DEDUCTIONS],
    }
