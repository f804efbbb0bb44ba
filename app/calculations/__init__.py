"""
Financial Calculation Engine

Stateless calculators for loan EMI, progressive income tax and salary
breakdowns. Every function is a pure function of its arguments.
"""

from app.calculations import loan, salary, tax

__all__ = ["loan", "salary", "tax"]
