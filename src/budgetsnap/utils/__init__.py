"""Utility functions for budgetsnap."""

from budgetsnap.utils.date_parser import parse_date, parse_month
from budgetsnap.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_month", "parse_amount"]
