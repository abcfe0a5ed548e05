"""Utilities package for common functions."""

from .parsing import parse_date, parse_amount, format_amount

__all__ = ['parse_date', 'parse_amount', 'format_amount']
