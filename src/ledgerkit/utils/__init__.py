"""Utility functions for ledgerkit."""

from ledgerkit.utils.date_parser import get_date_range, parse_timestamp
from ledgerkit.utils.amount_parser import parse_amount, parse_int_or_none

__all__ = ["get_date_range", "parse_timestamp", "parse_amount", "parse_int_or_none"]
