"""Utility functions for the Environment Operator."""

from .conditions import find_condition, now_timestamp, update_condition
from .errors import sanitize_dict, sanitize_error_message, sanitize_exception
from .events import emit_event

__all__ = [
    "update_condition",
    "find_condition",
    "now_timestamp",
    "emit_event",
    "sanitize_error_message",
    "sanitize_exception",
    "sanitize_dict",
]
