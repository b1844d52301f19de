"""Routes module for Flask endpoints"""

from typing import Any, Optional

from flask import current_app

from domain_knowledge import DomainKnowledge

TRUE_VALUES = ["true", "1", "yes"]
FALSE_VALUES = ["false", "0", "no"]


def get_knowledge() -> DomainKnowledge:
    """Knowledge engine bound to the running app"""
    return current_app.extensions['domain_knowledge']


def parse_flag(value: Any, default: bool) -> Optional[bool]:
    """
    Read a boolean from a JSON field.

    Accepts JSON booleans, 0/1 and the strings config.py accepts.
    Returns None when the value cannot be read as a boolean.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
    return None
