"""Standalone authorization policy module.

Every service asks the same question, "may this actor perform this action on
this resource?", through ``is_allowed``. Role and ownership rules live in
``rules`` instead of being repeated inside each view.
"""

from . import rules  # noqa: F401  (registers the rule table)
from .registry import ensure_allowed
from .registry import is_allowed

__all__ = [
    "ensure_allowed",
    "is_allowed",
]
