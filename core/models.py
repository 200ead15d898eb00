"""Flat import surface for the domain model (``from core.models import Expense``)."""
from __future__ import annotations

from core.domain import *  # noqa: F401,F403
from core.domain import __all__  # noqa: F401
