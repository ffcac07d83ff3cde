"""Progress Buddy: SMART activities, progress logs and goals on SQLite."""
from __future__ import annotations

__version__ = "0.1.0"
