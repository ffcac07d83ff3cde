"""Notification stubs.

Nothing is delivered: each call logs the payload and returns the message
that the API hands back to the client.
"""
from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def notify_achievement(payload: dict) -> str:
    logger.info("achievement notification would be sent: %s", payload)
    return "Notification logged (email disabled for now)"


def notify_goal_completed(payload: dict) -> str:
    logger.info("goal completed notification would be sent: %s", payload)
    return "Goal completion logged (email disabled for now)"


def notify_weekly_summary(payload: dict) -> str:
    logger.info("weekly summary would be sent: %s", payload)
    return "Weekly summary logged (email disabled for now)"
