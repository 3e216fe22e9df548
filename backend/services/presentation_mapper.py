from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from services.urgency_classifier import UrgencyLevel


class PresentationMode(str, Enum):
    HIDDEN = "hidden"
    SUBTLE = "subtle"
    NORMAL = "normal"
    PROMINENT = "prominent"
    URGENT = "urgent"


_MODE_BY_URGENCY: dict[UrgencyLevel, PresentationMode] = {
    UrgencyLevel.NONE: PresentationMode.SUBTLE,
    UrgencyLevel.UPCOMING: PresentationMode.NORMAL,
    UrgencyLevel.ACTIVE: PresentationMode.NORMAL,
    UrgencyLevel.URGENT: PresentationMode.PROMINENT,
    UrgencyLevel.CRITICAL: PresentationMode.URGENT,
}

MESSAGE_TEMPLATES: dict[str, str] = {
    "already_reflected": (
        "You already reflected on today ({percentage}% completed). "
        "You can review or edit your reflection."
    ),
    "critical": "Urgent! You have {unreflected} days without a reflection. Close them out before you go to sleep.",
    "urgent": "It's getting late! Reflect on your day ({percentage}% completed) before you go to sleep.",
    "active": "The evening has started - reflect on your day with {percentage}% completed.",
    "upcoming": "The evening is coming - get ready to reflect ({percentage}% completed).",
    "later": "Later today you can reflect on your day.",
}

_TEMPLATE_BY_URGENCY: dict[UrgencyLevel, str] = {
    UrgencyLevel.CRITICAL: "critical",
    UrgencyLevel.URGENT: "urgent",
    UrgencyLevel.ACTIVE: "active",
    UrgencyLevel.UPCOMING: "upcoming",
    UrgencyLevel.NONE: "later",
}


def presentation_mode(urgency: UrgencyLevel) -> PresentationMode:
    return _MODE_BY_URGENCY.get(urgency, PresentationMode.HIDDEN)


def completion_percentage(total_goals: int, completed_goals: int) -> int:
    if total_goals <= 0:
        return 0
    # Halves round up (12.5 -> 13), not to the nearest even integer.
    ratio = Decimal(completed_goals * 100) / Decimal(total_goals)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def message_key(urgency: UrgencyLevel, has_reflection: bool) -> str:
    if has_reflection:
        return "already_reflected"
    return _TEMPLATE_BY_URGENCY.get(urgency, "later")


def status_message(
    urgency: UrgencyLevel,
    total_goals: int,
    completed_goals: int,
    has_reflection: bool,
    unreflected_count: int = 0,
) -> str:
    template = MESSAGE_TEMPLATES[message_key(urgency, has_reflection)]
    return template.format(
        percentage=completion_percentage(total_goals, completed_goals),
        unreflected=unreflected_count,
    )
