"""Booked duration text -> minutes"""
import re
from typing import Callable, List, Optional, Tuple

DEFAULT_DURATION_MINUTES = 60

# Evaluated in order, first match wins. "1 hour 30 minutes" therefore yields 60.
DURATION_RULES: List[Tuple[re.Pattern, Callable[[int], int]]] = [
    (re.compile(r"(\d+)\s*hours?", re.IGNORECASE), lambda n: n * 60),
    (re.compile(r"(\d+)\s*minutes?", re.IGNORECASE), lambda n: n),
]


def parse_duration_minutes(duration: Optional[str]) -> int:
    """
    Convert a booking duration such as "2 hours" or "90 minutes" to minutes.

    Text that matches no rule (including a bare number like "45") falls back
    to DEFAULT_DURATION_MINUTES. Never raises.
    """
    if not duration:
        return DEFAULT_DURATION_MINUTES

    for pattern, to_minutes in DURATION_RULES:
        match = pattern.search(duration)
        if match:
            minutes = to_minutes(int(match.group(1)))
            return minutes if minutes >= 1 else DEFAULT_DURATION_MINUTES

    return DEFAULT_DURATION_MINUTES
