"""
Last Free Day urgency.

LFD is the terminal deadline after which demurrage accrues. The dispatch board
and the street-turn matcher both surface how close a container is to it.
"""

from datetime import date
from typing import Optional, Tuple

from journey_engine.core.config import Settings, get_settings
from journey_engine.schemas.journey import LfdWarningLevel


def lfd_status(
    last_free_day: Optional[date],
    as_of: Optional[date] = None,
    settings: Optional[Settings] = None,
) -> Tuple[Optional[int], LfdWarningLevel]:
    """
    Days until LFD and the warning level.

    Returns (None, NONE) when there is no LFD. Negative days mean overdue.
    """
    if last_free_day is None:
        return None, LfdWarningLevel.NONE

    settings = settings or get_settings()
    today = as_of or date.today()
    days_until_lfd = (last_free_day - today).days

    if days_until_lfd < 0:
        level = LfdWarningLevel.OVERDUE
    elif days_until_lfd <= settings.lfd_urgent_days:
        level = LfdWarningLevel.URGENT
    elif days_until_lfd <= settings.lfd_warning_days:
        level = LfdWarningLevel.WARNING
    else:
        level = LfdWarningLevel.NONE

    return days_until_lfd, level
