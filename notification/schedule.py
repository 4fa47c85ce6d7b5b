#!/usr/bin/env python3
"""
Notification Schedule - When a notification may go out.

next_eligible_time() is a pure function of ``now`` and a DeliverySchedule:
no clock is read and nothing is sent, so delivery channels call it and
tests exercise it without real time passing.

Rules, in order:
1. Batched (batch_window_minutes set): now + window
2. Frequency: immediate -> now, daily -> next send_hour,
   weekly -> next Monday at send_hour, monthly -> first of next month
3. If the result falls inside quiet hours, push it to the end of the
   quiet window (windows may wrap midnight, e.g. 22:00-08:00)

Usage:
    from notification.schedule import DeliverySchedule, QuietHours, next_eligible_time

    schedule = DeliverySchedule(frequency="daily",
                                quiet_hours=QuietHours(True, "22:00", "08:00"))
    send_at = next_eligible_time(datetime.now(timezone.utc), schedule)
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta, MO

from personalization.config_loader import NotificationScheduleConfig

logger = logging.getLogger(__name__)

FREQUENCIES = ("immediate", "daily", "weekly", "monthly")


def parse_clock(value: str) -> time:
    """'22:00' -> time(22, 0). Raises ValueError on malformed input."""
    try:
        hours, minutes = value.strip().split(":")
        return time(int(hours), int(minutes))
    except (AttributeError, ValueError):
        raise ValueError(f"Expected HH:MM, got {value!r}")


@dataclass(frozen=True)
class QuietHours:
    enabled: bool = False
    start: str = "22:00"
    end: str = "08:00"

    def __post_init__(self) -> None:
        parse_clock(self.start)
        parse_clock(self.end)

    @property
    def start_time(self) -> time:
        return parse_clock(self.start)

    @property
    def end_time(self) -> time:
        return parse_clock(self.end)


@dataclass(frozen=True)
class DeliverySchedule:
    frequency: str = "immediate"
    quiet_hours: QuietHours = field(default_factory=QuietHours)
    send_hour: int = 9
    batch_window_minutes: Optional[int] = None

    def __post_init__(self) -> None:
        if self.frequency not in FREQUENCIES:
            raise ValueError(f"Unknown frequency {self.frequency!r}, expected one of {FREQUENCIES}")
        if not 0 <= self.send_hour <= 23:
            raise ValueError(f"send_hour must be 0-23, got {self.send_hour}")
        if self.batch_window_minutes is not None and self.batch_window_minutes < 0:
            raise ValueError("batch_window_minutes must be non-negative")

    @classmethod
    def from_config(cls, config: NotificationScheduleConfig) -> "DeliverySchedule":
        return cls(
            frequency=config.frequency,
            quiet_hours=QuietHours(
                enabled=config.quiet_hours.enabled,
                start=config.quiet_hours.start,
                end=config.quiet_hours.end,
            ),
            send_hour=config.send_hour,
            batch_window_minutes=config.batch_window_minutes,
        )


def is_quiet_time(moment: datetime, quiet_hours: QuietHours) -> bool:
    """True when ``moment`` falls in [start, end); windows may wrap midnight."""
    if not quiet_hours.enabled:
        return False
    start, end = quiet_hours.start_time, quiet_hours.end_time
    current = moment.time().replace(tzinfo=None)
    if start == end:
        return False
    if start > end:
        return current >= start or current < end
    return start <= current < end


def end_of_quiet_hours(moment: datetime, quiet_hours: QuietHours) -> datetime:
    """First instant after the quiet window that contains ``moment``."""
    end = quiet_hours.end_time
    candidate = moment.replace(hour=end.hour, minute=end.minute, second=0, microsecond=0)
    if candidate <= moment:
        candidate += timedelta(days=1)
    return candidate


def _at_send_hour(moment: datetime, hour: int) -> datetime:
    return moment.replace(hour=hour, minute=0, second=0, microsecond=0)


def _scheduled_time(now: datetime, schedule: DeliverySchedule) -> datetime:
    if schedule.batch_window_minutes:
        return now + timedelta(minutes=schedule.batch_window_minutes)

    if schedule.frequency == "daily":
        send_at = _at_send_hour(now, schedule.send_hour)
        if send_at <= now:
            send_at += timedelta(days=1)
        return send_at

    if schedule.frequency == "weekly":
        send_at = _at_send_hour(now + relativedelta(weekday=MO(+1)), schedule.send_hour)
        if send_at <= now:
            send_at += timedelta(weeks=1)
        return send_at

    if schedule.frequency == "monthly":
        return _at_send_hour(now + relativedelta(months=+1, day=1), schedule.send_hour)

    return now


def next_eligible_time(now: datetime, schedule: DeliverySchedule) -> datetime:
    """Earliest time a notification queued at ``now`` may be delivered."""
    send_at = _scheduled_time(now, schedule)
    if is_quiet_time(send_at, schedule.quiet_hours):
        rescheduled = end_of_quiet_hours(send_at, schedule.quiet_hours)
        logger.debug(f"{send_at.isoformat()} falls in quiet hours, deferring to {rescheduled.isoformat()}")
        send_at = rescheduled
    return send_at
