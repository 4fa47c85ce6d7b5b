"""
Notification Module

Delivery-time scheduling for notifications. Transport (email, push, etc.)
lives with the caller; this module only decides when a send is allowed.

Usage:
    from notification import DeliverySchedule, QuietHours, next_eligible_time

    schedule = DeliverySchedule(frequency="weekly", quiet_hours=QuietHours(True, "22:00", "08:00"))
    send_at = next_eligible_time(now, schedule)
"""

from notification.schedule import (
    QuietHours,
    DeliverySchedule,
    is_quiet_time,
    end_of_quiet_hours,
    next_eligible_time,
    parse_clock,
)

__all__ = [
    'QuietHours',
    'DeliverySchedule',
    'is_quiet_time',
    'end_of_quiet_hours',
    'next_eligible_time',
    'parse_clock',
]
