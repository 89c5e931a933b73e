"""
Expansion of recurring appointment templates into concrete appointments.

The scheduled job looks one week ahead: every active template produces the
dates that fall in [today, today + 7 days] and inside its own
[start_date, end_date] range. An appointment is only created when the user
has none at that exact time, so re-running the job over the same window
creates nothing new.
"""
import calendar
import logging
from datetime import date, datetime, timedelta

from django.db import DatabaseError
from django.utils import timezone

from .models import Appointment, RecurringAppointment

logger = logging.getLogger(__name__)

WINDOW_DAYS = 7


def _sunday_based_weekday(day):
    """Weekday number with 0 = Sunday ... 6 = Saturday, as stored in days_of_week."""
    return (day.weekday() + 1) % 7


def _add_months(year, month, months):
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def _check_interval(rule):
    interval = rule.recurrence_interval
    if not isinstance(interval, int) or interval < 1:
        raise ValueError(f"recurrence_interval must be a positive integer, got {interval!r}")
    return interval


def expand_occurrences(rule, today, window_days=WINDOW_DAYS):
    """
    Return the dates ``rule`` produces inside the look-ahead window.

    Args:
        rule: RecurringAppointment (or any object with the same fields)
        today: first day of the window
        window_days: length of the window; the last day is included

    Returns:
        list[date]: ascending, no duplicates
    """
    window_end = today + timedelta(days=window_days)
    start, end = rule.start_date, rule.end_date

    def in_range(day):
        return day >= start and (end is None or day <= end)

    dates = []
    pattern = rule.recurrence_pattern

    if pattern == 'daily':
        step = timedelta(days=_check_interval(rule))
        day = today
        while day <= window_end:
            if in_range(day):
                dates.append(day)
            day += step

    elif pattern == 'weekly':
        # Checked day by day against the weekday set; recurrence_interval
        # is not applied to weekly templates.
        weekdays = {int(d) for d in (rule.days_of_week or [])}
        day = today
        while day <= window_end:
            if _sunday_based_weekday(day) in weekdays and in_range(day):
                dates.append(day)
            day += timedelta(days=1)

    elif pattern == 'monthly':
        interval = _check_interval(rule)
        year, month = today.year, today.month
        while True:
            last_day = calendar.monthrange(year, month)[1]
            day = date(year, month, min(start.day, last_day))
            if day > window_end:
                break
            if day >= today and in_range(day):
                dates.append(day)
            year, month = _add_months(year, month, interval)

    else:
        logger.warning(f"Unknown recurrence pattern {pattern!r} on recurring appointment {rule.pk}")

    return dates


def occurrence_datetimes(rule, today, window_days=WINDOW_DAYS):
    """Combine each occurrence date with the template's time of day (current time zone)."""
    tz = timezone.get_current_timezone()
    return [
        timezone.make_aware(datetime.combine(day, rule.time_of_day), tz)
        for day in expand_occurrences(rule, today, window_days)
    ]


def generate_recurring_appointments(today=None):
    """
    Create the coming week's appointments from every active template.

    A template that fails is logged and reported in ``errors``; the others
    still run.

    Returns:
        dict: {'processed': int, 'count': int, 'errors': list[str]}
    """
    today = today or timezone.localdate()
    logger.info('Starting recurring appointment generation job...')

    recurring_appointments = list(RecurringAppointment.objects.filter(is_active=True))
    logger.info(f"Found {len(recurring_appointments)} active recurring appointments")

    created_count = 0
    errors = []

    for recurring in recurring_appointments:
        if recurring.end_date and recurring.end_date < today:
            logger.info(f"Recurring appointment {recurring.id} has ended, skipping")
            continue

        try:
            for when in occurrence_datetimes(recurring, today):
                exists = Appointment.objects.filter(
                    user_id=recurring.user_id,
                    appointment_date=when,
                ).exists()
                if exists:
                    logger.info(f"Appointment already exists for {when.isoformat()}, skipping")
                    continue

                Appointment.objects.create(
                    user_id=recurring.user_id,
                    appointment_type=recurring.appointment_type,
                    purpose=recurring.purpose,
                    duration_minutes=recurring.duration_minutes,
                    appointment_date=when,
                    status='pending',
                )
                created_count += 1
        except (DatabaseError, ValueError, TypeError) as e:
            logger.error(f"Error processing recurring appointment {recurring.id}: {str(e)}")
            errors.append(f"Failed to process recurring appointment {recurring.id}: {str(e)}")

    logger.info(f"Created {created_count} appointments from recurring templates")
    return {
        'processed': len(recurring_appointments),
        'count': created_count,
        'errors': errors,
    }
