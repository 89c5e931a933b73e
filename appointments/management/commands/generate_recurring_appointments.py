"""
Management command to create the coming week's appointments from recurring templates.
Run daily: python manage.py generate_recurring_appointments
Use --date YYYY-MM-DD to expand from a different day.
"""
from datetime import date

from django.core.management.base import BaseCommand, CommandError

from appointments.recurrence import generate_recurring_appointments


class Command(BaseCommand):
    help = 'Create appointments for the next 7 days from active recurring appointments'

    def add_arguments(self, parser):
        parser.add_argument(
            '--date',
            help='First day of the window (YYYY-MM-DD). Defaults to today.',
        )

    def handle(self, *args, **options):
        today = None
        if options['date']:
            try:
                today = date.fromisoformat(options['date'])
            except ValueError:
                raise CommandError(f"Invalid --date {options['date']!r}, expected YYYY-MM-DD")

        result = generate_recurring_appointments(today=today)

        for error in result['errors']:
            self.stdout.write(self.style.ERROR(f'  {error}'))
        self.stdout.write(self.style.SUCCESS(
            f"Done. Templates: {result['processed']}, appointments created: {result['count']}, errors: {len(result['errors'])}"
        ))
