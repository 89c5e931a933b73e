"""
Management command to set up the membership categories.
Run this after migrations: python manage.py setup_initial_data
"""
from django.core.management.base import BaseCommand
from django.db import transaction
from memberships.models import MembershipCategory
from memberships.utils import get_category_code


class Command(BaseCommand):
    help = 'Sets up the GNACOPS membership categories'

    def handle(self, *args, **options):
        self.stdout.write('Setting up membership categories...')

        categories_data = [
            {'name': 'Institutional Membership', 'price': 500.00, 'position': 1},
            {'name': 'Proprietor', 'price': 300.00, 'position': 2},
            {'name': 'Teacher Council', 'price': 100.00, 'position': 3},
            {'name': 'Parent Council', 'price': 50.00, 'position': 4},
            {'name': 'Service Provider', 'price': 200.00, 'position': 5},
            {'name': 'Non-Teaching Staff', 'price': 50.00, 'position': 6},
        ]

        try:
            with transaction.atomic():
                for category_data in categories_data:
                    category, created = MembershipCategory.objects.get_or_create(
                        name=category_data['name'],
                        defaults=category_data
                    )
                    code = get_category_code(category.name)
                    if created:
                        self.stdout.write(self.style.SUCCESS(f'✓ Created Category: {category.name} ({code})'))
                    else:
                        self.stdout.write(self.style.WARNING(f'Category {category.name} already exists'))

        except Exception as e:
            self.stdout.write(self.style.ERROR(f'Error setting up initial data: {str(e)}'))
            raise

        self.stdout.write(self.style.SUCCESS('\n✓ Initial data setup complete!'))
