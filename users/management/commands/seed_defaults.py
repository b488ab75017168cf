"""
Django management command to install default access data
Usage: python manage.py seed_defaults

Creates:
- Built-in permissions ("module.action")
- Admin role with every permission
- Semesters Spring, Summer and Fall
- The admin user (SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD)
"""

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from users.defaults import seed_admin_role, seed_permissions, seed_semesters

User = get_user_model()


class Command(BaseCommand):
    help = 'Install default permissions, the Admin role, semesters and the admin user'

    def add_arguments(self, parser):
        parser.add_argument('--email', default=settings.SEED_ADMIN_EMAIL)
        parser.add_argument('--password', default=settings.SEED_ADMIN_PASSWORD)

    def handle(self, *args, **options):
        created = seed_permissions()
        self.stdout.write(f'Permissions created: {created}')

        admin_role = seed_admin_role()
        self.stdout.write(f'Role "{admin_role.name}" holds {admin_role.permissions.count()} permissions')

        seed_semesters()
        self.stdout.write('Semesters: Spring, Summer, Fall')

        email = options['email'].lower().strip()
        user = User.objects.filter(email=email).first()
        if user:
            self.stdout.write(self.style.WARNING(f'Admin user {email} already exists'))
        else:
            User.objects.create_user(
                email=email,
                password=options['password'],
                name='System Admin',
                role=admin_role,
                is_staff=True,
            )
            self.stdout.write(self.style.SUCCESS(f'Admin user created: {email}'))

        self.stdout.write(self.style.SUCCESS('Seed completed'))
