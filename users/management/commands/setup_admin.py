# users/management/commands/setup_admin.py
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from core.exceptions import InstituteManagementException
from users.services import AdminBootstrapService


class Command(BaseCommand):
    help = 'Create the first admin account (rejected once an admin exists)'

    def add_arguments(self, parser):
        parser.add_argument('--email', help='Admin email (defaults to ADMIN_EMAIL)')
        parser.add_argument('--password', help='Admin password (defaults to ADMIN_PASSWORD)')

    def handle(self, *args, **options):
        email = options.get('email') or getattr(settings, 'ADMIN_EMAIL', '')
        password = options.get('password') or getattr(settings, 'ADMIN_PASSWORD', '')

        if AdminBootstrapService.admin_exists():
            self.stdout.write(self.style.WARNING("Admin already exists - nothing to do"))
            return

        try:
            # The command runs with shell access, so the shared secret is not required
            user = AdminBootstrapService.bootstrap(
                email, password, secret=getattr(settings, 'SETUP_ADMIN_SECRET', '')
            )
        except InstituteManagementException as e:
            raise CommandError(e.message)

        self.stdout.write(self.style.SUCCESS(f"Admin user created: {user.email}"))
