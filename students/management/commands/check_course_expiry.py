# students/management/commands/check_course_expiry.py
from datetime import datetime

from django.core.management.base import BaseCommand, CommandError

from shared.helpers import institute_today
from students.services import CourseExpiryService


class Command(BaseCommand):
    help = 'Expire finished subscriptions, complete ended classes and expire past offers'

    def add_arguments(self, parser):
        parser.add_argument(
            '--date',
            type=str,
            help='Run as of this date (YYYY-MM-DD) instead of today',
        )

    def handle(self, *args, **options):
        if options.get('date'):
            try:
                today = datetime.strptime(options['date'], '%Y-%m-%d').date()
            except ValueError:
                raise CommandError(f"Invalid date: {options['date']}")
        else:
            today = institute_today()

        self.stdout.write(f"Checking course expiry for {today.isoformat()}...")
        summary = CourseExpiryService.run(today)

        self.stdout.write(self.style.SUCCESS(
            f"  Expired students: {summary['expired_students_updated']}"
        ))
        self.stdout.write(self.style.SUCCESS(
            f"  Classes completed: {summary['classes_completed']}"
        ))
        self.stdout.write(self.style.SUCCESS(
            f"  Offers expired: {summary['offers_expired']}"
        ))

        if summary['students_expiring_soon']:
            self.stdout.write(self.style.WARNING(
                f"  {summary['students_expiring_soon']} student(s) expire within "
                f"{CourseExpiryService.WARNING_DAYS} days:"
            ))
            for student in summary['expiring_students']:
                self.stdout.write(f"    - {student['name']} <{student['email']}> on {student['expiration_date']}")
