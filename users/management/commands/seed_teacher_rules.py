# users/management/commands/seed_teacher_rules.py
from django.core.management.base import BaseCommand

from users.services import TeacherAssignmentRules


class Command(BaseCommand):
    help = 'Create the default course -> teacher rules from teacher names'

    def handle(self, *args, **options):
        rules = TeacherAssignmentRules.seed_default_rules()

        for rule in rules:
            self.stdout.write(f"  {rule}")

        expected = len(TeacherAssignmentRules.DEFAULT_RULES)
        if len(rules) < expected:
            self.stdout.write(
                self.style.WARNING(f"Only {len(rules)} of {expected} rules seeded; add the missing teachers and re-run")
            )
        else:
            self.stdout.write(self.style.SUCCESS(f"✓ Seeded {len(rules)} teacher rules"))
