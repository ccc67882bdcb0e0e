# core/management/commands/seed_configuration.py
from decimal import Decimal

from django.core.management.base import BaseCommand

from core.config_values import CourseOption, DurationOption, SimpleOption
from core.models import ConfigurationItem
from core.services import ConfigurationService
from shared.constants import ConfigTypes, PaymentMethods, AUTO_TRANSLATION_SETTING


DEFAULT_CONFIGURATION = {
    ConfigTypes.COURSE: [
        CourseOption(key=f'level-{n}', label=f'Level {n}', category='English') for n in range(1, 13)
    ] + [
        CourseOption(key='spanish', label='Spanish', category='Languages'),
        CourseOption(key='italian', label='Italian', category='Languages'),
        CourseOption(key='french', label='French', category='Languages'),
        CourseOption(key='arabic', label='Arabic', category='Languages'),
        CourseOption(key='chinese', label='Chinese', category='Languages'),
        CourseOption(key='speaking', label='Speaking Club', category='Skills'),
    ],
    ConfigTypes.COURSE_DURATION: [
        DurationOption(key='1', label='1 Month', price=Decimal('500')),
        DurationOption(key='3', label='3 Months', price=Decimal('1350')),
        DurationOption(key='6', label='6 Months', price=Decimal('2500')),
        DurationOption(key='12', label='12 Months', price=Decimal('4500')),
    ],
    ConfigTypes.PAYMENT_METHOD: [
        SimpleOption(key='cash', label=PaymentMethods.CASH),
        SimpleOption(key='card', label=PaymentMethods.CARD),
        SimpleOption(key='transfer', label=PaymentMethods.TRANSFER),
    ],
    ConfigTypes.PROGRAM: [
        SimpleOption(key='general', label='General English'),
        SimpleOption(key='languages', label='Foreign Languages'),
    ],
    ConfigTypes.CLASS_TYPE: [
        SimpleOption(key='in_person', label='In Person'),
        SimpleOption(key='online', label='Online'),
    ],
    ConfigTypes.SETTING: [
        SimpleOption(key=AUTO_TRANSLATION_SETTING, label='false'),
    ],
}


class Command(BaseCommand):
    help = 'Seed default configuration rows (courses, durations, payment methods, settings)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--reset',
            action='store_true',
            help='Delete existing configuration rows before seeding',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be created without actually creating',
        )

    def handle(self, *args, **options):
        reset = options.get('reset')
        dry_run = options.get('dry_run')

        if reset and not dry_run:
            deleted = ConfigurationItem.objects.all().delete()
            self.stdout.write(self.style.WARNING(f"Reset: Deleted {deleted[0]} configuration rows"))

        created_count = 0
        for config_type, options_list in DEFAULT_CONFIGURATION.items():
            for order, option in enumerate(options_list):
                exists = ConfigurationItem.objects.filter(
                    config_type=config_type, config_key=option.key
                ).exists()

                if dry_run:
                    if not exists:
                        self.stdout.write(f"  [DRY RUN] Would create {config_type}: {option.key}")
                    continue

                if exists:
                    self.stdout.write(self.style.WARNING(f"  Already exists: {config_type}:{option.key}"))
                    continue

                ConfigurationService.save_option(config_type, option, display_order=order)
                created_count += 1
                self.stdout.write(self.style.SUCCESS(f"  Created {config_type}: {option.key}"))

        self.stdout.write("\n" + "=" * 50)
        if dry_run:
            self.stdout.write(self.style.WARNING("DRY RUN COMPLETED - No changes were made"))
        else:
            self.stdout.write(self.style.SUCCESS(f"SEEDING COMPLETED: {created_count} configuration rows created"))
