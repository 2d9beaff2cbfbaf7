# accounting/management/commands/seed_chart.py

from datetime import date

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from accounting.models.account import Account
from accounting.models.category import AccountCategory
from accounting.models.financial_year import FinancialYear
from accounting.services.financial_year_service import (
    activate_financial_year,
    create_financial_year,
)
from businesses.services.settings_service import BusinessNotFound, get_business, get_company_setting

CATEGORIES = [
    ("Assets", AccountCategory.ASSET),
    ("Liabilities", AccountCategory.LIABILITY),
    ("Equity", AccountCategory.EQUITY),
    ("Revenue", AccountCategory.REVENUE),
    ("Expenses", AccountCategory.EXPENSE),
]

ACCOUNTS = [
    ("1000", "Cash", AccountCategory.ASSET),
    ("1010", "Bank", AccountCategory.ASSET),
    ("1100", "Accounts Receivable", AccountCategory.ASSET),
    ("1200", "Inventory", AccountCategory.ASSET),
    ("2000", "Accounts Payable", AccountCategory.LIABILITY),
    ("3000", "Owner's Capital", AccountCategory.EQUITY),
    ("3900", "Opening Balance Equity", AccountCategory.EQUITY),
    ("4000", "Sales Revenue", AccountCategory.REVENUE),
    ("4100", "Other Income", AccountCategory.REVENUE),
    ("5000", "Cost of Goods Sold", AccountCategory.EXPENSE),
    ("6000", "Operating Expenses", AccountCategory.EXPENSE),
    ("6100", "Bank Charges", AccountCategory.EXPENSE),
]


class Command(BaseCommand):
    help = "Seed account categories + a starter chart of accounts for one business"

    def add_arguments(self, parser):
        parser.add_argument("--business", type=int, required=True, help="Business id")
        parser.add_argument(
            "--year",
            type=int,
            help="Also create (and activate) a January-December financial year",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        try:
            business = get_business(options["business"])
        except BusinessNotFound as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(f"Seeding chart of accounts for {business}...")

        get_company_setting(business.id)

        categories = {}
        for name, category_type in CATEGORIES:
            category = AccountCategory.objects.filter(business=business, type=category_type).first()
            if category is None:
                category = AccountCategory.objects.create(
                    business=business, name=name, type=category_type
                )
            categories[category_type] = category

        created_count = 0
        updated_count = 0

        for code, name, category_type in ACCOUNTS:
            acc, acc_created = Account.objects.get_or_create(
                business=business,
                code=code,
                defaults={
                    "name": name,
                    "category": categories[category_type],
                    "is_active": True,
                },
            )

            if acc_created:
                created_count += 1
                continue

            if not acc.is_active:
                acc.is_active = True
                acc.save(update_fields=["is_active", "updated_at"])
                updated_count += 1

        year_option = options.get("year")
        if year_option:
            name = f"{year_option}-{year_option}"
            year = FinancialYear.objects.filter(business=business, name=name).first()
            if year is None:
                year = create_financial_year(
                    business_id=business.id,
                    start_date=date(year_option, 1, 1),
                    end_date=date(year_option, 12, 31),
                    name=name,
                )
            activate_financial_year(business_id=business.id, financial_year_id=year.id)
            self.stdout.write(f"Financial year {year.name} is active.")

        self.stdout.write(
            self.style.SUCCESS(
                f"✔ Chart seeded ({created_count} new accounts, {updated_count} reactivated)."
            )
        )
