from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Business",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                (
                    "code",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        help_text="Unique business code (optional). If set, must be unique.",
                        max_length=50,
                        null=True,
                    ),
                ),
                ("legal_name", models.CharField(blank=True, default="", max_length=255)),
                ("address", models.TextField(blank=True, default="")),
                ("phone", models.CharField(blank=True, default="", max_length=50)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "members",
                    models.ManyToManyField(blank=True, related_name="businesses", to=settings.AUTH_USER_MODEL),
                ),
            ],
            options={
                "verbose_name_plural": "Businesses",
                "ordering": ["name"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("code__isnull", False), models.Q(("code", ""), _negated=True)),
                        fields=("code",),
                        name="uniq_business_code_when_present",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="CompanySetting",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("currency", models.CharField(default="BDT", max_length=10)),
                ("currency_symbol", models.CharField(default="৳", max_length=10)),
                ("decimal_separator", models.CharField(default=".", max_length=1)),
                ("thousand_separator", models.CharField(blank=True, default=",", max_length=1)),
                ("timezone", models.CharField(default="Asia/Dhaka", max_length=64)),
                ("fiscal_year_start_month", models.CharField(default="January", max_length=20)),
                ("journal_prefix", models.CharField(default="JE-", max_length=20)),
                ("invoice_prefix", models.CharField(default="INV-", max_length=20)),
                ("purchase_prefix", models.CharField(default="PO-", max_length=20)),
                ("sales_prefix", models.CharField(default="SO-", max_length=20)),
                ("receipt_prefix", models.CharField(default="REC-", max_length=20)),
                ("payment_prefix", models.CharField(default="PAY-", max_length=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "business",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="company_setting",
                        to="businesses.business",
                    ),
                ),
            ],
            options={
                "verbose_name": "Company Setting",
                "verbose_name_plural": "Company Settings",
            },
        ),
        migrations.CreateModel(
            name="DocumentSequence",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "document_type",
                    models.CharField(
                        choices=[
                            ("journal", "Journal Entry"),
                            ("invoice", "Invoice"),
                            ("purchase", "Purchase Order"),
                            ("sales", "Sales Order"),
                            ("receipt", "Receipt"),
                            ("payment", "Payment"),
                        ],
                        max_length=20,
                    ),
                ),
                ("last_number", models.PositiveIntegerField(default=0)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "business",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="document_sequences",
                        to="businesses.business",
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(
                        fields=("business", "document_type"),
                        name="uniq_document_sequence_business_type",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("last_number__gte", 0)),
                        name="chk_document_sequence_non_negative",
                    ),
                ],
            },
        ),
    ]
