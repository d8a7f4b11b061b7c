from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Account",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("username", models.CharField(max_length=150, unique=True)),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("password_hash", models.CharField(max_length=255)),
                ("balance", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
            ],
            options={
                "ordering": ["id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("balance__gte", 0)),
                        name="account_balance_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="CatalogueItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("genre", models.CharField(max_length=100)),
                ("developer", models.CharField(max_length=200)),
                ("release_date", models.DateField()),
                ("price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("lease_price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("description", models.TextField()),
            ],
            options={
                "ordering": ["id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("price__gt", 0)),
                        name="catalogue_item_price_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("lease_price__gt", 0)),
                        name="catalogue_item_lease_price_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="TransactionRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("kind", models.CharField(choices=[("Purchase", "Purchase"), ("Lease", "Lease")], max_length=8)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("transaction_date", models.DateField()),
                ("expiry_date", models.DateField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="transactions",
                        to="gamestore.account",
                    ),
                ),
                (
                    "item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="gamestore.catalogueitem",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("expiry_date__isnull", False), ("kind", "Lease")),
                            models.Q(("expiry_date__isnull", True), ("kind", "Purchase")),
                            _connector="OR",
                        ),
                        name="transaction_record_expiry_matches_kind",
                    ),
                ],
            },
        ),
    ]
