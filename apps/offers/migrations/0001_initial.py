import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Offer",
            fields=[
                ("product_name", models.CharField(max_length=100)),
                ("species_name", models.CharField(max_length=100)),
                ("brand", models.CharField(blank=True, max_length=50)),
                ("plant_approval_number", models.CharField(blank=True, max_length=50)),
                ("origin", models.CharField(blank=True, max_length=50)),
                ("processor", models.CharField(blank=True, max_length=50)),
                ("packing", models.CharField(blank=True, max_length=255)),
                ("quantity", models.CharField(blank=True, max_length=100)),
                ("tolerance", models.CharField(blank=True, max_length=100)),
                ("payment_terms", models.CharField(blank=True, max_length=255)),
                ("size_breakups", models.JSONField(default=list)),
                (
                    "total",
                    models.DecimalField(
                        blank=True, decimal_places=2, max_digits=14, null=True
                    ),
                ),
                (
                    "grand_total",
                    models.DecimalField(
                        blank=True, decimal_places=2, max_digits=14, null=True
                    ),
                ),
                ("shipment_date", models.DateField(blank=True, null=True)),
                ("offer_validity_date", models.DateField(blank=True, null=True)),
                ("remark", models.CharField(blank=True, max_length=100)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("offer_name", models.CharField(max_length=100)),
                (
                    "status",
                    models.CharField(
                        choices=[("open", "Open"), ("close", "Close")],
                        default="open",
                        max_length=10,
                    ),
                ),
                (
                    "business_owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="offers",
                        to="accounts.businessowner",
                    ),
                ),
            ],
            options={
                "verbose_name": "Offer",
                "verbose_name_plural": "Offers",
                "db_table": "offers",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["business_owner", "status"],
                        name="offer_owner_status_idx",
                    ),
                    models.Index(fields=["offer_name"], name="offer_name_idx"),
                ],
            },
        ),
    ]
