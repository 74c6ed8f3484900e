import uuid

import django.db.models.deletion
from django.db import migrations, models


TERM_FIELDS = [
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
    ("total", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
    (
        "grand_total",
        models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True),
    ),
    ("shipment_date", models.DateField(blank=True, null=True)),
    ("offer_validity_date", models.DateField(blank=True, null=True)),
    ("remark", models.CharField(blank=True, max_length=100)),
]

ROLE_CHOICES = [("business_owner", "Business Owner"), ("buyer", "Buyer")]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        ("offers", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Thread",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("open", "Open"),
                            ("accepted", "Accepted"),
                            ("rejected", "Rejected"),
                            ("countered", "Countered"),
                            ("close", "Close"),
                        ],
                        default="open",
                        max_length=20,
                    ),
                ),
                (
                    "business_owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="threads",
                        to="accounts.businessowner",
                    ),
                ),
                (
                    "buyer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="threads",
                        to="accounts.buyer",
                    ),
                ),
                (
                    "offer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="threads",
                        to="offers.offer",
                    ),
                ),
            ],
            options={
                "verbose_name": "Negotiation Thread",
                "verbose_name_plural": "Negotiation Threads",
                "db_table": "offer_buyers",
                "ordering": ["-updated_at"],
                "indexes": [
                    models.Index(
                        fields=["business_owner", "status"],
                        name="thread_owner_status_idx",
                    ),
                    models.Index(
                        fields=["buyer", "status"], name="thread_buyer_status_idx"
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("offer", "buyer"), name="unique_thread_per_offer_buyer"
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Proposal",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                *TERM_FIELDS,
                ("version_no", models.PositiveIntegerField()),
                ("from_party", models.CharField(max_length=255)),
                ("to_party", models.CharField(max_length=255)),
                ("sender_role", models.CharField(choices=ROLE_CHOICES, max_length=20)),
                ("offer_name", models.CharField(max_length=100)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "thread",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="proposals",
                        to="negotiations.thread",
                    ),
                ),
            ],
            options={
                "verbose_name": "Proposal",
                "verbose_name_plural": "Proposals",
                "db_table": "offer_versions",
                "ordering": ["thread", "version_no"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("thread", "version_no"), name="unique_version_per_thread"
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("version_no__gte", 1)),
                        name="proposal_version_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Decision",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("is_accepted", models.BooleanField(default=False)),
                ("is_rejected", models.BooleanField(default=False)),
                ("accepted_by", models.CharField(blank=True, max_length=255)),
                ("rejected_by", models.CharField(blank=True, max_length=255)),
                ("actor_role", models.CharField(choices=ROLE_CHOICES, max_length=20)),
                ("actor_id", models.UUIDField()),
                ("owner_name", models.CharField(blank=True, max_length=255)),
                ("owner_company_name", models.CharField(blank=True, max_length=255)),
                ("buyer_name", models.CharField(blank=True, max_length=255)),
                ("buyer_company_name", models.CharField(blank=True, max_length=255)),
                ("offer_name", models.CharField(max_length=100)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "business_owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="decisions",
                        to="accounts.businessowner",
                    ),
                ),
                (
                    "buyer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="decisions",
                        to="accounts.buyer",
                    ),
                ),
                (
                    "offer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="decisions",
                        to="offers.offer",
                    ),
                ),
                (
                    "proposal",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="decisions",
                        to="negotiations.proposal",
                    ),
                ),
                (
                    "thread",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="decisions",
                        to="negotiations.thread",
                    ),
                ),
            ],
            options={
                "verbose_name": "Decision",
                "verbose_name_plural": "Decisions",
                "db_table": "offer_results",
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["offer", "buyer", "-created_at"],
                        name="decision_pair_recent_idx",
                    )
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("is_accepted", True), ("is_rejected", False)),
                            models.Q(("is_accepted", False), ("is_rejected", True)),
                            _connector="OR",
                        ),
                        name="decision_accept_xor_reject",
                    )
                ],
            },
        ),
    ]
