# Initial migration for the loyalty ledger and fulfillment models

import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Mason",
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
                (
                    "code",
                    models.CharField(
                        help_text="Unique mason reference (ex: MSN-001)",
                        max_length=50,
                        unique=True,
                        verbose_name="code",
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="name")),
                (
                    "points_balance",
                    models.IntegerField(
                        default=0,
                        help_text="Sum of all ledger entries for this mason",
                        verbose_name="points balance",
                    ),
                ),
                (
                    "bags_lifted",
                    models.IntegerField(
                        default=0,
                        help_text="Lifetime purchase volume from approved bag lifts",
                        verbose_name="bags lifted",
                    ),
                ),
                (
                    "is_active",
                    models.BooleanField(db_index=True, default=True, verbose_name="active"),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "referred_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="referrals",
                        to="masonman.mason",
                        verbose_name="referred by",
                    ),
                ),
            ],
            options={
                "verbose_name": "mason",
                "verbose_name_plural": "masons",
                "ordering": ["name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(points_balance__gte=0),
                        name="masonman_mason_balance_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(bags_lifted__gte=0),
                        name="masonman_mason_bags_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Reward",
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
                ("name", models.CharField(max_length=200, verbose_name="name")),
                ("point_cost", models.PositiveIntegerField(verbose_name="point cost")),
                ("stock", models.IntegerField(default=0, verbose_name="stock")),
                (
                    "total_available_quantity",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Historical cap of units ever made available",
                        verbose_name="total available quantity",
                    ),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "reward",
                "verbose_name_plural": "rewards",
                "ordering": ["name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(stock__gte=0),
                        name="masonman_reward_stock_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="LedgerEntry",
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
                (
                    "source_type",
                    models.CharField(
                        choices=[
                            ("bag_lift", "Bag lift"),
                            ("adjustment", "Adjustment"),
                            ("referral_bonus", "Referral bonus"),
                        ],
                        max_length=32,
                        verbose_name="source type",
                    ),
                ),
                (
                    "source_id",
                    models.CharField(
                        blank=True,
                        help_text="BagLift or RewardRedemption id",
                        max_length=64,
                        null=True,
                        verbose_name="source id",
                    ),
                ),
                (
                    "points",
                    models.IntegerField(
                        help_text="Positive for credits, negative for debits and reversals",
                        verbose_name="points",
                    ),
                ),
                (
                    "balance_after",
                    models.IntegerField(
                        help_text="Mason balance right after this entry",
                        verbose_name="balance after",
                    ),
                ),
                ("memo", models.CharField(blank=True, max_length=255, verbose_name="memo")),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at"),
                ),
                ("created_by", models.CharField(blank=True, max_length=100, verbose_name="created by")),
                (
                    "mason",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="ledger_entries",
                        to="masonman.mason",
                        verbose_name="mason",
                    ),
                ),
            ],
            options={
                "verbose_name": "ledger entry",
                "verbose_name_plural": "ledger entries",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["mason", "-created_at"], name="masonman_ledger_mason_recent"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(source_id__isnull=False),
                        fields=("source_type", "source_id"),
                        name="masonman_ledger_one_entry_per_source",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="BagLift",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("purchase_date", models.DateField(verbose_name="purchase date")),
                ("bag_count", models.PositiveIntegerField(verbose_name="bag count")),
                (
                    "points_credited",
                    models.IntegerField(
                        help_text="Base and bonanza points, fixed when the lift is recorded",
                        verbose_name="points credited",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("approved", "Approved"),
                            ("rejected", "Rejected"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                ("approved_by", models.CharField(blank=True, max_length=100, verbose_name="approved by")),
                ("approved_at", models.DateTimeField(blank=True, null=True, verbose_name="approved at")),
                ("memo", models.CharField(blank=True, max_length=255, verbose_name="memo")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "mason",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bag_lifts",
                        to="masonman.mason",
                        verbose_name="mason",
                    ),
                ),
            ],
            options={
                "verbose_name": "bag lift",
                "verbose_name_plural": "bag lifts",
                "ordering": ["-purchase_date", "-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(bag_count__gt=0),
                        name="masonman_baglift_bag_count_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="RewardRedemption",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("quantity", models.PositiveIntegerField(verbose_name="quantity")),
                ("points_debited", models.PositiveIntegerField(verbose_name="points debited")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("placed", "Placed"),
                            ("approved", "Approved"),
                            ("rejected", "Rejected"),
                            ("shipped", "Shipped"),
                            ("delivered", "Delivered"),
                        ],
                        db_index=True,
                        default="placed",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                ("delivery_name", models.CharField(blank=True, max_length=200, verbose_name="delivery name")),
                ("delivery_phone", models.CharField(blank=True, max_length=20, verbose_name="delivery phone")),
                ("delivery_address", models.TextField(blank=True, verbose_name="delivery address")),
                ("fulfillment_notes", models.TextField(blank=True, verbose_name="fulfillment notes")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "mason",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="redemptions",
                        to="masonman.mason",
                        verbose_name="mason",
                    ),
                ),
                (
                    "reward",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="redemptions",
                        to="masonman.reward",
                        verbose_name="reward",
                    ),
                ),
            ],
            options={
                "verbose_name": "reward redemption",
                "verbose_name_plural": "reward redemptions",
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(quantity__gt=0),
                        name="masonman_redemption_quantity_positive",
                    ),
                ],
            },
        ),
    ]
