import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Creator",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("handle", models.CharField(max_length=255, unique=True)),
                ("name", models.CharField(blank=True, max_length=255, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
        ),
        migrations.CreateModel(
            name="MatchJob",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "kind",
                    models.CharField(
                        choices=[
                            ("match_batch", "Match batch"),
                            ("smart_match", "Smart match (AI fallback)"),
                            ("rebuild_index", "Rebuild index"),
                        ],
                        max_length=20,
                    ),
                ),
                ("params", models.JSONField(blank=True, default=dict)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("processing", "Processing"),
                            ("completed", "Completed"),
                            ("failed", "Failed"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=12,
                    ),
                ),
                ("attempts", models.PositiveSmallIntegerField(default=0)),
                ("max_attempts", models.PositiveSmallIntegerField(default=3)),
                ("result", models.JSONField(blank=True, null=True)),
                ("last_error", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("started_at", models.DateTimeField(blank=True, null=True)),
                ("finished_at", models.DateTimeField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Match Job",
                "verbose_name_plural": "Match Jobs",
                "ordering": ["created_at"],
                "indexes": [models.Index(fields=["status", "created_at"], name="matchjob_status_created_idx")],
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(help_text="Display name, the primary matching key.", max_length=500, verbose_name="Name")),
                (
                    "product_url",
                    models.URLField(
                        blank=True,
                        help_text="Canonical shop URL used for direct matches.",
                        max_length=2000,
                        null=True,
                        verbose_name="Product URL",
                    ),
                ),
                ("category", models.CharField(blank=True, db_index=True, max_length=255, null=True)),
                ("price", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("commission", models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                (
                    "commission_amount",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Derived: price x commission rate. Recomputed by the index rebuild.",
                        max_digits=12,
                        null=True,
                        verbose_name="Earning per sale",
                    ),
                ),
                ("total_revenue", models.DecimalField(blank=True, decimal_places=2, max_digits=16, null=True)),
                ("total_sales", models.IntegerField(blank=True, null=True)),
                ("revenue_30d", models.DecimalField(blank=True, decimal_places=2, max_digits=16, null=True)),
                ("gmv_30d", models.DecimalField(blank=True, decimal_places=2, max_digits=16, null=True, verbose_name="GMV 30d")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Product",
                "verbose_name_plural": "Products",
            },
        ),
        migrations.CreateModel(
            name="Video",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("video_url", models.URLField(max_length=2000)),
                ("title", models.TextField(blank=True, null=True)),
                ("product_name", models.TextField(blank=True, help_text="Product name declared by the creator.", null=True)),
                ("category", models.CharField(blank=True, max_length=255, null=True)),
                ("creator_handle", models.CharField(blank=True, max_length=255, null=True)),
                ("creator_name", models.CharField(blank=True, max_length=255, null=True)),
                ("revenue", models.DecimalField(blank=True, decimal_places=2, max_digits=16, null=True)),
                ("product_price", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("product_revenue", models.DecimalField(blank=True, decimal_places=2, max_digits=16, null=True)),
                ("product_sales", models.IntegerField(blank=True, null=True)),
                (
                    "match_confidence",
                    models.FloatField(
                        blank=True,
                        help_text="0-1 score of the accepted match; 0 once attempted without a match.",
                        null=True,
                    ),
                ),
                (
                    "match_type",
                    models.CharField(
                        blank=True,
                        choices=[("direct", "Direct (URL)"), ("fuzzy", "Fuzzy"), ("ai", "AI-assisted")],
                        max_length=10,
                        null=True,
                    ),
                ),
                ("match_attempted_at", models.DateTimeField(blank=True, null=True)),
                ("imported_at", models.DateTimeField(auto_now_add=True)),
                (
                    "creator",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="adbroll.creator",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="adbroll.product",
                    ),
                ),
            ],
            options={
                "verbose_name": "Video",
                "verbose_name_plural": "Videos",
                "indexes": [models.Index(fields=["product", "match_attempted_at"], name="video_product_attempt_idx")],
            },
        ),
    ]
