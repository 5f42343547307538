"""
Initial migration for the payments app.

Creates the PaymentIncident table used to track captured payments that
need a refund or manual reconciliation.
"""
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("events", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="PaymentIncident",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("payment_id", models.CharField(db_index=True, max_length=100)),
                ("order_id", models.CharField(blank=True, max_length=100)),
                ("email", models.EmailField(blank=True, max_length=254)),
                (
                    "reason",
                    models.CharField(
                        choices=[
                            ("duplicate_registration", "Duplicate registration"),
                            ("registration_failed", "Registration failed after payment"),
                            ("not_captured", "Payment not captured"),
                            ("amount_mismatch", "Amount mismatch"),
                        ],
                        max_length=32,
                    ),
                ),
                ("detail", models.TextField(blank=True)),
                ("payload", models.JSONField(blank=True, default=dict)),
                ("resolved", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "event",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="payment_incidents",
                        to="events.event",
                    ),
                ),
            ],
            options={"ordering": ["-created_at"]},
        ),
    ]
