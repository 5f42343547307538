"""
Initial migration for the participants app.

Creates the Participant table with the (email, event) unique constraint.
The link to the rendered certificate is added in 0002, once the
certificates app exists.
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
            name="Participant",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("email", models.EmailField(max_length=254)),
                ("phone", models.CharField(blank=True, max_length=32)),
                ("event_title", models.CharField(blank=True, max_length=255)),
                ("ticket_name", models.CharField(max_length=100)),
                ("ticket_price", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("quantity", models.PositiveIntegerField(default=1)),
                ("amount", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("is_volunteer", models.BooleanField(default=False)),
                ("tshirt_size", models.CharField(blank=True, max_length=8)),
                ("certificate_generated", models.BooleanField(default=False)),
                ("email_sent", models.BooleanField(default=False)),
                ("email_sent_at", models.DateTimeField(blank=True, null=True)),
                ("checked_in", models.BooleanField(default=False)),
                ("check_in_time", models.DateTimeField(blank=True, null=True)),
                ("payment_id", models.CharField(blank=True, db_index=True, max_length=100)),
                ("order_id", models.CharField(blank=True, max_length=100)),
                ("payment_signature", models.CharField(blank=True, max_length=255)),
                ("payment_verified", models.BooleanField(default=False)),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="participants",
                        to="events.event",
                    ),
                ),
            ],
            options={"ordering": ["-created_at"]},
        ),
        migrations.AddConstraint(
            model_name="participant",
            constraint=models.UniqueConstraint(fields=("email", "event"), name="uniq_participant_email_per_event"),
        ),
    ]
