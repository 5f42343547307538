"""Link participants to their rendered certificate."""
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    dependencies = [
        ("participants", "0001_initial"),
        ("certificates", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="participant",
            name="certificate",
            field=models.OneToOneField(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="+",
                to="certificates.certificate",
            ),
        ),
    ]
