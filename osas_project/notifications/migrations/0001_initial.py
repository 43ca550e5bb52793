from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("academics", "0001_initial"),
        ("compliance", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("category", models.CharField(choices=[("deadline_reminder", "Deadline reminder"), ("document", "Document"), ("event", "Event"), ("system", "System")], db_index=True, max_length=30)),
                ("priority", models.CharField(choices=[("info", "Info"), ("warning", "Warning"), ("danger", "Danger")], db_index=True, default="info", max_length=20)),
                ("title", models.CharField(help_text="Short headline shown in notification list", max_length=200)),
                ("message", models.TextField(help_text="Detailed message shown when expanded")),
                ("is_read", models.BooleanField(db_index=True, default=False)),
                ("read_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("academic_year", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="notifications", to="academics.academicyear")),
                ("document", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="notifications", to="compliance.compliancedocument")),
                ("recipient", models.ForeignKey(help_text="User who receives this notification", on_delete=django.db.models.deletion.CASCADE, related_name="notifications", to=settings.AUTH_USER_MODEL)),
                ("semester", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="notifications", to="academics.academicsemester")),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["recipient", "is_read"], name="notification_unread_idx"),
                    models.Index(fields=["recipient", "category", "is_read"], name="notification_category_idx"),
                ],
            },
        ),
    ]
