from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("academics", "0001_initial"),
        ("organizations", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ComplianceDocument",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("kind", models.CharField(choices=[("organization", "Organization document"), ("event", "Event document"), ("council", "Council document")], db_index=True, max_length=20)),
                ("document_type", models.CharField(help_text="Requirement key, e.g. officers_list", max_length=50)),
                ("event_title", models.CharField(blank=True, max_length=255)),
                ("compliance_status", models.CharField(choices=[("pending", "Pending review"), ("rejected_with_deadline", "Rejected (resubmission required)"), ("resubmitted", "Resubmitted"), ("approved", "Approved")], db_index=True, default="pending", max_length=30)),
                ("rejection_reason", models.TextField(blank=True)),
                ("resubmission_deadline", models.DateTimeField(blank=True, db_index=True, null=True)),
                ("resubmitted_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("academic_year", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="documents", to="academics.academicyear")),
                ("adviser", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="advised_documents", to=settings.AUTH_USER_MODEL)),
                ("council", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="documents", to="organizations.council")),
                ("organization", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="documents", to="organizations.organization")),
                ("president", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="presided_documents", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["resubmission_deadline"],
                "indexes": [models.Index(fields=["compliance_status", "resubmission_deadline"], name="document_status_deadline_idx")],
            },
        ),
        migrations.CreateModel(
            name="ReminderLedgerEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("deadline_occurrence", models.DateTimeField(help_text="Resubmission deadline value this reminder was sent for")),
                ("role", models.CharField(choices=[("president", "President"), ("adviser", "Adviser")], max_length=20)),
                ("sent_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("email_delivered", models.BooleanField(default=False)),
                ("document", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="reminder_ledger", to="compliance.compliancedocument")),
                ("recipient", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="deadline_reminders", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name_plural": "reminder ledger entries",
                "ordering": ["-sent_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("document", "recipient", "deadline_occurrence"), name="unique_reminder_per_deadline_occurrence"),
                ],
            },
        ),
    ]
