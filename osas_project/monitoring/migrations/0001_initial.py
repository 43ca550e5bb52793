from django.db import migrations, models
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="PipelineRun",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("pipeline", models.CharField(choices=[("calendar", "Calendar status check"), ("deadline", "Deadline reminders"), ("cleanup", "Notification cleanup")], db_index=True, max_length=20)),
                ("status", models.CharField(choices=[("success", "Success"), ("failed", "Failed")], default="success", max_length=20)),
                ("started_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("finished_at", models.DateTimeField(blank=True, null=True)),
                ("counts", models.JSONField(blank=True, default=dict)),
                ("transitions", models.JSONField(blank=True, default=list)),
                ("errors", models.JSONField(blank=True, default=list)),
            ],
            options={
                "ordering": ["-started_at"],
                "indexes": [models.Index(fields=["pipeline", "started_at"], name="pipelinerun_started_idx")],
            },
        ),
    ]
