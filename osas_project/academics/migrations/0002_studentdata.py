from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    dependencies = [
        ("academics", "0001_initial"),
        ("organizations", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="StudentData",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("student_number", models.CharField(max_length=30)),
                ("full_name", models.CharField(blank=True, max_length=200)),
                ("payload", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("council", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="student_data", to="organizations.council")),
                ("organization", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="student_data", to="organizations.organization")),
                ("semester", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="student_data", to="academics.academicsemester")),
            ],
            options={
                "verbose_name_plural": "student data",
                "indexes": [models.Index(fields=["semester", "student_number"], name="studentdata_semester_idx")],
            },
        ),
    ]
