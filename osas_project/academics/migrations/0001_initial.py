from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AcademicYear",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("status", models.CharField(choices=[("inactive", "Inactive"), ("active", "Active"), ("archived", "Archived")], db_index=True, default="inactive", max_length=20)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("school_year", models.CharField(help_text="Display label, e.g. 2024-2025", max_length=20)),
            ],
            options={
                "ordering": ["-start_date"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("end_date__gte", models.F("start_date"))), name="academic_year_dates_ordered"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AcademicSemester",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("status", models.CharField(choices=[("inactive", "Inactive"), ("active", "Active"), ("archived", "Archived")], db_index=True, default="inactive", max_length=20)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(help_text="e.g. First Semester", max_length=50)),
                ("academic_year", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="semesters", to="academics.academicyear")),
            ],
            options={
                "ordering": ["-start_date"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("end_date__gte", models.F("start_date"))), name="academic_semester_dates_ordered"),
                ],
            },
        ),
    ]
