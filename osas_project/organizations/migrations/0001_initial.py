from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


RECOGNITION_CHOICES = [
    ("recognized", "Recognized"),
    ("pending", "Pending"),
    ("unrecognized", "Unrecognized"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("academics", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Organization",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("code", models.CharField(blank=True, max_length=30)),
                ("college", models.CharField(blank=True, max_length=150)),
                ("status", models.CharField(choices=RECOGNITION_CHOICES, db_index=True, default="pending", max_length=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("academic_year", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="%(class)ss", to="academics.academicyear")),
                ("adviser", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="advised_%(class)ss", to=settings.AUTH_USER_MODEL)),
                ("president", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="presided_%(class)ss", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["name"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Council",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("code", models.CharField(blank=True, max_length=30)),
                ("college", models.CharField(blank=True, max_length=150)),
                ("status", models.CharField(choices=RECOGNITION_CHOICES, db_index=True, default="pending", max_length=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("academic_year", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="%(class)ss", to="academics.academicyear")),
                ("adviser", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="advised_%(class)ss", to=settings.AUTH_USER_MODEL)),
                ("president", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="presided_%(class)ss", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["name"],
                "abstract": False,
            },
        ),
    ]
