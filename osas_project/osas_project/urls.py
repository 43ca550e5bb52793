from django.contrib import admin
from django.urls import path, include


urlpatterns = [
    # DJANGO ADMIN (STAFF ONLY)
    path("osas/django/admin/", admin.site.urls),

    # PIPELINE MONITORING (JSON)
    path("monitoring/", include("monitoring.urls")),
]
