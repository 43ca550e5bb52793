from django.urls import path

from . import views

app_name = "monitoring"

urlpatterns = [
    path("status/", views.pipeline_status, name="status"),
    path("statistics/", views.deadline_statistics, name="statistics"),
    path("cleanup/", views.force_cleanup, name="force-cleanup"),
    path("reminders/run/", views.run_reminders_now, name="run-reminders"),
]
