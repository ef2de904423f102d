from django.apps import AppConfig


class FittrackConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "fittrack"
    verbose_name = "AI workout tracking"
