from django.apps import AppConfig


class ChangeRequestsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "change_requests"
    verbose_name = "Change requests"
