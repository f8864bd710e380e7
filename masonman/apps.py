from django.apps import AppConfig


class MasonmanConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "masonman"
    verbose_name = "Masonman - Mason Loyalty Ledger"
