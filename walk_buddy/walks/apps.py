from django.apps import AppConfig


class WalksConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "walk_buddy.walks"
    label = "walks"
