from django.apps import AppConfig


class ApiConfig(AppConfig):
    name = "walk_buddy.api"
    label = "api"
