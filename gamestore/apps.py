from django.apps import AppConfig


class GamestoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "gamestore"
    verbose_name = "Game Store"
