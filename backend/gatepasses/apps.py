from django.apps import AppConfig


class GatepassesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'gatepasses'
    verbose_name = 'Gate Passes'
