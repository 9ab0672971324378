from django.apps import AppConfig


class PrivacyConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core.privacy'
    label = 'privacy'
    verbose_name = 'Field-Level Data Protection'
