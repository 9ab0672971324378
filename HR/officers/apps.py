"""
Officers App Configuration
"""

from django.apps import AppConfig


class OfficersConfig(AppConfig):
    """Configuration for the Officer Directory app"""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'HR.officers'
    label = 'officers'
    verbose_name = 'Officer Directory'
