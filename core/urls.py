"""
URL Configuration for Core module.
This module handles core functionality: field-level data protection.
Account and authentication URLs are mounted at the project level.
"""
from django.urls import path, include

app_name = 'core'

urlpatterns = [
    # Field-level data protection (unmask request workflow)
    path('privacy/', include('core.privacy.urls')),
]
