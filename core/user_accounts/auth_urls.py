"""
URL Configuration for Authentication endpoints.
Handles login, password changes, and token management.
Account management endpoints are in urls.py
"""
from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView
from . import views

app_name = 'auth'

urlpatterns = [
    path('login/', views.login, name='login'),

    # Password management
    path('change-password/', views.change_password, name='change_password'),

    # Token management
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
]
