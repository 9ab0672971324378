"""
URL configuration for the Officer Directory project.

    admin/         Django admin (read-only views of audit data)
    auth/          JWT login and token refresh
    accounts/      account profile
    core/          privacy core (unmask request workflow)
    hr/            officer directory
"""
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('core/', include('core.urls')),
    path('hr/', include('HR.urls')),

    # Authentication endpoints (login, token refresh)
    path('auth/', include('core.user_accounts.auth_urls')),

    # Account endpoints (profile)
    path('accounts/', include('core.user_accounts.urls')),
]
