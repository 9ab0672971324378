from django.contrib import admin
from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(admin.ModelAdmin):
    """Admin configuration for CustomUser model"""
    list_display = ['email', 'name', 'phone_number', 'role', 'is_active']
    list_filter = ['role', 'is_active']
    search_fields = ['email', 'name', 'phone_number']
    readonly_fields = ['last_login']

    fieldsets = (
        ('User Information', {
            'fields': ('email', 'name', 'phone_number')
        }),
        ('Role & Status', {
            'fields': ('role', 'is_active')
        }),
        ('Authentication', {
            'fields': ('password', 'last_login')
        }),
    )

    def has_delete_permission(self, request, obj=None):
        return False
