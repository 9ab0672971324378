from django.contrib import admin
from .models import FieldAccessLog, UnmaskRequest


@admin.register(FieldAccessLog)
class FieldAccessLogAdmin(admin.ModelAdmin):
    """Read-only view of the access log."""
    list_display = [
        'timestamp', 'accessor', 'accessor_role', 'subject_type', 'subject_id',
        'field_name', 'outcome', 'access_type', 'request_id'
    ]
    list_filter = ['outcome', 'access_type', 'accessor_role', 'subject_type']
    search_fields = ['field_name', 'request_id', 'accessor__email']
    date_hierarchy = 'timestamp'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(UnmaskRequest)
class UnmaskRequestAdmin(admin.ModelAdmin):
    """Read-only; decisions go through the API so the workflow rules apply."""
    list_display = [
        'id', 'requester', 'subject_type', 'subject_id', 'status',
        'created_at', 'decided_by', 'expires_at'
    ]
    list_filter = ['status', 'subject_type']
    search_fields = ['requester__email', 'justification']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
