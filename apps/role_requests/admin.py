"""
Django admin configuration for role requests app.

Status changes go through the API so that provisioning and the audit trail
stay consistent; the admin is read-only for decisions.
"""
from django.contrib import admin
from .models import RoleRequest, RoleRequestEvent


class RoleRequestEventInline(admin.TabularInline):
    model = RoleRequestEvent
    extra = 0
    can_delete = False
    fields = ['event_type', 'actor', 'from_status', 'to_status', 'metadata', 'created_at']
    readonly_fields = fields


@admin.register(RoleRequest)
class RoleRequestAdmin(admin.ModelAdmin):
    list_display = ['user', 'request_type', 'status', 'priority', 'auto_approval_eligible', 'provisioned_at', 'created_at']
    list_filter = ['request_type', 'status', 'priority', 'auto_approval_eligible']
    search_fields = ['user__email']
    raw_id_fields = ['user', 'reviewed_by']
    readonly_fields = [
        'status', 'reviewed_by', 'reviewed_at', 'associated_entity_id',
        'provisioning_error', 'provisioning_failed_at', 'provisioned_at',
        'created_at', 'updated_at',
    ]
    inlines = [RoleRequestEventInline]
