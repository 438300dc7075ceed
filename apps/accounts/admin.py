"""
Django admin configuration for accounts app.
"""
from django.contrib import admin
from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    """
    Admin for marketplace users.

    Role and profile fields are shown read-only; they change only through
    approved role requests.
    """
    list_display = ['email', 'first_name', 'last_name', 'role', 'is_active', 'created_at']
    list_filter = ['role', 'is_active', 'created_at']
    search_fields = ['email', 'first_name', 'last_name']
    ordering = ['-created_at']

    fieldsets = (
        (None, {
            'fields': ('email', 'password_hash')
        }),
        ('Personal Info', {
            'fields': ('first_name', 'last_name')
        }),
        ('Role', {
            'fields': ('role', 'is_active')
        }),
        ('Provisioned Profiles', {
            'fields': ('ministry_info', 'coordinator_profile', 'dealership_id', 'provider_account_id')
        }),
        ('Activity', {
            'fields': ('last_login', 'created_at', 'updated_at')
        }),
    )

    readonly_fields = [
        'role', 'ministry_info', 'coordinator_profile', 'dealership_id',
        'provider_account_id', 'last_login', 'created_at', 'updated_at',
    ]
