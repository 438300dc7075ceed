"""
Django admin configuration for entitlements app.
"""
from django.contrib import admin
from .models import PrivilegedAccount, AccountSubscription, SubscriptionEvent


class AccountSubscriptionInline(admin.StackedInline):
    model = AccountSubscription
    can_delete = False
    readonly_fields = [
        'max_listings', 'allow_photography', 'allow_reviews',
        'allow_podcasts', 'allow_videos',
    ]


@admin.register(PrivilegedAccount)
class PrivilegedAccountAdmin(admin.ModelAdmin):
    list_display = ['business_name', 'account_type', 'owner', 'status', 'verification_status', 'created_at']
    list_filter = ['account_type', 'status', 'verification_status']
    search_fields = ['business_name', 'owner__email']
    raw_id_fields = ['owner', 'verified_by']
    inlines = [AccountSubscriptionInline]


@admin.register(SubscriptionEvent)
class SubscriptionEventAdmin(admin.ModelAdmin):
    list_display = ['subscription', 'event_type', 'created_at']
    list_filter = ['event_type']
    readonly_fields = ['subscription', 'event_type', 'metadata', 'created_at']
