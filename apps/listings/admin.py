"""
Django admin configuration for listings app.
"""
from django.contrib import admin
from .models import Listing, AccountContent


@admin.register(Listing)
class ListingAdmin(admin.ModelAdmin):
    list_display = ['title', 'account', 'status', 'created_at']
    list_filter = ['status']
    search_fields = ['title', 'account__business_name']
    raw_id_fields = ['account']


@admin.register(AccountContent)
class AccountContentAdmin(admin.ModelAdmin):
    list_display = ['title', 'account', 'kind', 'created_at']
    list_filter = ['kind']
    raw_id_fields = ['account']
