"""
URL configuration for privileged account endpoints.
"""
from django.urls import path
from apps.entitlements import views

urlpatterns = [
    path('accounts/<uuid:account_id>', views.AccountDetailView.as_view(), name='account-detail'),
    path('accounts/<uuid:account_id>/tier', views.AccountTierView.as_view(), name='account-tier'),
    path('accounts/<uuid:account_id>/listing-quota', views.ListingQuotaView.as_view(), name='account-listing-quota'),
]
