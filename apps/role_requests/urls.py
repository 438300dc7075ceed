"""
URL configuration for role request endpoints.
"""
from django.urls import path
from apps.role_requests import views

urlpatterns = [
    path('role-requests', views.RoleRequestListCreateView.as_view(), name='role-request-list'),
    path('role-requests/mine', views.MyRoleRequestsView.as_view(), name='role-request-mine'),
    path('role-requests/stats', views.RoleRequestStatsView.as_view(), name='role-request-stats'),
    path('role-requests/<uuid:request_id>', views.RoleRequestDetailView.as_view(), name='role-request-detail'),
    path('role-requests/<uuid:request_id>/decision', views.RoleRequestDecisionView.as_view(), name='role-request-decision'),
    path('role-requests/<uuid:request_id>/reprovision', views.RoleRequestReprovisionView.as_view(), name='role-request-reprovision'),
]
