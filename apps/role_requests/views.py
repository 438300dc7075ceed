"""
Role request API views.

Users submit and follow their own requests; administrators list, decide and
reconcile them.
"""
import logging
from django.utils.decorators import method_decorator
from django_ratelimit.decorators import ratelimit
from django_ratelimit.exceptions import Ratelimited
from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiExample

from apps.core.permissions import IsPlatformAdmin, IsAccountOwnerOrAdmin
from apps.role_requests.serializers import (
    RoleRequestSerializer,
    RoleRequestDetailSerializer,
    RoleRequestSubmitSerializer,
    RoleRequestDecisionSerializer,
    RoleRequestListQuerySerializer,
)
from apps.role_requests.services import IntakeService, ReviewService

logger = logging.getLogger(__name__)


@method_decorator(ratelimit(key='ip', rate='10/h', method='POST', block=False), name='dispatch')
class RoleRequestListCreateView(APIView):
    """
    Submit a role request or list all requests.

    POST /v1/role-requests - any authenticated user
    GET /v1/role-requests - administrators only
    """

    def get_permissions(self):
        if self.request.method == 'GET':
            return [IsPlatformAdmin()]
        return [IsAuthenticated()]

    @extend_schema(
        summary="Submit role request",
        description="""
Apply for elevation to dealer, service provider, ministry official or
transport coordinator.

Required fields per type:
- **dealer**: business_name, business_type, license_number
- **provider**: service_type, business_name
- **ministry**: ministry_name, department, position, employee_id
- **coordinator**: station_name, transport_experience

Rate limited to 10 submissions per hour per IP.
        """,
        request=RoleRequestSubmitSerializer,
        responses={
            201: RoleRequestSerializer,
            400: {'description': 'Validation error'},
            409: {'description': 'Duplicate pending request or role already held'},
            429: {'description': 'Rate limit exceeded'}
        },
        examples=[
            OpenApiExample(
                'Dealer request',
                value={
                    'request_type': 'dealer',
                    'business_name': 'Acme Motors',
                    'business_type': 'independent',
                    'license_number': 'LIC123',
                },
                request_only=True
            )
        ],
        tags=['Role Requests']
    )
    def post(self, request):
        if getattr(request, 'limited', False):
            raise Ratelimited()

        serializer = RoleRequestSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        role_request = IntakeService.submit(
            user=request.user,
            request_type=serializer.validated_data['request_type'],
            payload=serializer.payload(),
        )
        return Response(
            {
                'message': f"{role_request.request_type} role request submitted successfully. "
                           f"You'll be notified when it's reviewed.",
                'data': RoleRequestSerializer(role_request).data,
            },
            status=status.HTTP_201_CREATED
        )

    @extend_schema(
        summary="List role requests",
        parameters=[
            OpenApiParameter('status', str, description="pending, approved, rejected or all"),
            OpenApiParameter('request_type', str, description="Filter by request type"),
            OpenApiParameter('priority', str, description="low, medium, high or all"),
            OpenApiParameter('page', int, description="Page number (default 1)"),
            OpenApiParameter('limit', int, description="Page size (default 10, max 100)"),
            OpenApiParameter('ordering', str, description="Sort field, '-' for descending"),
        ],
        responses={
            200: RoleRequestSerializer(many=True),
            403: {'description': 'Forbidden - Administrator role required'}
        },
        tags=['Role Requests']
    )
    def get(self, request):
        query = RoleRequestListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        listing = ReviewService.list_requests(
            filters={k: params.get(k) for k in ('status', 'request_type', 'priority')},
            page=params['page'],
            limit=params['limit'],
            ordering=params['ordering'],
        )
        return Response({
            'count': len(listing['results']),
            'pagination': listing['pagination'],
            'results': RoleRequestSerializer(listing['results'], many=True).data,
        })


class MyRoleRequestsView(APIView):
    """
    GET /v1/role-requests/mine

    The current user's requests, newest first.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List my role requests",
        responses={200: RoleRequestSerializer(many=True)},
        tags=['Role Requests']
    )
    def get(self, request):
        requests = ReviewService.requests_for_user(request.user)
        return Response({
            'count': len(requests),
            'results': RoleRequestSerializer(requests, many=True).data,
        })


class RoleRequestStatsView(APIView):
    """
    GET /v1/role-requests/stats

    Counts by type and status plus the most recent requests.
    """
    permission_classes = [IsPlatformAdmin]

    @extend_schema(
        summary="Role request statistics",
        responses={
            200: {
                'type': 'object',
                'properties': {
                    'statistics': {'type': 'array', 'items': {'type': 'object'}},
                    'recent_requests': {'type': 'array', 'items': {'type': 'object'}},
                }
            },
            403: {'description': 'Forbidden - Administrator role required'}
        },
        tags=['Role Requests']
    )
    def get(self, request):
        stats = ReviewService.statistics()
        return Response({
            'statistics': stats['statistics'],
            'recent_requests': RoleRequestSerializer(stats['recent_requests'], many=True).data,
        })


class RoleRequestDetailView(APIView):
    """
    GET /v1/role-requests/{id}

    Visible to the requesting user and administrators.
    """
    permission_classes = [IsAccountOwnerOrAdmin]

    @extend_schema(
        summary="Get role request",
        responses={
            200: RoleRequestDetailSerializer,
            403: {'description': 'Not authorized to view this request'},
            404: {'description': 'Request not found'}
        },
        tags=['Role Requests']
    )
    def get(self, request, request_id):
        role_request = ReviewService.get_request(request_id)
        self.check_object_permissions(request, role_request)
        return Response(RoleRequestDetailSerializer(role_request).data)


class RoleRequestDecisionView(APIView):
    """
    POST /v1/role-requests/{id}/decision

    Approve or reject a pending request. Approval grants the role
    immediately; a provisioning failure is reported on the returned request.
    """
    permission_classes = [IsPlatformAdmin]

    @extend_schema(
        summary="Decide role request",
        request=RoleRequestDecisionSerializer,
        responses={
            200: RoleRequestSerializer,
            403: {'description': 'Forbidden - Administrator role required'},
            404: {'description': 'Request not found'},
            409: {'description': 'Invalid status or request already decided'}
        },
        tags=['Role Requests']
    )
    def post(self, request, request_id):
        serializer = RoleRequestDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        role_request = ReviewService.decide(
            request_id,
            serializer.validated_data['status'],
            reviewer=request.user,
            notes=serializer.validated_data.get('notes', ''),
        )
        return Response({
            'message': f"Request {role_request.status} successfully",
            'data': RoleRequestSerializer(role_request).data,
        })


class RoleRequestReprovisionView(APIView):
    """
    POST /v1/role-requests/{id}/reprovision

    Retry provisioning of an approved request whose provisioning failed.
    """
    permission_classes = [IsPlatformAdmin]

    @extend_schema(
        summary="Retry provisioning",
        request=None,
        responses={
            200: RoleRequestSerializer,
            404: {'description': 'Request not found'},
            409: {'description': 'Request is not awaiting reconciliation'}
        },
        tags=['Role Requests']
    )
    def post(self, request, request_id):
        role_request = ReviewService.retry_provisioning(request_id, operator=request.user)
        return Response({'data': RoleRequestSerializer(role_request).data})
