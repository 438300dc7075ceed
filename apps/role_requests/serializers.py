"""
Serializers for role request endpoints.
"""
from rest_framework import serializers
from apps.role_requests.models import RoleRequest, RoleRequestEvent


class RoleRequestEventSerializer(serializers.ModelSerializer):
    """Serializer for RoleRequestEvent."""

    actor_email = serializers.CharField(source='actor.email', read_only=True, allow_null=True)

    class Meta:
        model = RoleRequestEvent
        fields = [
            'id', 'event_type', 'actor', 'actor_email', 'from_status',
            'to_status', 'metadata', 'created_at',
        ]
        read_only_fields = fields


class RoleRequestSerializer(serializers.ModelSerializer):
    """Serializer for RoleRequest."""

    user_email = serializers.CharField(source='user.email', read_only=True)
    reviewed_by_email = serializers.CharField(source='reviewed_by.email', read_only=True, allow_null=True)

    class Meta:
        model = RoleRequest
        fields = [
            'id', 'user', 'user_email', 'request_type', 'status', 'payload',
            'priority', 'auto_approval_eligible', 'reviewed_by', 'reviewed_by_email',
            'review_notes', 'reviewed_at', 'associated_entity_id',
            'provisioning_error', 'provisioning_failed_at', 'provisioned_at',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class RoleRequestDetailSerializer(RoleRequestSerializer):
    """RoleRequest with its audit trail."""

    events = RoleRequestEventSerializer(many=True, read_only=True)

    class Meta(RoleRequestSerializer.Meta):
        fields = RoleRequestSerializer.Meta.fields + ['events']
        read_only_fields = fields


class ContactDetailsSerializer(serializers.Serializer):
    phone = serializers.CharField(required=False, allow_blank=True)
    alternate_email = serializers.EmailField(required=False, allow_blank=True)
    business_address = serializers.CharField(required=False, allow_blank=True)


class RoleRequestSubmitSerializer(serializers.Serializer):
    """
    Serializer for a role request submission.

    Only the shape is checked here; required fields per request type are
    enforced by the intake service.
    """

    request_type = serializers.CharField(help_text="dealer, provider, ministry or coordinator")

    # Dealer / provider
    business_name = serializers.CharField(required=False, allow_blank=True)
    business_type = serializers.CharField(required=False, allow_blank=True)
    license_number = serializers.CharField(required=False, allow_blank=True)
    service_type = serializers.CharField(required=False, allow_blank=True)

    # Ministry
    ministry_name = serializers.CharField(required=False, allow_blank=True)
    department = serializers.CharField(required=False, allow_blank=True)
    position = serializers.CharField(required=False, allow_blank=True)
    employee_id = serializers.CharField(required=False, allow_blank=True)

    # Coordinator
    station_name = serializers.CharField(required=False, allow_blank=True)
    transport_experience = serializers.CharField(required=False, allow_blank=True)

    # Common optional fields
    reason = serializers.CharField(required=False, allow_blank=True)
    experience = serializers.CharField(required=False, allow_blank=True)
    contact_details = ContactDetailsSerializer(required=False)
    documents = serializers.ListField(
        child=serializers.CharField(),
        required=False,
        help_text="References to documents uploaded to the media service"
    )

    def payload(self):
        data = dict(self.validated_data)
        data.pop('request_type', None)
        if 'contact_details' in data:
            data['contact_details'] = dict(data['contact_details'])
        return data


class RoleRequestDecisionSerializer(serializers.Serializer):
    """Serializer for an administrator's decision."""

    status = serializers.CharField(help_text="approved or rejected")
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class RoleRequestListQuerySerializer(serializers.Serializer):
    """Query parameters for the administrator request listing."""

    status = serializers.CharField(required=False)
    request_type = serializers.CharField(required=False)
    priority = serializers.CharField(required=False)
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=100, default=10)
    ordering = serializers.CharField(required=False, default='-created_at')
