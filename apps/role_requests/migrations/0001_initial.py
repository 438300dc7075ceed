import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='RoleRequest',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier', primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('request_type', models.CharField(choices=[('dealer', 'Dealer'), ('provider', 'Service Provider'), ('ministry', 'Ministry Official'), ('coordinator', 'Transport Coordinator')], db_index=True, help_text='Requested role', max_length=20)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected')], db_index=True, default='pending', help_text='Review status', max_length=20)),
                ('payload', models.JSONField(blank=True, default=dict, help_text='Type-specific application data')),
                ('priority', models.CharField(choices=[('low', 'Low'), ('medium', 'Medium'), ('high', 'High')], db_index=True, default='medium', help_text='Review priority derived from the request type', max_length=10)),
                ('auto_approval_eligible', models.BooleanField(default=False, help_text='Informational hint for reviewers; never approves on its own')),
                ('review_notes', models.TextField(blank=True)),
                ('reviewed_at', models.DateTimeField(blank=True, null=True)),
                ('associated_entity_id', models.UUIDField(blank=True, help_text='Account created when the request was provisioned', null=True)),
                ('provisioning_error', models.TextField(blank=True, help_text='Last provisioning failure message')),
                ('provisioning_failed_at', models.DateTimeField(blank=True, null=True)),
                ('provisioned_at', models.DateTimeField(blank=True, null=True)),
                ('reviewed_by', models.ForeignKey(blank=True, help_text='Administrator who decided the request', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reviewed_role_requests', to=settings.AUTH_USER_MODEL)),
                ('user', models.ForeignKey(help_text='User applying for the role', on_delete=django.db.models.deletion.CASCADE, related_name='role_requests', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'role_requests',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'priority', 'created_at'], name='role_req_queue_idx'),
                    models.Index(fields=['user', 'status'], name='role_req_user_status_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('status', 'pending')), fields=('user', 'request_type'), name='unique_pending_role_request'),
                ],
            },
        ),
        migrations.CreateModel(
            name='RoleRequestEvent',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier', primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('event_type', models.CharField(choices=[('submitted', 'Submitted'), ('approved', 'Approved'), ('rejected', 'Rejected'), ('provisioned', 'Provisioned'), ('provisioning_failed', 'Provisioning Failed'), ('provisioning_retried', 'Provisioning Retried')], db_index=True, help_text='Type of event', max_length=30)),
                ('from_status', models.CharField(blank=True, max_length=20)),
                ('to_status', models.CharField(blank=True, max_length=20)),
                ('metadata', models.JSONField(blank=True, default=dict, help_text='Event metadata (e.g., notes, error, entity id)')),
                ('actor', models.ForeignKey(blank=True, help_text='User who caused the event (none for background jobs)', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('role_request', models.ForeignKey(help_text='Request this event belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='events', to='role_requests.rolerequest')),
            ],
            options={
                'db_table': 'role_request_events',
                'ordering': ['created_at'],
                'indexes': [models.Index(fields=['role_request', 'created_at'], name='role_req_evt_req_idx')],
            },
        ),
    ]
