import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier', primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('email', models.EmailField(help_text='User email address (unique globally)', max_length=254, unique=True)),
                ('password_hash', models.CharField(blank=True, help_text='Hashed password', max_length=255)),
                ('first_name', models.CharField(blank=True, max_length=100)),
                ('last_name', models.CharField(blank=True, max_length=100)),
                ('role', models.CharField(choices=[('private', 'Private'), ('dealer', 'Dealer'), ('provider', 'Service Provider'), ('ministry', 'Ministry Official'), ('coordinator', 'Transport Coordinator'), ('admin', 'Administrator')], db_index=True, default='private', help_text='Current platform role', max_length=20)),
                ('is_active', models.BooleanField(db_index=True, default=True, help_text='Whether user account is active')),
                ('last_login', models.DateTimeField(blank=True, null=True)),
                ('ministry_info', models.JSONField(blank=True, default=dict, help_text='Ministry name, department, position and employee id')),
                ('coordinator_profile', models.JSONField(blank=True, default=dict, help_text='is_coordinator flag, stations, approval metadata')),
                ('dealership_id', models.UUIDField(blank=True, help_text='Dealer account provisioned for this user', null=True)),
                ('provider_account_id', models.UUIDField(blank=True, help_text='Service provider account provisioned for this user', null=True)),
            ],
            options={
                'db_table': 'users',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['role', 'is_active'], name='users_role_active_idx')],
            },
        ),
    ]
