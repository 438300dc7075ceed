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
            name='PrivilegedAccount',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier', primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('account_type', models.CharField(choices=[('dealer', 'Dealer'), ('provider', 'Service Provider')], db_index=True, help_text='Dealer or service provider', max_length=20)),
                ('business_name', models.CharField(max_length=255)),
                ('business_type', models.CharField(blank=True, help_text='Free-form business category (e.g. independent, franchise)', max_length=100)),
                ('provider_type', models.CharField(blank=True, help_text='Service category for provider accounts', max_length=100)),
                ('contact', models.JSONField(blank=True, default=dict, help_text='Phone, email and address taken from the role request')),
                ('status', models.CharField(choices=[('active', 'Active'), ('suspended', 'Suspended'), ('inactive', 'Inactive')], db_index=True, default='active', help_text='Operational status of the account', max_length=20)),
                ('verification_status', models.CharField(choices=[('unverified', 'Unverified'), ('pending', 'Pending'), ('verified', 'Verified')], default='unverified', help_text='Business verification state', max_length=20)),
                ('verified_at', models.DateTimeField(blank=True, null=True)),
                ('owner', models.ForeignKey(help_text='User who owns this account', on_delete=django.db.models.deletion.CASCADE, related_name='privileged_accounts', to=settings.AUTH_USER_MODEL)),
                ('verified_by', models.ForeignKey(blank=True, help_text='Administrator who verified the account', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'privileged_accounts',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['account_type', 'status'], name='priv_acct_type_status_idx')],
                'constraints': [models.UniqueConstraint(fields=('owner', 'account_type'), name='unique_account_type_per_owner')],
            },
        ),
        migrations.CreateModel(
            name='AccountSubscription',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier', primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('tier', models.CharField(choices=[('basic', 'Basic'), ('standard', 'Standard'), ('premium', 'Premium')], db_index=True, default='basic', help_text='Subscription tier', max_length=20)),
                ('status', models.CharField(choices=[('active', 'Active'), ('pending', 'Pending'), ('expired', 'Expired'), ('cancelled', 'Cancelled')], db_index=True, default='active', help_text='Current subscription status', max_length=20)),
                ('expires_at', models.DateTimeField(blank=True, help_text='End of the current subscription period', null=True)),
                ('max_listings', models.PositiveIntegerField(default=0)),
                ('allow_photography', models.BooleanField(default=False)),
                ('allow_reviews', models.BooleanField(default=False)),
                ('allow_podcasts', models.BooleanField(default=False)),
                ('allow_videos', models.BooleanField(default=False)),
                ('account', models.OneToOneField(help_text='Account this subscription belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='subscription', to='entitlements.privilegedaccount')),
            ],
            options={
                'db_table': 'account_subscriptions',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['status', 'expires_at'], name='acct_sub_status_exp_idx')],
            },
        ),
        migrations.CreateModel(
            name='SubscriptionEvent',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier', primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('event_type', models.CharField(choices=[('created', 'Created'), ('tier_changed', 'Tier Changed')], db_index=True, help_text='Type of event', max_length=30)),
                ('metadata', models.JSONField(blank=True, default=dict, help_text='Event metadata (e.g., previous_tier, new_tier)')),
                ('subscription', models.ForeignKey(help_text='Subscription this event belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='events', to='entitlements.accountsubscription')),
            ],
            options={
                'db_table': 'account_subscription_events',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['subscription', 'created_at'], name='acct_sub_evt_sub_idx')],
            },
        ),
    ]
