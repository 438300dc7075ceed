import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('entitlements', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Listing',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier', primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('title', models.CharField(max_length=255)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('pending', 'Pending'), ('active', 'Active'), ('sold', 'Sold'), ('archived', 'Archived')], db_index=True, default='pending', help_text='Listing lifecycle status', max_length=20)),
                ('account', models.ForeignKey(help_text='Account that owns this listing', on_delete=django.db.models.deletion.CASCADE, related_name='listings', to='entitlements.privilegedaccount')),
            ],
            options={
                'db_table': 'listings',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['account', 'status'], name='listings_acct_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='AccountContent',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier', primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('kind', models.CharField(choices=[('review', 'Review'), ('podcast', 'Podcast'), ('video', 'Video')], db_index=True, max_length=20)),
                ('title', models.CharField(max_length=255)),
                ('body', models.TextField(blank=True)),
                ('account', models.ForeignKey(help_text='Account the content is attached to', on_delete=django.db.models.deletion.CASCADE, related_name='content', to='entitlements.privilegedaccount')),
            ],
            options={
                'db_table': 'account_content',
                'ordering': ['-created_at'],
            },
        ),
    ]
