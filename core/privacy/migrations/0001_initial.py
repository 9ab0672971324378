import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('contenttypes', '0002_remove_content_type_name'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='FieldAccessLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('accessor_role', models.CharField(help_text='Role of the accessor at the time of the read', max_length=16)),
                ('subject_id', models.PositiveBigIntegerField()),
                ('field_name', models.CharField(max_length=64)),
                ('outcome', models.CharField(choices=[('SHOW', 'Show'), ('MASK', 'Mask'), ('REDACT', 'Redact')], max_length=8)),
                ('level', models.CharField(choices=[('public', 'Public'), ('internal', 'Internal'), ('restricted', 'Restricted')], default='restricted', help_text='Resolved visibility level of the field at read time', max_length=16)),
                ('access_type', models.CharField(choices=[('view', 'View'), ('export', 'Export')], default='view', max_length=8)),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('request_id', models.CharField(blank=True, default='', max_length=64)),
                ('ip', models.GenericIPAddressField(blank=True, null=True)),
                ('user_agent', models.CharField(blank=True, default='', max_length=512)),
                ('accessor', models.ForeignKey(help_text='Account that read the field', on_delete=django.db.models.deletion.PROTECT, related_name='field_access_logs', to=settings.AUTH_USER_MODEL)),
                ('subject_type', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, to='contenttypes.contenttype')),
            ],
            options={
                'verbose_name': 'Field Access Log Entry',
                'verbose_name_plural': 'Field Access Log',
                'db_table': 'field_access_logs',
                'indexes': [
                    models.Index(fields=['subject_type', 'subject_id', 'timestamp'], name='fal_subject_time_idx'),
                    models.Index(fields=['accessor', 'timestamp'], name='fal_accessor_time_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='UnmaskRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('subject_id', models.PositiveBigIntegerField()),
                ('fields', models.JSONField(default=list, help_text='Field names the requester wants unmasked')),
                ('justification', models.TextField()),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('denied', 'Denied'), ('expired', 'Expired')], db_index=True, default='pending', max_length=10)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('decided_at', models.DateTimeField(blank=True, null=True)),
                ('expires_at', models.DateTimeField(blank=True, null=True)),
                ('decision_reason', models.TextField(blank=True, default='')),
                ('decided_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='unmask_decisions', to=settings.AUTH_USER_MODEL)),
                ('requester', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='unmask_requests', to=settings.AUTH_USER_MODEL)),
                ('subject_type', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, to='contenttypes.contenttype')),
            ],
            options={
                'db_table': 'unmask_requests',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['requester', 'subject_type', 'subject_id', 'status'], name='unmask_req_subject_idx'),
                    models.Index(fields=['status', 'expires_at'], name='unmask_status_expiry_idx'),
                ],
            },
        ),
    ]
