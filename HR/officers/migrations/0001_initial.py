import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

VISIBILITY_CHOICES = [('public', 'Public'), ('internal', 'Internal'), ('restricted', 'Restricted')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Officer',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Timestamp when record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when record was last modified')),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive')], default='active', help_text='Record status. Set to INACTIVE instead of deleting.', max_length=10)),
                ('full_name', models.CharField(max_length=255)),
                ('name_bangla', models.CharField(blank=True, default='', max_length=255)),
                ('employee_id', models.CharField(blank=True, max_length=50, null=True, unique=True)),
                ('designation', models.CharField(blank=True, default='', max_length=150)),
                ('office', models.CharField(blank=True, default='', max_length=150)),
                ('department', models.CharField(blank=True, default='', max_length=150)),
                ('employment_status', models.CharField(choices=[('active', 'Active'), ('on_leave', 'On Leave'), ('suspended', 'Suspended'), ('retired', 'Retired'), ('terminated', 'Terminated'), ('resigned', 'Resigned')], default='active', max_length=16)),
                ('joining_date', models.DateField(blank=True, null=True)),
                ('photo_url', models.CharField(blank=True, default='', max_length=500)),
                ('personal_mobile', models.CharField(blank=True, default='', max_length=20)),
                ('official_mobile', models.CharField(blank=True, default='', max_length=20)),
                ('personal_email', models.EmailField(blank=True, default='', max_length=254)),
                ('official_email', models.EmailField(blank=True, default='', max_length=254)),
                ('nid_number', models.CharField(blank=True, max_length=32, null=True, unique=True)),
                ('passport_number', models.CharField(blank=True, default='', max_length=32)),
                ('tin_number', models.CharField(blank=True, default='', max_length=32)),
                ('date_of_birth', models.DateField(blank=True, null=True)),
                ('father_name', models.CharField(blank=True, default='', max_length=255)),
                ('mother_name', models.CharField(blank=True, default='', max_length=255)),
                ('blood_group', models.CharField(blank=True, default='', max_length=8)),
                ('religion', models.CharField(blank=True, default='', max_length=50)),
                ('marital_status', models.CharField(blank=True, default='', max_length=20)),
                ('present_address', models.TextField(blank=True, default='')),
                ('permanent_address', models.TextField(blank=True, default='')),
                ('emergency_contact_name', models.CharField(blank=True, default='', max_length=255)),
                ('emergency_contact_phone', models.CharField(blank=True, default='', max_length=20)),
                ('current_grade', models.CharField(blank=True, default='', max_length=20)),
                ('basic_salary', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('bank_account_number', models.CharField(blank=True, default='', max_length=34)),
                ('phone_visibility', models.CharField(blank=True, choices=VISIBILITY_CHOICES, help_text='Overrides personal_mobile and official_mobile', max_length=16, null=True)),
                ('email_visibility', models.CharField(blank=True, choices=VISIBILITY_CHOICES, help_text='Overrides personal_email and official_email', max_length=16, null=True)),
                ('nid_visibility', models.CharField(blank=True, choices=VISIBILITY_CHOICES, help_text='Overrides nid_number, passport_number and tin_number', max_length=16, null=True)),
                ('dob_visibility', models.CharField(blank=True, choices=VISIBILITY_CHOICES, help_text='Overrides date_of_birth', max_length=16, null=True)),
                ('salary_visibility', models.CharField(blank=True, choices=VISIBILITY_CHOICES, help_text='Overrides basic_salary and current_grade', max_length=16, null=True)),
                ('notes', models.TextField(blank=True, default='')),
                ('created_by', models.ForeignKey(blank=True, help_text='User who created this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='officers_officer_created', to=settings.AUTH_USER_MODEL)),
                ('updated_by', models.ForeignKey(blank=True, help_text='User who last updated this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='officers_officer_updated', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Officer',
                'verbose_name_plural': 'Officers',
                'db_table': 'officers',
                'ordering': ['full_name', 'id'],
                'indexes': [
                    models.Index(fields=['department'], name='officers_department_idx'),
                    models.Index(fields=['office'], name='officers_office_idx'),
                    models.Index(fields=['employment_status'], name='officers_emp_status_idx'),
                ],
            },
        ),
    ]
