import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Patient',
            fields=[
                ('nhs_number', models.CharField(db_column='nhsNumber', max_length=32, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('address', models.CharField(max_length=512)),
                ('medical_history', models.TextField(blank=True, db_column='medicalHistory', default='')),
            ],
            options={
                'db_table': 'patients',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Dispatch',
            fields=[
                ('id', models.AutoField(primary_key=True, serialize=False)),
                ('patient_id', models.CharField(db_column='patientId', max_length=32)),
                ('condition', models.CharField(max_length=255)),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('patient_name', models.CharField(db_column='patientName', max_length=255)),
                ('patient_address', models.CharField(db_column='patientAddress', max_length=512)),
                ('medical_history', models.TextField(blank=True, db_column='medicalHistory', default='')),
                ('completed', models.BooleanField(db_index=True, default=False)),
            ],
            options={
                'db_table': 'dispatches',
            },
        ),
    ]
