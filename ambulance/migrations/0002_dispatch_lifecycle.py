from django.db import migrations, models


class Migration(migrations.Migration):
    """Additive: crew assignment, completion time and patient coordinates."""

    dependencies = [
        ('ambulance', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='dispatch',
            name='ambulance_id',
            field=models.CharField(blank=True, db_column='ambulanceId', max_length=64, null=True),
        ),
        migrations.AddField(
            model_name='dispatch',
            name='completion_time',
            field=models.DateTimeField(blank=True, db_column='completionTime', null=True),
        ),
        migrations.AddField(
            model_name='dispatch',
            name='patient_latitude',
            field=models.FloatField(blank=True, db_column='patientLatitude', null=True),
        ),
        migrations.AddField(
            model_name='dispatch',
            name='patient_longitude',
            field=models.FloatField(blank=True, db_column='patientLongitude', null=True),
        ),
        migrations.AddConstraint(
            model_name='dispatch',
            constraint=models.CheckConstraint(
                condition=models.Q(('completed', False), ('completion_time__isnull', False), _connector='OR'),
                name='dispatch_completed_has_time',
            ),
        ),
        migrations.AddConstraint(
            model_name='dispatch',
            constraint=models.CheckConstraint(
                condition=models.Q(('completed', False), ('ambulance_id__isnull', False), _connector='OR'),
                name='dispatch_completed_was_accepted',
            ),
        ),
    ]
