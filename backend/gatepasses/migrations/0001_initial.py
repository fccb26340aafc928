import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('accounts', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='GatePass',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('reason', models.TextField()),
                ('date', models.DateField()),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected')], db_index=True, default='pending', max_length=16)),
                ('qr_url', models.CharField(blank=True, max_length=500, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('hod', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='decided_passes', to='accounts.profile')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='gate_passes', to='accounts.profile')),
            ],
            options={
                'ordering': ('-created_at',),
            },
        ),
        migrations.AddConstraint(
            model_name='gatepass',
            constraint=models.CheckConstraint(condition=models.Q(models.Q(('qr_url__isnull', False), ('status', 'approved')), models.Q(models.Q(('status', 'approved'), _negated=True), ('qr_url__isnull', True)), _connector='OR'), name='gatepass_qr_url_iff_approved'),
        ),
        migrations.AddConstraint(
            model_name='gatepass',
            constraint=models.CheckConstraint(condition=models.Q(('hod__isnull', True), ('status__in', ['approved', 'rejected']), _connector='OR'), name='gatepass_hod_only_when_decided'),
        ),
    ]
