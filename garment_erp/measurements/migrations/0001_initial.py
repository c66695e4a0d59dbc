# Generated manually
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
        ('employees', '0001_initial'),
        ('parties', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Measurement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('measurement_code', models.CharField(editable=False, max_length=20, unique=True)),
                ('garment_type', models.CharField(max_length=100)),
                ('chest', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('waist', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('hips', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('shoulder', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('sleeve_length', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('arm_hole', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('bicep', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('wrist', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('neck_round', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('front_length', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('back_length', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('inseam', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('outseam', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('thigh', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('knee', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('calf', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('ankle', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('rise', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('notes', models.TextField(blank=True, null=True)),
                ('custom_fields', models.JSONField(blank=True, help_text='Additional named measurements', null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='measurements', to='parties.customer')),
                ('taken_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='measurements', to='employees.employee')),
            ],
            options={
                'db_table': 'measurements',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['garment_type'], name='measurements_garment_idx'),
                ],
            },
        ),
    ]
