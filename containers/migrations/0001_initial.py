from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Item',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sku', models.CharField(max_length=64, unique=True)),
                ('name', models.CharField(max_length=255)),
                ('unit_of_measurement', models.CharField(default='pcs', max_length=16)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['sku'],
            },
        ),
        migrations.CreateModel(
            name='Location',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=64, unique=True)),
                ('name', models.CharField(blank=True, max_length=120)),
                ('location_type', models.CharField(choices=[('dock', 'Receiving dock'), ('line', 'Assembly line'), ('shelf', 'Shelf'), ('staging', 'Staging area')], db_index=True, default='shelf', max_length=16)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['code'],
            },
        ),
        migrations.CreateModel(
            name='Container',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=64, unique=True)),
                ('sku', models.CharField(blank=True, max_length=64, null=True)),
                ('quantity', models.PositiveIntegerField(blank=True, null=True)),
                ('status', models.CharField(blank=True, choices=[('Idle', 'Idle'), ('Pending_QC', 'Pending QC'), ('Stored', 'Stored'), ('QC_Hold', 'QC hold'), ('In_Transit', 'In transit'), ('Empty', 'Empty')], db_index=True, max_length=16, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('location', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='containers', to='containers.location')),
            ],
            options={
                'ordering': ['code'],
                'indexes': [models.Index(fields=['status', 'location'], name='container_status_loc_idx')],
                'constraints': [
                    models.CheckConstraint(
                        condition=(
                            models.Q(status__in=['Idle', 'Empty'], sku__isnull=True, quantity__isnull=True)
                            | (models.Q(sku__isnull=False, quantity__isnull=False) & ~models.Q(status__in=['Idle', 'Empty']))
                            | models.Q(status__isnull=True)
                        ),
                        name='container_contents_match_status',
                    ),
                ],
            },
        ),
    ]
