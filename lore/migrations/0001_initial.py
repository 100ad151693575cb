# Generated manually on 2026-10-19

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import uuid


def taxonomy_fields():
    return [
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ('name', models.CharField(db_index=True, max_length=100, unique=True)),
        ('description', models.TextField(blank=True)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
    ]


def entity_fields(related_name):
    return [
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ('name', models.CharField(db_index=True, max_length=255)),
        ('description', models.TextField(blank=True)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
        ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name=f'created_{related_name}', to=settings.AUTH_USER_MODEL)),
        ('world', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name=related_name, to='campaigns.world')),
    ]


def visibility_fields():
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('campaign', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='+', to='campaigns.campaign')),
        ('player', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='+', to=settings.AUTH_USER_MODEL)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('campaigns', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='LocationType',
            fields=taxonomy_fields(),
            options={
                'verbose_name': 'Location Type',
                'verbose_name_plural': 'Location Types',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='NpcType',
            fields=taxonomy_fields(),
            options={
                'verbose_name': 'NPC Type',
                'verbose_name_plural': 'NPC Types',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='OrganisationType',
            fields=taxonomy_fields(),
            options={
                'verbose_name': 'Organisation Type',
                'verbose_name_plural': 'Organisation Types',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Race',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(db_index=True, max_length=100, unique=True)),
                ('description', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_races', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Race',
                'verbose_name_plural': 'Races',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Location',
            fields=entity_fields('locations') + [
                ('summary', models.CharField(blank=True, max_length=255)),
                ('type', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='locations', to='lore.locationtype')),
            ],
            options={
                'verbose_name': 'Location',
                'verbose_name_plural': 'Locations',
                'ordering': ['name'],
                'indexes': [models.Index(fields=['world', 'name'], name='lore_location_world_name_idx')],
            },
        ),
        migrations.CreateModel(
            name='Npc',
            fields=entity_fields('npcs') + [
                ('demeanor', models.CharField(blank=True, max_length=255)),
                ('race', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='npcs', to='lore.race')),
                ('type', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='npcs', to='lore.npctype')),
            ],
            options={
                'verbose_name': 'NPC',
                'verbose_name_plural': 'NPCs',
                'ordering': ['name'],
                'indexes': [models.Index(fields=['world', 'name'], name='lore_npc_world_name_idx')],
            },
        ),
        migrations.CreateModel(
            name='Organisation',
            fields=entity_fields('organisations') + [
                ('motto', models.CharField(blank=True, max_length=255)),
                ('type', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='organisations', to='lore.organisationtype')),
            ],
            options={
                'verbose_name': 'Organisation',
                'verbose_name_plural': 'Organisations',
                'ordering': ['name'],
                'indexes': [models.Index(fields=['world', 'name'], name='lore_org_world_name_idx')],
            },
        ),
        migrations.CreateModel(
            name='OrganisationLocation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('location', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to='lore.location')),
                ('organisation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to='lore.organisation')),
            ],
            options={
                'constraints': [models.UniqueConstraint(fields=('organisation', 'location'), name='unique_organisation_location')],
            },
        ),
        migrations.AddField(
            model_name='organisation',
            name='locations',
            field=models.ManyToManyField(blank=True, related_name='organisations', through='lore.OrganisationLocation', to='lore.location'),
        ),
        migrations.CreateModel(
            name='LocationVisibility',
            fields=visibility_fields() + [
                ('location', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='visibility', to='lore.location')),
            ],
            options={
                'verbose_name': 'Location Visibility',
                'verbose_name_plural': 'Location Visibility',
                'ordering': ['id'],
                'constraints': [models.UniqueConstraint(fields=('location', 'campaign', 'player'), name='unique_location_visibility')],
            },
        ),
        migrations.CreateModel(
            name='NpcVisibility',
            fields=visibility_fields() + [
                ('npc', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='visibility', to='lore.npc')),
            ],
            options={
                'verbose_name': 'NPC Visibility',
                'verbose_name_plural': 'NPC Visibility',
                'ordering': ['id'],
                'constraints': [models.UniqueConstraint(fields=('npc', 'campaign', 'player'), name='unique_npc_visibility')],
            },
        ),
        migrations.CreateModel(
            name='OrganisationVisibility',
            fields=visibility_fields() + [
                ('organisation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='visibility', to='lore.organisation')),
            ],
            options={
                'verbose_name': 'Organisation Visibility',
                'verbose_name_plural': 'Organisation Visibility',
                'ordering': ['id'],
                'constraints': [models.UniqueConstraint(fields=('organisation', 'campaign', 'player'), name='unique_organisation_visibility')],
            },
        ),
    ]
