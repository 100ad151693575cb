# Generated manually on 2026-10-19

from django.db import migrations, models
import django.db.models.deletion
import uuid


def relationship_fields():
    return [
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ('relationship_type', models.CharField(blank=True, max_length=100)),
        ('description', models.TextField(blank=True)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
    ]


class Migration(migrations.Migration):

    dependencies = [
        ('lore', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='NpcRelationship',
            fields=relationship_fields() + [
                ('npc', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='relationships', to='lore.npc')),
                ('related_npc', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='+', to='lore.npc')),
            ],
            options={
                'verbose_name': 'NPC Relationship',
                'verbose_name_plural': 'NPC Relationships',
                'ordering': ['created_at'],
            },
        ),
        migrations.CreateModel(
            name='OrganisationRelationship',
            fields=relationship_fields() + [
                ('organisation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='relationships', to='lore.organisation')),
                ('related_organisation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='+', to='lore.organisation')),
            ],
            options={
                'verbose_name': 'Organisation Relationship',
                'verbose_name_plural': 'Organisation Relationships',
                'ordering': ['created_at'],
            },
        ),
    ]
