# Generated manually on 2026-10-19

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('lore', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='NpcNote',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('content', models.TextField(help_text='Note text')),
                ('visibility_level', models.CharField(choices=[('Private', 'Private'), ('Party', 'Party'), ('DM', 'DM')], db_index=True, default='Private', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('author', models.ForeignKey(blank=True, help_text='User who wrote the note', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='npc_notes', to=settings.AUTH_USER_MODEL)),
                ('npc', models.ForeignKey(help_text='NPC this note is about', on_delete=django.db.models.deletion.CASCADE, related_name='notes', to='lore.npc')),
            ],
            options={
                'verbose_name': 'NPC Note',
                'verbose_name_plural': 'NPC Notes',
                'ordering': ['created_at'],
                'indexes': [models.Index(fields=['npc', 'visibility_level'], name='notes_npc_level_idx')],
            },
        ),
    ]
