# Generated manually on 2026-10-19

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='SystemRole',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(db_index=True, help_text="Role name (e.g., 'System Admin', 'World Admin', 'Dungeon Master')", max_length=100, unique=True)),
                ('description', models.TextField(blank=True, help_text='Optional description of the role')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'System Role',
                'verbose_name_plural': 'System Roles',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='UserSystemRole',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('assigned_at', models.DateTimeField(auto_now_add=True)),
                ('role', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignments', to='api.systemrole')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='system_role_assignments', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'User System Role',
                'verbose_name_plural': 'User System Roles',
                'indexes': [models.Index(fields=['user'], name='api_usersysrole_user_idx')],
                'constraints': [models.UniqueConstraint(fields=('user', 'role'), name='unique_user_system_role')],
            },
        ),
    ]
