"""
Shared fixtures for visibility tests.

Keeps setUp methods readable: users with system roles, worlds, campaigns and
campaign role assignments.
"""
from django.contrib.auth import get_user_model

from api.models import SystemRole, UserSystemRole
from campaigns.models import Campaign, CampaignRole, UserCampaignRole, World

User = get_user_model()


def make_user(username, *system_roles):
    user = User.objects.create_user(username=username, password='pass')
    for role_name in system_roles:
        role, _ = SystemRole.objects.get_or_create(name=role_name)
        UserSystemRole.objects.create(user=user, role=role)
    return user


def make_world(name='Eberron'):
    return World.objects.create(name=name)


def make_campaign(world, name):
    return Campaign.objects.create(world=world, name=name, status='active')


def assign_campaign_role(user, campaign, role_name):
    role, _ = CampaignRole.objects.get_or_create(name=role_name)
    return UserCampaignRole.objects.create(user=user, campaign=campaign, role=role)
