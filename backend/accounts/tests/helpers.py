from django.contrib.auth import get_user_model

from accounts.models import Department, Profile


def make_profile(username, role, department=Department.COMPUTER_SCIENCE, roll='', year=None, password='pw'):
    user = get_user_model().objects.create_user(username=username, email=f'{username}@campus.edu', password=password)
    return Profile.objects.create(user=user, name=username.title(), roll=roll, department=department, role=role, year=year)
