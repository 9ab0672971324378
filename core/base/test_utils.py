from django.contrib.auth import get_user_model

from core.user_accounts.models import Role

User = get_user_model()

_counter = {'value': 0}


def create_user_with_role(role=Role.USER, email=None, name=None, password='testpass123'):
    """Create an account with the given role and a unique email."""
    _counter['value'] += 1
    n = _counter['value']
    return User.objects.create_user(
        email=email or f'{role}{n}@directory.test',
        name=name or f'{str(role).title()} {n}',
        phone_number=f'0170000{n:04d}',
        password=password,
        role=role,
    )


def create_role_users():
    """One account per role, keyed by role value."""
    return {role.value: create_user_with_role(role) for role in Role}
