"""
Default permissions, roles and semesters installed by `seed_defaults`.
"""
from django.db import transaction

MODULE_ACTIONS = [
    ('users', ['view', 'create', 'edit', 'delete']),
    ('roles', ['view', 'create', 'edit', 'delete']),
    ('permissions', ['view']),
    ('dashboard', ['view']),
    ('faculties', ['view', 'create', 'edit', 'delete']),
    ('departments', ['view', 'create', 'edit', 'delete']),
    ('courses', ['view', 'create', 'edit', 'delete']),
    ('classes', ['view', 'create', 'edit', 'delete']),
    ('admission', ['view', 'create', 'edit', 'delete']),
    ('attendance', ['view', 'create', 'edit', 'delete']),
    ('examinations', ['view', 'create', 'edit', 'delete']),
    ('reports', ['view']),
    ('finance', ['view', 'create']),
    ('semesters', ['view', 'create', 'edit', 'delete']),
]

ACTION_LABELS = {
    'view': 'View',
    'create': 'Create',
    'edit': 'Edit',
    'delete': 'Delete',
}

DEFAULT_SEMESTERS = [
    ('Spring', 1),
    ('Summer', 2),
    ('Fall', 3),
]

ADMIN_ROLE = 'Admin'
STUDENT_ROLE = 'Student'


def default_permissions():
    """(name, description, module) for every built-in permission"""
    return [
        (f'{module}.{action}', f'{ACTION_LABELS[action]} {module}', module)
        for module, actions in MODULE_ACTIONS
        for action in actions
    ]


@transaction.atomic
def seed_permissions():
    from .models import Permission

    created = 0
    for name, description, module in default_permissions():
        _, was_created = Permission.objects.get_or_create(
            name=name,
            defaults={'description': description, 'module': module}
        )
        created += int(was_created)
    return created


@transaction.atomic
def seed_admin_role():
    """Admin role holding every permission"""
    from .models import Permission, Role

    seed_permissions()
    role, _ = Role.objects.get_or_create(
        name=ADMIN_ROLE,
        defaults={'description': 'Full system access'}
    )
    role.permissions.add(*Permission.objects.all())
    return role


@transaction.atomic
def get_student_role():
    """Default role for self-registered accounts, limited to the dashboard"""
    from .models import Permission, Role

    role, _ = Role.objects.get_or_create(
        name=STUDENT_ROLE,
        defaults={'description': 'Default role for newly registered students'}
    )
    dashboard = Permission.objects.filter(name='dashboard.view').first()
    if dashboard:
        role.permissions.add(dashboard)
    return role


@transaction.atomic
def seed_semesters():
    from academic.models import Semester

    for name, sort_order in DEFAULT_SEMESTERS:
        Semester.objects.update_or_create(
            name=name,
            defaults={'sort_order': sort_order}
        )
