from rest_framework import permissions

# ViewSet action -> permission verb
ACTION_VERBS = {
    'list': 'view',
    'retrieve': 'view',
    'create': 'create',
    'update': 'edit',
    'partial_update': 'edit',
    'destroy': 'delete',
}

# HTTP method -> permission verb, for plain APIViews and custom actions
METHOD_VERBS = {
    'GET': 'view',
    'HEAD': 'view',
    'OPTIONS': 'view',
    'POST': 'create',
    'PUT': 'edit',
    'PATCH': 'edit',
    'DELETE': 'delete',
}


def required_permission(request, view):
    """
    Resolve the permission name a request needs, e.g. "faculties.create".
    `permission_overrides` on the view may map an action or HTTP method to a
    full permission name.
    """
    action = getattr(view, 'action', None)
    overrides = getattr(view, 'permission_overrides', {})
    if action in overrides:
        return overrides[action]
    if request.method in overrides:
        return overrides[request.method]

    module = getattr(view, 'permission_module', None)
    if not module:
        return None
    verb = ACTION_VERBS.get(action) or METHOD_VERBS.get(request.method, 'view')
    return f'{module}.{verb}'


class HasModulePermission(permissions.BasePermission):
    """
    Allows access only if the user's role grants the permission required
    by the view's `permission_module` and the current action
    """
    message = 'You do not have permission to perform this action'

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        required = required_permission(request, view)
        if required is None:
            return True
        return user.has_permission(required)


class IsStaffUser(permissions.BasePermission):
    """
    Allows access only to staff accounts (Django admin users)
    """
    message = 'Only staff users can access this resource'

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_staff)
