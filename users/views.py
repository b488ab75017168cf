import logging

from rest_framework import viewsets, generics, status
from rest_framework.response import Response

from authentication.permissions import HasModulePermission
from backend.exceptions import DeleteConflict
from backend.mixins import SuccessDestroyMixin
from .models import User, Role, Permission
from .serializers import (
    UserSerializer, UserCreateSerializer, UserUpdateSerializer,
    RoleSerializer, PermissionSerializer
)

logger = logging.getLogger(__name__)


class UserViewSet(SuccessDestroyMixin, viewsets.ModelViewSet):
    """
    ViewSet for managing system users
    """
    queryset = User.objects.select_related('role').all()
    permission_classes = [HasModulePermission]
    permission_module = 'users'

    def get_serializer_class(self):
        if self.action == 'create':
            return UserCreateSerializer
        if self.action in ['update', 'partial_update']:
            return UserUpdateSerializer
        return UserSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info('User %s created by %s', user.email, request.user.email)
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(UserSerializer(user).data)

    def perform_destroy(self, instance):
        if instance.pk == self.request.user.pk:
            raise DeleteConflict('You cannot delete your own account')
        instance.delete()
        logger.info('User %s deleted by %s', instance.email, self.request.user.email)


class RoleViewSet(SuccessDestroyMixin, viewsets.ModelViewSet):
    """
    ViewSet for managing roles and their permissions
    """
    queryset = Role.objects.prefetch_related('permissions').all()
    serializer_class = RoleSerializer
    permission_classes = [HasModulePermission]
    permission_module = 'roles'

    def perform_destroy(self, instance):
        user_count = instance.users.count()
        if user_count > 0:
            raise DeleteConflict(
                f'Cannot delete a role assigned to {user_count} user(s). Reassign them first.'
            )
        instance.delete()


class PermissionListView(generics.ListAPIView):
    """
    List all permissions
    GET /api/permissions/
    """
    queryset = Permission.objects.all()
    serializer_class = PermissionSerializer
    permission_classes = [HasModulePermission]
    permission_module = 'permissions'
