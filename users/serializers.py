from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password

from backend.exceptions import AlreadyExists
from .models import User, Role, Permission


class PermissionSerializer(serializers.ModelSerializer):
    """
    Serializer for Permission
    """
    class Meta:
        model = Permission
        fields = ['id', 'name', 'description', 'module']


class RoleSerializer(serializers.ModelSerializer):
    """
    Serializer for Role with its permissions
    """
    permissions = PermissionSerializer(many=True, read_only=True)
    permission_ids = serializers.PrimaryKeyRelatedField(
        queryset=Permission.objects.all(),
        many=True,
        write_only=True,
        required=False,
        source='permissions'
    )
    user_count = serializers.SerializerMethodField()

    class Meta:
        model = Role
        fields = [
            'id', 'name', 'description', 'permissions', 'permission_ids',
            'user_count', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {
            'name': {'validators': []},
        }

    def get_user_count(self, obj):
        return obj.users.count()

    def validate_name(self, value):
        name = value.strip()
        queryset = Role.objects.filter(name__iexact=name)
        if self.instance:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise AlreadyExists('A role with this name already exists')
        return name


class UserSerializer(serializers.ModelSerializer):
    """
    Serializer for User (read)
    """
    role_name = serializers.CharField(source='role.name', read_only=True, allow_null=True)

    class Meta:
        model = User
        fields = [
            'id', 'email', 'name', 'role', 'role_name', 'is_active',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class UserCreateSerializer(serializers.ModelSerializer):
    """
    Serializer for creating users
    """
    password = serializers.CharField(write_only=True, validators=[validate_password])
    role = serializers.PrimaryKeyRelatedField(queryset=Role.objects.all())

    class Meta:
        model = User
        fields = ['email', 'password', 'name', 'role']
        extra_kwargs = {
            'email': {'validators': []},
        }

    def validate_email(self, value):
        email = value.lower().strip()
        if User.objects.filter(email=email).exists():
            raise AlreadyExists('User with this email already exists')
        return email

    def create(self, validated_data):
        password = validated_data.pop('password')
        return User.objects.create_user(password=password, **validated_data)


class UserUpdateSerializer(serializers.ModelSerializer):
    """
    Serializer for updating users; password is optional
    """
    password = serializers.CharField(write_only=True, required=False, validators=[validate_password])
    role = serializers.PrimaryKeyRelatedField(queryset=Role.objects.all(), required=False)

    class Meta:
        model = User
        fields = ['email', 'password', 'name', 'role', 'is_active']
        extra_kwargs = {
            'email': {'validators': []},
        }

    def validate_email(self, value):
        email = value.lower().strip()
        if User.objects.filter(email=email).exclude(pk=self.instance.pk).exists():
            raise AlreadyExists('User with this email already exists')
        return email

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance
