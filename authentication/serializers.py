from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from backend.exceptions import AlreadyExists
from users.defaults import get_student_role

User = get_user_model()


def user_payload(user):
    """Session payload returned by login, signup and /me"""
    return {
        'id': user.id,
        'email': user.email,
        'name': user.name,
        'role_id': user.role_id,
        'role_name': user.role.name if user.role_id else None,
        'permissions': user.permission_names(),
    }


def token_response(user):
    refresh = RefreshToken.for_user(user)
    return {
        'token': str(refresh.access_token),
        'refresh': str(refresh),
        'user': user_payload(user),
    }


class LoginSerializer(TokenObtainPairSerializer):
    """
    Email/password login returning the access token, refresh token and
    the user's role permissions
    """
    default_error_messages = {
        'no_active_account': 'Invalid email or password',
    }

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['email'] = user.email
        token['role_id'] = user.role_id
        return token

    def validate(self, attrs):
        attrs[self.username_field] = attrs[self.username_field].lower().strip()
        data = super().validate(attrs)
        return {
            'token': data['access'],
            'refresh': data['refresh'],
            'user': user_payload(self.user),
        }


class SignupSerializer(serializers.Serializer):
    """
    Self-registration; new accounts get the default Student role
    """
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, validators=[validate_password])

    def validate_email(self, value):
        email = value.lower().strip()
        if User.objects.filter(email=email).exists():
            raise AlreadyExists('Email already exists')
        return email

    def create(self, validated_data):
        name = f"{validated_data['first_name'].strip()} {validated_data['last_name'].strip()}".strip()
        return User.objects.create_user(
            email=validated_data['email'],
            password=validated_data['password'],
            name=name,
            role=get_student_role(),
        )


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField()
