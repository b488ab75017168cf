import logging

from rest_framework import status, generics, permissions
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView

from .serializers import (
    LoginSerializer,
    LogoutSerializer,
    SignupSerializer,
    token_response,
    user_payload,
)

logger = logging.getLogger(__name__)


class LoginView(TokenObtainPairView):
    """
    Obtain an access/refresh token pair
    POST /api/auth/login/
    """
    serializer_class = LoginSerializer


class SignupView(generics.CreateAPIView):
    """
    Register a new account
    POST /api/auth/signup/
    """
    permission_classes = [permissions.AllowAny]
    authentication_classes = []
    serializer_class = SignupSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info('New account registered: %s', user.email)
        return Response(token_response(user), status=status.HTTP_201_CREATED)


class MeView(APIView):
    """
    Current user with role permissions
    GET /api/auth/me/
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response({'user': user_payload(request.user)})


class LogoutView(APIView):
    """
    Blacklist the refresh token
    POST /api/auth/logout/
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = LogoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            RefreshToken(serializer.validated_data['refresh']).blacklist()
        except TokenError as exc:
            raise ValidationError({'refresh': str(exc)})
        return Response({'success': True})
