from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import (
    RegistrationSerializer,
    LoginSerializer,
    ProfileSerializer,
    ProfileUpdateSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    issue_tokens,
    update_profile,
    EmailTakenError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidProfileError,
)


class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class SessionResponseSerializer(serializers.Serializer):
    user = ProfileSerializer()
    tokens = TokensResponseSerializer()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


def _session(user):
    return {
        'user': ProfileSerializer(user).data,
        'tokens': issue_tokens(user),
    }


@extend_schema(
    request=RegistrationSerializer,
    responses={201: SessionResponseSerializer, 400: ErrorResponseSerializer},
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Create an account and sign straight in."""
    serializer = RegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = register_user(**serializer.validated_data)
    except EmailTakenError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(_session(user), status=status.HTTP_201_CREATED)


@extend_schema(
    request=LoginSerializer,
    responses={
        200: SessionResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Exchange email and password for a JWT pair."""
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = authenticate_user(**serializer.validated_data)
    except InvalidCredentialsError as e:
        return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response(_session(user))


@extend_schema(
    methods=['GET'],
    responses={200: ProfileSerializer},
    tags=['auth'],
)
@extend_schema(
    methods=['PATCH'],
    request=ProfileUpdateSerializer,
    responses={200: ProfileSerializer, 400: ErrorResponseSerializer},
    tags=['auth'],
)
@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def me(request):
    """Read or edit the signed-in user's profile."""
    if request.method == 'PATCH':
        serializer = ProfileUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            update_profile(user=request.user, **serializer.validated_data)
        except InvalidProfileError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(ProfileSerializer(request.user).data)
