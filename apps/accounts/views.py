from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiResponse

from apps.ledger.exceptions import service_error_response, LedgerServiceError

from .serializers import UserLoginSerializer, UserSerializer, LoginResponseSerializer
from .services import authenticate_member, issue_tokens


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: LoginResponseSerializer,
        401: OpenApiResponse(description="Unknown email or wrong password"),
        403: OpenApiResponse(description="Account is deactivated"),
    },
    description="Authenticate with email and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = authenticate_member(
            email=serializer.validated_data['email'],
            password=serializer.validated_data['password'],
        )
    except LedgerServiceError as e:
        return service_error_response(e)

    return Response({
        'message': 'Login successful',
        'user': UserSerializer(user).data,
        'tokens': issue_tokens(user),
    })


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current user's profile and fund balance.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    return Response(UserSerializer(request.user).data)


@extend_schema(
    request=UserSerializer,
    responses={200: UserSerializer},
    description="Update the current user's profile (display_name, phone, notification settings).",
    tags=['auth'],
)
@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def update_profile(request):
    """Update profile fields; balance and rotation stats are read-only."""
    serializer = UserSerializer(request.user, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    return Response(serializer.data)
