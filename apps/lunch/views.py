from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .models import LunchSession, OrderStatus
from .serializers import (
    LunchSessionSerializer,
    LunchSessionDetailSerializer,
    LunchOrderSerializer,
    LunchHistorySerializer,
    SessionTargetSerializer,
    SubmitPaymentSerializer,
    SettlementSummarySerializer,
)
from apps.accounts.serializers import UserMinimalSerializer
from apps.ledger.exceptions import service_error_response, UUID_LOOKUP_REGEX

from apps.lunch.services import (
    get_or_create_session,
    get_session_for_date,
    join_session,
    leave_session,
    claim_payment,
    cancel_session,
    select_buyers,
    settle_invoice,
    office_today,
    order_target_date,
    # Exceptions
    LedgerServiceError,
    SessionNotFoundError,
)


class LunchSessionPagination(PageNumberPagination):
    """Custom pagination for lunch sessions."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


def _resolve_buyer_session(validated_data):
    """Session a buyer action applies to: explicit id, else today's lunch."""
    session_id = validated_data.get('session_id')
    if session_id:
        return session_id
    session = get_session_for_date(session_date=office_today())
    if session is None:
        raise SessionNotFoundError("No lunch session today")
    return session.id


@extend_schema(
    responses={200: LunchSessionDetailSerializer},
    description="Get the session users are currently ordering for (tomorrow after the cutoff hour).",
    tags=['lunch'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def today(request):
    """Get or lazily create the current ordering session."""
    session = get_or_create_session(session_date=order_target_date())
    serializer = LunchSessionDetailSerializer(session, context={'request': request})
    return Response(serializer.data)


@extend_schema(
    request=None,
    responses={201: LunchOrderSerializer},
    description="Join the current ordering session.",
    tags=['lunch'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def join_today(request):
    """Join the current session."""
    try:
        order = join_session(user=request.user, session_date=order_target_date())
    except LedgerServiceError as e:
        return service_error_response(e)

    return Response(LunchOrderSerializer(order).data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=None,
    responses={204: None},
    description="Leave the current ordering session.",
    tags=['lunch'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def leave_today(request):
    """Leave the current session."""
    try:
        leave_session(user=request.user, session_date=order_target_date())
    except LedgerServiceError as e:
        return service_error_response(e)

    return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(
    request=SessionTargetSerializer,
    responses={200: LunchSessionSerializer},
    description="Claim today's bill as the paying buyer.",
    tags=['lunch'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def claim_today(request):
    """Claim the payment of today's lunch."""
    serializer = SessionTargetSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        session_id = _resolve_buyer_session(serializer.validated_data)
        session = claim_payment(session_id=session_id, user=request.user)
    except LedgerServiceError as e:
        return service_error_response(e)

    return Response(LunchSessionSerializer(session).data)


@extend_schema(
    request=SubmitPaymentSerializer,
    responses={200: SettlementSummarySerializer},
    description="Submit the real bill; it is split evenly between all participants.",
    tags=['lunch'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def submit_payment(request):
    """Settle today's lunch with the bill paid by the current user."""
    serializer = SubmitPaymentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        session_id = _resolve_buyer_session(serializer.validated_data)
        summary = settle_invoice(
            session_id=session_id,
            payer_id=request.user.id,
            total_bill=serializer.validated_data['total_bill'],
            receipt_ref=serializer.validated_data.get('receipt_ref'),
        )
    except LedgerServiceError as e:
        return service_error_response(e)

    return Response(SettlementSummarySerializer(summary).data)


@extend_schema(
    responses={200: LunchHistorySerializer(many=True)},
    description="Sessions the current user took part in, newest first.",
    tags=['lunch'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def history(request):
    """Get the current user's lunch history."""
    sessions = (
        LunchSession.objects
        .filter(orders__user=request.user, orders__status=OrderStatus.CONFIRMED)
        .select_related('payer')
        .order_by('-session_date')
    )

    paginator = LunchSessionPagination()
    page = paginator.paginate_queryset(sessions, request)
    serializer = LunchHistorySerializer(page, many=True, context={'request': request})
    return paginator.get_paginated_response(serializer.data)


class LunchSessionViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for lunch sessions.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Get all sessions, newest first
    retrieve: Get a session with its orders
    select_buyers: Run the buyer rotation (admin only)
    cancel: Cancel an unsettled session (admin only)
    """

    queryset = LunchSession.objects.select_related('payer').prefetch_related('orders__user')
    serializer_class = LunchSessionSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = LunchSessionPagination
    lookup_value_regex = UUID_LOOKUP_REGEX

    def get_queryset(self):
        """Optionally filter by status."""
        queryset = super().get_queryset()
        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        return queryset

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'retrieve':
            return LunchSessionDetailSerializer
        return LunchSessionSerializer

    @extend_schema(request=None, responses={200: UserMinimalSerializer(many=True)})
    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated, IsAdminUser])
    def select_buyers(self, request, pk=None):
        """Select today's buyers (admin only)."""
        try:
            buyers = select_buyers(session_id=pk)
        except LedgerServiceError as e:
            return service_error_response(e)

        return Response(UserMinimalSerializer(buyers, many=True).data)

    @extend_schema(request=None, responses={200: LunchSessionSerializer})
    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated, IsAdminUser])
    def cancel(self, request, pk=None):
        """Cancel a session (admin only)."""
        try:
            session = cancel_session(session_id=pk)
        except LedgerServiceError as e:
            return service_error_response(e)

        return Response(LunchSessionSerializer(session).data)
