from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .models import Transaction
from .serializers import (
    TransactionSerializer,
    PendingDepositSerializer,
    DepositCreateSerializer,
    DepositRejectSerializer,
    AdjustmentSerializer,
    FundStatsSerializer,
)
from .exceptions import service_error_response, UUID_LOOKUP_REGEX

from apps.lunch.services.clock import office_today

from apps.ledger.services import (
    create_deposit,
    approve_deposit,
    reject_deposit,
    adjust_balance,
    list_pending_deposits,
    get_user_transactions,
    get_fund_stats,
    # Exceptions
    LedgerServiceError,
)


class TransactionPagination(PageNumberPagination):
    """Custom pagination for ledger history."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


@extend_schema(
    responses={200: TransactionSerializer(many=True)},
    description="Get the current user's ledger history, newest first.",
    tags=['ledger'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def transactions(request):
    """List the current user's transactions."""
    queryset = get_user_transactions(user=request.user)

    paginator = TransactionPagination()
    page = paginator.paginate_queryset(queryset, request)
    serializer = TransactionSerializer(page, many=True)
    return paginator.get_paginated_response(serializer.data)


@extend_schema(
    request=AdjustmentSerializer,
    responses={201: TransactionSerializer},
    description="Manually adjust a user's balance (admin only). The balance may go negative.",
    tags=['ledger'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminUser])
def adjustments(request):
    """Create a balance adjustment."""
    serializer = AdjustmentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        adjustment = adjust_balance(
            user_id=serializer.validated_data['user_id'],
            amount=serializer.validated_data['amount'],
            admin=request.user,
            note=serializer.validated_data['note'],
        )
    except LedgerServiceError as e:
        return service_error_response(e)

    return Response(TransactionSerializer(adjustment).data, status=status.HTTP_201_CREATED)


@extend_schema(
    responses={200: FundStatsSerializer},
    description="Fund snapshot for the admin dashboard: members, sessions, pending deposits and today's lunch.",
    tags=['ledger'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminUser])
def stats(request):
    """Get fund statistics (admin only)."""
    return Response(FundStatsSerializer(get_fund_stats(today=office_today())).data)


class DepositViewSet(viewsets.GenericViewSet):
    """
    ViewSet for deposits.

    create: Request a deposit (balance changes on approval)
    pending: List deposits awaiting approval (admin only)
    approve: Approve a deposit (admin only)
    reject: Reject a deposit (admin only)
    """

    queryset = Transaction.objects.none()
    serializer_class = TransactionSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_LOOKUP_REGEX

    @extend_schema(request=DepositCreateSerializer, responses={201: TransactionSerializer})
    def create(self, request):
        """Request a deposit."""
        serializer = DepositCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            deposit = create_deposit(
                user=request.user,
                amount=serializer.validated_data['amount'],
                note=serializer.validated_data.get('note'),
                bank_reference=serializer.validated_data.get('bank_reference'),
            )
        except LedgerServiceError as e:
            return service_error_response(e)

        return Response(TransactionSerializer(deposit).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: PendingDepositSerializer(many=True)})
    @action(detail=False, methods=['get'], permission_classes=[IsAuthenticated, IsAdminUser])
    def pending(self, request):
        """List pending deposits (admin only)."""
        serializer = PendingDepositSerializer(list_pending_deposits(), many=True)
        return Response(serializer.data)

    @extend_schema(request=None, responses={200: TransactionSerializer})
    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated, IsAdminUser])
    def approve(self, request, pk=None):
        """Approve a deposit (admin only)."""
        try:
            deposit = approve_deposit(transaction_id=pk, admin=request.user)
        except LedgerServiceError as e:
            return service_error_response(e)

        return Response(TransactionSerializer(deposit).data)

    @extend_schema(request=DepositRejectSerializer, responses={200: TransactionSerializer})
    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated, IsAdminUser])
    def reject(self, request, pk=None):
        """Reject a deposit (admin only)."""
        serializer = DepositRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            deposit = reject_deposit(
                transaction_id=pk,
                admin=request.user,
                reason=serializer.validated_data.get('reason'),
            )
        except LedgerServiceError as e:
            return service_error_response(e)

        return Response(TransactionSerializer(deposit).data)
