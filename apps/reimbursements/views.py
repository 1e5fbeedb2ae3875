from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .models import ReimbursementRequest
from .serializers import ReimbursementSerializer, TransferSerializer, ConfirmSerializer
from apps.ledger.exceptions import service_error_response, UUID_LOOKUP_REGEX

from apps.reimbursements.services import (
    mark_transferred,
    confirm_receipt,
    list_pending_reimbursements,
    list_user_reimbursements,
    # Exceptions
    LedgerServiceError,
)


class ReimbursementPagination(PageNumberPagination):
    """Custom pagination for reimbursements."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class ReimbursementViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for reimbursement requests.

    list: All requests (admin only)
    retrieve: One request (admin or its settler)
    mine: Current user's requests
    pending: Requests waiting for a transfer (admin only)
    transfer: Mark the bank transfer as sent (admin only)
    confirm: Confirm or dispute a transfer (settler only)
    """

    serializer_class = ReimbursementSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = ReimbursementPagination
    lookup_value_regex = UUID_LOOKUP_REGEX

    def get_queryset(self):
        """Admins see every request, users only their own."""
        queryset = ReimbursementRequest.objects.select_related(
            'settler', 'admin', 'session', 'snack_menu'
        )
        if self.request.user.is_staff:
            return queryset
        return queryset.filter(settler=self.request.user)

    def get_permissions(self):
        """Set permissions based on action."""
        if self.action in ['list', 'pending', 'transfer']:
            return [IsAuthenticated(), IsAdminUser()]
        return [IsAuthenticated()]

    @action(detail=False, methods=['get'])
    def mine(self, request):
        """List the current user's reimbursements."""
        page = self.paginate_queryset(list_user_reimbursements(user=request.user))
        serializer = ReimbursementSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    @action(detail=False, methods=['get'])
    def pending(self, request):
        """List requests waiting for a transfer (admin only)."""
        serializer = ReimbursementSerializer(list_pending_reimbursements(), many=True)
        return Response(serializer.data)

    @extend_schema(request=TransferSerializer, responses={200: ReimbursementSerializer})
    @action(detail=True, methods=['post'])
    def transfer(self, request, pk=None):
        """Mark a request as transferred (admin only)."""
        serializer = TransferSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            reimbursement = mark_transferred(
                request_id=pk,
                admin=request.user,
                note=serializer.validated_data.get('note'),
            )
        except LedgerServiceError as e:
            return service_error_response(e)

        return Response(ReimbursementSerializer(reimbursement).data)

    @extend_schema(request=ConfirmSerializer, responses={200: ReimbursementSerializer})
    @action(detail=True, methods=['post'])
    def confirm(self, request, pk=None):
        """Confirm or dispute a transfer (settler only)."""
        serializer = ConfirmSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            reimbursement = confirm_receipt(
                request_id=pk,
                user=request.user,
                response=serializer.validated_data['response'],
            )
        except LedgerServiceError as e:
            return service_error_response(e)

        return Response(ReimbursementSerializer(reimbursement).data)
