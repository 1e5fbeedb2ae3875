from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .serializers import (
    SnackMenuSerializer,
    SnackMenuListSerializer,
    SnackMenuCreateSerializer,
    SnackItemSerializer,
    SnackItemCreateSerializer,
    SnackSettlementSerializer,
    SnackOrderSerializer,
    PlaceOrderSerializer,
    OrderQuantitySerializer,
    MenuOrdersSerializer,
    ActiveMenuSerializer,
)
from apps.ledger.exceptions import service_error_response, UUID_LOOKUP_REGEX

from apps.snacks.services import (
    get_menu_by_id,
    list_menus,
    create_menu,
    add_item,
    remove_item,
    cancel_menu,
    settle_menu,
    create_catalog_menu,
    get_active_menu,
    place_order,
    update_order,
    cancel_order,
    list_my_orders,
    get_menu_orders,
    # Exceptions
    LedgerServiceError,
)


class SnackMenuPagination(PageNumberPagination):
    """Custom pagination for snack menus."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class SnackMenuViewSet(viewsets.GenericViewSet):
    """
    ViewSet for snack menus.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Get menus, optionally filtered by ?status=
    create: Open a new menu, free-form or with a catalog
    active: Newest open catalog menu with the user's order
    retrieve: Get a menu with items and per-user totals
    items: Add an item to an open menu
    remove_item: Remove one of your items
    orders: Per-member summary (GET) or replace your catalog order (POST)
    my_orders: Your catalog order lines on every menu
    order_line: Change or drop one of your catalog order lines
    settle: Charge participants and open the creator's reimbursement (creator or admin)
    cancel: Cancel an open menu (creator or admin)
    """

    serializer_class = SnackMenuSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = SnackMenuPagination
    lookup_value_regex = UUID_LOOKUP_REGEX

    def get_queryset(self):
        return list_menus(status=self.request.query_params.get('status'))

    def list(self, request):
        """List menus."""
        page = self.paginate_queryset(self.get_queryset())
        serializer = SnackMenuListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    @extend_schema(request=SnackMenuCreateSerializer, responses={201: SnackMenuSerializer})
    def create(self, request):
        """Open a new menu."""
        serializer = SnackMenuCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = serializer.validated_data
        try:
            if data.get('catalog'):
                menu = create_catalog_menu(
                    title=data['title'],
                    notes=data.get('notes', ''),
                    items=data['catalog'],
                    created_by=request.user,
                )
            else:
                menu = create_menu(
                    title=data['title'],
                    notes=data.get('notes', ''),
                    created_by=request.user,
                )
        except LedgerServiceError as e:
            return service_error_response(e)

        return Response(SnackMenuSerializer(menu).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: ActiveMenuSerializer})
    @action(detail=False, methods=['get'])
    def active(self, request):
        """Newest open catalog menu and the current user's order on it."""
        menu = get_active_menu()
        if menu is None:
            return Response({'menu': None, 'my_orders': []})

        my_orders = list_my_orders(user=request.user, menu_id=menu.id)
        return Response(ActiveMenuSerializer({'menu': menu, 'my_orders': my_orders}).data)

    def retrieve(self, request, pk=None):
        """Get a menu with its items."""
        try:
            menu = get_menu_by_id(menu_id=pk)
        except LedgerServiceError as e:
            return service_error_response(e)

        return Response(SnackMenuSerializer(menu).data)

    @extend_schema(request=SnackItemCreateSerializer, responses={201: SnackItemSerializer})
    @action(detail=True, methods=['post'])
    def items(self, request, pk=None):
        """Add an item to the menu."""
        serializer = SnackItemCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            item = add_item(
                menu_id=pk,
                user=request.user,
                item_name=serializer.validated_data['item_name'],
                price=serializer.validated_data['price'],
                quantity=serializer.validated_data['quantity'],
            )
        except LedgerServiceError as e:
            return service_error_response(e)

        return Response(SnackItemSerializer(item).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=None, responses={204: None})
    @action(detail=True, methods=['delete'], url_path=rf'items/(?P<item_id>{UUID_LOOKUP_REGEX})')
    def remove_item(self, request, pk=None, item_id=None):
        """Remove one of the current user's items."""
        try:
            remove_item(menu_id=pk, item_id=item_id, user=request.user)
        except LedgerServiceError as e:
            return service_error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        methods=['GET'],
        responses={200: MenuOrdersSerializer(many=True)},
        description="What each member ordered; balances are shown to the creator and admins.",
    )
    @extend_schema(
        methods=['POST'],
        request=PlaceOrderSerializer,
        responses={201: SnackOrderSerializer(many=True)},
        description="Replace the current user's order on a catalog menu.",
    )
    @action(detail=True, methods=['get', 'post'])
    def orders(self, request, pk=None):
        """Per-member order summary, or place the current user's order."""
        if request.method == 'GET':
            try:
                menu = get_menu_by_id(menu_id=pk)
                summary = get_menu_orders(menu_id=pk)
            except LedgerServiceError as e:
                return service_error_response(e)

            show_balances = menu.created_by_id == request.user.id or request.user.is_staff
            serializer = MenuOrdersSerializer(summary, many=True, context={'show_balances': show_balances})
            return Response(serializer.data)

        serializer = PlaceOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            orders = place_order(
                menu_id=pk,
                user=request.user,
                lines=serializer.validated_data['lines'],
            )
        except LedgerServiceError as e:
            return service_error_response(e)

        return Response(SnackOrderSerializer(orders, many=True).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: SnackOrderSerializer(many=True)})
    @action(detail=False, methods=['get'], url_path='orders/mine')
    def my_orders(self, request):
        """Current user's catalog order lines."""
        return Response(SnackOrderSerializer(list_my_orders(user=request.user), many=True).data)

    @extend_schema(methods=['PATCH'], request=OrderQuantitySerializer, responses={200: SnackOrderSerializer})
    @extend_schema(methods=['DELETE'], request=None, responses={204: None})
    @action(detail=False, methods=['patch', 'delete'], url_path=rf'orders/(?P<order_id>{UUID_LOOKUP_REGEX})')
    def order_line(self, request, order_id=None):
        """Change the quantity of, or drop, one of the current user's lines."""
        if request.method == 'DELETE':
            try:
                cancel_order(order_id=order_id, user=request.user)
            except LedgerServiceError as e:
                return service_error_response(e)
            return Response(status=status.HTTP_204_NO_CONTENT)

        serializer = OrderQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = update_order(
                order_id=order_id,
                user=request.user,
                quantity=serializer.validated_data['quantity'],
            )
        except LedgerServiceError as e:
            return service_error_response(e)

        return Response(SnackOrderSerializer(order).data)

    @extend_schema(request=None, responses={200: SnackSettlementSerializer})
    @action(detail=True, methods=['post'])
    def settle(self, request, pk=None):
        """Settle the menu (creator or admin)."""
        try:
            summary = settle_menu(menu_id=pk, settler=request.user)
        except LedgerServiceError as e:
            return service_error_response(e)

        return Response(SnackSettlementSerializer(summary).data)

    @extend_schema(request=None, responses={200: SnackMenuSerializer})
    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        """Cancel the menu (creator or admin)."""
        try:
            menu = cancel_menu(menu_id=pk, user=request.user)
        except LedgerServiceError as e:
            return service_error_response(e)

        return Response(SnackMenuSerializer(menu).data)
