"""Orders API views.

All writes go through :mod:`orders.services`; the views only choose the
serializer for the caller's role and shape the response.
"""

from django.conf import settings
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response

from accounts.models import ADMIN, DESIGNER, FINANCIAL, RECEPTIONIST, STAFF_ROLES, WORKER
from accounts.permissions import HasActionRole
from core.pagination import StandardResultsSetPagination
from dashboard.cache import get_or_compute

from . import services, stats
from .filters import OrderFilter
from .models import Order
from .serializers import UPDATE_SERIALIZERS, OrderCreateSerializer, OrderSerializer


class OrderViewSet(viewsets.ModelViewSet):
    """Production orders.

    - Every staff role can read.
    - Admins, receptionists and designers create; non-admins delete only
      their own pending orders.
    - Updates are filtered per role (see ``UPDATE_SERIALIZERS``).
    """

    serializer_class = OrderSerializer
    permission_classes = [HasActionRole]
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = OrderFilter
    search_fields = ['client_name', 'client_phone', 'client_factory_name', 'type']
    ordering_fields = ['created_at', 'total_price', 'order_state']
    ordering = ['-created_at']
    lookup_value_regex = r'\d+'

    action_roles = {
        'list': STAFF_ROLES,
        'retrieve': STAFF_ROLES,
        'create': {ADMIN, RECEPTIONIST, DESIGNER},
        'update': {ADMIN, DESIGNER, WORKER, FINANCIAL},
        'partial_update': {ADMIN, DESIGNER, WORKER, FINANCIAL},
        'destroy': {ADMIN, RECEPTIONIST, DESIGNER},
        'financial_stats': {ADMIN, FINANCIAL},
        'timeseries': {ADMIN, FINANCIAL},
    }

    def get_queryset(self):
        return Order.objects.select_related('material', 'product', 'created_by')

    def create(self, request, *args, **kwargs):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = services.create_order(serializer.validated_data, actor=request.user)
        return Response(self.get_serializer(order).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        order = self.get_object()
        serializer_class = UPDATE_SERIALIZERS.get(request.user.role)
        if serializer_class is None:
            raise PermissionDenied('Not authorized to modify this order.')
        serializer = serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = services.update_order(order, serializer.validated_data, actor=request.user)
        return Response(self.get_serializer(order).data)

    def destroy(self, request, *args, **kwargs):
        order = self.get_object()
        services.delete_order(order, actor=request.user)
        return Response({'detail': 'Order deleted.'}, status=status.HTTP_200_OK)

    @action(detail=False, methods=['get'], url_path='stats/financial')
    def financial_stats(self, request):
        return Response(stats.financial_summary())

    @action(detail=False, methods=['get'], url_path='stats/timeseries')
    def timeseries(self, request):
        """``?period=N&interval=day|week|month``; cached per parameters."""
        period, interval = stats.parse_timeseries_params(
            request.query_params.get('period'), request.query_params.get('interval'),
        )
        data = get_or_compute(
            'timeseries',
            (interval, period),
            lambda: stats.order_timeseries(period, interval),
            settings.TIMESERIES_CACHE_TTL,
        )
        return Response(data)
