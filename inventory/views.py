"""Inventory API views.

Materials are exposed through a viewset; ledger-driven operations (daily
counts, wastage, withdrawals, history) are plain function views because they
do not map onto a single resource.
"""

from datetime import datetime, time, timedelta
from decimal import Decimal

from django.db import transaction
from django.db.models import Q
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.response import Response

from accounts.models import ADMIN, DESIGNER, FINANCIAL, RECEPTIONIST, WORKER
from accounts.permissions import HasActionRole, role_required
from core.pagination import StandardResultsSetPagination

from . import services
from .filters import MaterialFilter
from .models import InventoryRecord, Material
from .serializers import (
    DailyCountSerializer,
    DateRangeQuerySerializer,
    DayQuerySerializer,
    InventoryRecordSerializer,
    MaterialSerializer,
    StockUpdateSerializer,
    WastageSerializer,
    WithdrawSerializer,
)

READ_ROLES = {ADMIN, DESIGNER, WORKER, RECEPTIONIST, FINANCIAL}


def _day_bounds(day):
    start = timezone.make_aware(datetime.combine(day, time.min))
    return start, start + timedelta(days=1)


def _query_dates(serializer_class, request):
    """Validate date query params; blank values count as missing."""
    params = {key: value for key, value in request.query_params.items() if value}
    serializer = serializer_class(data=params)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


class MaterialViewSet(viewsets.ModelViewSet):
    """Material registry.

    Every staff role can read (orders and invoices need the list); only
    admins create, edit, adjust stock or deactivate.
    """

    serializer_class = MaterialSerializer
    permission_classes = [HasActionRole]
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = MaterialFilter
    search_fields = ['name', 'description']
    ordering_fields = ['name', 'current_stock', 'category']
    ordering = ['name']

    action_roles = {
        'list': READ_ROLES,
        'retrieve': READ_ROLES,
    }
    default_roles = {ADMIN}

    def get_queryset(self):
        return Material.objects.filter(is_active=True).select_related('supplier')

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user, updated_by=self.request.user)

    def perform_update(self, serializer):
        # current_stock only moves through the ledger
        serializer.validated_data.pop('current_stock', None)
        serializer.save(updated_by=self.request.user)

    def destroy(self, request, *args, **kwargs):
        material = self.get_object()
        material.is_active = False
        material.updated_by = request.user
        material.save(update_fields=['is_active', 'updated_by', 'updated_at'])
        return Response({'detail': 'Material deleted.'}, status=status.HTTP_200_OK)

    @action(detail=False, methods=['get'], url_path='low-stock')
    def low_stock(self, request):
        materials = [m for m in self.get_queryset() if m.is_low_stock]
        return Response(self.get_serializer(materials, many=True).data)

    @action(detail=False, methods=['post'], url_path='stock/update')
    def update_stock(self, request):
        serializer = StockUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        record = services.adjust_stock(
            data['material'],
            data['quantity'],
            actor=request.user,
            record_type=data['type'],
            reason=data['reason'],
            notes=data['notes'],
        )
        return Response({
            'material': MaterialSerializer(data['material']).data,
            'record': InventoryRecordSerializer(record).data,
        })


@api_view(['GET', 'POST'])
@permission_classes([role_required(ADMIN, WORKER)])
def daily_inventory(request):
    """GET: the day's count rows (``?date=YYYY-MM-DD``). POST: submit counts."""
    if request.method == 'GET':
        day = _query_dates(DayQuerySerializer, request).get('date') or timezone.localdate()
        start, end = _day_bounds(day)
        records = (
            InventoryRecord.objects.filter(type=InventoryRecord.DAILY_COUNT, date__gte=start, date__lt=end)
            .select_related('material', 'counted_by')
        )
        return Response(InventoryRecordSerializer(records, many=True).data)

    serializer = DailyCountSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    with transaction.atomic():
        records = [
            services.submit_daily_count(item['material'], item['actual_stock'], actor=request.user, notes=item['notes'])
            for item in serializer.validated_data['counts']
        ]
    return Response(InventoryRecordSerializer(records, many=True).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
@permission_classes([role_required(ADMIN)])
def wastage(request):
    """GET: wastage report per material. POST: record a wastage event."""
    if request.method == 'POST':
        serializer = WastageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        record = services.record_wastage(
            data['material'], data['waste_amount'], actor=request.user, reason=data['reason'], notes=data['notes'],
        )
        return Response(InventoryRecordSerializer(record).data, status=status.HTTP_201_CREATED)

    dates = _query_dates(DateRangeQuerySerializer, request)
    end = dates.get('end_date') or timezone.localdate()
    start = dates.get('start_date') or end - timedelta(days=30)
    range_start, _ = _day_bounds(start)
    _, range_end = _day_bounds(end)

    rows = {}
    records = InventoryRecord.objects.filter(
        type=InventoryRecord.WASTAGE, date__gte=range_start, date__lt=range_end,
    ).select_related('material')
    for record in records:
        material = record.material
        row = rows.setdefault(material.pk, {
            'material_id': material.pk,
            'material_name': material.name,
            'material_unit': material.unit,
            'total_wastage': Decimal('0'),
            'waste_events': 0,
            'total_cost': Decimal('0'),
        })
        amount = abs(record.difference)
        row['total_wastage'] += amount
        row['waste_events'] += 1
        row['total_cost'] += amount * material.cost_per_unit

    data = sorted(rows.values(), key=lambda r: r['total_wastage'], reverse=True)
    for row in data:
        row['average_waste'] = row['total_wastage'] / row['waste_events']

    return Response({
        'wastage_data': data,
        'summary': {
            'total_waste_events': sum(r['waste_events'] for r in data),
            'total_waste_cost': sum((r['total_cost'] for r in data), Decimal('0')),
            'date_range': {'start_date': start, 'end_date': end},
        },
    })


@api_view(['POST'])
@permission_classes([role_required(ADMIN, WORKER)])
def withdraw(request):
    serializer = WithdrawSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    record = services.withdraw(
        data['material'], data['quantity'], actor=request.user, reason=data['reason'], notes=data['notes'],
    )
    return Response({
        'record': InventoryRecordSerializer(record).data,
        'material': MaterialSerializer(data['material']).data,
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([role_required(ADMIN, WORKER)])
def withdrawals(request):
    """Manual withdrawals (usage rows not tied to an order), newest first."""
    records = (
        InventoryRecord.objects.filter(type=InventoryRecord.USAGE, order__isnull=True)
        .select_related('material', 'counted_by')
    )
    material_id = request.query_params.get('material')
    if material_id and material_id.isdigit():
        records = records.filter(material_id=int(material_id))

    paginator = StandardResultsSetPagination()
    page = paginator.paginate_queryset(records, request)
    return paginator.get_paginated_response(InventoryRecordSerializer(page, many=True).data)


@api_view(['GET'])
@permission_classes([role_required(ADMIN)])
def history(request, material_id):
    """Ledger rows for one material; optional ``type``, ``start_date``, ``end_date``."""
    material = get_object_or_404(Material, pk=material_id)
    records = material.inventory_records.select_related('material', 'counted_by')

    record_type = request.query_params.get('type')
    if record_type:
        records = records.filter(type=record_type)

    dates = _query_dates(DateRangeQuerySerializer, request)
    start = dates.get('start_date')
    end = dates.get('end_date')
    if start and end:
        records = records.filter(Q(date__gte=_day_bounds(start)[0]) & Q(date__lt=_day_bounds(end)[1]))

    paginator = StandardResultsSetPagination()
    page = paginator.paginate_queryset(records, request)
    return paginator.get_paginated_response(InventoryRecordSerializer(page, many=True).data)
