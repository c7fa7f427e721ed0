"""Invoices API views.

Reads recompute the invoice totals first so a missed recalculation never
reaches the client. Financial fields and client changes are admin-only.
"""

import logging

from django.db import transaction
from django.db.models import Count, Sum
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response

from accounts.models import ADMIN, DESIGNER, STAFF_ROLES, WORKER
from accounts.permissions import HasActionRole
from core.events import publish
from core.pagination import StandardResultsSetPagination

from .events import invoice_created, invoice_updated
from .filters import InvoiceFilter
from .models import Invoice
from .serializers import (
    FINANCIAL_FIELDS,
    InvoiceAdminUpdateSerializer,
    InvoiceCreateSerializer,
    InvoiceDetailSerializer,
    InvoiceSerializer,
    InvoiceStaffUpdateSerializer,
)
from .services import delete_invoice, recalculate_invoice

logger = logging.getLogger(__name__)

EDITOR_ROLES = {ADMIN, DESIGNER, WORKER}


class InvoiceViewSet(viewsets.ModelViewSet):
    permission_classes = [HasActionRole]
    pagination_class = StandardResultsSetPagination
    filterset_class = InvoiceFilter
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    search_fields = ['client_name', 'client_phone', 'client_factory_name']

    action_roles = {
        'list': STAFF_ROLES,
        'retrieve': STAFF_ROLES,
        'create': EDITOR_ROLES,
        'update': EDITOR_ROLES,
        'partial_update': EDITOR_ROLES,
        'destroy': {ADMIN},
        'stats': {ADMIN},
    }

    def get_queryset(self):
        queryset = (
            Invoice.objects.select_related('client', 'created_by')
            .annotate(order_count=Count('orders'))
        )
        if self.action == 'retrieve':
            queryset = queryset.prefetch_related('orders__material')
        return queryset

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return InvoiceDetailSerializer
        return InvoiceSerializer

    def _detail(self, invoice):
        invoice = self.get_queryset().prefetch_related('orders__material').get(pk=invoice.pk)
        return InvoiceDetailSerializer(invoice, context=self.get_serializer_context()).data

    def retrieve(self, request, *args, **kwargs):
        invoice = self.get_object()
        recalculate_invoice(invoice)
        return Response(self.get_serializer(invoice).data)

    def create(self, request, *args, **kwargs):
        serializer = InvoiceCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        if request.user.role != ADMIN:
            for field in FINANCIAL_FIELDS:
                serializer.validated_data.pop(field, None)

        with transaction.atomic():
            invoice = serializer.save(created_by=request.user, updated_by=request.user)
            recalculate_invoice(invoice)
            publish(invoice_created, sender=Invoice, invoice=invoice, actor=request.user)

        logger.info('Invoice %s created by %s for client %s', invoice.pk, request.user.username, invoice.client_id)
        return Response(self._detail(invoice), status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        invoice = self.get_object()
        if request.user.role == ADMIN:
            serializer = InvoiceAdminUpdateSerializer(invoice, data=request.data, partial=True)
        else:
            client = request.data.get('client')
            if client not in (None, '') and str(client) != str(invoice.client_id):
                raise PermissionDenied('Only admin can change invoice client.')
            serializer = InvoiceStaffUpdateSerializer(invoice, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            invoice = serializer.save(updated_by=request.user)
            recalculate_invoice(invoice)
            publish(invoice_updated, sender=Invoice, invoice=invoice, actor=request.user)

        logger.info('Invoice %s updated by %s (%s)', invoice.pk, request.user.username, request.user.role)
        return Response(self._detail(invoice))

    def destroy(self, request, *args, **kwargs):
        invoice = self.get_object()
        delete_invoice(invoice, actor=request.user)
        return Response({'detail': 'Invoice and associated orders deleted.'}, status=status.HTTP_200_OK)

    @action(detail=False, methods=['get'])
    def stats(self, request):
        by_status = (
            Invoice.objects.values('status')
            .annotate(count=Count('id'), total_amount=Sum('total'), total_remaining=Sum('total_remaining'))
            .order_by('status')
        )
        totals = Invoice.objects.aggregate(total_invoices=Count('id'), total_revenue=Sum('total'))
        return Response({
            'by_status': list(by_status),
            'total_invoices': totals['total_invoices'],
            'total_revenue': totals['total_revenue'] or 0,
        })
