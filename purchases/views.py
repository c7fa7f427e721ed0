"""Purchase and supplier API views (admin only)."""

from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from accounts.models import ADMIN
from accounts.permissions import role_required
from core.pagination import StandardResultsSetPagination

from .models import Purchase, Supplier
from .serializers import PurchaseSerializer, ReceivePurchaseSerializer, SupplierSerializer
from .services import receive_purchase


class SupplierViewSet(viewsets.ModelViewSet):
    serializer_class = SupplierSerializer
    permission_classes = [role_required(ADMIN)]
    pagination_class = StandardResultsSetPagination
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['name', 'contact_person', 'phone']
    ordering = ['name']

    def get_queryset(self):
        return Supplier.objects.filter(is_active=True)

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)

    def destroy(self, request, *args, **kwargs):
        supplier = self.get_object()
        supplier.is_active = False
        supplier.save(update_fields=['is_active', 'updated_at'])
        return Response({'detail': 'Supplier deleted.'}, status=status.HTTP_200_OK)


class PurchaseViewSet(viewsets.ModelViewSet):
    """Purchase orders.

    Deleting is only possible while pending or cancelled; receiving goes
    through ``POST /purchases/{id}/receive/``.
    """

    serializer_class = PurchaseSerializer
    permission_classes = [role_required(ADMIN)]
    pagination_class = StandardResultsSetPagination
    filterset_fields = ['status', 'supplier']

    def get_queryset(self):
        return Purchase.objects.select_related('supplier').prefetch_related('items__material')

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user, updated_by=self.request.user)

    def perform_update(self, serializer):
        serializer.save(updated_by=self.request.user)

    def destroy(self, request, *args, **kwargs):
        purchase = self.get_object()
        if purchase.status not in Purchase.DELETABLE_STATUSES:
            return Response(
                {'detail': 'Cannot delete a purchase order that is ordered or received.'},
                status=status.HTTP_400_BAD_REQUEST,
            )
        purchase.delete()
        return Response({'detail': 'Purchase order deleted.'}, status=status.HTTP_200_OK)

    @action(detail=True, methods=['post'])
    def receive(self, request, pk=None):
        purchase = self.get_object()
        serializer = ReceivePurchaseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        purchase, _ = receive_purchase(
            purchase,
            actor=request.user,
            received_items=serializer.validated_data.get('received_items'),
            notes=serializer.validated_data['notes'],
        )
        return Response(self.get_serializer(purchase).data)
