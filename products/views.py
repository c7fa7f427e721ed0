"""Products API views."""

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, status, viewsets
from rest_framework.response import Response

from core.pagination import StandardResultsSetPagination

from .models import Product
from .permissions import IsCatalogEditorOrReadOnly
from .serializers import ProductSerializer


class ProductViewSet(viewsets.ModelViewSet):
    """Product catalog CRUD; deleting deactivates the product."""

    serializer_class = ProductSerializer
    permission_classes = [IsCatalogEditorOrReadOnly]
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['category']
    search_fields = ['name', 'description']
    ordering_fields = ['name', 'selling_price']

    def get_queryset(self):
        return Product.objects.filter(is_active=True).prefetch_related('materials__material')

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user, updated_by=self.request.user)

    def perform_update(self, serializer):
        serializer.save(updated_by=self.request.user)

    def destroy(self, request, *args, **kwargs):
        product = self.get_object()
        product.is_active = False
        product.updated_by = request.user
        product.save(update_fields=['is_active', 'updated_by', 'updated_at'])
        return Response({'detail': 'Product deleted.'}, status=status.HTTP_200_OK)
