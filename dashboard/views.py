"""Dashboard summary endpoint."""

from django.conf import settings
from django.db.models import Count, F, Sum
from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from accounts.models import ADMIN, STAFF_ROLES
from accounts.permissions import role_required
from clients.models import Client
from inventory.models import Material
from inventory.serializers import MaterialSerializer
from notifications.models import Notification
from notifications.serializers import NotificationSerializer
from orders.models import Order
from orders.serializers import OrderSerializer

from .cache import get_or_compute


def build_summary(user):
    now = timezone.localtime()
    start_of_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    totals = Order.objects.aggregate(total_orders=Count('id'), total_revenue=Sum('total_price'))
    monthly = Order.objects.filter(created_at__gte=start_of_month).aggregate(total=Sum('total_price'))
    breakdown = (
        Order.objects.values('order_state')
        .annotate(count=Count('id'), total_value=Sum('total_price'))
        .order_by('order_state')
    )
    recent_orders = Order.objects.select_related('material', 'product', 'created_by')[:5]
    low_stock = Material.objects.filter(is_active=True, current_stock__lte=F('min_stock_level')).select_related('supplier')[:10]
    notifications = Notification.objects.all() if user.role == ADMIN else Notification.objects.filter(user=user)

    return {
        'overall': {
            'total_orders': totals['total_orders'],
            'total_revenue': totals['total_revenue'] or 0,
            'total_clients': Client.objects.count(),
            'monthly_revenue': monthly['total'] or 0,
        },
        'status_breakdown': list(breakdown),
        'recent_orders': OrderSerializer(recent_orders, many=True).data,
        'low_stock': MaterialSerializer(low_stock, many=True).data,
        'recent_notifications': NotificationSerializer(notifications[:10], many=True).data,
    }


@api_view(['GET'])
@permission_classes([role_required(*STAFF_ROLES)])
def summary(request):
    """Cached per user and role for ``DASHBOARD_CACHE_TTL`` seconds."""
    user = request.user
    data = get_or_compute(
        'dashboard',
        ('summary', user.pk, user.role),
        lambda: build_summary(user),
        settings.DASHBOARD_CACHE_TTL,
    )
    return Response(data)
