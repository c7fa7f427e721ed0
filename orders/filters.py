import django_filters

from .models import Order


class OrderFilter(django_filters.FilterSet):
    state = django_filters.ChoiceFilter(field_name='order_state', choices=Order.STATE_CHOICES)
    date_from = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    date_to = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = Order
        fields = ['order_state', 'invoice', 'client', 'material', 'product']
