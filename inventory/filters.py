"""django-filter filtersets for materials."""

import django_filters
from django.db.models import F

from .models import Material


class MaterialFilter(django_filters.FilterSet):
    is_order_type = django_filters.BooleanFilter()
    category = django_filters.ChoiceFilter(choices=Material.CATEGORY_CHOICES)
    stock_status = django_filters.ChoiceFilter(
        choices=(('low_stock', 'Low stock'), ('out_of_stock', 'Out of stock')),
        method='filter_stock_status',
    )

    class Meta:
        model = Material
        fields = ['is_order_type', 'category', 'supplier']

    def filter_stock_status(self, queryset, name, value):
        if value == 'low_stock':
            return queryset.filter(current_stock__lte=F('min_stock_level'))
        if value == 'out_of_stock':
            return queryset.filter(current_stock__lte=0)
        return queryset
