"""Django admin configuration for the product catalog."""

from django.contrib import admin

from .models import Product, ProductMaterial


class ProductMaterialInline(admin.TabularInline):
    """Inline editor for a product's material composition."""

    model = ProductMaterial
    extra = 1


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'selling_price', 'is_active')
    search_fields = ('name', 'description')
    list_filter = ('category', 'is_active')
    inlines = [ProductMaterialInline]
