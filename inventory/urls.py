from django.urls import path

from . import views

urlpatterns = [
    path('daily/', views.daily_inventory, name='inventory_daily'),
    path('wastage/', views.wastage, name='inventory_wastage'),
    path('withdraw/', views.withdraw, name='inventory_withdraw'),
    path('withdrawals/', views.withdrawals, name='inventory_withdrawals'),
    path('<int:material_id>/history/', views.history, name='inventory_history'),
]
