from django.urls import path
from .views import (
    material_list_create, material_detail, material_transaction, material_transaction_list,
    material_categories, inventory_summary,
)

urlpatterns = [
    path('materials/', material_list_create, name='material-list-create'),
    path('materials/meta/categories/', material_categories, name='material-categories'),
    path('materials/summary/inventory/', inventory_summary, name='inventory-summary'),
    path('materials/<int:pk>/', material_detail, name='material-detail'),
    path('materials/<int:pk>/transaction/', material_transaction, name='material-transaction'),
    path('materials/<int:pk>/transactions/', material_transaction_list, name='material-transaction-list'),
]
