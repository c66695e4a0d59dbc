from django.urls import path
from .views import (
    purchase_order_list_create, purchase_order_detail, purchase_order_approve,
    purchase_order_receive, purchase_order_cancel, purchase_order_summary,
)

urlpatterns = [
    path('purchase-orders/', purchase_order_list_create, name='purchase-order-list-create'),
    path('purchase-orders/summary/stats/', purchase_order_summary, name='purchase-order-summary'),
    path('purchase-orders/<int:pk>/', purchase_order_detail, name='purchase-order-detail'),
    path('purchase-orders/<int:pk>/approve/', purchase_order_approve, name='purchase-order-approve'),
    path('purchase-orders/<int:pk>/receive/', purchase_order_receive, name='purchase-order-receive'),
    path('purchase-orders/<int:pk>/cancel/', purchase_order_cancel, name='purchase-order-cancel'),
]
