from django.urls import path
from .views import measurement_list_create, measurement_detail, garment_types, customer_measurements

urlpatterns = [
    path('measurements/', measurement_list_create, name='measurement-list-create'),
    path('measurements/meta/garment-types/', garment_types, name='measurement-garment-types'),
    path('measurements/customer/<int:customer_id>/', customer_measurements, name='customer-measurements'),
    path('measurements/<int:pk>/', measurement_detail, name='measurement-detail'),
]
