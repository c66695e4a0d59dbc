"""
URL configuration for garment_erp project.

Every app mounts its routes under ``api/v1/``; the Django admin stays at
``admin/``.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Garment ERP Admin Panel"
admin.site.site_title = "Garment ERP Admin Portal"
admin.site.index_title = "Welcome to the Garment ERP Admin Portal"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('garment_erp.core.urls')),
    path('api/v1/', include('garment_erp.employees.urls')),
    path('api/v1/', include('garment_erp.machines.urls')),
    path('api/v1/', include('garment_erp.inventory.urls')),
    path('api/v1/', include('garment_erp.parties.urls')),
    path('api/v1/', include('garment_erp.measurements.urls')),
    path('api/v1/', include('garment_erp.purchasing.urls')),
    path('api/v1/', include('garment_erp.notifications.urls')),
    path('api/v1/', include('garment_erp.analytics.urls')),
]
