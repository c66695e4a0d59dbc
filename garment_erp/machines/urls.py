from django.urls import path
from .views import (
    machine_list_create, machine_detail, machine_assign, machine_unassign,
    machine_maintenance, machine_status_summary,
)

urlpatterns = [
    path('machines/', machine_list_create, name='machine-list-create'),
    path('machines/summary/status/', machine_status_summary, name='machine-status-summary'),
    path('machines/<int:pk>/', machine_detail, name='machine-detail'),
    path('machines/<int:pk>/assign/', machine_assign, name='machine-assign'),
    path('machines/<int:pk>/unassign/', machine_unassign, name='machine-unassign'),
    path('machines/<int:pk>/maintenance/', machine_maintenance, name='machine-maintenance'),
]
