from django.urls import path
from .views import analytics_dashboard, analytics_attendance, analytics_machines

urlpatterns = [
    path('analytics/dashboard/', analytics_dashboard, name='analytics-dashboard'),
    path('analytics/attendance/', analytics_attendance, name='analytics-attendance'),
    path('analytics/machines/', analytics_machines, name='analytics-machines'),
]
