from django.urls import path
from .views import (
    CustomTokenObtainPairView, CustomTokenRefreshView, register, user_me, change_password,
    health, user_list, user_detail,
    setting_list, setting_detail, company_info,
)

urlpatterns = [
    path('health/', health, name='health'),

    # Auth endpoints
    path('auth/register/', register, name='register'),
    path('auth/login/', CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', user_me, name='user-me'),
    path('auth/change-password/', change_password, name='change-password'),

    # User endpoints
    path('users/', user_list, name='user-list'),
    path('users/<int:pk>/', user_detail, name='user-detail'),

    # Setting endpoints
    path('settings/', setting_list, name='setting-list'),
    path('settings/company/info/', company_info, name='setting-company-info'),
    path('settings/<str:key>/', setting_detail, name='setting-detail'),
]
