import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework_simplejwt.exceptions import AuthenticationFailed
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .filters import UserFilter, filter_queryset
from .models import Setting, Role
from .permissions import role_required, is_admin_user
from .serializers import (
    UserSerializer, UserCreateSerializer, UserUpdateSerializer, ChangePasswordSerializer,
    SettingSerializer, SettingValueSerializer, BulkSettingSerializer,
)
from .utils import api_response, paginated_response

logger = logging.getLogger(__name__)

User = get_user_model()

COMPANY_SETTING_PREFIX = 'company_'


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    default_error_messages = {
        'no_active_account': 'Invalid credentials',
    }

    def validate(self, attrs):
        email = attrs.get(self.username_field)
        if email:
            attrs[self.username_field] = email.lower()
            candidate = User.objects.filter(email__iexact=email).first()
            if candidate is not None and not candidate.is_active:
                raise AuthenticationFailed('Account is deactivated', code='user_inactive')
        data = super().validate(attrs)
        return {
            'user': UserSerializer(self.user).data,
            'token': data['access'],
            'refresh': data['refresh'],
        }

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['email'] = user.email
        token['role'] = user.role
        return token


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer

    def post(self, request, *args, **kwargs):
        response = super().post(request, *args, **kwargs)
        logger.info(f"User {response.data['user']['email']} logged in")
        return api_response(response.data)


class CustomTokenRefreshView(TokenRefreshView):
    def post(self, request, *args, **kwargs):
        response = super().post(request, *args, **kwargs)
        return api_response(response.data)


@api_view(['GET'])
@permission_classes([AllowAny])
def health(request):
    """Liveness probe"""
    return api_response({'status': 'ok', 'timestamp': timezone.now().isoformat()})


@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """User registration endpoint; only admins may pick a role other than EMPLOYEE"""
    data = request.data.copy()
    if not is_admin_user(request.user):
        data['role'] = Role.EMPLOYEE
    serializer = UserCreateSerializer(data=data)
    serializer.is_valid(raise_exception=True)
    user = serializer.save()
    logger.info(f"Registered user {user.email} with role {user.role}")
    return api_response(UserSerializer(user).data, status_code=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Current user, including the linked employee record when there is one"""
    data = UserSerializer(request.user).data
    employee = getattr(request.user, 'employee', None)
    data['employee'] = (
        {'id': employee.id, 'employee_id': employee.employee_id, 'department': employee.department,
         'designation': employee.designation}
        if employee else None
    )
    return api_response(data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def change_password(request):
    serializer = ChangePasswordSerializer(data=request.data, context={'request': request})
    serializer.is_valid(raise_exception=True)
    serializer.save()
    logger.info(f"User {request.user.email} changed password")
    return api_response(message='Password changed successfully')


# User views
@api_view(['GET'])
@permission_classes([role_required(Role.ADMIN, Role.MANAGER)])
def user_list(request):
    """List users with search, role and is_active filters"""
    queryset = filter_queryset(UserFilter, request, User.objects.all().order_by('-created_at'))
    return paginated_response(request, queryset, UserSerializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def user_detail(request, pk):
    """Retrieve, update or delete a user"""
    user = get_object_or_404(User, pk=pk)

    if request.method == 'GET':
        return api_response(UserSerializer(user).data)
    elif request.method in ('PUT', 'PATCH'):
        if request.user.pk != user.pk and not is_admin_user(request.user):
            raise PermissionDenied('You can only update your own profile.')
        serializer = UserUpdateSerializer(user, data=request.data, partial=True, context={'request': request})
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return api_response(UserSerializer(user).data)
    else:  # DELETE
        if not is_admin_user(request.user):
            raise PermissionDenied('Only admins can delete users.')
        if user.pk == request.user.pk:
            raise ValidationError({'detail': ['You cannot delete your own account.']})
        user.delete()
        logger.info(f"User {user.email} deleted by {request.user.email}")
        return api_response(message='User deleted successfully')


# Setting views
@api_view(['GET', 'PUT'])
@permission_classes([role_required(Role.ADMIN, methods=['PUT'])])
def setting_list(request):
    """All settings as a key/value object, or bulk upsert (PUT)"""
    if request.method == 'GET':
        return api_response({s.key: s.value for s in Setting.objects.all()})

    serializer = BulkSettingSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    with transaction.atomic():
        for key, value in serializer.validated_data['settings'].items():
            Setting.objects.update_or_create(key=key, defaults={'value': value})
    return api_response(
        {s.key: s.value for s in Setting.objects.all()},
        message='Settings updated successfully',
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def company_info(request):
    """Settings whose key starts with ``company_``, prefix stripped"""
    settings_qs = Setting.objects.filter(key__startswith=COMPANY_SETTING_PREFIX)
    return api_response({s.key[len(COMPANY_SETTING_PREFIX):]: s.value for s in settings_qs})


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([role_required(Role.ADMIN, methods=['PUT', 'DELETE'])])
def setting_detail(request, key):
    """Retrieve, upsert or delete a setting by key"""
    if request.method == 'GET':
        setting = get_object_or_404(Setting, key=key)
        return api_response(SettingSerializer(setting).data)
    elif request.method == 'PUT':
        serializer = SettingValueSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        defaults = {'value': serializer.validated_data['value']}
        if 'description' in serializer.validated_data:
            defaults['description'] = serializer.validated_data['description']
        setting, created = Setting.objects.update_or_create(key=key, defaults=defaults)
        return api_response(
            SettingSerializer(setting).data,
            status_code=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
    else:  # DELETE
        setting = get_object_or_404(Setting, key=key)
        setting.delete()
        return api_response(message='Setting deleted successfully')
