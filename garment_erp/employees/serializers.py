from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework import serializers

from garment_erp.core.models import Role
from .models import Employee, Attendance

User = get_user_model()


class EmployeeUserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'email', 'first_name', 'last_name', 'phone', 'avatar', 'role']


class EmployeeSerializer(serializers.ModelSerializer):
    user = EmployeeUserSerializer(read_only=True)

    class Meta:
        model = Employee
        fields = [
            'id', 'employee_id', 'user', 'department', 'designation', 'joining_date', 'salary',
            'address', 'emergency_contact', 'is_active', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'employee_id', 'created_at', 'updated_at']


class EmployeeBriefSerializer(serializers.ModelSerializer):
    first_name = serializers.CharField(source='user.first_name', read_only=True)
    last_name = serializers.CharField(source='user.last_name', read_only=True)

    class Meta:
        model = Employee
        fields = ['id', 'employee_id', 'first_name', 'last_name', 'department', 'designation']


class EmployeeCreateSerializer(serializers.ModelSerializer):
    """Creates the login user (role EMPLOYEE) together with the employee record"""
    email = serializers.EmailField(write_only=True)
    password = serializers.CharField(write_only=True, min_length=6)
    first_name = serializers.CharField(write_only=True)
    last_name = serializers.CharField(write_only=True)
    phone = serializers.CharField(write_only=True, required=False, allow_blank=True, allow_null=True)
    salary = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)

    class Meta:
        model = Employee
        fields = [
            'email', 'password', 'first_name', 'last_name', 'phone',
            'department', 'designation', 'joining_date', 'salary', 'address', 'emergency_contact',
        ]

    def validate_email(self, value):
        value = value.lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError('Email already registered')
        return value

    def create(self, validated_data):
        user_fields = {
            'email': validated_data.pop('email'),
            'first_name': validated_data.pop('first_name'),
            'last_name': validated_data.pop('last_name'),
            'phone': validated_data.pop('phone', None),
            'role': Role.EMPLOYEE,
        }
        password = validated_data.pop('password')
        with transaction.atomic():
            user = User.objects.create_user(password=password, **user_fields)
            return Employee.objects.create(user=user, **validated_data)

    def to_representation(self, instance):
        return EmployeeSerializer(instance).data


class EmployeeUpdateSerializer(serializers.ModelSerializer):
    first_name = serializers.CharField(source='user.first_name', required=False)
    last_name = serializers.CharField(source='user.last_name', required=False)
    phone = serializers.CharField(source='user.phone', required=False, allow_blank=True, allow_null=True)
    salary = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)

    class Meta:
        model = Employee
        fields = [
            'first_name', 'last_name', 'phone', 'department', 'designation', 'joining_date',
            'salary', 'address', 'emergency_contact', 'is_active',
        ]

    def update(self, instance, validated_data):
        user_data = validated_data.pop('user', {})
        with transaction.atomic():
            if user_data:
                for attr, value in user_data.items():
                    setattr(instance.user, attr, value)
                instance.user.save(update_fields=list(user_data.keys()) + ['updated_at'])
            for attr, value in validated_data.items():
                setattr(instance, attr, value)
            instance.save()
        return instance

    def to_representation(self, instance):
        return EmployeeSerializer(instance).data


class AttendanceSerializer(serializers.ModelSerializer):
    employee_code = serializers.CharField(source='employee.employee_id', read_only=True)
    employee_name = serializers.CharField(source='employee.user.full_name', read_only=True)

    class Meta:
        model = Attendance
        fields = [
            'id', 'employee', 'employee_code', 'employee_name', 'date', 'check_in', 'check_out',
            'status', 'notes', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class AttendanceMarkSerializer(serializers.Serializer):
    """Create or overwrite the attendance record for (employee, date)"""
    employee = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.all())
    date = serializers.DateField()
    check_in = serializers.DateTimeField(required=False, allow_null=True)
    check_out = serializers.DateTimeField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=Attendance.Status.choices)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate(self, attrs):
        check_in, check_out = attrs.get('check_in'), attrs.get('check_out')
        if check_in and check_out and check_out < check_in:
            raise serializers.ValidationError({'check_out': ['Check-out cannot be before check-in.']})
        return attrs

    def save(self, **kwargs):
        self.instance = upsert_attendance(self.validated_data)
        return self.instance


class AttendanceBulkSerializer(serializers.Serializer):
    records = AttendanceMarkSerializer(many=True, allow_empty=False)

    def save(self, **kwargs):
        results = []
        with transaction.atomic():
            for record in self.validated_data['records']:
                results.append(upsert_attendance(record))
        return results


def upsert_attendance(validated):
    data = dict(validated)
    employee = data.pop('employee')
    date = data.pop('date')
    # Check-in/out times that were not sent keep their stored value
    defaults = {
        key: value for key, value in data.items()
        if key not in ('check_in', 'check_out') or value is not None
    }
    attendance, _ = Attendance.objects.update_or_create(employee=employee, date=date, defaults=defaults)
    return attendance
