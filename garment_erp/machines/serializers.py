from rest_framework import serializers

from garment_erp.employees.models import Employee
from .models import Machine, MachineAssignment, MaintenanceLog


class MachineAssignmentSerializer(serializers.ModelSerializer):
    machine_code = serializers.CharField(source='machine.machine_code', read_only=True)
    machine_name = serializers.CharField(source='machine.name', read_only=True)
    employee_code = serializers.CharField(source='employee.employee_id', read_only=True)
    employee_name = serializers.CharField(source='employee.user.full_name', read_only=True)

    class Meta:
        model = MachineAssignment
        fields = [
            'id', 'machine', 'machine_code', 'machine_name', 'employee', 'employee_code',
            'employee_name', 'assigned_at', 'unassigned_at', 'is_active',
        ]
        read_only_fields = fields


class MaintenanceLogSerializer(serializers.ModelSerializer):
    cost = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True)

    class Meta:
        model = MaintenanceLog
        fields = [
            'id', 'machine', 'type', 'description', 'cost', 'performed_at', 'performed_by',
            'next_due_date', 'created_at',
        ]
        read_only_fields = ['id', 'machine', 'created_at']
        extra_kwargs = {
            'description': {'allow_blank': False},
        }


class MachineSerializer(serializers.ModelSerializer):
    current_assignment = serializers.SerializerMethodField()

    class Meta:
        model = Machine
        fields = [
            'id', 'machine_code', 'name', 'type', 'manufacturer', 'model', 'purchase_date',
            'last_maintenance', 'next_maintenance', 'status', 'location', 'notes',
            'current_assignment', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'machine_code', 'last_maintenance', 'created_at', 'updated_at']
        extra_kwargs = {
            'name': {'allow_blank': False},
            'type': {'allow_blank': False},
        }

    def get_current_assignment(self, obj):
        # list views prefetch active assignments into ``active_assignments``
        active = getattr(obj, 'active_assignments', None)
        assignment = active[0] if active else (None if active is not None else obj.active_assignment)
        return MachineAssignmentSerializer(assignment).data if assignment else None


class MachineCreateSerializer(MachineSerializer):
    """New machines always start IDLE"""

    class Meta(MachineSerializer.Meta):
        read_only_fields = MachineSerializer.Meta.read_only_fields + ['status']


class MachineAssignSerializer(serializers.Serializer):
    employee = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.filter(is_active=True))
