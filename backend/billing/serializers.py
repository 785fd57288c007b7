from django.core.validators import FileExtensionValidator
from rest_framework import serializers

from tenants.models import validate_file_size
from .models import RECEIPT_EXTENSIONS, RentBill, UtilityBill


class RentBillSerializer(serializers.ModelSerializer):
    room_number = serializers.CharField(source='room.number', read_only=True)
    property_name = serializers.CharField(source='property.name', read_only=True)

    class Meta:
        model = RentBill
        fields = [
            'id', 'room', 'room_number', 'property', 'property_name',
            'year', 'month', 'due_date', 'amount', 'payment_day',
            'status', 'proof', 'submitted_amount', 'submitted_at',
            'action', 'action_at', 'created_at',
        ]
        read_only_fields = fields


class OwnerRentBillSerializer(RentBillSerializer):
    tenant_name = serializers.CharField(source='tenant.get_full_name', read_only=True)
    tenant_email = serializers.EmailField(source='tenant.email', read_only=True)
    room_rent = serializers.DecimalField(source='room.monthly_rent', max_digits=10, decimal_places=2, read_only=True)

    class Meta(RentBillSerializer.Meta):
        fields = RentBillSerializer.Meta.fields + ['tenant', 'tenant_name', 'tenant_email', 'room_rent', 'move_in']
        read_only_fields = fields


class PaymentSubmissionSerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=2000, max_value=9999)
    month = serializers.IntegerField(min_value=1, max_value=12)
    room = serializers.IntegerField(required=False, allow_null=True)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True)
    proof = serializers.FileField(
        validators=[FileExtensionValidator(allowed_extensions=RECEIPT_EXTENSIONS), validate_file_size],
    )


class UtilityBillSerializer(serializers.ModelSerializer):
    class Meta:
        model = UtilityBill
        fields = [
            'id', 'bill_type', 'amount', 'status', 'verification', 'receipt',
            'year', 'month', 'property', 'owner', 'created_at', 'updated_at',
        ]
        read_only_fields = ['status', 'verification', 'year', 'month', 'property', 'owner', 'created_at', 'updated_at']
        extra_kwargs = {
            'amount': {'min_value': 0},
            'receipt': {'required': False},
        }

    def validate_bill_type(self, value):
        value = str(value).strip()
        if not value:
            raise serializers.ValidationError("Bill type is required.")
        return value


class OwnerUtilityBillSerializer(UtilityBillSerializer):
    tenant_name = serializers.CharField(source='tenant.get_full_name', read_only=True)
    property_name = serializers.CharField(source='property.name', read_only=True, default=None)

    class Meta(UtilityBillSerializer.Meta):
        fields = UtilityBillSerializer.Meta.fields + ['tenant', 'tenant_name', 'property_name']
        read_only_fields = fields
