from django.contrib.auth import get_user_model
from rest_framework import serializers
from .models import Tenancy

User = get_user_model()


class TenancySerializer(serializers.ModelSerializer):
    tenant_name = serializers.CharField(source='tenant.get_full_name', read_only=True)
    tenant_email = serializers.EmailField(source='tenant.email', read_only=True)
    tenant_phone = serializers.CharField(source='tenant.phone', read_only=True)

    class Meta:
        model = Tenancy
        fields = [
            'id', 'tenant', 'tenant_name', 'tenant_email', 'tenant_phone',
            'room', 'move_in', 'payment_day', 'created_at', 'updated_at',
        ]
        read_only_fields = ['tenant', 'room', 'created_at', 'updated_at']


class AssignTenantSerializer(serializers.Serializer):
    email = serializers.EmailField()
    move_in = serializers.DateField()
    payment_day = serializers.IntegerField(min_value=1, max_value=31)

    def validate_email(self, value):
        user = User.objects.filter(email__iexact=value, role='tenant', is_active=True).first()
        if user is None:
            raise serializers.ValidationError("No tenant account is registered with this email.")
        self.context['tenant_user'] = user
        return value


class TenancyUpdateSerializer(serializers.ModelSerializer):
    payment_day = serializers.IntegerField(min_value=1, max_value=31, required=False)

    class Meta:
        model = Tenancy
        fields = ['move_in', 'payment_day']
        extra_kwargs = {'move_in': {'required': False}}

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError({"detail": "No fields to update"})
        return attrs


class MyRoomSerializer(serializers.ModelSerializer):
    """The current tenant's room with property and owner contact."""
    room_id = serializers.IntegerField(source='room.id', read_only=True)
    room_number = serializers.CharField(source='room.number', read_only=True)
    room_type = serializers.CharField(source='room.room_type', read_only=True)
    monthly_rent = serializers.DecimalField(source='room.monthly_rent', max_digits=10, decimal_places=2, read_only=True)
    amenities = serializers.CharField(source='room.amenities', read_only=True)
    property_id = serializers.IntegerField(source='room.property.id', read_only=True)
    property_name = serializers.CharField(source='room.property.name', read_only=True)
    property_address = serializers.CharField(source='room.property.address', read_only=True)
    owner = serializers.SerializerMethodField()

    class Meta:
        model = Tenancy
        fields = [
            'id', 'room_id', 'room_number', 'room_type', 'monthly_rent', 'amenities',
            'property_id', 'property_name', 'property_address', 'owner',
            'move_in', 'payment_day',
        ]

    def get_owner(self, obj):
        owner = obj.room.property.owner
        return {
            'id': owner.id,
            'name': owner.get_full_name(),
            'email': owner.email,
            'phone': owner.phone,
        }
