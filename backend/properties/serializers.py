from rest_framework import serializers
from .models import Property, Room
from tenants.serializers import TenancySerializer


class PropertySerializer(serializers.ModelSerializer):
    created_by = serializers.StringRelatedField(read_only=True)
    updated_by = serializers.StringRelatedField(read_only=True)
    room_count = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = Property
        fields = [
            'id', 'owner', 'name', 'address', 'description', 'is_active', 'room_count',
            'created_at', 'created_by', 'updated_at', 'updated_by',
        ]
        read_only_fields = ['owner', 'is_active', 'created_at', 'created_by', 'updated_at', 'updated_by']

    def get_room_count(self, obj):
        return obj.rooms.filter(is_active=True).count()


class RoomSerializer(serializers.ModelSerializer):
    property_name = serializers.CharField(source='property.name', read_only=True)
    tenants = TenancySerializer(source='tenancies', many=True, read_only=True)
    created_by = serializers.StringRelatedField(read_only=True)
    updated_by = serializers.StringRelatedField(read_only=True)

    class Meta:
        model = Room
        fields = [
            'id', 'property', 'property_name', 'number', 'room_type', 'monthly_rent', 'capacity',
            'amenities', 'is_active', 'tenants',
            'created_at', 'created_by', 'updated_at', 'updated_by',
        ]
        read_only_fields = ['property', 'is_active', 'created_at', 'created_by', 'updated_at', 'updated_by']

    def validate_number(self, value):
        value = str(value).strip()
        if not value:
            raise serializers.ValidationError("Room number is required.")
        prop = self.context.get('property')
        if prop is not None:
            qs = Room.objects.filter(property=prop, number__iexact=value, is_active=True)
            if self.instance is not None:
                qs = qs.exclude(pk=self.instance.pk)
            if qs.exists():
                raise serializers.ValidationError("A room with this number already exists in this property.")
        return value

    def validate_capacity(self, value):
        if value is not None and self.instance is not None:
            occupied = self.instance.tenancies.count()
            if value and value < occupied:
                raise serializers.ValidationError(f"Room already has {occupied} tenant(s).")
        return value
