from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.shortcuts import get_object_or_404
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
import logging

from accounts.models import log_activity
from accounts.permissions import IsOwnerRole
from tenants.models import Tenancy
from tenants.serializers import AssignTenantSerializer, TenancySerializer, TenancyUpdateSerializer
from .models import Property, Room
from .serializers import PropertySerializer, RoomSerializer

logger = logging.getLogger(__name__)
User = get_user_model()


class PropertyViewSet(viewsets.ModelViewSet):
    """Owner's properties. Other owners' rows are simply not in the queryset (404)."""
    permission_classes = [IsAuthenticated, IsOwnerRole]
    serializer_class = PropertySerializer

    def get_queryset(self):
        return Property.objects.filter(owner=self.request.user, is_active=True).order_by('name')

    def perform_create(self, serializer):
        instance = serializer.save(owner=self.request.user)
        log_activity(self.request.user, 'create', f"Created property {instance.name}", meta={'property_id': instance.id})

    def perform_update(self, serializer):
        instance = serializer.save()
        log_activity(self.request.user, 'update', f"Updated property {instance.name}", meta={'property_id': instance.id})

    def perform_destroy(self, instance):
        # Soft delete: ends tenancies, keeps rooms and rent history for the ledger
        with transaction.atomic():
            removed, _ = Tenancy.objects.filter(room__property=instance).delete()
            instance.rooms.update(is_active=False)
            instance.is_active = False
            instance.save(update_fields=['is_active', 'updated_at', 'updated_by'])
        logger.info("properties: deactivated property=%s tenancies_removed=%s", instance.id, removed)
        log_activity(self.request.user, 'delete', f"Deleted property {instance.name}", meta={'property_id': instance.id})


class RoomViewSet(viewsets.ModelViewSet):
    """Rooms of one of the owner's properties, plus tenant assignment."""
    permission_classes = [IsAuthenticated, IsOwnerRole]
    serializer_class = RoomSerializer

    def get_property(self):
        if not hasattr(self, '_property'):
            prop = Property.objects.filter(
                pk=self.kwargs.get('property_pk'), owner=self.request.user, is_active=True
            ).first()
            if prop is None:
                raise NotFound("Property not found or not authorized.")
            self._property = prop
        return self._property

    def get_queryset(self):
        return (
            Room.objects.filter(property=self.get_property(), is_active=True)
            .select_related('property')
            .prefetch_related('tenancies__tenant')
            .order_by('number')
        )

    def get_serializer_context(self):
        context = super().get_serializer_context()
        if 'property_pk' in self.kwargs:
            context['property'] = self.get_property()
        return context

    def perform_create(self, serializer):
        room = serializer.save(property=self.get_property())
        log_activity(self.request.user, 'create', f"Created room {room.number}", meta={'room_id': room.id})

    def perform_update(self, serializer):
        room = serializer.save()
        log_activity(self.request.user, 'update', f"Updated room {room.number}", meta={'room_id': room.id})

    def perform_destroy(self, instance):
        with transaction.atomic():
            removed, _ = instance.tenancies.all().delete()
            instance.is_active = False
            instance.save(update_fields=['is_active', 'updated_at', 'updated_by'])
        logger.info("properties: deactivated room=%s tenancies_removed=%s", instance.id, removed)
        log_activity(self.request.user, 'delete', f"Deleted room {instance.number}", meta={'room_id': instance.id})

    @action(detail=True, methods=['post'], url_path='assign-tenant')
    def assign_tenant(self, request, property_pk=None, pk=None):
        room = self.get_object()
        serializer = AssignTenantSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        tenant = serializer.context['tenant_user']

        if Tenancy.objects.filter(tenant=tenant).exists():
            raise ValidationError({'email': 'This tenant is already assigned to a room.'})
        if not room.has_free_slot():
            raise ValidationError({'detail': 'Room is at full capacity.'})
        try:
            with transaction.atomic():
                tenancy = Tenancy.objects.create(
                    tenant=tenant,
                    room=room,
                    move_in=serializer.validated_data['move_in'],
                    payment_day=serializer.validated_data['payment_day'],
                )
        except IntegrityError:
            raise ValidationError({'email': 'This tenant is already assigned to a room.'})

        log_activity(
            request.user, 'create', f"Assigned {tenant.get_full_name()} to room {room.number}",
            meta={'room_id': room.id, 'tenant_id': tenant.id},
        )
        return Response(TenancySerializer(tenancy).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['put', 'patch', 'delete'], url_path=r'tenants/(?P<tenant_id>\d+)')
    def tenant_detail(self, request, property_pk=None, pk=None, tenant_id=None):
        room = self.get_object()
        tenancy = get_object_or_404(Tenancy, room=room, tenant_id=tenant_id)

        if request.method == 'DELETE':
            tenancy.delete()
            # Rent bills stay: they reference the room, not the tenancy
            log_activity(
                request.user, 'delete', f"Removed tenant {tenant_id} from room {room.number}",
                meta={'room_id': room.id, 'tenant_id': int(tenant_id)},
            )
            return Response(status=status.HTTP_204_NO_CONTENT)

        serializer = TenancyUpdateSerializer(tenancy, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        tenancy = serializer.save()
        log_activity(
            request.user, 'update', f"Updated tenancy of tenant {tenant_id} in room {room.number}",
            meta={'room_id': room.id, 'tenant_id': int(tenant_id)},
        )
        return Response(TenancySerializer(tenancy).data)
