from calendar import month_name
from django.utils import timezone
from rest_framework import serializers, status
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
import logging

from accounts.permissions import IsOwnerRole, IsTenantRole
from tenants.models import Tenancy
from .models import Concern, ConcernMessage

logger = logging.getLogger(__name__)

MONTHS = {name.lower(): index for index, name in enumerate(month_name) if name}


# ----- Serializers (kept local to the views) -----
class ConcernSerializer(serializers.ModelSerializer):
    class Meta:
        model = Concern
        fields = [
            "id", "category", "message", "status", "property", "room",
            "created_at", "updated_at", "resolved_at",
        ]
        read_only_fields = ["status", "property", "room", "created_at", "updated_at", "resolved_at"]

    def validate_category(self, value):
        value = str(value).strip()
        if not value:
            raise serializers.ValidationError("Category is required.")
        return value

    def validate_message(self, value):
        value = str(value).strip()
        if not value:
            raise serializers.ValidationError("Message is required.")
        return value


class OwnerConcernSerializer(ConcernSerializer):
    property_name = serializers.CharField(source="property.name", read_only=True, default=None)
    room_number = serializers.CharField(source="room.number", read_only=True, default=None)
    tenant_name = serializers.CharField(source="tenant.get_full_name", read_only=True)

    class Meta(ConcernSerializer.Meta):
        fields = ConcernSerializer.Meta.fields + ["tenant", "property_name", "room_number", "tenant_name"]
        read_only_fields = fields


class ConcernMessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ConcernMessage
        fields = ["id", "concern", "sender", "body", "created_at"]
        read_only_fields = ["id", "concern", "sender", "created_at"]


class ReplySerializer(serializers.Serializer):
    message = serializers.CharField(allow_blank=True, trim_whitespace=True)

    def validate_message(self, value):
        if not value:
            raise serializers.ValidationError("Message cannot be empty.")
        return value


def _parse_month(value):
    """'March 2025' -> (2025, 3); anything else is a validation error."""
    parts = str(value).split()
    if len(parts) != 2 or parts[0].lower() not in MONTHS or not parts[1].isdigit():
        raise ValidationError({"month": "Use the format 'March 2025'."})
    return int(parts[1]), MONTHS[parts[0].lower()]


def _post_message(concern, user, sender, data):
    serializer = ReplySerializer(data=data)
    serializer.is_valid(raise_exception=True)
    msg = ConcernMessage.objects.create(
        concern=concern, sender=sender, author=user, body=serializer.validated_data["message"],
    )
    Concern.objects.filter(pk=concern.pk).update(updated_at=timezone.now())
    return Response({"message": ConcernMessageSerializer(msg).data}, status=status.HTTP_201_CREATED)


def _thread(concern):
    return Response({"messages": ConcernMessageSerializer(concern.messages.all(), many=True).data})


# ----- Tenant views -----
@extend_schema(request=ConcernSerializer, responses={201: OpenApiResponse(response=ConcernSerializer)})
class ConcernCreateView(APIView):
    permission_classes = [IsAuthenticated, IsTenantRole]

    def post(self, request):
        serializer = ConcernSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        tenancy = Tenancy.objects.select_related("room__property").filter(tenant=request.user).first()
        if tenancy is None:
            raise ValidationError({"detail": "You are not assigned to a room."})
        concern = serializer.save(
            tenant=request.user,
            owner_id=tenancy.room.property.owner_id,
            property=tenancy.room.property,
            room=tenancy.room,
        )
        logger.info("concerns: tenant=%s opened concern=%s", request.user.pk, concern.pk)
        return Response(
            {"message": "Ticket submitted successfully.", "concern": ConcernSerializer(concern).data},
            status=status.HTTP_201_CREATED,
        )


@extend_schema(
    parameters=[
        OpenApiParameter(name="month", type=str, description="Month and year, e.g. 'March 2025'."),
        OpenApiParameter(name="word", type=str, description="Substring match on the message."),
        OpenApiParameter(name="sort", type=str, description="'asc' or 'desc' by creation time (default desc)."),
    ],
    responses={200: OpenApiResponse(response=ConcernSerializer)},
)
class ConcernHistoryView(APIView):
    permission_classes = [IsAuthenticated, IsTenantRole]

    def get(self, request):
        qs = Concern.objects.filter(tenant=request.user)
        params = request.query_params
        if params.get("month"):
            year, month = _parse_month(params["month"])
            qs = qs.filter(created_at__year=year, created_at__month=month)
        if params.get("word"):
            qs = qs.filter(message__icontains=params["word"])
        if params.get("sort") == "asc":
            qs = qs.order_by("created_at", "id")
        else:
            qs = qs.order_by("-created_at", "-id")
        return Response({"concerns": ConcernSerializer(qs, many=True).data})


@extend_schema(request=ReplySerializer, responses={200: OpenApiResponse(response=ConcernMessageSerializer)})
class TenantConcernMessagesView(APIView):
    permission_classes = [IsAuthenticated, IsTenantRole]

    def get_concern(self, request, pk):
        concern = Concern.objects.filter(pk=pk, tenant=request.user).first()
        if concern is None:
            raise NotFound("Concern not found or not authorized.")
        return concern

    def get(self, request, pk):
        return _thread(self.get_concern(request, pk))

    def post(self, request, pk):
        return _post_message(self.get_concern(request, pk), request.user, ConcernMessage.Sender.TENANT, request.data)


# ----- Owner views -----
@extend_schema(
    parameters=[OpenApiParameter(name="status", type=str, description="'open' or 'resolved'.")],
    responses={200: OpenApiResponse(response=OwnerConcernSerializer)},
)
class OwnerConcernListView(APIView):
    permission_classes = [IsAuthenticated, IsOwnerRole]

    def get(self, request):
        qs = Concern.objects.filter(owner=request.user).select_related("tenant", "property", "room")
        wanted = (request.query_params.get("status") or "").lower()
        if wanted in Concern.Status.values:
            qs = qs.filter(status=wanted)
        qs = qs.order_by("-created_at", "-id")
        return Response({"concerns": OwnerConcernSerializer(qs, many=True).data})


class _OwnerConcernStatusView(APIView):
    permission_classes = [IsAuthenticated, IsOwnerRole]
    target_status = None

    def values(self):
        raise NotImplementedError

    def post(self, request, pk):
        updated = Concern.objects.filter(pk=pk, owner=request.user).update(
            status=self.target_status, updated_at=timezone.now(), **self.values()
        )
        if not updated:
            raise NotFound("Concern not found or not authorized.")
        concern = Concern.objects.select_related("tenant", "property", "room").get(pk=pk)
        return Response({"success": True, "concern": OwnerConcernSerializer(concern).data})


@extend_schema(request=None, responses={200: OpenApiResponse(response=OwnerConcernSerializer)})
class OwnerConcernResolveView(_OwnerConcernStatusView):
    target_status = Concern.Status.RESOLVED

    def values(self):
        return {"resolved_at": timezone.now()}


@extend_schema(request=None, responses={200: OpenApiResponse(response=OwnerConcernSerializer)})
class OwnerConcernReopenView(_OwnerConcernStatusView):
    target_status = Concern.Status.OPEN

    def values(self):
        return {"resolved_at": None}


@extend_schema(request=ReplySerializer, responses={200: OpenApiResponse(response=ConcernMessageSerializer)})
class OwnerConcernMessagesView(APIView):
    permission_classes = [IsAuthenticated, IsOwnerRole]

    def get_concern(self, request, pk):
        concern = Concern.objects.filter(pk=pk, owner=request.user).first()
        if concern is None:
            raise NotFound("Concern not found or not authorized.")
        return concern

    def get(self, request, pk):
        return _thread(self.get_concern(request, pk))

    def post(self, request, pk):
        return _post_message(self.get_concern(request, pk), request.user, ConcernMessage.Sender.OWNER, request.data)
