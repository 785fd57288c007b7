from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView
from django.contrib.auth import get_user_model
from django.contrib.auth.signals import user_logged_in
from django.utils.dateparse import parse_datetime
from django.utils import timezone
from .models import ActivityLog
from .serializers import (
    UserSerializer,
    UserCreateSerializer,
    ProfileUpdateSerializer,
    CustomTokenObtainPairSerializer,
    ActivityLogSerializer,
)

User = get_user_model()


class SignupView(generics.CreateAPIView):
    permission_classes = [permissions.AllowAny]
    serializer_class = UserCreateSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(
            {'message': 'Signup successful! You can now log in.', 'id': user.id},
            status=status.HTTP_201_CREATED,
        )


class CustomTokenObtainPairView(TokenObtainPairView):
    """Email/password login.

    Emits Django's ``user_logged_in`` signal on success so that login hooks
    (e.g. rent bill generation for tenants) run the same way they would for a
    session login.
    """
    permission_classes = [permissions.AllowAny]
    serializer_class = CustomTokenObtainPairSerializer

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.user
        user_logged_in.send(sender=user.__class__, request=request, user=user)
        return Response(serializer.validated_data, status=status.HTTP_200_OK)


class CurrentUserView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user, context={'request': request}).data)

    def put(self, request):
        serializer = ProfileUpdateSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response({
            'message': 'Profile updated',
            'profile': UserSerializer(user, context={'request': request}).data,
        })

    patch = put


class ActivityLogListView(generics.ListAPIView):
    """
    Audit trail of the current user's actions (bill verifications, reminders, submissions).

    Supports query params:
    - since: ISO timestamp; returns activities newer than this
    - action: filter action value case-insensitively
    - limit: int; slice results
    """
    serializer_class = ActivityLogSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        qs = ActivityLog.objects.filter(user=self.request.user).order_by('-timestamp')
        params = self.request.query_params

        since = params.get('since')
        if since:
            dt = parse_datetime(since)
            if dt is not None and timezone.is_naive(dt):
                dt = timezone.make_aware(dt, timezone.get_current_timezone())
            if dt is not None:
                qs = qs.filter(timestamp__gt=dt)

        action = params.get('action')
        if action:
            qs = qs.filter(action__iexact=str(action))

        limit = params.get('limit')
        try:
            if limit is not None:
                limit_int = int(limit)
                if limit_int > 0:
                    qs = qs[:limit_int]
        except (TypeError, ValueError):
            pass
        return qs
