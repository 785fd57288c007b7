from rest_framework import generics
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated

from accounts.permissions import IsTenantRole
from .models import Tenancy
from .serializers import MyRoomSerializer


class MyRoomView(generics.RetrieveAPIView):
    """Room, property and owner contact of the calling tenant."""
    permission_classes = [IsAuthenticated, IsTenantRole]
    serializer_class = MyRoomSerializer

    def get_object(self):
        tenancy = (
            Tenancy.objects.select_related('room', 'room__property', 'room__property__owner')
            .filter(tenant=self.request.user)
            .first()
        )
        if tenancy is None:
            raise NotFound("No room is assigned to you yet.")
        return tenancy
