from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
import logging

from accounts.permissions import IsOwnerRole, IsTenantRole
from . import reconciliation, utility
from .models import RentBill, UtilityBill
from .serializers import (
    OwnerRentBillSerializer,
    OwnerUtilityBillSerializer,
    PaymentSubmissionSerializer,
    RentBillSerializer,
    UtilityBillSerializer,
)
from .storage import discard_receipt, store_receipt

logger = logging.getLogger(__name__)


def _status_filter(request, choices):
    value = request.query_params.get('status')
    if value and value.lower() in choices.values:
        return value.lower()
    return None


class RentBillViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """Tenant side of the rent ledger."""
    permission_classes = [IsAuthenticated, IsTenantRole]
    serializer_class = RentBillSerializer

    def get_queryset(self):
        qs = RentBill.objects.filter(tenant=self.request.user).select_related('room', 'property')
        wanted = _status_filter(self.request, RentBill.Status)
        if wanted:
            qs = qs.filter(status=wanted)
        return qs.order_by('due_date', 'id')

    @action(detail=False, methods=['get'], url_path='unpaid')
    def unpaid(self, request):
        bills = reconciliation.list_unpaid_bills_for_tenant(request.user)
        return Response(self.get_serializer(bills, many=True).data)

    @action(detail=False, methods=['post'], url_path='submit')
    def submit(self, request):
        serializer = PaymentSubmissionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        proof_ref = store_receipt(data['proof'])
        try:
            bill = reconciliation.submit_payment(
                request.user,
                data['year'],
                data['month'],
                proof_ref,
                amount=data.get('amount'),
                room=data.get('room'),
            )
        except Exception:
            # The ledger never references it; do not keep an orphan upload
            discard_receipt(proof_ref)
            raise
        return Response(
            {'message': 'Payment submitted for verification', 'bill': self.get_serializer(bill).data},
            status=status.HTTP_200_OK,
        )


class OwnerRentBillViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """Owner side of the rent ledger: list and reconcile."""
    permission_classes = [IsAuthenticated, IsOwnerRole]
    serializer_class = OwnerRentBillSerializer
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        return reconciliation.list_bills_for_owner(
            self.request.user, status=_status_filter(self.request, RentBill.Status)
        )

    def _respond(self, bill, message):
        return Response({'message': message, 'bill': self.get_serializer(bill).data})

    @action(detail=True, methods=['post'], url_path='verify')
    def verify(self, request, pk=None):
        return self._respond(reconciliation.verify_bill(request.user, pk), 'Payment verified')

    @action(detail=True, methods=['post'], url_path='send-back')
    def send_back(self, request, pk=None):
        return self._respond(reconciliation.send_back_bill(request.user, pk), 'Payment sent back to tenant')

    @action(detail=True, methods=['post'], url_path='remind')
    def remind(self, request, pk=None):
        return self._respond(reconciliation.remind_bill(request.user, pk), 'Reminder recorded')


class UtilityBillViewSet(mixins.ListModelMixin, mixins.CreateModelMixin, viewsets.GenericViewSet):
    permission_classes = [IsAuthenticated, IsTenantRole]
    serializer_class = UtilityBillSerializer

    def get_queryset(self):
        return UtilityBill.objects.filter(tenant=self.request.user).order_by('-created_at', '-id')

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        bill = utility.create_utility_bill(
            request.user, data['bill_type'], data['amount'], receipt=data.get('receipt'),
        )
        return Response(
            {'message': 'Bill submitted', 'bill': self.get_serializer(bill).data},
            status=status.HTTP_201_CREATED,
        )


class OwnerUtilityBillViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    permission_classes = [IsAuthenticated, IsOwnerRole]
    serializer_class = OwnerUtilityBillSerializer
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        qs = UtilityBill.objects.filter(owner=self.request.user).select_related('tenant', 'property')
        verification = self.request.query_params.get('verification')
        if verification:
            qs = qs.filter(verification=verification.lower())
        return qs.order_by('-created_at', '-id')

    @action(detail=True, methods=['post'], url_path='verify')
    def verify(self, request, pk=None):
        bill = utility.verify_utility_bill(request.user, pk)
        return Response({'message': 'Bill verified', 'bill': self.get_serializer(bill).data})

    @action(detail=True, methods=['post'], url_path='reject')
    def reject(self, request, pk=None):
        bill = utility.reject_utility_bill(request.user, pk)
        return Response({'message': 'Bill rejected', 'bill': self.get_serializer(bill).data})
