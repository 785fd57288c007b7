from rest_framework.routers import DefaultRouter
from .views import OwnerRentBillViewSet, OwnerUtilityBillViewSet, RentBillViewSet, UtilityBillViewSet

router = DefaultRouter()
router.register(r'rent-bills/owner', OwnerRentBillViewSet, basename='owner-rent-bill')
router.register(r'rent-bills', RentBillViewSet, basename='rent-bill')
router.register(r'bills/owner', OwnerUtilityBillViewSet, basename='owner-utility-bill')
router.register(r'bills', UtilityBillViewSet, basename='utility-bill')

urlpatterns = router.urls
