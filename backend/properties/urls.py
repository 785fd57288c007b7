from rest_framework.routers import DefaultRouter
from .views import PropertyViewSet, RoomViewSet

router = DefaultRouter()
router.register(r'properties', PropertyViewSet, basename='property')
router.register(r'properties/(?P<property_pk>\d+)/rooms', RoomViewSet, basename='property-room')

urlpatterns = router.urls
