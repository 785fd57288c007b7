from django.urls import path
from .views import MyRoomView

urlpatterns = [
    path('me/room/', MyRoomView.as_view(), name='tenant-my-room'),
]
