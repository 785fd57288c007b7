from django.urls import path
from .views import (
    ConcernCreateView,
    ConcernHistoryView,
    TenantConcernMessagesView,
    OwnerConcernListView,
    OwnerConcernResolveView,
    OwnerConcernReopenView,
    OwnerConcernMessagesView,
)

urlpatterns = [
    path("", ConcernCreateView.as_view(), name="concern-create"),
    path("history/", ConcernHistoryView.as_view(), name="concern-history"),
    path("<int:pk>/messages/", TenantConcernMessagesView.as_view(), name="concern-messages"),
    # Owner side
    path("owner/", OwnerConcernListView.as_view(), name="owner-concern-list"),
    path("owner/<int:pk>/resolve/", OwnerConcernResolveView.as_view(), name="owner-concern-resolve"),
    path("owner/<int:pk>/reopen/", OwnerConcernReopenView.as_view(), name="owner-concern-reopen"),
    path("owner/<int:pk>/messages/", OwnerConcernMessagesView.as_view(), name="owner-concern-messages"),
    path("owner/<int:pk>/reply/", OwnerConcernMessagesView.as_view(), name="owner-concern-reply"),
]
