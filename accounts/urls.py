from django.urls import path
from .views import (
    UserRegistrationView,
    UserLoginView,
    CurrentUserView,
    HostRequestView,
    PendingHostRequestsView,
    DecideHostRequestView,
)

urlpatterns = [
    path('register/', UserRegistrationView.as_view(), name='register'),
    path('login/', UserLoginView.as_view(), name='login'),
    path('me/', CurrentUserView.as_view(), name='current_user'),
    path('host-requests/', HostRequestView.as_view(), name='host_request'),
    path('host-requests/pending/', PendingHostRequestsView.as_view(), name='pending_host_requests'),
    path('host-requests/<int:request_id>/decide/', DecideHostRequestView.as_view(), name='decide_host_request'),
]
