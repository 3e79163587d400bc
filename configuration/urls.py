from django.urls import path
from .views import PlatformConfigListView, PlatformConfigDetailView

urlpatterns = [
    path('', PlatformConfigListView.as_view(), name='platform_config'),
    path('<str:key>/', PlatformConfigDetailView.as_view(), name='platform_config_detail'),
]
