from django.urls import path
from .views import StorefrontHealthView

urlpatterns = [
    path("health", StorefrontHealthView.as_view(), name="api-storefront-health"),
]
