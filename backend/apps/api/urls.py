from django.urls import path, include

urlpatterns = [
    path("", include("apps.catalog.urls")),
    path("storefront/", include("apps.commerce.urls")),
]
