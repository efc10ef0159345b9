from django.urls import path
from .views import CollectionDetailView, CollectionListView, ProductDetailView, ProductListView

urlpatterns = [
    path("products", ProductListView.as_view(), name="api-products-list"),
    path("products/<str:handle>", ProductDetailView.as_view(), name="api-products-detail"),
    path("collections", CollectionListView.as_view(), name="api-collections-list"),
    path(
        "collections/<str:handle>",
        CollectionDetailView.as_view(),
        name="api-collections-detail",
    ),
]
