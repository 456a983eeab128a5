from django.urls import path

from .views import (
    AdminProductListView,
    CategoryListView,
    ProductDetailView,
    ProductListCreateView,
    ProductToggleActiveView,
    SupplierProductListView,
)

urlpatterns = [
    path("products/", ProductListCreateView.as_view(), name="product-list"),
    path("products/<uuid:pk>/", ProductDetailView.as_view(), name="product-detail"),
    path("products/<uuid:pk>/toggle/", ProductToggleActiveView.as_view(), name="product-toggle"),
    path("categories/", CategoryListView.as_view(), name="category-list"),
    path("supplier/products/", SupplierProductListView.as_view(), name="supplier-products"),
    path("admin/products/", AdminProductListView.as_view(), name="admin-products"),
]
