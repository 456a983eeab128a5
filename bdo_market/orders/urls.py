from django.urls import path

from .views import (
    AdminDashboardView,
    AdminFinancesView,
    AdminOrderListView,
    MyOrderListView,
    OrderCreateView,
    OrderDetailView,
    SupplierDashboardView,
    SupplierFinancesView,
    SupplierOrderItemListView,
    SupplierOrderItemUpdateView,
)

urlpatterns = [
    path("orders/", OrderCreateView.as_view(), name="order-create"),
    path("orders/me/", MyOrderListView.as_view(), name="order-list"),
    path("orders/<uuid:pk>/", OrderDetailView.as_view(), name="order-detail"),

    path("supplier/dashboard/", SupplierDashboardView.as_view(), name="supplier-dashboard"),
    path("supplier/finances/", SupplierFinancesView.as_view(), name="supplier-finances"),
    path("supplier/orders/", SupplierOrderItemListView.as_view(), name="supplier-orders"),
    path("supplier/order-items/<uuid:pk>/", SupplierOrderItemUpdateView.as_view(), name="supplier-order-item"),

    path("admin/dashboard/", AdminDashboardView.as_view(), name="admin-dashboard"),
    path("admin/orders/", AdminOrderListView.as_view(), name="admin-orders"),
    path("admin/finances/", AdminFinancesView.as_view(), name="admin-finances"),
]
