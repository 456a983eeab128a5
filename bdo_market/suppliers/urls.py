from django.urls import path

from .views import (
    AdminApproveSupplierView,
    AdminRejectSupplierView,
    AdminSupplierListView,
    SupplierProfileView,
)

urlpatterns = [
    path("supplier/profile/", SupplierProfileView.as_view(), name="supplier-profile"),
    path("admin/suppliers/", AdminSupplierListView.as_view(), name="admin-suppliers"),
    path("admin/suppliers/<uuid:pk>/approve/", AdminApproveSupplierView.as_view(), name="admin-supplier-approve"),
    path("admin/suppliers/<uuid:pk>/reject/", AdminRejectSupplierView.as_view(), name="admin-supplier-reject"),
]
