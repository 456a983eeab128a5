# suppliers/views.py
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import generics
from rest_framework.exceptions import NotFound
from rest_framework.response import Response
from rest_framework.views import APIView

from common.permissions import IsAdminRole, IsSupplier
from .models import SupplierProfile
from .serializers import RejectSupplierSerializer, SupplierProfileSerializer
from .services import approve_supplier, reject_supplier


@extend_schema_view(
    get=extend_schema(tags=["Supplier"], summary="My supplier profile"),
    put=extend_schema(tags=["Supplier"], summary="Update my supplier profile"),
    patch=extend_schema(tags=["Supplier"], summary="Partially update my supplier profile"),
)
class SupplierProfileView(generics.RetrieveUpdateAPIView):
    serializer_class = SupplierProfileSerializer
    permission_classes = [IsSupplier]

    def get_object(self):
        profile = getattr(self.request.user, "supplier_profile", None)
        if profile is None:
            raise NotFound("Profile not found")
        return profile


@extend_schema(
    tags=["Admin"],
    parameters=[OpenApiParameter("status", OpenApiTypes.STR, enum=SupplierProfile.Status.values)],
)
class AdminSupplierListView(generics.ListAPIView):
    serializer_class = SupplierProfileSerializer
    permission_classes = [IsAdminRole]
    pagination_class = None

    def get_queryset(self):
        qs = SupplierProfile.objects.select_related("user")
        status_param = self.request.query_params.get("status")
        if status_param:
            qs = qs.filter(status=status_param)
        return qs


@extend_schema(tags=["Admin"], request=None, responses={200: SupplierProfileSerializer})
class AdminApproveSupplierView(APIView):
    permission_classes = [IsAdminRole]

    def post(self, request, pk):
        profile = approve_supplier(request.user, pk)
        return Response(SupplierProfileSerializer(profile).data)


@extend_schema(tags=["Admin"], request=RejectSupplierSerializer, responses={200: SupplierProfileSerializer})
class AdminRejectSupplierView(APIView):
    permission_classes = [IsAdminRole]

    def post(self, request, pk):
        serializer = RejectSupplierSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        profile = reject_supplier(request.user, pk, serializer.validated_data["reason"])
        return Response(SupplierProfileSerializer(profile).data)
