# orders/views.py
from django.http import Http404
from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema, inline_serializer
from rest_framework import generics, permissions, serializers, status
from rest_framework.exceptions import NotFound
from rest_framework.response import Response
from rest_framework.views import APIView

from common.permissions import IsAdminRole, IsSupplier
from . import reports
from .models import Order, OrderItem
from .serializers import (
    ItemStatusUpdateSerializer,
    OrderCreateSerializer,
    OrderDetailSerializer,
    OrderItemSerializer,
    OrderSerializer,
    SupplierOrderItemSerializer,
)
from .services import place_order, update_item_status


@extend_schema(
    tags=["Orders"],
    request=OrderCreateSerializer,
    responses={
        201: OrderDetailSerializer,
        400: OpenApiResponse(description="Invalid input / product not found / insufficient stock"),
        401: OpenApiResponse(description="Unauthorized"),
    },
    examples=[
        OpenApiExample(
            "COD checkout",
            value={
                "items": [{"productId": "0b7c3f6e-4a43-4d1e-9d59-6f9b0c1f2a10", "quantity": 6}],
                "paymentMethod": "COD",
                "address": {"fullName": "Sara", "phone": "0501234567", "city": "Riyadh", "street": "King Fahd Rd"},
            },
            request_only=True,
        ),
        OpenApiExample(
            "Insufficient stock",
            value={"message": "Insufficient stock for Ethiopia Yirgacheffe.", "code": "INSUFFICIENT_STOCK"},
            response_only=True,
            status_codes=["400"],
        ),
    ],
)
class OrderCreateView(APIView):
    """
    Checkout: prices the requested lines and commits order, items and stock
    decrements atomically for the authenticated buyer.
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = place_order(
            buyer=request.user,
            lines=data["items"],
            payment_method=data["paymentMethod"],
            address=data.get("address"),
            notes=data.get("notes", ""),
        )
        order = Order.objects.prefetch_related("items__product").get(pk=order.pk)
        return Response(OrderDetailSerializer(order).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Orders"], summary="My orders, newest first")
class MyOrderListView(generics.ListAPIView):
    serializer_class = OrderSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = None

    def get_queryset(self):
        # Never expose other users' orders
        return Order.objects.filter(buyer=self.request.user).order_by("-created_at")


@extend_schema(tags=["Orders"], summary="One of my orders with its items")
class OrderDetailView(generics.RetrieveAPIView):
    serializer_class = OrderDetailSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return Order.objects.filter(buyer=self.request.user).prefetch_related("items__product")

    def get_object(self):
        try:
            return super().get_object()
        except Http404:
            raise NotFound("Order not found")


@extend_schema(tags=["Supplier"], summary="Order items containing my products")
class SupplierOrderItemListView(generics.ListAPIView):
    serializer_class = SupplierOrderItemSerializer
    permission_classes = [IsSupplier]
    pagination_class = None

    def get_queryset(self):
        profile = getattr(self.request.user, "supplier_profile", None)
        if profile is None:
            return OrderItem.objects.none()
        return OrderItem.objects.filter(supplier=profile).select_related("order", "product")


@extend_schema(tags=["Supplier"], request=ItemStatusUpdateSerializer, responses={200: OrderItemSerializer})
class SupplierOrderItemUpdateView(APIView):
    permission_classes = [IsSupplier]

    def patch(self, request, pk):
        profile = getattr(request.user, "supplier_profile", None)
        if profile is None:
            raise NotFound("Profile not found")
        serializer = ItemStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = update_item_status(
            profile,
            pk,
            serializer.validated_data["itemStatus"],
            tracking_number=serializer.validated_data.get("trackingNumber"),
        )
        return Response(OrderItemSerializer(item).data)


@extend_schema(tags=["Admin"], summary="All orders, newest first")
class AdminOrderListView(generics.ListAPIView):
    serializer_class = OrderSerializer
    permission_classes = [IsAdminRole]
    pagination_class = None
    queryset = Order.objects.select_related("buyer").order_by("-created_at")


@extend_schema(
    tags=["Admin"],
    responses={200: inline_serializer(
        name="PlatformDashboard",
        fields={
            "total_revenue": serializers.DecimalField(max_digits=12, decimal_places=2),
            "platform_fees": serializers.DecimalField(max_digits=12, decimal_places=2),
            "active_suppliers": serializers.IntegerField(),
            "pending_approvals": serializers.IntegerField(),
            "total_orders": serializers.IntegerField(),
            "today_orders": serializers.IntegerField(),
        },
    )},
)
class AdminDashboardView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        return Response(reports.platform_dashboard())


@extend_schema(tags=["Admin"], responses={200: OpenApiResponse(description="Revenue, fees and per-supplier payouts")})
class AdminFinancesView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        return Response(reports.platform_finances())


class SupplierBackOfficeMixin:
    permission_classes = [IsSupplier]

    def get_profile(self, request):
        profile = getattr(request.user, "supplier_profile", None)
        if profile is None:
            raise NotFound("Profile not found")
        return profile


@extend_schema(tags=["Supplier"], responses={200: OpenApiResponse(description="Sales, pending items, active products")})
class SupplierDashboardView(SupplierBackOfficeMixin, APIView):
    def get(self, request):
        data = reports.supplier_dashboard(self.get_profile(request))
        data["recent_orders"] = SupplierOrderItemSerializer(data["recent_orders"], many=True).data
        return Response(data)


@extend_schema(tags=["Supplier"], responses={200: OpenApiResponse(description="Earnings, fees and net payout")})
class SupplierFinancesView(SupplierBackOfficeMixin, APIView):
    def get(self, request):
        data = reports.supplier_finances(self.get_profile(request))
        data["transactions"] = SupplierOrderItemSerializer(data["transactions"], many=True).data
        return Response(data)
