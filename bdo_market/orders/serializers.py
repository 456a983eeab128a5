# orders/serializers.py
from rest_framework import serializers

from .models import Order, OrderItem


class OrderLineSerializer(serializers.Serializer):
    productId = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class AddressSnapshotSerializer(serializers.Serializer):
    fullName = serializers.CharField()
    phone = serializers.CharField()
    city = serializers.CharField()
    district = serializers.CharField(required=False, allow_blank=True)
    street = serializers.CharField()


class OrderCreateSerializer(serializers.Serializer):
    items = OrderLineSerializer(many=True)
    paymentMethod = serializers.ChoiceField(choices=Order.PaymentMethod.choices, default=Order.PaymentMethod.COD)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    address = AddressSnapshotSerializer(required=False, allow_null=True)

    def validate_items(self, items):
        if not items:
            raise serializers.ValidationError("At least one item is required.")
        return items


class OrderItemSerializer(serializers.ModelSerializer):
    product_name = serializers.ReadOnlyField(source="product.name_en")
    product_name_ar = serializers.ReadOnlyField(source="product.name_ar")

    class Meta:
        model = OrderItem
        fields = [
            "id", "order", "product", "product_name", "product_name_ar", "supplier", "quantity",
            "unit_price", "subtotal", "shipping_cost", "supplier_payout",
            "item_status", "tracking_number", "created_at", "updated_at",
        ]
        read_only_fields = fields


class SupplierOrderItemSerializer(OrderItemSerializer):
    order_number = serializers.ReadOnlyField(source="order.order_number")
    address_snapshot = serializers.ReadOnlyField(source="order.address_snapshot")
    payment_method = serializers.ReadOnlyField(source="order.payment_method")

    class Meta(OrderItemSerializer.Meta):
        fields = OrderItemSerializer.Meta.fields + ["order_number", "address_snapshot", "payment_method"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    buyer = serializers.ReadOnlyField(source="buyer.email")

    class Meta:
        model = Order
        fields = [
            "id", "order_number", "buyer", "status", "payment_method", "payment_status",
            "subtotal", "shipping_total", "platform_fee", "total_amount",
            "notes", "address_snapshot", "created_at", "updated_at",
        ]
        # orders only change through status transitions
        read_only_fields = fields


class OrderDetailSerializer(OrderSerializer):
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ["items"]
        read_only_fields = fields


class ItemStatusUpdateSerializer(serializers.Serializer):
    itemStatus = serializers.ChoiceField(choices=OrderItem.ItemStatus.choices)
    trackingNumber = serializers.CharField(required=False, allow_blank=True, max_length=100)
