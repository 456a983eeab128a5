# products/views.py
import logging

from django.shortcuts import get_object_or_404
from django.utils import timezone
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema, inline_serializer
from rest_framework import generics, permissions, serializers, status
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.response import Response
from rest_framework.views import APIView

from common.conf import marketplace_setting
from common.permissions import IsAdminRole, IsApprovedSupplier, IsSupplier
from .catalog import get_product, list_products
from .models import Category, Product
from .serializers import (
    CategorySerializer,
    ProductDetailSerializer,
    ProductSerializer,
    ProductWriteSerializer,
)

logger = logging.getLogger(__name__)

CATALOG_PARAMETERS = [
    OpenApiParameter("search", OpenApiTypes.STR, description="Substring of the English or Arabic name"),
    OpenApiParameter("categoryId", OpenApiTypes.UUID),
    OpenApiParameter("processing", OpenApiTypes.STR, description="Comma separated processing methods"),
    OpenApiParameter("roast", OpenApiTypes.STR, description="Comma separated roast levels"),
    OpenApiParameter("origin", OpenApiTypes.STR, description="Comma separated origin countries"),
    OpenApiParameter("brew", OpenApiTypes.STR, description="Comma separated brew methods"),
    OpenApiParameter("price_min", OpenApiTypes.NUMBER),
    OpenApiParameter("price_max", OpenApiTypes.NUMBER),
    OpenApiParameter("in_stock", OpenApiTypes.BOOL),
    OpenApiParameter("sort", OpenApiTypes.STR, enum=["newest", "price_asc", "price_desc"]),
    OpenApiParameter("page", OpenApiTypes.INT),
    OpenApiParameter("limit", OpenApiTypes.INT),
]

CATALOG_PAGE = inline_serializer(
    name="CatalogPage",
    fields={
        "products": ProductDetailSerializer(many=True),
        "total": serializers.IntegerField(),
    },
)


def get_owned_product(request, pk):
    """Product owned by the requesting (approved) supplier, or 404/403."""
    product = get_object_or_404(Product.objects.not_deleted(), pk=pk)
    if product.supplier_id != request.supplier_profile.pk:
        raise PermissionDenied("You do not own this product")
    return product


class ProductListCreateView(APIView):
    """
    GET: public catalog listing.
    POST: an approved supplier adds a product to its catalog.
    """

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsApprovedSupplier()]
        return [permissions.AllowAny()]

    @extend_schema(tags=["Products"], parameters=CATALOG_PARAMETERS, responses={200: CATALOG_PAGE})
    def get(self, request):
        page = list_products(request.query_params)
        return Response({
            "products": ProductDetailSerializer(page.items, many=True, context={"request": request}).data,
            "total": page.total,
        })

    @extend_schema(
        tags=["Products"],
        request=ProductWriteSerializer,
        responses={201: ProductSerializer, 403: OpenApiResponse(description="Supplier not approved")},
    )
    def post(self, request):
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = serializer.save(supplier=request.supplier_profile)
        logger.info("Supplier %s created product %s", request.supplier_profile.pk, product.pk)
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)


class ProductDetailView(APIView):
    """
    GET: one product with its details.
    PUT/PATCH: owner updates it. DELETE: owner soft-deletes it.
    """

    def get_permissions(self):
        if self.request.method == "GET":
            return [permissions.AllowAny()]
        return [IsApprovedSupplier()]

    @extend_schema(tags=["Products"], responses={200: ProductDetailSerializer, 404: OpenApiResponse(description="Product not found")})
    def get(self, request, pk):
        product = get_product(pk)
        if product is None:
            raise NotFound("Product not found")
        return Response(ProductDetailSerializer(product, context={"request": request}).data)

    def _update(self, request, pk, partial):
        product = get_owned_product(request, pk)
        serializer = ProductWriteSerializer(product, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        product = serializer.save()
        return Response(ProductSerializer(product).data)

    @extend_schema(tags=["Products"], request=ProductWriteSerializer, responses={200: ProductSerializer})
    def put(self, request, pk):
        return self._update(request, pk, partial=False)

    @extend_schema(tags=["Products"], request=ProductWriteSerializer, responses={200: ProductSerializer})
    def patch(self, request, pk):
        return self._update(request, pk, partial=True)

    @extend_schema(tags=["Products"], responses={204: None})
    def delete(self, request, pk):
        product = get_owned_product(request, pk)
        product.deleted_at = timezone.now()
        product.is_active = False
        product.save(update_fields=["deleted_at", "is_active", "updated_at"])
        logger.info("Supplier %s soft-deleted product %s", request.supplier_profile.pk, product.pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=["Products"], request=None, responses={200: ProductSerializer})
class ProductToggleActiveView(APIView):
    permission_classes = [IsApprovedSupplier]

    def patch(self, request, pk):
        product = get_owned_product(request, pk)
        product.is_active = not product.is_active
        product.save(update_fields=["is_active", "updated_at"])
        return Response(ProductSerializer(product).data)


@extend_schema(tags=["Categories"])
class CategoryListView(generics.ListAPIView):
    serializer_class = CategorySerializer
    permission_classes = [permissions.AllowAny]
    pagination_class = None
    queryset = Category.objects.all()


@extend_schema(tags=["Supplier"], summary="My products, including inactive ones")
class SupplierProductListView(generics.ListAPIView):
    serializer_class = ProductSerializer
    permission_classes = [IsSupplier]
    pagination_class = None

    def get_queryset(self):
        profile = getattr(self.request.user, "supplier_profile", None)
        if profile is None:
            return Product.objects.none()
        return Product.objects.not_deleted().filter(supplier=profile)


@extend_schema(tags=["Admin"], summary="Catalog as buyers see it (first page)")
class AdminProductListView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(responses={200: ProductDetailSerializer(many=True)})
    def get(self, request):
        page = list_products({"page": 1, "limit": marketplace_setting("ADMIN_PRODUCT_LIMIT")})
        return Response(ProductDetailSerializer(page.items, many=True, context={"request": request}).data)
