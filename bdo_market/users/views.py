# users/views.py
import logging

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import AddressSerializer, MeSerializer, RegisterSerializer

logger = logging.getLogger(__name__)


@extend_schema(tags=["Auth"], request=RegisterSerializer, responses={201: MeSerializer})
class RegisterView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("Registered %s user %s", user.role, user.pk)
        return Response(MeSerializer(user).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Auth"], responses={200: MeSerializer})
class MeView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(MeSerializer(request.user).data)


@extend_schema_view(
    get=extend_schema(tags=["Addresses"], summary="List my saved addresses"),
    post=extend_schema(tags=["Addresses"], summary="Save a delivery address"),
)
class AddressListCreateView(generics.ListCreateAPIView):
    serializer_class = AddressSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = None

    def get_queryset(self):
        return self.request.user.addresses.all()

    def perform_create(self, serializer):
        serializer.save(user=self.request.user)
