from rest_framework import status
from rest_framework.response import Response
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from accounts.permissions import IsAdmin
from .serializers import PlatformConfigSerializer, UpdatePlatformConfigSerializer
from .store import PlatformConfigStore


class PlatformConfigListView(GenericAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]
    serializer_class = UpdatePlatformConfigSerializer

    @swagger_auto_schema(
        responses={200: PlatformConfigSerializer(many=True)},
        operation_description="List stored platform settings (admins only).",
        tags=['config']
    )
    def get(self, request):
        return Response(PlatformConfigSerializer(PlatformConfigStore.all(), many=True).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        request_body=UpdatePlatformConfigSerializer,
        responses={200: PlatformConfigSerializer, 400: "Bad Request"},
        operation_description="Create or update a platform setting such as creation_fee (admins only).",
        tags=['config']
    )
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entry = serializer.save()
        return Response(PlatformConfigSerializer(entry).data, status=status.HTTP_200_OK)


class PlatformConfigDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]
    serializer_class = UpdatePlatformConfigSerializer

    @swagger_auto_schema(
        responses={200: PlatformConfigSerializer, 404: "Unknown key"},
        operation_description="Read one platform setting, falling back to its default (admins only).",
        tags=['config']
    )
    def get(self, request, key):
        entry = PlatformConfigStore.get_entry(key)
        if entry['value'] is None:
            return Response({"error": f"Config key '{key}' does not exist."}, status=status.HTTP_404_NOT_FOUND)
        return Response(entry, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        request_body=UpdatePlatformConfigSerializer,
        responses={200: PlatformConfigSerializer, 400: "Bad Request"},
        operation_description="Set the value of one platform setting (admins only).",
        tags=['config']
    )
    def put(self, request, key):
        serializer = UpdatePlatformConfigSerializer(data={**request.data, 'key': key})
        serializer.is_valid(raise_exception=True)
        entry = serializer.save()
        return Response(PlatformConfigSerializer(entry).data, status=status.HTTP_200_OK)
