from rest_framework import status
from rest_framework.response import Response
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated, AllowAny
from drf_yasg.utils import swagger_auto_schema
from utils.failures import Failure, failure_response
from .permissions import IsAdmin
from .serializers import (
    UserSerializer, HostApprovalRequestSerializer, CreateHostRequestSerializer,
    DecideHostRequestSerializer
)
from .services import HostApprovalWorkflow
from .models import User


class UserRegistrationView(GenericAPIView):
    permission_classes = [AllowAny]
    serializer_class = UserSerializer.RegistrationSerializer

    @swagger_auto_schema(
        request_body=UserSerializer.RegistrationSerializer,
        responses={
            201: UserSerializer.RetrieveSerializer,
            400: "Bad Request"
        },
        operation_description="Register a new participant account.",
        tags=['account']
    )
    def post(self, request):
        serializer = UserSerializer.RegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(
            {"message": "User registered successfully.", "user": UserSerializer.RetrieveSerializer(user).data},
            status=status.HTTP_201_CREATED
        )


class UserLoginView(GenericAPIView):
    permission_classes = [AllowAny]
    serializer_class = UserSerializer.LoginSerializer

    @swagger_auto_schema(
        request_body=UserSerializer.LoginSerializer,
        responses={
            200: UserSerializer.RetrieveSerializer,
            401: "Unauthorized"
        },
        operation_description="Log in a user and return tokens.",
        tags=['account']
    )
    def post(self, request):
        serializer = UserSerializer.LoginSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return Response(
            {
                "message": "Login successful.",
                "access_token": data["access_token"],
                "refresh_token": data["refresh_token"],
                "user": UserSerializer.RetrieveSerializer(User.objects.get(id=data["id"])).data
            },
            status=status.HTTP_200_OK
        )


class CurrentUserView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        responses={200: UserSerializer.RetrieveSerializer},
        operation_description="Retrieve the authenticated user, including host approval status.",
        tags=['account']
    )
    def get(self, request):
        return Response(UserSerializer.RetrieveSerializer(request.user).data, status=status.HTTP_200_OK)


class HostRequestView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CreateHostRequestSerializer

    @swagger_auto_schema(
        request_body=CreateHostRequestSerializer,
        responses={
            201: HostApprovalRequestSerializer,
            200: HostApprovalRequestSerializer
        },
        operation_description="Ask to become a host. Repeating the request returns the existing one.",
        tags=['host-requests']
    )
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        already_requested = hasattr(request.user, 'host_request')
        host_request = HostApprovalWorkflow.request_host(request.user, **serializer.validated_data)
        return Response(
            HostApprovalRequestSerializer(host_request).data,
            status=status.HTTP_200_OK if already_requested else status.HTTP_201_CREATED
        )

    @swagger_auto_schema(
        responses={200: HostApprovalRequestSerializer, 404: "No host request"},
        operation_description="Retrieve the authenticated user's host request.",
        tags=['host-requests']
    )
    def get(self, request):
        host_request = getattr(request.user, 'host_request', None)
        if host_request is None:
            return Response({"error": "You have not requested host access."}, status=status.HTTP_404_NOT_FOUND)
        return Response(HostApprovalRequestSerializer(host_request).data, status=status.HTTP_200_OK)


class PendingHostRequestsView(GenericAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    @swagger_auto_schema(
        responses={200: HostApprovalRequestSerializer(many=True)},
        operation_description="List host requests waiting for a decision (admins only).",
        tags=['host-requests']
    )
    def get(self, request):
        requests = HostApprovalWorkflow.pending_requests()
        return Response(HostApprovalRequestSerializer(requests, many=True).data, status=status.HTTP_200_OK)


class DecideHostRequestView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = DecideHostRequestSerializer

    @swagger_auto_schema(
        request_body=DecideHostRequestSerializer,
        responses={
            200: HostApprovalRequestSerializer,
            403: "Forbidden",
            404: "Host request not found",
            409: "Already decided"
        },
        operation_description="Approve or reject a pending host request (admins only).",
        tags=['host-requests']
    )
    def post(self, request, request_id):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = HostApprovalWorkflow.decide(request.user, request_id, serializer.validated_data['outcome'])
        if isinstance(result, Failure):
            return failure_response(result)
        return Response(HostApprovalRequestSerializer(result).data, status=status.HTTP_200_OK)
