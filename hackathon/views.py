import logging

from django.db.models import Count, Q, Sum
from django.utils import timezone
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView, ListAPIView
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from accounts.models import HostApprovalRequest
from accounts.permissions import IsAdmin
from utils.failures import Failure, Forbidden, IncompleteHackathon, NotFound, failure_response
from .creation import CreationGate
from .eligibility import evaluate
from .lifecycle import allowed_targets, is_admin, is_live, is_owner, missing_live_content, transition
from .models import CreationPayment, Hackathon, HackathonStatus, Registration, Submission
from .serializers import (
    ConfirmCreationSerializer, CreateHackathonSerializer, CreationPaymentSerializer, HackathonSerializer,
    HackathonSubmissionSerializer, RegisterSerializer, RegistrationSerializer, SaveSubmissionSerializer,
    StatusUpdateSerializer, SubmissionSerializer, UpdateHackathonSerializer,
)
from .services import register_for_hackathon, save_submission

logger = logging.getLogger(__name__)

PUBLIC_STATUSES = (
    HackathonStatus.UPCOMING,
    HackathonStatus.PUBLISHED,
    HackathonStatus.LIVE,
    HackathonStatus.COMPLETED,
)


def visible_hackathons(user):
    """Public hackathons, plus every hackathon the user organizes. Admins see everything."""
    queryset = Hackathon.objects.select_related('organizer').prefetch_related('tracks')
    if is_admin(user):
        return queryset
    if user.is_authenticated:
        return queryset.filter(Q(status__in=PUBLIC_STATUSES) | Q(organizer=user))
    return queryset.filter(status__in=PUBLIC_STATUSES)


def get_visible_hackathon(user, hackathon_id):
    hackathon = visible_hackathons(user).filter(id=hackathon_id).first()
    if hackathon is None:
        return NotFound('Hackathon')
    return hackathon


class HackathonListView(GenericAPIView):
    serializer_class = CreateHackathonSerializer
    parser_classes = (JSONParser, MultiPartParser, FormParser)

    def get_permissions(self):
        if self.request.method == 'GET':
            return [AllowAny()]
        return [IsAuthenticated()]

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('status', openapi.IN_QUERY, type=openapi.TYPE_STRING, description="Filter by status"),
            openapi.Parameter('category', openapi.IN_QUERY, type=openapi.TYPE_STRING, description="Filter by category"),
            openapi.Parameter('mine', openapi.IN_QUERY, type=openapi.TYPE_BOOLEAN, description="Only hackathons I organize"),
            openapi.Parameter('search', openapi.IN_QUERY, type=openapi.TYPE_STRING, description="Search title and description"),
        ],
        responses={200: HackathonSerializer(many=True)},
        operation_description="List hackathons. Anonymous users see public hackathons only.",
        tags=['hackathons']
    )
    def get(self, request):
        queryset = visible_hackathons(request.user)
        if request.query_params.get('status'):
            queryset = queryset.filter(status=request.query_params['status'].upper())
        if request.query_params.get('category'):
            queryset = queryset.filter(category=request.query_params['category'].upper())
        if request.query_params.get('mine', '').lower() in ('1', 'true') and request.user.is_authenticated:
            queryset = queryset.filter(organizer=request.user)
        search = request.query_params.get('search', '').strip()
        if search:
            queryset = queryset.filter(Q(title__icontains=search) | Q(description__icontains=search))
        return Response(HackathonSerializer(queryset, many=True).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        request_body=CreateHackathonSerializer,
        responses={
            201: HackathonSerializer,
            400: "Incomplete draft",
            402: "Creation fee must be paid",
            403: "Host not approved"
        },
        operation_description="Create a hackathon in DRAFT. Answers 402 with the amount when a creation fee applies.",
        tags=['hackathons']
    )
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = CreationGate.request_creation(request.user, serializer.to_draft())
        if isinstance(result, Failure):
            return failure_response(result)
        return Response(
            {"message": "Hackathon created successfully.", "hackathon": HackathonSerializer(result.hackathon).data},
            status=status.HTTP_201_CREATED
        )


class ConfirmCreationView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ConfirmCreationSerializer
    parser_classes = (JSONParser, MultiPartParser, FormParser)

    @swagger_auto_schema(
        request_body=ConfirmCreationSerializer,
        responses={
            201: HackathonSerializer,
            400: "Incomplete draft",
            402: "Payment receipt missing",
            403: "Host not approved"
        },
        operation_description="Create a hackathon after paying the creation fee.",
        tags=['hackathons']
    )
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = CreationGate.confirm_creation(request.user, serializer.to_draft(), serializer.receipt())
        if isinstance(result, Failure):
            return failure_response(result)
        return Response(
            {
                "message": "Hackathon created successfully.",
                "hackathon": HackathonSerializer(result.hackathon).data,
                "payment_id": result.payment.payment_id,
            },
            status=status.HTTP_201_CREATED
        )


class HackathonDetailView(GenericAPIView):
    serializer_class = UpdateHackathonSerializer

    def get_permissions(self):
        if self.request.method == 'GET':
            return [AllowAny()]
        return [IsAuthenticated()]

    @swagger_auto_schema(
        responses={200: HackathonSerializer, 404: "Hackathon not found"},
        operation_description="Retrieve a hackathon's details.",
        tags=['hackathons']
    )
    def get(self, request, hackathon_id):
        hackathon = get_visible_hackathon(request.user, hackathon_id)
        if isinstance(hackathon, Failure):
            return failure_response(hackathon)
        return Response(HackathonSerializer(hackathon).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        request_body=UpdateHackathonSerializer,
        responses={
            200: HackathonSerializer,
            400: "A live hackathon would lose required content",
            403: "Forbidden",
            404: "Hackathon not found"
        },
        operation_description="Update a hackathon's content (organizer or administrator).",
        tags=['hackathons']
    )
    def patch(self, request, hackathon_id):
        hackathon = get_visible_hackathon(request.user, hackathon_id)
        if isinstance(hackathon, Failure):
            return failure_response(hackathon)
        if not (is_owner(hackathon, request.user) or is_admin(request.user)):
            return failure_response(Forbidden('Only the organizer or an administrator can edit this hackathon.'))
        serializer = self.get_serializer(hackathon, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        if is_live(hackathon.status):
            for name, value in serializer.validated_data.items():
                setattr(hackathon, name, value)
            missing = missing_live_content(hackathon)
            if missing:
                hackathon.refresh_from_db()
                logger.warning(f"User {request.user.id} tried to blank {', '.join(missing)} on live hackathon {hackathon.id}")
                return failure_response(IncompleteHackathon(missing))
        serializer.save()
        return Response(HackathonSerializer(hackathon).data, status=status.HTTP_200_OK)


class HackathonStatusView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = StatusUpdateSerializer

    @swagger_auto_schema(
        request_body=StatusUpdateSerializer,
        responses={
            200: HackathonSerializer,
            400: "Invalid transition or incomplete hackathon",
            403: "Forbidden",
            404: "Hackathon not found"
        },
        operation_description="Move a hackathon to a new status (publish, go live, unpublish, complete, cancel, reject).",
        tags=['hackathons']
    )
    def patch(self, request, hackathon_id):
        hackathon = get_visible_hackathon(request.user, hackathon_id)
        if isinstance(hackathon, Failure):
            return failure_response(hackathon)
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = transition(hackathon, serializer.validated_data['status'], request.user)
        if isinstance(result, Failure):
            logger.warning(f"User {request.user.id} status change on hackathon {hackathon.id} refused: {result.code}")
            return failure_response(result)

        hackathon.status = result.to_status
        hackathon.save(update_fields=['status', 'updated_at'])
        logger.info(f"Hackathon {hackathon.id} moved from {result.from_status} to {result.to_status} by user {request.user.id}")
        return Response(
            {"hackathon": HackathonSerializer(hackathon).data, "allowed_targets": allowed_targets(hackathon.status)},
            status=status.HTTP_200_OK
        )


class HackathonActionView(GenericAPIView):
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        responses={200: "The action available to the current user", 404: "Hackathon not found"},
        operation_description="Which action the current user can take on this hackathon right now.",
        tags=['hackathons']
    )
    def get(self, request, hackathon_id):
        hackathon = get_visible_hackathon(request.user, hackathon_id)
        if isinstance(hackathon, Failure):
            return failure_response(hackathon)
        registration = submission = None
        if request.user.is_authenticated:
            registration = Registration.objects.filter(hackathon=hackathon, user=request.user).first()
            if registration is not None:
                submission = Submission.objects.filter(registration=registration).first()
        action = evaluate(hackathon, request.user, registration, submission, now=timezone.now())
        return Response(
            {"action": action.value, "registered": registration is not None, "status": hackathon.status},
            status=status.HTTP_200_OK
        )


class HackathonRegistrationView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = RegisterSerializer

    @swagger_auto_schema(
        request_body=RegisterSerializer,
        responses={
            201: RegistrationSerializer,
            400: "Team composition problems or registration closed",
            403: "Forbidden",
            404: "Hackathon not found",
            409: "Already registered"
        },
        operation_description="Register for a hackathon individually or as a team leader.",
        tags=['hackathons']
    )
    def post(self, request, hackathon_id):
        hackathon = get_visible_hackathon(request.user, hackathon_id)
        if isinstance(hackathon, Failure):
            return failure_response(hackathon)
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = register_for_hackathon(
            hackathon, request.user, data['registration_type'],
            team_name=data['team_name'],
            members=[dict(member) for member in data['members']],
            track=data['track'],
            description=data['description'],
            now=timezone.now(),
        )
        if isinstance(result, Failure):
            return failure_response(result)
        return Response(
            {"message": "Successfully registered for hackathon.", "registration": RegistrationSerializer(result).data},
            status=status.HTTP_201_CREATED
        )


class SubmissionView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SaveSubmissionSerializer

    def get_registration(self, request, hackathon_id):
        hackathon = get_visible_hackathon(request.user, hackathon_id)
        if isinstance(hackathon, Failure):
            return hackathon
        registration = Registration.objects.filter(hackathon=hackathon, user=request.user).select_related('hackathon').first()
        if registration is None:
            return NotFound('Registration')
        return registration

    @swagger_auto_schema(
        responses={200: SubmissionSerializer, 404: "No submission"},
        operation_description="Retrieve my submission for this hackathon.",
        tags=['submissions']
    )
    def get(self, request, hackathon_id):
        registration = self.get_registration(request, hackathon_id)
        if isinstance(registration, Failure):
            return failure_response(registration)
        submission = Submission.objects.filter(registration=registration).first()
        if submission is None:
            return failure_response(NotFound('Submission'))
        return Response(SubmissionSerializer(submission).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        request_body=SaveSubmissionSerializer,
        responses={200: SubmissionSerializer, 400: "Outside the submission window", 404: "Not registered"},
        operation_description="Create or update my submission. Send finalize=true to submit it.",
        tags=['submissions']
    )
    def post(self, request, hackathon_id):
        registration = self.get_registration(request, hackathon_id)
        if isinstance(registration, Failure):
            return failure_response(registration)
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payload = dict(serializer.validated_data)
        finalize = payload.pop('finalize')

        result = save_submission(registration, payload, finalize, now=timezone.now())
        if isinstance(result, Failure):
            return failure_response(result)
        return Response(SubmissionSerializer(result).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        request_body=SaveSubmissionSerializer,
        responses={200: SubmissionSerializer, 400: "Outside the submission window", 404: "Not registered"},
        operation_description="Update my submission.",
        tags=['submissions']
    )
    def patch(self, request, hackathon_id):
        return self.post(request, hackathon_id)


class HackathonParticipantsView(ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = RegistrationSerializer

    def get_queryset(self):
        return Registration.objects.filter(hackathon_id=self.kwargs['hackathon_id']).select_related(
            'user', 'team', 'track'
        ).prefetch_related('team__members').order_by('registered_at')

    @swagger_auto_schema(
        responses={200: RegistrationSerializer(many=True), 403: "Forbidden", 404: "Hackathon not found"},
        operation_description="List a hackathon's registrations (organizer or administrator).",
        tags=['hackathons']
    )
    def get(self, request, hackathon_id):
        hackathon = get_visible_hackathon(request.user, hackathon_id)
        if isinstance(hackathon, Failure):
            return failure_response(hackathon)
        if not (is_owner(hackathon, request.user) or is_admin(request.user)):
            return failure_response(Forbidden('Only the organizer or an administrator can view participants.'))
        return super().get(request, hackathon_id=hackathon_id)


class MyHackathonsView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        responses={200: HackathonSerializer(many=True)},
        operation_description="Hackathons I am registered for, newest registration first.",
        tags=['hackathons']
    )
    def get(self, request):
        registrations = Registration.objects.filter(user=request.user).select_related('hackathon').order_by('-registered_at')
        data = []
        for registration in registrations:
            entry = HackathonSerializer(registration.hackathon).data
            entry['registration_id'] = registration.id
            entry['registered_at'] = registration.registered_at
            data.append(entry)
        return Response(data, status=status.HTTP_200_OK)


class HackathonSubmissionsView(ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = HackathonSubmissionSerializer

    def get_queryset(self):
        queryset = Submission.objects.filter(registration__hackathon_id=self.kwargs['hackathon_id']).select_related(
            'registration__user', 'registration__team', 'registration__track'
        ).order_by('created_at', 'id')
        if self.request.query_params.get('finalized', '').lower() in ('1', 'true'):
            queryset = queryset.filter(submitted_at__isnull=False)
        return queryset

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('finalized', openapi.IN_QUERY, type=openapi.TYPE_BOOLEAN, description="Only finalized submissions"),
        ],
        responses={200: HackathonSubmissionSerializer(many=True), 403: "Forbidden", 404: "Hackathon not found"},
        operation_description="List a hackathon's submissions (organizer or administrator).",
        tags=['submissions']
    )
    def get(self, request, hackathon_id):
        hackathon = get_visible_hackathon(request.user, hackathon_id)
        if isinstance(hackathon, Failure):
            return failure_response(hackathon)
        if not (is_owner(hackathon, request.user) or is_admin(request.user)):
            return failure_response(Forbidden('Only the organizer or an administrator can view submissions.'))
        return super().get(request, hackathon_id=hackathon_id)


class PaymentHistoryView(ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CreationPaymentSerializer

    def get_queryset(self):
        return CreationPayment.objects.filter(host=self.request.user).select_related('hackathon').order_by('-created_at')

    @swagger_auto_schema(
        responses={200: CreationPaymentSerializer(many=True)},
        operation_description="Creation fees I have paid, newest first.",
        tags=['payments']
    )
    def get(self, request):
        return super().get(request)


class PlatformStatsView(GenericAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    @swagger_auto_schema(
        responses={200: "Platform counters", 403: "Forbidden"},
        operation_description="Platform-wide counters (admins only).",
        tags=['stats']
    )
    def get(self, request):
        by_status = {choice: 0 for choice in HackathonStatus.values}
        for row in Hackathon.objects.values('status').annotate(total=Count('id')):
            by_status[row['status']] = row['total']
        payments = CreationPayment.objects.aggregate(count=Count('id'), total=Sum('amount'))
        return Response(
            {
                "hackathons": {"total": sum(by_status.values()), "by_status": by_status},
                "registrations": Registration.objects.count(),
                "submissions": {
                    "total": Submission.objects.count(),
                    "finalized": Submission.objects.filter(submitted_at__isnull=False).count(),
                },
                "pending_host_requests": HostApprovalRequest.objects.filter(status=HostApprovalRequest.PENDING).count(),
                "creation_payments": {"count": payments['count'], "total": str(payments['total'] or 0)},
            },
            status=status.HTTP_200_OK
        )
