from rest_framework import serializers

from team.serializers import MemberInputSerializer, TeamSerializer
from team.validators import REGISTRATION_TYPES
from utils.cloudinary_utils import upload_file_to_cloudinary
from .creation import DATE_FIELDS
from .models import CreationPayment, Hackathon, HackathonStatus, Registration, Submission, Track


class TrackSerializer(serializers.ModelSerializer):
    number = serializers.IntegerField(min_value=1, required=False)
    title = serializers.CharField(max_length=200, required=False, allow_blank=True)
    document_url = serializers.URLField(max_length=500, required=False, allow_blank=True)

    class Meta:
        model = Track
        fields = ['id', 'number', 'title', 'description', 'document_url']
        read_only_fields = ['id']


class HackathonSerializer(serializers.ModelSerializer):
    tracks = TrackSerializer(many=True, read_only=True)
    organizer = serializers.SerializerMethodField()
    participants_count = serializers.SerializerMethodField()

    class Meta:
        model = Hackathon
        fields = [
            'id', 'title', 'description', 'category', 'status', 'banner_image', 'logo_image', 'rules',
            'venue', 'is_virtual', 'prize_amount',
            'registration_start', 'registration_end', 'start_date', 'end_date', 'submission_deadline',
            'min_team_size', 'max_team_size', 'allow_individual',
            'contact_email', 'contact_person', 'contact_phone',
            'organizer', 'tracks', 'participants_count', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_organizer(self, obj):
        return {
            'id': obj.organizer.id,
            'username': obj.organizer.username,
            'full_name': obj.organizer.get_full_name,
        }

    def get_participants_count(self, obj):
        return obj.registrations.count()


class CreateHackathonSerializer(serializers.Serializer):
    """
    Hackathon draft as sent by the create form.

    Content fields are optional here because the creation gate reports every
    missing one at once. Banner and logo may be sent as URLs or as files,
    which are uploaded to Cloudinary.
    """
    title = serializers.CharField(max_length=100, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    category = serializers.ChoiceField(choices=Hackathon.CATEGORY_CHOICES, required=False)
    banner_image = serializers.URLField(max_length=500, required=False, allow_blank=True)
    logo_image = serializers.URLField(max_length=500, required=False, allow_blank=True)
    banner_image_file = serializers.FileField(write_only=True, required=False)
    logo_image_file = serializers.FileField(write_only=True, required=False)
    rules = serializers.CharField(required=False, allow_blank=True)
    venue = serializers.CharField(max_length=100, required=False, allow_blank=True)
    is_virtual = serializers.BooleanField(required=False)
    prize_amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    registration_start = serializers.DateTimeField(required=False, allow_null=True)
    registration_end = serializers.DateTimeField(required=False, allow_null=True)
    start_date = serializers.DateTimeField(required=False, allow_null=True)
    submission_deadline = serializers.DateTimeField(required=False, allow_null=True)
    end_date = serializers.DateTimeField(required=False, allow_null=True)
    min_team_size = serializers.IntegerField(min_value=1, max_value=100, required=False)
    max_team_size = serializers.IntegerField(min_value=1, max_value=100, required=False)
    allow_individual = serializers.BooleanField(required=False)
    contact_email = serializers.EmailField(required=False, allow_blank=True)
    contact_person = serializers.CharField(max_length=100, required=False, allow_blank=True)
    contact_phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    tracks = TrackSerializer(many=True, required=False)

    def validate_tracks(self, value):
        numbers = [track['number'] for track in value if track.get('number')]
        if len(numbers) != len(set(numbers)):
            raise serializers.ValidationError("Track numbers must be unique.")
        return value

    def validate(self, data):
        dates = [data.get(name) for name in DATE_FIELDS]
        if all(dates) and dates != sorted(dates):
            raise serializers.ValidationError(
                "Dates must be ordered: registration start, registration end, start, submission deadline, end."
            )
        min_size = data.get('min_team_size', 1)
        max_size = data.get('max_team_size', 5)
        if min_size > max_size:
            raise serializers.ValidationError("Minimum team size cannot exceed maximum team size.")
        return data

    def to_draft(self):
        """Validated data as a creation draft, with any uploaded images replaced by their URLs."""
        draft = dict(self.validated_data)
        banner_file = draft.pop('banner_image_file', None)
        logo_file = draft.pop('logo_image_file', None)
        if banner_file:
            draft['banner_image'] = upload_file_to_cloudinary(banner_file, folder='hackathon_banners')
        if logo_file:
            draft['logo_image'] = upload_file_to_cloudinary(logo_file, folder='hackathon_logos')
        draft['tracks'] = [dict(track) for track in draft.get('tracks', [])]
        return draft


class ConfirmCreationSerializer(CreateHackathonSerializer):
    payment_id = serializers.CharField(max_length=100, required=False, allow_blank=True)
    provider_payment_id = serializers.CharField(max_length=100, required=False, allow_blank=True)

    def to_draft(self):
        draft = super().to_draft()
        draft.pop('payment_id', None)
        draft.pop('provider_payment_id', None)
        return draft

    def receipt(self):
        return {
            'payment_id': self.validated_data.get('payment_id', ''),
            'provider_payment_id': self.validated_data.get('provider_payment_id', ''),
        }


class UpdateHackathonSerializer(serializers.ModelSerializer):
    class Meta:
        model = Hackathon
        fields = [
            'description', 'category', 'banner_image', 'logo_image', 'rules', 'venue', 'is_virtual',
            'prize_amount', 'contact_email', 'contact_person', 'contact_phone',
        ]


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=HackathonStatus.choices)

    def to_internal_value(self, data):
        if isinstance(data.get('status'), str):
            data = {**data, 'status': data['status'].upper()}
        return super().to_internal_value(data)


class RegisterSerializer(serializers.Serializer):
    registration_type = serializers.ChoiceField(choices=REGISTRATION_TYPES, default=Registration.TEAM)
    team_name = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    description = serializers.CharField(required=False, allow_blank=True, default='')
    track = serializers.IntegerField(required=False, allow_null=True, default=None)
    members = MemberInputSerializer(many=True, required=False, default=list)

    def to_internal_value(self, data):
        if isinstance(data.get('registration_type'), str):
            data = {**data, 'registration_type': data['registration_type'].upper()}
        return super().to_internal_value(data)


class SubmissionSerializer(serializers.ModelSerializer):
    is_finalized = serializers.BooleanField(read_only=True)

    class Meta:
        model = Submission
        fields = [
            'id', 'title', 'description', 'repository_url', 'demo_url', 'presentation_url',
            'is_draft', 'is_finalized', 'submitted_at', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class SaveSubmissionSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=100, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    repository_url = serializers.URLField(required=False, allow_blank=True)
    demo_url = serializers.URLField(required=False, allow_blank=True)
    presentation_url = serializers.URLField(required=False, allow_blank=True)
    finalize = serializers.BooleanField(required=False, default=False)


class RegistrationSerializer(serializers.ModelSerializer):
    user = serializers.SerializerMethodField()
    team = TeamSerializer(read_only=True)
    track = serializers.SerializerMethodField()
    submission = serializers.SerializerMethodField()

    class Meta:
        model = Registration
        fields = ['id', 'hackathon', 'user', 'registration_type', 'team', 'track', 'registered_at', 'submission']
        read_only_fields = fields

    def get_user(self, obj):
        return {'id': obj.user.id, 'username': obj.user.username, 'email': obj.user.email}

    def get_track(self, obj):
        if obj.track is None:
            return None
        return {'number': obj.track.number, 'title': obj.track.title}

    def get_submission(self, obj):
        submission = Submission.objects.filter(registration=obj).first()
        return SubmissionSerializer(submission).data if submission else None


class HackathonSubmissionSerializer(SubmissionSerializer):
    team = serializers.CharField(source='registration.team.name', read_only=True)
    submitted_by = serializers.SerializerMethodField()
    track = serializers.SerializerMethodField()

    class Meta(SubmissionSerializer.Meta):
        fields = SubmissionSerializer.Meta.fields + ['team', 'submitted_by', 'track']
        read_only_fields = fields

    def get_submitted_by(self, obj):
        user = obj.registration.user
        return {'id': user.id, 'username': user.username, 'email': user.email}

    def get_track(self, obj):
        track = obj.registration.track
        if track is None:
            return None
        return {'number': track.number, 'title': track.title}


class CreationPaymentSerializer(serializers.ModelSerializer):
    hackathon = serializers.SerializerMethodField()

    class Meta:
        model = CreationPayment
        fields = ['id', 'hackathon', 'amount', 'payment_id', 'provider_payment_id', 'created_at']
        read_only_fields = fields

    def get_hackathon(self, obj):
        return {'id': obj.hackathon.id, 'title': obj.hackathon.title, 'status': obj.hackathon.status}
