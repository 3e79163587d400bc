from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator

# Create your models here.
class HackathonStatus(models.TextChoices):
    DRAFT = 'DRAFT', 'Draft'
    UPCOMING = 'UPCOMING', 'Upcoming'
    PUBLISHED = 'PUBLISHED', 'Published'
    LIVE = 'LIVE', 'Live'
    COMPLETED = 'COMPLETED', 'Completed'
    REJECTED = 'REJECTED', 'Rejected'
    CANCELLED = 'CANCELLED', 'Cancelled'


class Hackathon(models.Model):
    CATEGORY_CHOICES = [
        ('WEB_DEVELOPMENT', 'Web Development'),
        ('MOBILE_DEVELOPMENT', 'Mobile Development'),
        ('AI_ML', 'AI / ML'),
        ('BLOCKCHAIN', 'Blockchain'),
        ('DATA_SCIENCE', 'Data Science'),
        ('CYBERSECURITY', 'Cybersecurity'),
        ('OPEN_INNOVATION', 'Open Innovation'),
    ]

    title = models.CharField(max_length=100, null=False, blank=False)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=30, choices=CATEGORY_CHOICES, default='WEB_DEVELOPMENT')
    banner_image = models.URLField(max_length=500, blank=True)
    logo_image = models.URLField(max_length=500, blank=True)
    rules = models.TextField(blank=True, help_text="Enter hackathon rules (one per line or as formatted text)")
    venue = models.CharField(max_length=100, blank=True)
    is_virtual = models.BooleanField(default=False)
    prize_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    registration_start = models.DateTimeField(null=False, blank=False)
    registration_end = models.DateTimeField(null=False, blank=False)
    start_date = models.DateTimeField(null=False, blank=False)
    end_date = models.DateTimeField(null=False, blank=False)
    submission_deadline = models.DateTimeField(null=False, blank=False)
    min_team_size = models.IntegerField('minimum team size', null=False, default=1, validators=[MinValueValidator(1), MaxValueValidator(100)])
    max_team_size = models.IntegerField('maximum team size', null=False, default=5, validators=[MinValueValidator(1), MaxValueValidator(100)])
    allow_individual = models.BooleanField(default=True)
    status = models.CharField(max_length=10, choices=HackathonStatus.choices, default=HackathonStatus.DRAFT)
    organizer = models.ForeignKey('accounts.User', related_name='organized_hackathons', on_delete=models.PROTECT)
    contact_email = models.EmailField(blank=True)
    contact_person = models.CharField(max_length=100, blank=True)
    contact_phone = models.CharField(max_length=30, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['status', '-created_at'], name='hack_status_idx'),
            models.Index(fields=['organizer', '-created_at'], name='hack_organizer_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return self.title


class Track(models.Model):
    hackathon = models.ForeignKey(Hackathon, related_name='tracks', on_delete=models.CASCADE)
    number = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    document_url = models.URLField(max_length=500, blank=True)

    class Meta:
        unique_together = ['hackathon', 'number']
        ordering = ['number']

    def __str__(self):
        return f"Track {self.number}: {self.title}"


class CreationPayment(models.Model):
    hackathon = models.OneToOneField(Hackathon, related_name='creation_payment', on_delete=models.CASCADE)
    host = models.ForeignKey('accounts.User', related_name='creation_payments', on_delete=models.PROTECT)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    payment_id = models.CharField(max_length=100)
    provider_payment_id = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.payment_id} for {self.hackathon.title}"


class Registration(models.Model):
    INDIVIDUAL = 'INDIVIDUAL'
    TEAM = 'TEAM'

    TYPE_CHOICES = [
        (INDIVIDUAL, 'Individual'),
        (TEAM, 'Team'),
    ]

    hackathon = models.ForeignKey(Hackathon, related_name='registrations', on_delete=models.CASCADE)
    user = models.ForeignKey('accounts.User', related_name='hackathon_registrations', on_delete=models.CASCADE)
    team = models.OneToOneField('team.Team', related_name='registration', on_delete=models.PROTECT)
    registration_type = models.CharField(max_length=10, choices=TYPE_CHOICES, default=TEAM)
    track = models.ForeignKey(Track, related_name='registrations', null=True, blank=True, on_delete=models.SET_NULL)
    registered_at = models.DateTimeField()

    class Meta:
        unique_together = ['hackathon', 'user']
        verbose_name = 'Hackathon Registration'
        verbose_name_plural = 'Hackathon Registrations'

    def __str__(self):
        return f"{self.user.username} in {self.hackathon.title}"


class Submission(models.Model):
    registration = models.OneToOneField(Registration, related_name='submission', on_delete=models.CASCADE)
    title = models.CharField(max_length=100, blank=True)
    description = models.TextField(blank=True)
    repository_url = models.URLField("repository url", blank=True)
    demo_url = models.URLField("demo video link", blank=True)
    presentation_url = models.URLField("presentation link", blank=True)
    is_draft = models.BooleanField(default=True)
    submitted_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.title or f"Submission {self.pk}"

    @property
    def is_finalized(self):
        return self.submitted_at is not None
