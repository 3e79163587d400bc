from django.contrib import admin
from .models import Hackathon, Track, CreationPayment, Registration, Submission


class TrackInline(admin.TabularInline):
    model = Track
    extra = 0


@admin.register(Hackathon)
class HackathonAdmin(admin.ModelAdmin):
    list_display = ['title', 'status', 'organizer', 'start_date', 'submission_deadline', 'end_date']
    list_filter = ['status', 'category', 'start_date']
    search_fields = ['title', 'description', 'venue', 'organizer__email']
    # Status changes go through the lifecycle endpoint so its guards apply.
    readonly_fields = ['status', 'created_at', 'updated_at']
    inlines = [TrackInline]
    fieldsets = (
        ('Basic Information', {
            'fields': ('title', 'description', 'category', 'organizer', 'status')
        }),
        ('Content', {
            'fields': ('banner_image', 'logo_image', 'rules', 'venue', 'is_virtual', 'prize_amount')
        }),
        ('Schedule', {
            'fields': ('registration_start', 'registration_end', 'start_date', 'submission_deadline', 'end_date')
        }),
        ('Teams', {
            'fields': ('min_team_size', 'max_team_size', 'allow_individual')
        }),
        ('Contact', {
            'fields': ('contact_email', 'contact_person', 'contact_phone')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(CreationPayment)
class CreationPaymentAdmin(admin.ModelAdmin):
    list_display = ['payment_id', 'hackathon', 'host', 'amount', 'created_at']
    search_fields = ['payment_id', 'provider_payment_id', 'hackathon__title']
    readonly_fields = ['created_at']


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    list_display = ['user', 'hackathon', 'registration_type', 'team', 'registered_at']
    list_filter = ['registration_type', 'hackathon']
    search_fields = ['user__email', 'team__name', 'hackathon__title']


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    list_display = ['__str__', 'registration', 'is_draft', 'submitted_at']
    list_filter = ['is_draft']
