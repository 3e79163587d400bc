from django.urls import path
from .views import (
    HackathonListView, ConfirmCreationView, HackathonDetailView, HackathonStatusView,
    HackathonActionView, HackathonRegistrationView, SubmissionView, HackathonParticipantsView,
    HackathonSubmissionsView, MyHackathonsView, PaymentHistoryView, PlatformStatsView
)

urlpatterns = [
    path('', HackathonListView.as_view(), name='hackathon_list'),
    path('confirm-creation/', ConfirmCreationView.as_view(), name='hackathon_confirm_creation'),
    path('my-hackathons/', MyHackathonsView.as_view(), name='my_hackathons'),
    path('payments/', PaymentHistoryView.as_view(), name='payment_history'),
    path('stats/', PlatformStatsView.as_view(), name='platform_stats'),
    path('<int:hackathon_id>/', HackathonDetailView.as_view(), name='hackathon_detail'),
    path('<int:hackathon_id>/status/', HackathonStatusView.as_view(), name='hackathon_status'),
    path('<int:hackathon_id>/action/', HackathonActionView.as_view(), name='hackathon_action'),
    path('<int:hackathon_id>/register/', HackathonRegistrationView.as_view(), name='hackathon_register'),
    path('<int:hackathon_id>/submission/', SubmissionView.as_view(), name='hackathon_submission'),
    path('<int:hackathon_id>/submissions/', HackathonSubmissionsView.as_view(), name='hackathon_submissions'),
    path('<int:hackathon_id>/participants/', HackathonParticipantsView.as_view(), name='hackathon_participants'),
]
