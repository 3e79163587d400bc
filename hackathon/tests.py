from datetime import timedelta
from decimal import Decimal
from itertools import product

from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import User, HostApprovalRequest
from accounts.services import HostApprovalWorkflow
from configuration.store import CREATION_FEE, PlatformConfigStore
from hackathon.creation import CreationGate, Created
from hackathon.eligibility import Action, can_register, can_submit, evaluate
from hackathon.lifecycle import (
    Transitioned, allowed_targets, can_transition, missing_live_content, registration_open, submission_window_open,
    transition,
)
from hackathon.models import CreationPayment, Hackathon, HackathonStatus, Registration, Submission, Track
from hackathon.services import register_for_hackathon, save_submission
from team.models import TeamMember
from utils.failures import (
    AlreadyRegistered, Forbidden, HostNotApproved, IncompleteDraft, IncompleteHackathon, IneligibleWindow,
    InvalidTransition, PaymentRequired, TeamCompositionViolation,
)

DAY = timedelta(days=1)
ALL_STATUSES = [choice for choice, _ in HackathonStatus.choices]

# Every edge a hackathon may take. Anything else must be refused.
EXPECTED_EDGES = {
    ('DRAFT', 'UPCOMING'), ('DRAFT', 'PUBLISHED'), ('DRAFT', 'LIVE'),
    ('UPCOMING', 'PUBLISHED'), ('UPCOMING', 'LIVE'),
    ('PUBLISHED', 'COMPLETED'), ('LIVE', 'COMPLETED'),
    ('PUBLISHED', 'UPCOMING'), ('LIVE', 'UPCOMING'),
    ('DRAFT', 'CANCELLED'), ('UPCOMING', 'CANCELLED'),
    ('DRAFT', 'REJECTED'), ('UPCOMING', 'REJECTED'),
}


def make_user(username, **extra):
    return User.objects.create_user(
        email=f'{username}@example.com', username=username, first_name=username.title(),
        password='password123', **extra
    )


def approve_host(user):
    return HostApprovalRequest.objects.create(user=user, status=HostApprovalRequest.APPROVED)


def make_hackathon(organizer, now, tracks=1, **overrides):
    """A hackathon whose registration closes at now+12h, starts at now+1d and takes submissions until now+3d."""
    fields = dict(
        title='Test Hack',
        organizer=organizer,
        status=HackathonStatus.LIVE,
        banner_image='https://example.com/banner.png',
        logo_image='https://example.com/logo.png',
        rules='Be kind.',
        registration_start=now - 5 * DAY,
        registration_end=now + DAY / 2,
        start_date=now + DAY,
        submission_deadline=now + 3 * DAY,
        end_date=now + 5 * DAY,
        min_team_size=1,
        max_team_size=5,
        allow_individual=True,
    )
    fields.update(overrides)
    hackathon = Hackathon.objects.create(**fields)
    for number in range(1, tracks + 1):
        Track.objects.create(
            hackathon=hackathon, number=number, title=f'Track {number}',
            document_url=f'https://example.com/track{number}.csv'
        )
    return hackathon


def complete_draft(now):
    return {
        'title': 'Green Hack',
        'description': 'Build for the climate.',
        'banner_image': 'https://example.com/banner.png',
        'logo_image': 'https://example.com/logo.png',
        'registration_start': now,
        'registration_end': now + DAY,
        'start_date': now + 2 * DAY,
        'submission_deadline': now + 4 * DAY,
        'end_date': now + 5 * DAY,
        'contact_email': 'team@greenhack.io',
        'contact_person': 'Kemi',
        'tracks': [
            {'title': 'Energy', 'document_url': 'https://example.com/energy.csv'},
            {'title': 'Water', 'document_url': 'https://example.com/water.csv'},
        ],
    }


class LifecycleTransitionTest(TestCase):

    def setUp(self):
        self.now = timezone.now()
        self.organizer = make_user('organizer')
        self.admin = make_user('admin', is_admin=True)
        self.stranger = make_user('stranger')
        self.hackathon = make_hackathon(self.organizer, self.now, status=HackathonStatus.DRAFT)

    def test_transition_table_is_exhaustive(self):
        for current, target in product(ALL_STATUSES, ALL_STATUSES):
            self.hackathon.status = current
            result = transition(self.hackathon, target, self.admin)
            if (current, target) in EXPECTED_EDGES:
                self.assertEqual(result, Transitioned(current, target), f'{current} -> {target}')
            else:
                self.assertEqual(result, InvalidTransition(current, target), f'{current} -> {target}')

    def test_organizer_follows_the_same_table_except_rejection(self):
        for current, target in product(ALL_STATUSES, ALL_STATUSES):
            self.hackathon.status = current
            result = transition(self.hackathon, target, self.organizer)
            if target == HackathonStatus.REJECTED:
                self.assertIsInstance(result, Forbidden, f'{current} -> {target}')
            elif (current, target) in EXPECTED_EDGES:
                self.assertIsInstance(result, Transitioned, f'{current} -> {target}')
            else:
                self.assertIsInstance(result, InvalidTransition, f'{current} -> {target}')

    def test_other_users_are_always_forbidden(self):
        for current, target in product(ALL_STATUSES, ALL_STATUSES):
            self.hackathon.status = current
            self.assertIsInstance(transition(self.hackathon, target, self.stranger), Forbidden)

    def test_live_hackathon_cannot_be_cancelled(self):
        self.hackathon.status = HackathonStatus.LIVE
        result = transition(self.hackathon, HackathonStatus.CANCELLED, self.organizer)
        self.assertEqual(result, InvalidTransition('LIVE', 'CANCELLED'))
        self.assertEqual(result.as_dict()['from_status'], 'LIVE')

    def test_going_live_requires_content(self):
        bare = make_hackathon(
            self.organizer, self.now, tracks=0, status=HackathonStatus.DRAFT,
            banner_image='', logo_image='', rules='  ',
        )
        self.assertEqual(missing_live_content(bare), ('banner_image', 'logo_image', 'rules', 'tracks'))
        for target in (HackathonStatus.PUBLISHED, HackathonStatus.LIVE):
            result = transition(bare, target, self.organizer)
            self.assertEqual(result, IncompleteHackathon(('banner_image', 'logo_image', 'rules', 'tracks')))
        self.assertIsInstance(transition(bare, HackathonStatus.UPCOMING, self.organizer), Transitioned)

    def test_edge_is_checked_before_content(self):
        bare = make_hackathon(self.organizer, self.now, tracks=0, status=HackathonStatus.COMPLETED, banner_image='')
        self.assertIsInstance(transition(bare, HackathonStatus.LIVE, self.organizer), InvalidTransition)

    def test_transition_does_not_save(self):
        transition(self.hackathon, HackathonStatus.LIVE, self.organizer)
        self.hackathon.refresh_from_db()
        self.assertEqual(self.hackathon.status, HackathonStatus.DRAFT)

    def test_allowed_targets(self):
        self.assertEqual(allowed_targets(HackathonStatus.LIVE), ['COMPLETED', 'UPCOMING'])
        self.assertEqual(allowed_targets(HackathonStatus.CANCELLED), [])

    def test_windows(self):
        h = self.hackathon
        self.assertFalse(registration_open(h, self.now))
        h.status = HackathonStatus.LIVE
        self.assertTrue(registration_open(h, self.now))
        self.assertFalse(registration_open(h, h.registration_start - DAY))
        self.assertFalse(registration_open(h, h.registration_end + DAY))
        self.assertFalse(submission_window_open(h, self.now))
        self.assertTrue(submission_window_open(h, h.start_date))
        self.assertTrue(submission_window_open(h, h.submission_deadline))
        self.assertTrue(can_transition(HackathonStatus.UPCOMING, HackathonStatus.LIVE))
        self.assertFalse(can_transition(HackathonStatus.LIVE, HackathonStatus.CANCELLED))


class EvaluateTest(TestCase):
    """The first matching rule decides the action."""

    def setUp(self):
        self.T = timezone.now()
        self.organizer = make_user('organizer')
        self.participant = make_user('participant')
        self.hackathon = make_hackathon(self.organizer, self.T)
        self.registration = object()
        self.submission = object()

    def test_registered_user_through_the_submission_window(self):
        h, user, reg = self.hackathon, self.participant, self.registration
        self.assertEqual(evaluate(h, user, reg, None, now=self.T), Action.SUBMISSION_OPENS_SOON)
        self.assertEqual(evaluate(h, user, reg, None, now=self.T + 2 * DAY), Action.SUBMIT_PROJECT)
        self.assertEqual(evaluate(h, user, reg, None, now=self.T + 4 * DAY), Action.SUBMISSION_DEADLINE_PASSED)

    def test_window_bounds_are_inclusive(self):
        h, user, reg = self.hackathon, self.participant, self.registration
        self.assertEqual(evaluate(h, user, reg, None, now=h.start_date), Action.SUBMIT_PROJECT)
        self.assertEqual(evaluate(h, user, reg, None, now=h.submission_deadline), Action.SUBMIT_PROJECT)
        self.assertEqual(evaluate(h, user, reg, self.submission, now=h.submission_deadline), Action.EDIT_SUBMISSION)

    def test_organizer_always_manages(self):
        for status, offset in product(ALL_STATUSES, range(-2, 8)):
            self.hackathon.status = status
            action = evaluate(self.hackathon, self.organizer, None, None, now=self.T + offset * DAY)
            self.assertEqual(action, Action.MANAGE_AS_ORGANIZER)

    def test_every_status_and_time_gives_one_action(self):
        for status, offset, reg, sub in product(ALL_STATUSES, range(-2, 8), (None, self.registration), (None, self.submission)):
            self.hackathon.status = status
            action = evaluate(self.hackathon, self.participant, reg, sub, now=self.T + offset * DAY)
            self.assertIsInstance(action, Action)

    def test_register_only_while_live_and_open(self):
        h = self.hackathon
        self.assertEqual(evaluate(h, self.participant, now=self.T), Action.REGISTER)
        h.status = HackathonStatus.PUBLISHED
        self.assertEqual(evaluate(h, self.participant, now=self.T), Action.REGISTER)
        h.status = HackathonStatus.UPCOMING
        self.assertEqual(evaluate(h, self.participant, now=self.T), Action.NONE)
        h.status = HackathonStatus.LIVE
        self.assertEqual(evaluate(h, self.participant, now=self.T + DAY * 3 / 4), Action.NONE)
        self.assertTrue(can_register(h, self.participant, now=self.T))
        self.assertFalse(can_register(h, self.participant, self.registration, now=self.T))

    def test_completed_shows_results(self):
        self.hackathon.status = HackathonStatus.COMPLETED
        for reg, sub in product((None, self.registration), (None, self.submission)):
            action = evaluate(self.hackathon, self.participant, reg, sub, now=self.T + 10 * DAY)
            self.assertEqual(action, Action.VIEW_RESULTS)

    def test_submission_is_editable_then_locked(self):
        h, reg, sub = self.hackathon, self.registration, self.submission
        self.assertEqual(evaluate(h, self.participant, reg, sub, now=self.T + 2 * DAY), Action.EDIT_SUBMISSION)
        self.assertEqual(evaluate(h, self.participant, reg, sub, now=self.T + 4 * DAY), Action.VIEW_SUBMISSION)

    def test_unregistered_after_deadline(self):
        self.assertEqual(
            evaluate(self.hackathon, self.participant, now=self.T + 4 * DAY), Action.SUBMISSION_DEADLINE_PASSED
        )

    def test_before_start_wins_over_deadline_passed(self):
        misconfigured = make_hackathon(
            self.organizer, self.T, start_date=self.T + DAY, submission_deadline=self.T - DAY
        )
        action = evaluate(misconfigured, self.participant, self.registration, None, now=self.T)
        self.assertEqual(action, Action.SUBMISSION_OPENS_SOON)

    def test_anonymous_user_is_never_the_organizer(self):
        from django.contrib.auth.models import AnonymousUser
        self.assertEqual(evaluate(self.hackathon, AnonymousUser(), now=self.T), Action.REGISTER)

    def test_can_submit(self):
        h, reg = self.hackathon, self.registration
        self.assertFalse(can_submit(h, self.participant, reg, now=self.T))
        self.assertTrue(can_submit(h, self.participant, reg, now=self.T + 2 * DAY))
        self.assertTrue(can_submit(h, self.participant, reg, self.submission, now=self.T + 2 * DAY))
        self.assertFalse(can_submit(h, self.participant, reg, self.submission, now=self.T + 4 * DAY))
        self.assertFalse(can_submit(h, self.participant, None, now=self.T + 2 * DAY))


class CreationGateTest(TestCase):

    def setUp(self):
        self.now = timezone.now()
        self.host = make_user('host')
        approve_host(self.host)

    def test_free_creation_persists_a_draft(self):
        result = CreationGate.request_creation(self.host, complete_draft(self.now))
        self.assertIsInstance(result, Created)
        hackathon = result.hackathon
        self.assertEqual(hackathon.status, HackathonStatus.DRAFT)
        self.assertEqual(hackathon.organizer, self.host)
        self.assertEqual([t.number for t in hackathon.tracks.all()], [1, 2])
        self.assertFalse(CreationPayment.objects.exists())

    def test_paid_creation_requires_payment(self):
        PlatformConfigStore.set(CREATION_FEE, '500')
        result = CreationGate.request_creation(self.host, complete_draft(self.now))
        self.assertEqual(result, PaymentRequired(Decimal('500')))
        self.assertFalse(Hackathon.objects.exists())

    def test_confirm_records_receipt(self):
        PlatformConfigStore.set(CREATION_FEE, '500')
        receipt = {'payment_id': 'pay_1', 'provider_payment_id': 'prov_1'}
        result = CreationGate.confirm_creation(self.host, complete_draft(self.now), receipt)
        self.assertIsInstance(result, Created)
        self.assertEqual(result.hackathon.status, HackathonStatus.DRAFT)
        self.assertEqual(result.payment.amount, Decimal('500'))
        self.assertEqual(result.hackathon.creation_payment.provider_payment_id, 'prov_1')

    def test_confirm_with_blank_receipt(self):
        PlatformConfigStore.set(CREATION_FEE, '500')
        result = CreationGate.confirm_creation(
            self.host, complete_draft(self.now), {'payment_id': ' ', 'provider_payment_id': 'prov_1'}
        )
        self.assertIsInstance(result, PaymentRequired)
        self.assertFalse(Hackathon.objects.exists())

    def test_unapproved_host_is_refused(self):
        pending = make_user('pending')
        HostApprovalWorkflow.request_host(pending)
        self.assertIsInstance(CreationGate.request_creation(pending, complete_draft(self.now)), HostNotApproved)
        never_asked = make_user('nobody')
        self.assertIsInstance(CreationGate.request_creation(never_asked, complete_draft(self.now)), HostNotApproved)
        self.assertFalse(Hackathon.objects.exists())

    def test_incomplete_draft_lists_missing_fields(self):
        draft = complete_draft(self.now)
        draft['logo_image'] = ''
        draft['contact_person'] = ' '
        del draft['end_date']
        draft['tracks'] = [{'title': 'Energy', 'document_url': ''}]
        result = CreationGate.request_creation(self.host, draft)
        self.assertEqual(
            result, IncompleteDraft(('logo_image', 'end_date', 'contact_person', 'tracks[0].document_url'))
        )

    def test_draft_without_tracks(self):
        draft = complete_draft(self.now)
        draft['tracks'] = []
        self.assertEqual(CreationGate.request_creation(self.host, draft), IncompleteDraft(('tracks',)))

    def test_unnumbered_tracks_skip_numbers_already_taken(self):
        draft = complete_draft(self.now)
        draft['tracks'] = [
            {'number': 2, 'title': 'Energy', 'document_url': 'https://example.com/energy.csv'},
            {'title': 'Water', 'document_url': 'https://example.com/water.csv'},
            {'title': 'Food', 'document_url': 'https://example.com/food.csv'},
        ]
        result = CreationGate.request_creation(self.host, draft)
        self.assertIsInstance(result, Created)
        numbers = {t.title: t.number for t in result.hackathon.tracks.all()}
        self.assertEqual(numbers, {'Energy': 2, 'Water': 1, 'Food': 3})

    def test_repeated_track_number_is_reported(self):
        draft = complete_draft(self.now)
        for track in draft['tracks']:
            track['number'] = 1
        result = CreationGate.request_creation(self.host, draft)
        self.assertEqual(result, IncompleteDraft(('tracks[1].number',)))
        self.assertFalse(Hackathon.objects.exists())


class RegistrationServiceTest(TestCase):

    def setUp(self):
        self.now = timezone.now()
        self.organizer = make_user('organizer')
        self.leader = make_user('leader')
        self.friend = make_user('friend')
        self.hackathon = make_hackathon(self.organizer, self.now, tracks=2, min_team_size=2)

    def register(self, user, **kwargs):
        options = dict(team_name='Alpha', members=[{'name': 'Friend', 'email': 'FRIEND@example.com'}], track=1)
        options.update(kwargs)
        return register_for_hackathon(self.hackathon, user, 'TEAM', now=self.now, **options)

    def test_team_registration(self):
        registration = self.register(self.leader)
        self.assertIsInstance(registration, Registration)
        self.assertEqual(registration.track.number, 1)
        self.assertEqual(registration.registered_at, self.now)
        members = list(registration.team.members.all())
        self.assertEqual([m.role for m in members], [TeamMember.LEADER, TeamMember.MEMBER])
        self.assertEqual(members[0].user, self.leader)
        self.assertEqual(members[1].user, self.friend)

    def test_second_registration_is_refused(self):
        self.register(self.leader)
        self.assertIsInstance(self.register(self.leader), AlreadyRegistered)
        self.assertEqual(Registration.objects.filter(user=self.leader).count(), 1)

    def test_organizer_cannot_register(self):
        self.assertIsInstance(self.register(self.organizer), Forbidden)

    def test_registration_closed(self):
        late = register_for_hackathon(
            self.hackathon, self.leader, 'TEAM', team_name='Alpha',
            members=[{'name': 'Friend', 'email': 'friend@example.com'}], track=1, now=self.now + DAY,
        )
        self.assertEqual(late, IneligibleWindow('register'))

    def test_bad_composition_is_not_saved(self):
        result = self.register(self.leader, members=[], track=None)
        self.assertIsInstance(result, TeamCompositionViolation)
        self.assertEqual(sorted(result.fields()), ['members', 'track'])
        self.assertFalse(Registration.objects.exists())


class SubmissionServiceTest(TestCase):

    def setUp(self):
        self.now = timezone.now()
        organizer = make_user('organizer')
        leader = make_user('leader')
        self.hackathon = make_hackathon(organizer, self.now)
        self.registration = register_for_hackathon(self.hackathon, leader, 'INDIVIDUAL', track=1, now=self.now)
        self.payload = {'title': 'Solar Sim', 'repository_url': 'https://github.com/example/solar'}

    def test_cannot_submit_before_start(self):
        result = save_submission(self.registration, self.payload, now=self.now)
        self.assertEqual(result, IneligibleWindow('create_submission'))

    def test_draft_then_finalize(self):
        during = self.now + 2 * DAY
        draft = save_submission(self.registration, self.payload, now=during)
        self.assertTrue(draft.is_draft)
        self.assertIsNone(draft.submitted_at)

        final = save_submission(self.registration, {'demo_url': 'https://example.com/demo'}, finalize=True, now=during)
        self.assertEqual(final.id, draft.id)
        self.assertFalse(final.is_draft)
        self.assertEqual(final.submitted_at, during)
        self.assertEqual(final.title, 'Solar Sim')

    def test_cannot_create_after_deadline(self):
        result = save_submission(self.registration, self.payload, now=self.now + 4 * DAY)
        self.assertEqual(result, IneligibleWindow('create_submission'))

    def test_unfinalized_draft_stays_editable_after_deadline(self):
        save_submission(self.registration, self.payload, now=self.now + 2 * DAY)
        edited = save_submission(self.registration, {'title': 'Solar Sim 2'}, now=self.now + 4 * DAY)
        self.assertIsInstance(edited, Submission)
        self.assertEqual(edited.title, 'Solar Sim 2')
        refused = save_submission(self.registration, {}, finalize=True, now=self.now + 4 * DAY)
        self.assertEqual(refused, IneligibleWindow('finalize_submission'))

    def test_finalized_submission_is_locked_after_deadline(self):
        save_submission(self.registration, self.payload, finalize=True, now=self.now + 2 * DAY)
        result = save_submission(self.registration, {'title': 'Too late'}, now=self.now + 4 * DAY)
        self.assertEqual(result, IneligibleWindow('edit_submission'))

    def test_completed_hackathon_takes_no_submissions(self):
        self.hackathon.status = HackathonStatus.COMPLETED
        self.hackathon.save()
        during = self.now + 2 * DAY
        self.assertEqual(evaluate(self.hackathon, self.registration.user, self.registration, now=during), Action.VIEW_RESULTS)
        result = save_submission(self.registration, self.payload, finalize=True, now=during)
        self.assertEqual(result, IneligibleWindow('create_submission'))
        self.assertFalse(Submission.objects.exists())

    def test_unpublished_hackathon_freezes_the_draft(self):
        during = self.now + 2 * DAY
        save_submission(self.registration, self.payload, now=during)
        self.hackathon.status = HackathonStatus.UPCOMING
        self.hackathon.save()
        self.registration.refresh_from_db()
        self.assertEqual(
            save_submission(self.registration, {}, finalize=True, now=during), IneligibleWindow('finalize_submission')
        )
        self.assertEqual(
            save_submission(self.registration, {'title': 'Renamed'}, now=during), IneligibleWindow('edit_submission')
        )
        submission = Submission.objects.get(registration=self.registration)
        self.assertEqual(submission.title, 'Solar Sim')
        self.assertIsNone(submission.submitted_at)


class HackathonAPITest(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.now = timezone.now()
        self.host = make_user('host')
        approve_host(self.host)
        self.participant = make_user('participant')
        self.admin = make_user('admin', is_admin=True)

    def draft_payload(self):
        payload = complete_draft(self.now)
        for name in ('registration_start', 'registration_end', 'start_date', 'submission_deadline', 'end_date'):
            payload[name] = payload[name].isoformat()
        return payload

    def test_free_creation(self):
        self.client.force_authenticate(user=self.host)
        resp = self.client.post('/api/v1/hackathons/', self.draft_payload(), format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['hackathon']['status'], 'DRAFT')
        self.assertEqual(len(resp.data['hackathon']['tracks']), 2)

    @override_settings(PLATFORM_CONFIG_DEFAULTS={'creation_fee': '500'})
    def test_paid_creation_flow(self):
        self.client.force_authenticate(user=self.host)
        resp = self.client.post('/api/v1/hackathons/', self.draft_payload(), format='json')
        self.assertEqual(resp.status_code, 402)
        self.assertEqual(resp.data['error'], 'payment_required')
        self.assertEqual(resp.data['amount'], '500')

        payload = dict(self.draft_payload(), payment_id='pay_1', provider_payment_id='prov_1')
        resp = self.client.post('/api/v1/hackathons/confirm-creation/', payload, format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['payment_id'], 'pay_1')

    def test_creation_requires_approval(self):
        self.client.force_authenticate(user=self.participant)
        resp = self.client.post('/api/v1/hackathons/', self.draft_payload(), format='json')
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.data['error'], 'host_not_approved')

    def test_incomplete_draft(self):
        self.client.force_authenticate(user=self.host)
        payload = self.draft_payload()
        payload['banner_image'] = ''
        resp = self.client.post('/api/v1/hackathons/', payload, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['missing_fields'], ['banner_image'])

    def test_misordered_dates(self):
        self.client.force_authenticate(user=self.host)
        payload = self.draft_payload()
        payload['end_date'] = (self.now - DAY).isoformat()
        resp = self.client.post('/api/v1/hackathons/', payload, format='json')
        self.assertEqual(resp.status_code, 400)

    def test_status_changes(self):
        hackathon = make_hackathon(self.host, self.now, status=HackathonStatus.DRAFT)
        url = f'/api/v1/hackathons/{hackathon.id}/status/'

        self.client.force_authenticate(user=self.participant)
        self.assertEqual(self.client.patch(url, {'status': 'LIVE'}, format='json').status_code, 404)

        self.client.force_authenticate(user=self.host)
        resp = self.client.patch(url, {'status': 'live'}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['hackathon']['status'], 'LIVE')
        hackathon.refresh_from_db()
        self.assertEqual(hackathon.status, HackathonStatus.LIVE)

        self.client.force_authenticate(user=self.participant)
        self.assertEqual(self.client.patch(url, {'status': 'COMPLETED'}, format='json').status_code, 403)

        self.client.force_authenticate(user=self.host)
        resp = self.client.patch(url, {'status': 'CANCELLED'}, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'invalid_transition')

    def test_drafts_are_hidden_from_the_public(self):
        make_hackathon(self.host, self.now, status=HackathonStatus.DRAFT, title='Secret')
        make_hackathon(self.host, self.now, title='Open')
        resp = self.client.get('/api/v1/hackathons/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([h['title'] for h in resp.data], ['Open'])

        self.client.force_authenticate(user=self.host)
        resp = self.client.get('/api/v1/hackathons/?mine=true')
        self.assertEqual(sorted(h['title'] for h in resp.data), ['Open', 'Secret'])

    def test_register_and_action(self):
        hackathon = make_hackathon(self.host, self.now)
        self.client.force_authenticate(user=self.participant)
        resp = self.client.get(f'/api/v1/hackathons/{hackathon.id}/action/')
        self.assertEqual(resp.data['action'], 'REGISTER')

        payload = {'registration_type': 'team', 'team_name': 'Alpha', 'track': 1,
                   'members': [{'name': 'Bo', 'email': 'bo@example.com'}]}
        resp = self.client.post(f'/api/v1/hackathons/{hackathon.id}/register/', payload, format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(len(resp.data['registration']['team']['members']), 2)

        resp = self.client.post(f'/api/v1/hackathons/{hackathon.id}/register/', payload, format='json')
        self.assertEqual(resp.status_code, 409)

        resp = self.client.get(f'/api/v1/hackathons/{hackathon.id}/action/')
        self.assertEqual(resp.data['action'], 'SUBMISSION_OPENS_SOON')

        self.client.force_authenticate(user=self.host)
        resp = self.client.get(f'/api/v1/hackathons/{hackathon.id}/action/')
        self.assertEqual(resp.data['action'], 'MANAGE_AS_ORGANIZER')

    def test_register_reports_every_violation(self):
        hackathon = make_hackathon(self.host, self.now, min_team_size=2)
        self.client.force_authenticate(user=self.participant)
        resp = self.client.post(
            f'/api/v1/hackathons/{hackathon.id}/register/', {'registration_type': 'TEAM'}, format='json'
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'team_composition_violation')
        self.assertEqual(
            sorted(v['field'] for v in resp.data['violations']), ['members', 'team_name', 'track']
        )

    def test_submission_outside_window(self):
        hackathon = make_hackathon(self.host, self.now)
        register_for_hackathon(hackathon, self.participant, 'INDIVIDUAL', track=1, now=self.now)
        self.client.force_authenticate(user=self.participant)
        resp = self.client.post(f'/api/v1/hackathons/{hackathon.id}/submission/', {'title': 'Early'}, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'ineligible_window')
        self.assertEqual(self.client.get(f'/api/v1/hackathons/{hackathon.id}/submission/').status_code, 404)

    def test_submission_requires_registration(self):
        hackathon = make_hackathon(self.host, self.now)
        self.client.force_authenticate(user=self.participant)
        resp = self.client.post(f'/api/v1/hackathons/{hackathon.id}/submission/', {'title': 'X'}, format='json')
        self.assertEqual(resp.status_code, 404)

    def test_participants_are_visible_to_owner_and_admin_only(self):
        hackathon = make_hackathon(self.host, self.now)
        register_for_hackathon(hackathon, self.participant, 'INDIVIDUAL', track=1, now=self.now)
        url = f'/api/v1/hackathons/{hackathon.id}/participants/'

        self.client.force_authenticate(user=self.participant)
        self.assertEqual(self.client.get(url).status_code, 403)

        for user in (self.host, self.admin):
            self.client.force_authenticate(user=user)
            resp = self.client.get(url)
            self.assertEqual(resp.status_code, 200)
            self.assertEqual(len(resp.data), 1)

    def test_owner_edits_content(self):
        hackathon = make_hackathon(self.host, self.now, status=HackathonStatus.DRAFT, rules='')
        self.client.force_authenticate(user=self.host)
        resp = self.client.patch(f'/api/v1/hackathons/{hackathon.id}/', {'rules': 'No plagiarism.'}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['rules'], 'No plagiarism.')

    def test_live_hackathon_cannot_lose_required_content(self):
        hackathon = make_hackathon(self.host, self.now)
        self.client.force_authenticate(user=self.host)
        resp = self.client.patch(
            f'/api/v1/hackathons/{hackathon.id}/', {'banner_image': '', 'venue': 'Lagos'}, format='json'
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'incomplete_hackathon')
        self.assertEqual(resp.data['missing_fields'], ['banner_image'])
        hackathon.refresh_from_db()
        self.assertEqual(hackathon.banner_image, 'https://example.com/banner.png')
        self.assertEqual(hackathon.venue, '')

        resp = self.client.patch(f'/api/v1/hackathons/{hackathon.id}/', {'venue': 'Lagos'}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['venue'], 'Lagos')

    def test_creation_with_mixed_track_numbers(self):
        self.client.force_authenticate(user=self.host)
        payload = self.draft_payload()
        payload['tracks'][1]['number'] = 1
        resp = self.client.post('/api/v1/hackathons/', payload, format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(sorted(t['number'] for t in resp.data['hackathon']['tracks']), [1, 2])

    def test_search_matches_title_and_description(self):
        make_hackathon(self.host, self.now, title='Solar Sprint')
        make_hackathon(self.host, self.now, title='Open Data', description='Civic tech for solar farms')
        make_hackathon(self.host, self.now, title='Game Jam')
        make_hackathon(self.host, self.now, title='Solar Secret', status=HackathonStatus.DRAFT)
        resp = self.client.get('/api/v1/hackathons/?search=SOLAR')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(sorted(h['title'] for h in resp.data), ['Open Data', 'Solar Sprint'])

    def test_my_hackathons_lists_registrations(self):
        joined = make_hackathon(self.host, self.now, title='Joined')
        make_hackathon(self.host, self.now, title='Skipped')
        registration = register_for_hackathon(joined, self.participant, 'INDIVIDUAL', track=1, now=self.now)

        self.assertEqual(self.client.get('/api/v1/hackathons/my-hackathons/').status_code, 401)

        self.client.force_authenticate(user=self.participant)
        resp = self.client.get('/api/v1/hackathons/my-hackathons/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([h['title'] for h in resp.data], ['Joined'])
        self.assertEqual(resp.data[0]['registration_id'], registration.id)

        self.client.force_authenticate(user=self.host)
        self.assertEqual(self.client.get('/api/v1/hackathons/my-hackathons/').data, [])

    def test_submissions_are_listed_for_owner_and_admin(self):
        hackathon = make_hackathon(self.host, self.now)
        other = make_user('other')
        first = register_for_hackathon(hackathon, self.participant, 'INDIVIDUAL', track=1, now=self.now)
        second = register_for_hackathon(hackathon, other, 'INDIVIDUAL', track=1, now=self.now)
        save_submission(first, {'title': 'Solar Sim'}, finalize=True, now=self.now + 2 * DAY)
        save_submission(second, {'title': 'Wind Map'}, now=self.now + 2 * DAY)
        url = f'/api/v1/hackathons/{hackathon.id}/submissions/'

        self.client.force_authenticate(user=self.participant)
        self.assertEqual(self.client.get(url).status_code, 403)

        for user in (self.host, self.admin):
            self.client.force_authenticate(user=user)
            resp = self.client.get(url)
            self.assertEqual(resp.status_code, 200)
            self.assertEqual([s['title'] for s in resp.data], ['Solar Sim', 'Wind Map'])
            self.assertEqual(resp.data[0]['submitted_by']['username'], 'participant')
            self.assertEqual(resp.data[0]['track'], {'number': 1, 'title': 'Track 1'})

        resp = self.client.get(url + '?finalized=true')
        self.assertEqual([s['title'] for s in resp.data], ['Solar Sim'])

    def test_payment_history_is_per_host(self):
        PlatformConfigStore.set(CREATION_FEE, '500')
        receipt = {'payment_id': 'pay_1', 'provider_payment_id': 'prov_1'}
        CreationGate.confirm_creation(self.host, complete_draft(self.now), receipt)

        self.client.force_authenticate(user=self.host)
        resp = self.client.get('/api/v1/hackathons/payments/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.data), 1)
        self.assertEqual(resp.data[0]['payment_id'], 'pay_1')
        self.assertEqual(resp.data[0]['amount'], '500.00')
        self.assertEqual(resp.data[0]['hackathon']['status'], 'DRAFT')

        self.client.force_authenticate(user=self.participant)
        self.assertEqual(self.client.get('/api/v1/hackathons/payments/').data, [])

    def test_platform_stats_for_admins(self):
        hackathon = make_hackathon(self.host, self.now)
        make_hackathon(self.host, self.now, status=HackathonStatus.DRAFT)
        registration = register_for_hackathon(hackathon, self.participant, 'INDIVIDUAL', track=1, now=self.now)
        save_submission(registration, {'title': 'Solar Sim'}, finalize=True, now=self.now + 2 * DAY)
        HostApprovalWorkflow.request_host(make_user('applicant'))

        self.client.force_authenticate(user=self.host)
        self.assertEqual(self.client.get('/api/v1/hackathons/stats/').status_code, 403)

        self.client.force_authenticate(user=self.admin)
        resp = self.client.get('/api/v1/hackathons/stats/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['hackathons']['total'], 2)
        self.assertEqual(resp.data['hackathons']['by_status']['LIVE'], 1)
        self.assertEqual(resp.data['hackathons']['by_status']['DRAFT'], 1)
        self.assertEqual(resp.data['registrations'], 1)
        self.assertEqual(resp.data['submissions'], {'total': 1, 'finalized': 1})
        self.assertEqual(resp.data['pending_host_requests'], 1)
        self.assertEqual(resp.data['creation_payments']['count'], 0)
