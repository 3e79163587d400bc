from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from accounts.models import User
from hackathon.models import Hackathon, HackathonStatus, Track
from team.models import TeamMember
from team.validators import INDIVIDUAL, TEAM, TeamDraft, validate_team_composition
from utils.failures import TeamCompositionViolation


def members(count):
    return [{'name': f'Member {i}', 'email': f'member{i}@example.com'} for i in range(count)]


class TeamCompositionTest(TestCase):
    """Team size, member details and track choice are checked together."""

    def setUp(self):
        self.organizer = User.objects.create_user(
            email='org@example.com', username='organizer', first_name='Ola', password='password123'
        )
        self.leader = User.objects.create_user(
            email='Lead@Example.com', username='leader', first_name='Lara', last_name='Bello', password='password123'
        )
        now = timezone.now()
        self.hackathon = Hackathon.objects.create(
            title='Test Hack',
            organizer=self.organizer,
            status=HackathonStatus.LIVE,
            registration_start=now,
            registration_end=now + timedelta(days=1),
            start_date=now + timedelta(days=2),
            submission_deadline=now + timedelta(days=3),
            end_date=now + timedelta(days=4),
            min_team_size=2,
            max_team_size=5,
            allow_individual=False,
        )

    def test_leader_plus_one_member_meets_minimum(self):
        result = validate_team_composition(self.hackathon, self.leader, TEAM, 'Alpha', members(1))
        self.assertIsInstance(result, TeamDraft)
        self.assertEqual(result.size, 2)
        self.assertEqual(result.leader.role, TeamMember.LEADER)
        self.assertEqual(result.leader.email, 'lead@example.com')

    def test_leader_alone_is_below_minimum(self):
        result = validate_team_composition(self.hackathon, self.leader, TEAM, 'Alpha', [])
        self.assertIsInstance(result, TeamCompositionViolation)
        self.assertIn('members', result.fields())

    def test_team_at_maximum_is_accepted(self):
        result = validate_team_composition(self.hackathon, self.leader, TEAM, 'Alpha', members(4))
        self.assertIsInstance(result, TeamDraft)
        self.assertEqual(result.size, 5)

    def test_team_over_maximum_is_rejected(self):
        result = validate_team_composition(self.hackathon, self.leader, TEAM, 'Alpha', members(5))
        self.assertIsInstance(result, TeamCompositionViolation)
        self.assertIn('members', result.fields())

    def test_duplicate_member_emails_are_rejected(self):
        duplicated = [
            {'name': 'Ada', 'email': 'ada@example.com'},
            {'name': 'Ada Again', 'email': 'ADA@example.com'},
        ]
        result = validate_team_composition(self.hackathon, self.leader, TEAM, 'Alpha', duplicated)
        self.assertIsInstance(result, TeamCompositionViolation)
        self.assertEqual(result.fields(), ['members[1].email'])

    def test_member_cannot_reuse_leader_email(self):
        result = validate_team_composition(
            self.hackathon, self.leader, TEAM, 'Alpha', [{'name': 'Me', 'email': 'lead@example.com'}]
        )
        self.assertIsInstance(result, TeamCompositionViolation)
        self.assertEqual(result.fields(), ['members[0].email'])

    def test_all_problems_reported_at_once(self):
        result = validate_team_composition(
            self.hackathon, self.leader, TEAM, '  ',
            [{'name': '', 'email': 'not-an-email'}, {'name': 'Bo', 'email': ''}],
        )
        self.assertIsInstance(result, TeamCompositionViolation)
        self.assertEqual(
            sorted(result.fields()),
            sorted(['team_name', 'members[0].name', 'members[0].email', 'members[1].email']),
        )

    def test_only_the_registrant_leads(self):
        result = validate_team_composition(
            self.hackathon, self.leader, TEAM, 'Alpha', [{'name': 'Bo', 'email': 'bo@example.com', 'role': 'LEADER'}]
        )
        self.assertIsInstance(result, TeamCompositionViolation)
        self.assertEqual(result.fields(), ['members[0].role'])

    def test_individual_not_allowed(self):
        result = validate_team_composition(self.hackathon, self.leader, INDIVIDUAL)
        self.assertIsInstance(result, TeamCompositionViolation)
        self.assertEqual(result.fields(), ['registration_type'])

    def test_individual_registration(self):
        self.hackathon.allow_individual = True
        result = validate_team_composition(self.hackathon, self.leader, 'individual')
        self.assertIsInstance(result, TeamDraft)
        self.assertEqual(result.name, 'Lara Bello')
        self.assertEqual(result.size, 1)
        self.assertEqual(result.registration_type, INDIVIDUAL)

    def test_individual_cannot_bring_members(self):
        self.hackathon.allow_individual = True
        result = validate_team_composition(self.hackathon, self.leader, INDIVIDUAL, members=members(1))
        self.assertIsInstance(result, TeamCompositionViolation)
        self.assertEqual(result.fields(), ['members'])

    def test_unknown_registration_type(self):
        result = validate_team_composition(self.hackathon, self.leader, 'SQUAD', 'Alpha', members(1))
        self.assertIsInstance(result, TeamCompositionViolation)
        self.assertEqual(result.fields(), ['registration_type'])

    def test_track_ignored_when_none_defined(self):
        result = validate_team_composition(self.hackathon, self.leader, TEAM, 'Alpha', members(1), track=7)
        self.assertIsInstance(result, TeamDraft)
        self.assertIsNone(result.track)

    def test_track_must_be_chosen_from_defined_tracks(self):
        Track.objects.create(hackathon=self.hackathon, number=1, title='Payments', document_url='https://example.com/1.csv')
        Track.objects.create(hackathon=self.hackathon, number=2, title='Health', document_url='https://example.com/2.csv')

        missing = validate_team_composition(self.hackathon, self.leader, TEAM, 'Alpha', members(1))
        self.assertEqual(missing.fields(), ['track'])

        unknown = validate_team_composition(self.hackathon, self.leader, TEAM, 'Alpha', members(1), track=3)
        self.assertEqual(unknown.fields(), ['track'])

        chosen = validate_team_composition(self.hackathon, self.leader, TEAM, 'Alpha', members(1), track='2')
        self.assertIsInstance(chosen, TeamDraft)
        self.assertEqual(chosen.track, 2)
