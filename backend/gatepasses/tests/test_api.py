import datetime
import json
import shutil
import tempfile

from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from accounts.models import Department, Role
from accounts.tests.helpers import make_profile
from gatepasses.exceptions import CredentialGenerationError, QueryError
from gatepasses.models import GatePass
from gatepasses.services import approval_engine, department_query


class GatePassApiTests(TestCase):
    def setUp(self):
        self.media_root = tempfile.mkdtemp()
        override = override_settings(MEDIA_ROOT=self.media_root)
        override.enable()
        self.addCleanup(override.disable)
        self.addCleanup(shutil.rmtree, self.media_root, True)

        self.client = APIClient()
        self.student = make_profile('stud', Role.STUDENT, roll='CS10', year='2')
        self.classmate = make_profile('mate', Role.STUDENT, roll='CS11', year='1')
        self.hod = make_profile('hod', Role.HOD)
        self.other_hod = make_profile('mechhod', Role.HOD, department=Department.MECHANICAL_ENGINEERING)
        self.guard = make_profile('guard', Role.GUARD, department=Department.ADMINISTRATION)
        self.gate_pass = GatePass.objects.create(student=self.student, reason='Hospital', date=datetime.date(2026, 10, 21))

    def as_user(self, profile):
        self.client.force_authenticate(user=profile.user)

    def test_student_creates_and_lists_own_passes(self):
        self.as_user(self.student)
        resp = self.client.post('/api/gatepasses/', {'reason': 'Wedding', 'date': '2026-11-02'}, format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['status'], 'pending')
        self.assertIsNone(resp.data['qr_url'])
        self.assertIsNone(resp.data['hod_id'])

        resp = self.client.get('/api/gatepasses/my/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.data), 2)
        self.assertTrue(all(p['student_id'] == self.student.pk for p in resp.data))

    def test_blank_reason_is_rejected(self):
        self.as_user(self.student)
        resp = self.client.post('/api/gatepasses/', {'reason': '  ', 'date': '2026-11-02'}, format='json')
        self.assertEqual(resp.status_code, 400)

    def test_hod_cannot_create_passes(self):
        self.as_user(self.hod)
        resp = self.client.post('/api/gatepasses/', {'reason': 'x', 'date': '2026-11-02'}, format='json')
        self.assertEqual(resp.status_code, 403)

    def test_detail_visibility(self):
        url = f'/api/gatepasses/{self.gate_pass.pk}/'
        for profile, expected in (
            (self.student, 200),
            (self.hod, 200),
            (self.guard, 200),
            (self.classmate, 403),
            (self.other_hod, 403),
        ):
            self.as_user(profile)
            self.assertEqual(self.client.get(url).status_code, expected, profile.user.username)

    def test_hod_approves_own_department_pass(self):
        self.as_user(self.hod)
        resp = self.client.post(f'/api/gatepasses/{self.gate_pass.pk}/approve/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['status'], 'approved')
        self.assertEqual(resp.data['hod_id'], self.hod.pk)
        self.assertIsNotNone(resp.data['qr_url'])

    def test_hod_of_other_department_is_forbidden(self):
        self.as_user(self.other_hod)
        for action in ('approve', 'reject', 'undo'):
            resp = self.client.post(f'/api/gatepasses/{self.gate_pass.pk}/{action}/')
            self.assertEqual(resp.status_code, 403)
        self.gate_pass.refresh_from_db()
        self.assertEqual(self.gate_pass.status, GatePass.Status.PENDING)

    def test_reject_then_undo(self):
        self.as_user(self.hod)
        resp = self.client.post(f'/api/gatepasses/{self.gate_pass.pk}/reject/')
        self.assertEqual((resp.data['status'], resp.data['hod_id']), ('rejected', self.hod.pk))
        resp = self.client.post(f'/api/gatepasses/{self.gate_pass.pk}/undo/')
        self.assertEqual((resp.data['status'], resp.data['hod_id'], resp.data['qr_url']), ('pending', None, None))

    def test_unknown_pass_is_404(self):
        self.as_user(self.hod)
        self.assertEqual(self.client.post('/api/gatepasses/999999/approve/').status_code, 404)

    def test_credential_failure_maps_to_502(self):
        original = approval_engine.approve

        def broken(pass_id, actor, store=None):
            raise CredentialGenerationError(pass_id, 'upload', 'bucket unavailable')

        approval_engine.approve = broken
        try:
            self.as_user(self.hod)
            resp = self.client.post(f'/api/gatepasses/{self.gate_pass.pk}/approve/')
        finally:
            approval_engine.approve = original

        self.assertEqual(resp.status_code, 502)
        self.assertIn('bucket unavailable', resp.data['detail'])

    def test_department_listing_with_counts_and_filter(self):
        GatePass.objects.create(student=self.classmate, reason='Match', date=datetime.date(2026, 10, 22),
                                status=GatePass.Status.REJECTED, hod=self.hod)
        self.as_user(self.hod)

        resp = self.client.get('/api/gatepasses/department/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['department'], Department.COMPUTER_SCIENCE)
        self.assertEqual(resp.data['counts'], {'pending': 1, 'approved': 0, 'rejected': 1})
        self.assertEqual(len(resp.data['passes']), 2)

        resp = self.client.get('/api/gatepasses/department/', {'status': 'pending'})
        self.assertEqual([p['id'] for p in resp.data['passes']], [self.gate_pass.pk])

        resp = self.client.get('/api/gatepasses/department/', {'status': 'lost'})
        self.assertEqual(resp.status_code, 400)

    def test_department_query_failure_maps_to_503(self):
        original = department_query.passes_for_department

        def broken(department, strategies=None):
            raise QueryError('two_step', 'connection reset')

        department_query.passes_for_department = broken
        try:
            self.as_user(self.hod)
            resp = self.client.get('/api/gatepasses/department/')
        finally:
            department_query.passes_for_department = original

        self.assertEqual(resp.status_code, 503)
        self.assertEqual(resp.data['stage'], 'two_step')

    def test_guard_verifies_scanned_payload(self):
        self.as_user(self.hod)
        self.client.post(f'/api/gatepasses/{self.gate_pass.pk}/approve/')

        payload = json.dumps({'passId': self.gate_pass.pk, 'studentId': self.student.pk,
                              'timestamp': '2026-10-18T10:00:00+00:00', 'department': Department.COMPUTER_SCIENCE})
        self.as_user(self.guard)
        resp = self.client.post('/api/gatepasses/verify/', {'payload': payload}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.data['valid'])
        self.assertEqual(resp.data['gate_pass']['id'], self.gate_pass.pk)

        self.as_user(self.student)
        resp = self.client.post('/api/gatepasses/verify/', {'payload': payload}, format='json')
        self.assertEqual(resp.status_code, 403)
