import json
import os
import tempfile
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import CommandError, call_command
from django.db.models.signals import pre_save
from django.test import TestCase
from rest_framework.test import APIClient

from accounts.exceptions import BatchEnvelopeError, PerItemProvisioningError
from accounts.models import Department, Profile, Role
from accounts.services import provisioning


def account(email, roll, **extra):
    item = {'email': email, 'password': 'secret123', 'name': 'Student ' + roll, 'roll': roll,
            'department': Department.COMPUTER_SCIENCE}
    item.update(extra)
    return item


class RecordingIdentity:
    def __init__(self, fail_on=()):
        self.calls = []
        self.fail_on = set(fail_on)

    def create_account(self, email, password, metadata, email_confirm=True):
        self.calls.append((email, metadata))
        if email in self.fail_on:
            raise PerItemProvisioningError(email, 'rate limited')
        if email == 'boom@x.edu':
            raise RuntimeError('identity service down')


class ProvisioningTests(TestCase):
    def test_bad_item_does_not_stop_the_batch(self):
        logs = provisioning.provision_students([
            account('a@x.edu', 'R1'),
            account('bad', 'R2'),
            account('c@x.edu', 'R3'),
        ])
        self.assertEqual(logs, ['Created: a@x.edu', 'bad: Enter a valid email address.', 'Created: c@x.edu'])
        self.assertEqual(
            sorted(Profile.objects.values_list('user__email', flat=True)),
            ['a@x.edu', 'c@x.edu'],
        )

    def test_students_start_in_first_year(self):
        provisioning.provision_students([account('y@x.edu', 'R9', year=3, role=Role.HOD)])
        profile = Profile.objects.get(user__email='y@x.edu')
        self.assertEqual((profile.role, profile.year), (Role.STUDENT, '1'))

    def test_identity_is_called_in_order_with_student_metadata(self):
        identity = RecordingIdentity(fail_on={'b@x.edu'})
        logs = provisioning.provision_students(
            [account('a@x.edu', 'R1'), account('b@x.edu', 'R2'), account('boom@x.edu', 'R3')],
            identity=identity,
        )
        self.assertEqual([c[0] for c in identity.calls], ['a@x.edu', 'b@x.edu', 'boom@x.edu'])
        self.assertTrue(all(m.role == Role.STUDENT and m.year == 1 for _, m in identity.calls))
        self.assertEqual(logs, ['Created: a@x.edu', 'b@x.edu: rate limited', 'boom@x.edu: identity service down'])

    def test_missing_fields_and_duplicates_are_logged(self):
        provisioning.provision_students([account('dup@x.edu', 'R1')])
        logs = provisioning.provision_students([
            {'email': 'nofields@x.edu'},
            account('dup@x.edu', 'R5'),
            account('sameroll@x.edu', 'R1'),
            'not-an-object',
        ])
        self.assertEqual(len(logs), 4)
        self.assertTrue(logs[0].startswith('nofields@x.edu: Missing field(s): password'))
        self.assertEqual(logs[1], 'dup@x.edu: A user with this email address has already been registered.')
        self.assertEqual(logs[2], f'sameroll@x.edu: Roll "R1" already exists in {Department.COMPUTER_SCIENCE}.')
        self.assertEqual(logs[3], 'not-an-object: Entry must be an object.')
        self.assertFalse(get_user_model().objects.filter(email='sameroll@x.edu').exists())

    def test_email_race_is_not_reported_as_duplicate_roll(self):
        User = get_user_model()

        def concurrent_signup(sender, instance, **kwargs):
            # bulk_create sends no signals, so this does not recurse
            if instance.pk is None and instance.username == 'race@x.edu':
                User.objects.bulk_create([User(username='race@x.edu', email='other@x.edu')])

        pre_save.connect(concurrent_signup, sender=User)
        try:
            logs = provisioning.provision_students([account('race@x.edu', 'R40')])
        finally:
            pre_save.disconnect(concurrent_signup, sender=User)

        self.assertEqual(len(logs), 1)
        self.assertTrue(logs[0].startswith('race@x.edu: '))
        self.assertNotIn('Roll', logs[0])
        self.assertFalse(Profile.objects.filter(roll='R40').exists())

    def test_parse_batch_requires_json_array(self):
        self.assertEqual(provisioning.parse_batch(b'[]'), [])
        for raw in (b'{"email": "a@x.edu"}', b'not json', b'\xff\xfe'):
            with self.assertRaises(BatchEnvelopeError):
                provisioning.parse_batch(raw)


class BulkCreateUsersApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        admin = get_user_model().objects.create_user(username='admin', password='pw', is_staff=True)
        self.client.force_authenticate(user=admin)

    def upload(self, content):
        return self.client.post(
            '/api/accounts/bulk-create-users/',
            {'file': SimpleUploadedFile('students.json', content, content_type='application/json')},
            format='multipart',
        )

    def test_returns_logs(self):
        resp = self.upload(json.dumps([account('a@x.edu', 'R1'), account('bad', 'R2')]).encode())
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['logs'], ['Created: a@x.edu', 'bad: Enter a valid email address.'])

    def test_invalid_envelope_is_400(self):
        resp = self.upload(b'{oops')
        self.assertEqual(resp.status_code, 400)
        self.assertIn('error', resp.data)

    def test_missing_file_is_400(self):
        resp = self.client.post('/api/accounts/bulk-create-users/', {}, format='multipart')
        self.assertEqual(resp.status_code, 400)

    def test_non_admin_is_forbidden(self):
        user = get_user_model().objects.create_user(username='someone', password='pw')
        self.client.force_authenticate(user=user)
        self.assertEqual(self.upload(b'[]').status_code, 403)


class ProvisionStudentsCommandTests(TestCase):
    def write_batch(self, content):
        fd, path = tempfile.mkstemp(suffix='.json')
        with os.fdopen(fd, 'w') as fh:
            fh.write(content)
        self.addCleanup(os.remove, path)
        return path

    def test_command_creates_accounts(self):
        path = self.write_batch(json.dumps([account('cmd@x.edu', 'R7'), account('bad', 'R8')]))
        out = StringIO()
        call_command('provision_students', file=path, stdout=out)
        self.assertIn('Created: cmd@x.edu', out.getvalue())
        self.assertIn('Created: 1, Errors: 1', out.getvalue())
        self.assertTrue(Profile.objects.filter(user__email='cmd@x.edu').exists())

    def test_command_rejects_bad_file(self):
        with self.assertRaises(CommandError):
            call_command('provision_students', file=self.write_batch('{}'), stdout=StringIO())
        with self.assertRaises(CommandError):
            call_command('provision_students', file='/nonexistent/students.json', stdout=StringIO())
