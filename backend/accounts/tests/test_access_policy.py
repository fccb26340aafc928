from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase

from accounts import access_policy
from accounts.models import Role
from accounts.tests.helpers import make_profile


class EvaluateTests(SimpleTestCase):
    roles = {1: Role.STUDENT, 2: Role.HOD, 3: Role.GUARD}

    def decide(self, path, user_id):
        return access_policy.evaluate(path, user_id, self.roles.get)

    def test_policy_table(self):
        cases = [
            ('/student/dashboard', None, '/login'),
            ('/hod', None, '/login'),
            ('/student/dashboard', 1, None),
            ('/student/dashboard', 2, '/hod/dashboard'),
            ('/hod/students', 3, '/guard/scanner'),
            ('/guard/scanner', 1, '/student/dashboard'),
            ('/guard/scanner', 3, None),
            ('/hod/dashboard', 99, '/login'),
            ('/login', None, None),
            ('/students-info', None, None),
            ('/api/gatepasses/my/', None, None),
        ]
        for path, user_id, expected in cases:
            decision = self.decide(path, user_id)
            self.assertEqual(decision.redirect_to, expected, (path, user_id))
            self.assertEqual(decision.allowed, expected is None, (path, user_id))

    def test_custom_landing_routes(self):
        decision = access_policy.evaluate('/student/x', 2, self.roles.get, landing_routes={Role.HOD: '/hod/home'})
        self.assertEqual(decision.redirect_to, '/hod/home')


class RolePolicyMiddlewareTests(TestCase):
    def redirect_target(self, path):
        resp = self.client.get(path)
        self.assertEqual(resp.status_code, 302, path)
        return resp['Location']

    def test_anonymous_caller_goes_to_login(self):
        self.assertEqual(self.redirect_target('/hod/x'), '/login')

    def test_wrong_role_goes_to_own_landing(self):
        guard = make_profile('gatekeeper', Role.GUARD)
        self.client.force_login(guard.user)
        self.assertEqual(self.redirect_target('/student/foo'), '/guard/scanner')

    def test_account_without_profile_goes_to_login(self):
        user = get_user_model().objects.create_user(username='orphan', password='pw')
        self.client.force_login(user)
        self.assertEqual(self.redirect_target('/guard/scanner'), '/login')

    def test_ungated_paths_pass_through(self):
        resp = self.client.get('/nothing-here/')
        self.assertEqual(resp.status_code, 404)
