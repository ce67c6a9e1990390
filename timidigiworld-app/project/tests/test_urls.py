from django.test import Client, TestCase
from django.urls import reverse


class UrlConfTests(TestCase):

    def setUp(self):
        self.client = Client()

    def test_no_diagnostic_route(self):
        self.assertEqual(self.client.get('/_urls_ok/').status_code, 404)

    def test_app_routes_are_mounted(self):
        self.assertEqual(reverse('fulfillment:redeem', args=['abc']), '/downloads/redeem/abc/')
        self.assertEqual(self.client.get('/accounts/payout-profile/').status_code, 401)
