import json
from decimal import Decimal
from unittest import mock

from django.test import Client, TestCase

from accounts.models import BankAccount, Profile
from accounts.services import PayoutProfileService, resolve_contact_email
from orders.models import Order
from payments.exceptions import GatewayError, ValidationError
from payments.models import PaymentSplit
from payments.services.paystack import paystack_service
from payments.services.settlement import SettlementService
from payments.tests.helpers import make_order, make_product, make_user

RESOLVED = (True, {'account_name': 'ADA SELLER', 'account_number': '0123456789'})


class PayoutProfileServiceTests(TestCase):

    def setUp(self):
        self.seller = make_user('seller')

    def test_account_name_comes_from_gateway(self):
        with mock.patch.object(paystack_service, 'resolve_account', return_value=RESOLVED) as resolve:
            bank_account = PayoutProfileService.verify_and_save(
                self.seller, bank_name='Access Bank', bank_code='044', account_number='0123456789')

        resolve.assert_called_once_with('0123456789', '044')
        self.assertEqual(bank_account.account_name, 'ADA SELLER')
        self.assertIsNotNone(bank_account.verified_at)
        self.assertTrue(bank_account.is_complete())
        self.assertEqual(Profile.objects.get(user=self.seller).status, Profile.vendor)

    def test_account_number_format(self):
        with mock.patch.object(paystack_service, 'resolve_account') as resolve:
            for number in ('12345', '01234567890', '01234abcde', ''):
                with self.assertRaises(ValidationError):
                    PayoutProfileService.verify_and_save(
                        self.seller, bank_name='Access Bank', bank_code='044', account_number=number)
        resolve.assert_not_called()

    def test_unknown_account(self):
        with mock.patch.object(paystack_service, 'resolve_account',
                               return_value=(False, {'error': 'Could not resolve', 'status_code': 422})):
            with self.assertRaises(ValidationError):
                PayoutProfileService.verify_and_save(
                    self.seller, bank_name='Access Bank', bank_code='044', account_number='0123456789')
        self.assertFalse(BankAccount.objects.exists())

    def test_gateway_down(self):
        with mock.patch.object(paystack_service, 'resolve_account',
                               return_value=(False, {'error': 'timeout', 'status_code': None})):
            with self.assertRaises(GatewayError):
                PayoutProfileService.verify_and_save(
                    self.seller, bank_name='Access Bank', bank_code='044', account_number='0123456789')

    def test_subaccount_uses_commission_rate(self):
        with mock.patch.object(paystack_service, 'resolve_account', return_value=RESOLVED), \
                mock.patch.object(paystack_service, 'create_subaccount',
                                  return_value=(True, {'subaccount_code': 'ACCT_1'})) as create:
            bank_account = PayoutProfileService.verify_and_save(
                self.seller, bank_name='Access Bank', bank_code='044', account_number='0123456789',
                create_subaccount=True)

        self.assertEqual(bank_account.subaccount_code, 'ACCT_1')
        self.assertEqual(create.call_args[1]['percentage_charge'], Decimal('25'))

    def test_clear(self):
        with mock.patch.object(paystack_service, 'resolve_account', return_value=RESOLVED):
            PayoutProfileService.verify_and_save(
                self.seller, bank_name='Access Bank', bank_code='044', account_number='0123456789')

        self.assertTrue(PayoutProfileService.clear(self.seller))

        bank_account = BankAccount.objects.get()
        for field in ('bank_name', 'bank_code', 'account_number', 'account_name',
                      'subaccount_code', 'recipient_code', 'verified_at'):
            self.assertIsNone(getattr(bank_account, field))
        self.assertFalse(bank_account.is_complete())


class ResolveContactEmailTests(TestCase):

    def test_priority(self):
        user = make_user('buyer', email='account@example.com')
        user.profile.email = 'profile@example.com'
        user.profile.save()

        self.assertEqual(resolve_contact_email(user, 'explicit@example.com'), 'explicit@example.com')
        self.assertEqual(resolve_contact_email(user), 'account@example.com')
        user.email = ''
        self.assertEqual(resolve_contact_email(user), 'profile@example.com')
        self.assertIsNone(resolve_contact_email(None))


class PayoutProfileViewTests(TestCase):

    def setUp(self):
        self.client = Client()
        self.seller = make_user('seller')
        self.product = make_product(seller=self.seller, price='10.00')

    def _post(self, payload):
        return self.client.post(
            '/accounts/payout-profile/', data=json.dumps(payload), content_type='application/json')

    def test_anonymous(self):
        self.assertEqual(self.client.get('/accounts/payout-profile/').status_code, 401)

    def test_no_pending_payouts(self):
        self.client.force_login(self.seller)

        pending = self.client.get('/accounts/payout-profile/').json()['pending_payouts']

        self.assertEqual(pending, {'count': 0, 'amount': '0.00'})

    def test_saving_details_releases_pending_payouts(self):
        order = make_order(self.product, buyer=make_user('buyer'), status=Order.COMPLETED)
        SettlementService.process_order(order)
        self.client.force_login(self.seller)

        pending = self.client.get('/accounts/payout-profile/').json()
        self.assertIsNone(pending['bank_account'])
        self.assertEqual(pending['pending_payouts'], {'count': 1, 'amount': '7.50'})

        with mock.patch.object(paystack_service, 'resolve_account', return_value=RESOLVED), \
                mock.patch.object(paystack_service, 'create_transfer_recipient',
                                  return_value=(True, {'recipient_code': 'RCP_1'})), \
                mock.patch.object(paystack_service, 'initiate_transfer',
                                  return_value=(True, {'reference': 'SELLER_X', 'status': 'success'})):
            response = self._post({
                'bank_name': 'Access Bank',
                'bank_code': '044',
                'account_number': '0123456789',
                'account_name': 'Somebody Else',
            })

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['payouts_released'], 1)
        self.assertEqual(data['bank_account']['account_name'], 'ADA SELLER')
        self.assertEqual(data['bank_account']['account_number'], '****6789')
        self.assertTrue(PaymentSplit.objects.get().seller_paid)

    def test_invalid_details(self):
        self.client.force_login(self.seller)
        with mock.patch.object(paystack_service, 'resolve_account',
                               return_value=(False, {'error': 'Could not resolve', 'status_code': 422})):
            response = self._post({'bank_name': 'Access Bank', 'bank_code': '044', 'account_number': '0123456789'})

        self.assertEqual(response.status_code, 400)
        self.assertFalse(BankAccount.objects.exists())

    def test_delete(self):
        self.client.force_login(self.seller)
        with mock.patch.object(paystack_service, 'resolve_account', return_value=RESOLVED):
            self._post({'bank_name': 'Access Bank', 'bank_code': '044', 'account_number': '0123456789'})

        response = self.client.delete('/accounts/payout-profile/')

        self.assertEqual(response.status_code, 200)
        self.assertIsNone(self.client.get('/accounts/payout-profile/').json()['bank_account'])
