from decimal import Decimal
from unittest import mock

from django.test import TestCase

from accounts.models import BankAccount
from orders.models import Order, OrderNotification
from payments.exceptions import OrderNotFound, StateConflict
from payments.models import PaymentSplit
from payments.services.paystack import paystack_service
from payments.services.settlement import SettlementService
from payments.tests.helpers import add_bank_account, make_order, make_product, make_user


class GatewayMocksMixin:

    def mock_gateway(self, transfer=(True, {'reference': None, 'transfer_code': 'TRF_1', 'status': 'success'})):
        patches = {
            'resolve_account': mock.patch.object(
                paystack_service, 'resolve_account',
                return_value=(True, {'account_name': 'ADA SELLER', 'account_number': '0123456789'})),
            'create_transfer_recipient': mock.patch.object(
                paystack_service, 'create_transfer_recipient',
                return_value=(True, {'recipient_code': 'RCP_seller'})),
            'initiate_transfer': mock.patch.object(
                paystack_service, 'initiate_transfer', return_value=transfer),
        }
        mocks = {}
        for name, patcher in patches.items():
            mocks[name] = patcher.start()
            self.addCleanup(patcher.stop)
        return mocks


class SettlementTests(GatewayMocksMixin, TestCase):

    def setUp(self):
        self.seller = make_user('seller')
        self.buyer = make_user('buyer')
        self.product = make_product(seller=self.seller, price='10.00')
        self.order = make_order(self.product, buyer=self.buyer, status=Order.PAID, exchange_rate='1600')

    def _seller_notifications(self):
        return OrderNotification.objects.filter(user=self.seller)

    def test_missing_bank_details_defers_payout(self):
        mocks = self.mock_gateway()

        split = SettlementService.process_order(self.order)

        self.assertTrue(split.platform_paid)
        self.assertFalse(split.seller_paid)
        self.assertEqual(split.platform_amount, Decimal('2.50'))
        self.assertEqual(split.seller_amount, Decimal('7.50'))
        self.assertTrue(split.is_balanced)
        self.assertIn('bancaires', split.payout_error)
        mocks['initiate_transfer'].assert_not_called()

        notification = self._seller_notifications().get()
        self.assertEqual(notification.title, 'Payment Pending')
        self.assertIn('7.50', notification.message)

    def test_rerun_without_details_does_not_notify_again(self):
        self.mock_gateway()
        SettlementService.process_order(self.order)
        SettlementService.process_order(self.order)

        self.assertEqual(PaymentSplit.objects.count(), 1)
        self.assertEqual(self._seller_notifications().count(), 1)

    def test_payout_after_details_are_added(self):
        mocks = self.mock_gateway()
        first = SettlementService.process_order(self.order)
        add_bank_account(self.seller)

        split = SettlementService.process_order(self.order.id)

        self.assertEqual(split.pk, first.pk)
        self.assertEqual(PaymentSplit.objects.count(), 1)
        self.assertTrue(split.seller_paid)
        self.assertEqual(split.seller_reference, f"SELLER_{split.id}")
        self.assertIsNotNone(split.seller_paid_at)
        self.assertIsNone(split.payout_error)
        self.assertEqual(split.payout_attempts, 1)

        kwargs = mocks['initiate_transfer'].call_args[1]
        self.assertEqual(kwargs['amount'], 1200000)
        self.assertEqual(kwargs['recipient_code'], 'RCP_seller')
        self.assertEqual(kwargs['reference'], f"SELLER_{split.id}")

        self.assertEqual(BankAccount.objects.get().recipient_code, 'RCP_seller')
        titles = list(self._seller_notifications().values_list('title', flat=True))
        self.assertCountEqual(titles, ['Payment Pending', 'Payment Received'])

    def test_paid_split_is_left_alone(self):
        mocks = self.mock_gateway()
        add_bank_account(self.seller)
        SettlementService.process_order(self.order)
        SettlementService.process_order(self.order)

        self.assertEqual(mocks['initiate_transfer'].call_count, 1)
        self.assertEqual(self._seller_notifications().count(), 1)

    def test_recipient_code_is_reused(self):
        mocks = self.mock_gateway()
        add_bank_account(self.seller)
        SettlementService.process_order(self.order)
        other = make_order(self.product, buyer=self.buyer, status=Order.PAID)

        SettlementService.process_order(other)

        self.assertEqual(mocks['create_transfer_recipient'].call_count, 1)
        self.assertEqual(mocks['initiate_transfer'].call_count, 2)

    def test_bank_name_from_gateway_wins(self):
        mocks = self.mock_gateway()
        add_bank_account(self.seller, account_name='ADA S.', recipient_code='RCP_old')

        SettlementService.process_order(self.order)

        bank_account = BankAccount.objects.get()
        self.assertEqual(bank_account.account_name, 'ADA SELLER')
        self.assertEqual(bank_account.recipient_code, 'RCP_seller')
        self.assertEqual(mocks['create_transfer_recipient'].call_args[1]['name'], 'ADA SELLER')

    def test_transfer_failure_keeps_platform_share(self):
        self.mock_gateway(transfer=(False, {'error': 'Insufficient balance'}))
        add_bank_account(self.seller)

        split = SettlementService.process_order(self.order)

        self.assertTrue(split.platform_paid)
        self.assertFalse(split.seller_paid)
        self.assertIn('Insufficient balance', split.payout_error)
        self.assertEqual(split.payout_attempts, 1)
        self.assertFalse(self._seller_notifications().filter(title='Payment Received').exists())

    def test_subaccount_order_is_already_split(self):
        mocks = self.mock_gateway()
        order = make_order(self.product, buyer=self.buyer, status=Order.PAID, gateway_subaccount='ACCT_seller')

        split = SettlementService.process_order(order)

        self.assertTrue(split.seller_paid)
        self.assertEqual(split.seller_reference, f"PAYSTACK_SPLIT_{order.id}")
        mocks['initiate_transfer'].assert_not_called()
        self.assertEqual(self._seller_notifications().get().title, 'Payment Received')

    def test_platform_product(self):
        mocks = self.mock_gateway()
        product = make_product(price='10.00', title='House Template')
        order = make_order(product, buyer=self.buyer, status=Order.COMPLETED)

        split = SettlementService.process_order(order)

        self.assertTrue(split.platform_paid)
        self.assertTrue(split.seller_paid)
        self.assertEqual(split.platform_amount, Decimal('0.00'))
        self.assertEqual(split.seller_amount, Decimal('10.00'))
        self.assertEqual(split.seller_reference, 'PLATFORM_OWNED')
        mocks['resolve_account'].assert_not_called()
        self.assertFalse(OrderNotification.objects.exists())

    def test_pending_order_cannot_be_settled(self):
        order = make_order(self.product, buyer=self.buyer)
        with self.assertRaises(StateConflict):
            SettlementService.process_order(order)
        self.assertFalse(PaymentSplit.objects.exists())

    def test_unknown_order(self):
        with self.assertRaises(OrderNotFound):
            SettlementService.process_order(999999)


class RetryPendingPayoutsTests(GatewayMocksMixin, TestCase):

    def setUp(self):
        self.seller = make_user('seller')
        self.other_seller = make_user('other')
        self.buyer = make_user('buyer')
        product = make_product(seller=self.seller, price='10.00')
        other_product = make_product(seller=self.other_seller, price='40.00', title='Course')
        self.mocks = self.mock_gateway()
        for order in (
            make_order(product, buyer=self.buyer, status=Order.PAID),
            make_order(product, buyer=self.buyer, status=Order.COMPLETED),
            make_order(other_product, buyer=self.buyer, status=Order.PAID),
        ):
            SettlementService.process_order(order)

    def test_pending_total(self):
        pending = SettlementService.pending_payout_total(self.seller)
        self.assertEqual(pending['count'], 2)
        self.assertEqual(pending['amount'], Decimal('15.00'))

    def test_retry_for_one_seller(self):
        add_bank_account(self.seller)
        add_bank_account(self.other_seller, account_number='9876543210')

        splits = SettlementService.retry_pending_payouts(seller=self.seller)

        self.assertEqual(len(splits), 2)
        self.assertTrue(all(split.seller_paid for split in splits))
        self.assertEqual(PaymentSplit.objects.filter(seller_paid=False).count(), 1)
        pending = SettlementService.pending_payout_total(self.seller)
        self.assertEqual(pending['count'], 0)
        self.assertEqual(str(pending['amount']), '0.00')

    def test_retry_everyone(self):
        add_bank_account(self.seller)

        splits = SettlementService.retry_pending_payouts()

        self.assertEqual(len(splits), 3)
        self.assertEqual(sum(1 for split in splits if split.seller_paid), 2)


class TransferStatusTests(GatewayMocksMixin, TestCase):

    def setUp(self):
        self.seller = make_user('seller')
        self.buyer = make_user('buyer')
        self.product = make_product(seller=self.seller, price='10.00')
        self.order = make_order(self.product, buyer=self.buyer, status=Order.PAID)
        add_bank_account(self.seller)

    def _transfer(self, status):
        return (True, {'reference': None, 'transfer_code': 'TRF_1', 'status': status})

    def _received(self):
        return OrderNotification.objects.filter(user=self.seller, title='Payment Received')

    def test_success_pays_seller(self):
        self.mock_gateway(transfer=self._transfer('success'))

        split = SettlementService.process_order(self.order)

        self.assertTrue(split.seller_paid)
        self.assertEqual(split.transfer_status, 'success')
        self.assertEqual(split.transfer_reference, f"SELLER_{split.id}")
        self.assertEqual(self._received().count(), 1)

    def test_otp_defers_payout(self):
        self.mock_gateway(transfer=self._transfer('otp'))

        split = SettlementService.process_order(self.order)

        self.assertFalse(split.seller_paid)
        self.assertIsNone(split.seller_paid_at)
        self.assertEqual(split.transfer_status, 'otp')
        self.assertIn('OTP', split.payout_error)
        self.assertFalse(self._received().exists())
        self.assertEqual(SettlementService.pending_payout_total(self.seller)['count'], 1)

    def test_pending_defers_payout(self):
        self.mock_gateway(transfer=self._transfer('pending'))

        split = SettlementService.process_order(self.order)

        self.assertFalse(split.seller_paid)
        self.assertEqual(split.transfer_status, 'pending')
        self.assertIn('pending', split.payout_error)
        self.assertFalse(self._received().exists())

    def test_rerun_follows_transfer_in_flight(self):
        mocks = self.mock_gateway(transfer=self._transfer('otp'))
        split = SettlementService.process_order(self.order)

        with mock.patch.object(paystack_service, 'verify_transfer',
                               return_value=(True, {'reference': split.transfer_reference, 'status': 'otp'})) as verify:
            split = SettlementService.process_order(self.order)

        verify.assert_called_once_with(f"SELLER_{split.id}")
        self.assertEqual(mocks['initiate_transfer'].call_count, 1)
        self.assertFalse(split.seller_paid)
        self.assertIn('OTP', split.payout_error)

    def test_rerun_pays_once_transfer_succeeded(self):
        mocks = self.mock_gateway(transfer=self._transfer('pending'))
        SettlementService.process_order(self.order)

        with mock.patch.object(paystack_service, 'verify_transfer',
                               return_value=(True, {'status': 'success'})):
            split = SettlementService.process_order(self.order)

        self.assertTrue(split.seller_paid)
        self.assertEqual(split.seller_reference, f"SELLER_{split.id}")
        self.assertIsNone(split.payout_error)
        self.assertEqual(mocks['initiate_transfer'].call_count, 1)
        self.assertEqual(self._received().count(), 1)

    def test_unreachable_gateway_keeps_transfer_pending(self):
        mocks = self.mock_gateway(transfer=self._transfer('pending'))
        SettlementService.process_order(self.order)

        with mock.patch.object(paystack_service, 'verify_transfer',
                               return_value=(False, {'error': 'timeout'})):
            split = SettlementService.process_order(self.order)

        self.assertFalse(split.seller_paid)
        self.assertEqual(split.transfer_status, 'pending')
        self.assertEqual(mocks['initiate_transfer'].call_count, 1)

    def test_failed_transfer_is_replaced_with_new_reference(self):
        mocks = self.mock_gateway(transfer=self._transfer('pending'))
        SettlementService.process_order(self.order)

        mocks['initiate_transfer'].return_value = self._transfer('success')
        with mock.patch.object(paystack_service, 'verify_transfer',
                               return_value=(True, {'status': 'failed'})):
            split = SettlementService.process_order(self.order)

        self.assertTrue(split.seller_paid)
        self.assertEqual(split.payout_attempts, 2)
        self.assertEqual(mocks['initiate_transfer'].call_count, 2)
        self.assertEqual(mocks['initiate_transfer'].call_args[1]['reference'], f"SELLER_{split.id}_2")
        self.assertEqual(split.seller_reference, f"SELLER_{split.id}_2")

    def test_transfer_success_event(self):
        self.mock_gateway(transfer=self._transfer('otp'))
        split = SettlementService.process_order(self.order)

        updated = SettlementService.apply_transfer_event(split.transfer_reference, 'success')

        self.assertTrue(updated.seller_paid)
        self.assertEqual(updated.seller_reference, f"SELLER_{split.id}")
        self.assertEqual(self._received().count(), 1)

        SettlementService.apply_transfer_event(split.transfer_reference, 'success')
        self.assertEqual(self._received().count(), 1)

    def test_transfer_reversed_event(self):
        self.mock_gateway(transfer=self._transfer('pending'))
        split = SettlementService.process_order(self.order)

        updated = SettlementService.apply_transfer_event(split.transfer_reference, 'reversed')

        self.assertFalse(updated.seller_paid)
        self.assertIsNone(updated.transfer_reference)
        self.assertEqual(updated.transfer_status, 'reversed')
        self.assertIn('reversed', updated.payout_error)

    def test_unknown_transfer_event(self):
        self.assertIsNone(SettlementService.apply_transfer_event('SELLER_404', 'success'))
