import json

from django.test import Client, TestCase

from orders.models import Order, OrderNotification
from orders.services import OrderStatusService
from orders.utils import generate_reference
from payments.exceptions import AccessDenied, InvalidTransition, StateConflict, ValidationError
from payments.tests.helpers import make_order, make_product, make_user
from products.models import Product


class OrderTransitionTests(TestCase):

    def setUp(self):
        self.buyer = make_user('buyer')
        self.seller = make_user('seller')
        self.product = make_product(seller=self.seller, product_type=Product.PHYSICAL, title='Headphones')
        self.order = make_order(self.product, buyer=self.buyer, status=Order.PROCESSING, tracking_number='TDW1')

    def test_shipped_then_delivered(self):
        order = OrderStatusService.transition(self.order, Order.SHIPPED)
        self.assertIsNotNone(order.shipped_at)
        order = OrderStatusService.transition(order, Order.DELIVERED)
        self.assertIsNotNone(order.delivered_at)

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.DELIVERED)
        titles = list(OrderNotification.objects.filter(user=self.buyer).values_list('title', flat=True))
        self.assertCountEqual(titles, ['Order Shipped', 'Order Delivered'])

    def test_shipped_message_has_tracking_number(self):
        OrderStatusService.transition(self.order, Order.SHIPPED)
        notification = OrderNotification.objects.get()
        self.assertEqual(notification.notification_type, OrderNotification.SHIPPED)
        self.assertIn('TDW1', notification.message)

    def test_no_going_back(self):
        OrderStatusService.transition(self.order, Order.SHIPPED)
        for status in (Order.PENDING, Order.PAID, Order.PROCESSING):
            with self.assertRaises(InvalidTransition):
                OrderStatusService.transition(self.order, status)
        self.assertEqual(Order.objects.get(pk=self.order.pk).status, Order.SHIPPED)

    def test_terminal_statuses(self):
        OrderStatusService.transition(self.order, Order.CANCELLED)
        self.assertTrue(self.order.is_terminal)
        with self.assertRaises(InvalidTransition):
            OrderStatusService.transition(self.order, Order.SHIPPED)
        self.assertEqual(OrderNotification.objects.get().title, 'Order Cancelled')

    def test_stale_order_is_a_conflict(self):
        stale = Order.objects.get(pk=self.order.pk)
        OrderStatusService.transition(self.order, Order.SHIPPED)

        with self.assertRaises(StateConflict):
            OrderStatusService.transition(stale, Order.CANCELLED)

        self.assertEqual(Order.objects.get(pk=self.order.pk).status, Order.SHIPPED)
        self.assertEqual(OrderNotification.objects.count(), 1)

    def test_paid_is_not_notified_by_transition(self):
        order = make_order(self.product, buyer=self.buyer)
        order = OrderStatusService.transition(order, Order.PAID)
        self.assertIsNotNone(order.paid_at)
        self.assertFalse(OrderNotification.objects.filter(order=order).exists())


class UpdateStatusPermissionTests(TestCase):

    def setUp(self):
        self.buyer = make_user('buyer')
        self.seller = make_user('seller')
        self.staff = make_user('admin', is_staff=True)
        product = make_product(seller=self.seller, product_type=Product.PHYSICAL, title='Headphones')
        self.order = make_order(product, buyer=self.buyer, status=Order.PROCESSING)

    def test_seller_can_ship(self):
        order = OrderStatusService.update_status(self.order, self.seller, Order.SHIPPED, tracking_number='TRK-9')
        self.assertEqual(order.status, Order.SHIPPED)
        self.assertEqual(Order.objects.get(pk=order.pk).tracking_number, 'TRK-9')

    def test_staff_can_cancel(self):
        order = OrderStatusService.update_status(self.order, self.staff, Order.CANCELLED)
        self.assertEqual(order.status, Order.CANCELLED)

    def test_buyer_cannot_change_status(self):
        with self.assertRaises(AccessDenied):
            OrderStatusService.update_status(self.order, self.buyer, Order.SHIPPED)

    def test_paid_cannot_be_set_by_hand(self):
        order = make_order(self.order.product, buyer=self.buyer)
        with self.assertRaises(ValidationError):
            OrderStatusService.update_status(order, self.staff, Order.PAID)

    def test_platform_product_needs_staff(self):
        product = make_product(product_type=Product.PHYSICAL, title='House Mug')
        order = make_order(product, buyer=self.buyer, status=Order.PROCESSING)
        with self.assertRaises(AccessDenied):
            OrderStatusService.update_status(order, self.seller, Order.SHIPPED)


class OrderViewsTests(TestCase):

    def setUp(self):
        self.client = Client()
        self.buyer = make_user('buyer')
        self.seller = make_user('seller')
        product = make_product(seller=self.seller, product_type=Product.PHYSICAL, title='Headphones')
        self.order = make_order(product, buyer=self.buyer, status=Order.PROCESSING)

    def _update(self, payload):
        return self.client.post(
            f'/orders/{self.order.id}/status/', data=json.dumps(payload), content_type='application/json')

    def test_anonymous(self):
        self.assertEqual(self._update({'status': Order.SHIPPED}).status_code, 401)

    def test_seller_ships(self):
        self.client.force_login(self.seller)
        response = self._update({'status': Order.SHIPPED, 'tracking_number': 'TRK-1'})

        self.assertEqual(response.status_code, 200)
        data = response.json()['order']
        self.assertEqual(data['status'], Order.SHIPPED)
        self.assertEqual(data['tracking_number'], 'TRK-1')
        self.assertIsNotNone(data['shipped_at'])

    def test_buyer_is_refused(self):
        self.client.force_login(self.buyer)
        response = self._update({'status': Order.SHIPPED})
        self.assertEqual(response.status_code, 403)

    def test_backwards_move_is_409(self):
        self.client.force_login(self.seller)
        self._update({'status': Order.SHIPPED})
        response = self._update({'status': Order.PROCESSING})
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['code'], 'invalid_transition')

    def test_unknown_order(self):
        self.client.force_login(self.seller)
        response = self.client.post('/orders/999999/status/', data='{}', content_type='application/json')
        self.assertEqual(response.status_code, 404)

    def test_notifications_inbox(self):
        OrderStatusService.transition(self.order, Order.SHIPPED)
        self.client.force_login(self.buyer)

        response = self.client.get('/orders/notifications/')
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['total_unread'], 1)
        notification_id = data['notifications'][0]['id']

        response = self.client.post(f'/orders/notifications/{notification_id}/read/')
        self.assertEqual(response.status_code, 200)
        self.assertTrue(OrderNotification.objects.get(pk=notification_id).is_read)

    def test_cannot_read_someone_elses_notification(self):
        OrderStatusService.transition(self.order, Order.SHIPPED)
        notification = OrderNotification.objects.get()
        self.client.force_login(self.seller)

        response = self.client.post(f'/orders/notifications/{notification.id}/read/')
        self.assertEqual(response.status_code, 404)
        self.assertFalse(OrderNotification.objects.get(pk=notification.id).is_read)


class ReferenceTests(TestCase):

    def test_reference_format(self):
        reference = generate_reference()
        self.assertTrue(reference.startswith('TDW'))
        self.assertEqual(len(reference), 3 + 13 + 5)
        self.assertTrue(reference[3:16].isdigit())

    def test_references_are_unique(self):
        self.assertEqual(len({generate_reference() for _ in range(200)}), 200)
