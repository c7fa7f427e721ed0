"""Invoices app tests."""

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase, override_settings
from rest_framework.test import APIClient

from accounts.models import ADMIN, DESIGNER, FINANCIAL, RECEPTIONIST, WORKER
from clients.models import Client
from invoices.models import Invoice
from invoices.services import compute_invoice_totals, recalculate_invoice
from notifications.models import Notification
from orders.models import Order


class InvoiceTotalsTests(SimpleTestCase):
	def test_totals_from_orders_and_adjustments(self):
		totals = compute_invoice_totals(
			[(Decimal('100'), Decimal('50')), (Decimal('200'), Decimal('50'))],
			tax=Decimal('10'),
			shipping=Decimal('5'),
			discount=Decimal('15'),
		)
		self.assertEqual(totals.subtotal, Decimal('300'))
		self.assertEqual(totals.total, Decimal('300'))
		self.assertEqual(totals.total_remaining, Decimal('200'))

	def test_empty_invoice_is_adjustments_only(self):
		totals = compute_invoice_totals([], tax=Decimal('10'), shipping=None, discount=Decimal('4'))
		self.assertEqual(totals.subtotal, Decimal('0'))
		self.assertEqual(totals.total, Decimal('6'))
		self.assertEqual(totals.total_remaining, Decimal('6'))

	def test_missing_amounts_count_as_zero(self):
		totals = compute_invoice_totals([(None, None), (Decimal('40'), None)])
		self.assertEqual(totals.subtotal, Decimal('40'))
		self.assertEqual(totals.total_remaining, Decimal('40'))


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class InvoiceApiTests(TestCase):
	@classmethod
	def setUpTestData(cls):
		User = get_user_model()
		cls.admin = User.objects.create_user(username='inv_admin', password='12345678', role=ADMIN)
		cls.designer = User.objects.create_user(username='inv_designer', password='12345678', role=DESIGNER)
		cls.worker = User.objects.create_user(username='inv_worker', password='12345678', role=WORKER)
		cls.financial = User.objects.create_user(username='inv_finance', password='12345678', role=FINANCIAL)
		cls.receptionist = User.objects.create_user(username='inv_reception', password='12345678', role=RECEPTIONIST)

		cls.client_a = Client.objects.create(name='Delta Packaging', phone='01011112222', factory_name='Delta')
		cls.client_b = Client.objects.create(name='Cairo Labels', phone='01033334444')

	def api(self, user):
		client = APIClient()
		client.force_authenticate(user=user)
		return client

	def make_invoice(self, **fields):
		invoice = Invoice(created_by=self.admin, **fields)
		invoice.apply_client_snapshot(self.client_a)
		invoice.save()
		return invoice

	def add_order(self, invoice, total, deposit):
		order = Order(
			client=invoice.client,
			invoice=invoice,
			type='Manual',
			total_price=Decimal(total),
			deposit=Decimal(deposit),
			remaining_amount=Decimal(total) - Decimal(deposit),
		)
		order.apply_client_snapshot(invoice)
		order.save()
		return order

	def test_recalculate_is_idempotent(self):
		invoice = self.make_invoice(tax=Decimal('10'), shipping=Decimal('5'), discount=Decimal('15'))
		self.add_order(invoice, '100', '50')
		self.add_order(invoice, '200', '50')

		first = recalculate_invoice(invoice)
		second = recalculate_invoice(invoice)
		self.assertEqual(first, second)

		invoice.refresh_from_db()
		self.assertEqual(invoice.subtotal, Decimal('300'))
		self.assertEqual(invoice.total, Decimal('300'))
		self.assertEqual(invoice.total_remaining, Decimal('200'))

	def test_admin_create_keeps_financial_fields(self):
		res = self.api(self.admin).post(
			'/api/invoices/',
			data={'client': self.client_a.id, 'tax': '10', 'shipping': '5', 'discount': '3'},
			format='json',
		)
		self.assertEqual(res.status_code, 201)
		self.assertEqual(Decimal(res.data['total']), Decimal('12'))
		self.assertEqual(res.data['client_name'], 'Delta Packaging')
		self.assertEqual(res.data['orders'], [])

	def test_non_admin_create_drops_financial_fields(self):
		res = self.api(self.designer).post(
			'/api/invoices/',
			data={'client': self.client_a.id, 'tax': '10', 'shipping': '5'},
			format='json',
		)
		self.assertEqual(res.status_code, 201)
		invoice = Invoice.objects.get(pk=res.data['id'])
		self.assertEqual(invoice.tax, Decimal('0'))
		self.assertEqual(invoice.shipping, Decimal('0'))
		self.assertEqual(invoice.created_by, self.designer)

	def test_receptionist_cannot_create(self):
		res = self.api(self.receptionist).post('/api/invoices/', data={'client': self.client_a.id}, format='json')
		self.assertEqual(res.status_code, 403)

	def test_retrieve_recomputes_totals(self):
		invoice = self.make_invoice()
		self.add_order(invoice, '100', '30')
		Invoice.objects.filter(pk=invoice.pk).update(subtotal=Decimal('999'))

		res = self.api(self.financial).get(f'/api/invoices/{invoice.id}/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(Decimal(res.data['subtotal']), Decimal('100'))
		self.assertEqual(Decimal(res.data['total_remaining']), Decimal('70'))
		self.assertEqual(len(res.data['orders']), 1)

	def test_admin_update_financials_recomputes(self):
		invoice = self.make_invoice()
		self.add_order(invoice, '100', '0')
		res = self.api(self.admin).patch(f'/api/invoices/{invoice.id}/', data={'discount': '20'}, format='json')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(Decimal(res.data['total']), Decimal('80'))

	def test_staff_update_ignores_financial_fields(self):
		invoice = self.make_invoice()
		res = self.api(self.worker).patch(
			f'/api/invoices/{invoice.id}/',
			data={'status': 'sent', 'tax': '50'},
			format='json',
		)
		self.assertEqual(res.status_code, 200)
		invoice.refresh_from_db()
		self.assertEqual(invoice.status, Invoice.SENT)
		self.assertEqual(invoice.tax, Decimal('0'))

	def test_non_admin_client_change_forbidden(self):
		invoice = self.make_invoice()
		res = self.api(self.designer).patch(
			f'/api/invoices/{invoice.id}/', data={'client': self.client_b.id}, format='json',
		)
		self.assertEqual(res.status_code, 403)
		invoice.refresh_from_db()
		self.assertEqual(invoice.client, self.client_a)

	def test_admin_client_change_refreshes_snapshot(self):
		invoice = self.make_invoice()
		res = self.api(self.admin).patch(
			f'/api/invoices/{invoice.id}/', data={'client': self.client_b.id}, format='json',
		)
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['client_name'], 'Cairo Labels')
		self.assertEqual(res.data['client_factory_name'], '')

	def test_delete_cascades_orders(self):
		invoice = self.make_invoice()
		self.add_order(invoice, '100', '0')
		self.add_order(invoice, '50', '0')

		res = self.api(self.designer).delete(f'/api/invoices/{invoice.id}/')
		self.assertEqual(res.status_code, 403)

		with self.captureOnCommitCallbacks(execute=True):
			res = self.api(self.admin).delete(f'/api/invoices/{invoice.id}/')
		self.assertEqual(res.status_code, 200)
		self.assertFalse(Invoice.objects.filter(pk=invoice.pk).exists())
		self.assertEqual(Order.objects.filter(invoice_id=invoice.pk).count(), 0)
		self.assertTrue(Notification.objects.filter(title='Invoice deleted', user=self.financial).exists())

	def test_list_filters_by_status(self):
		self.make_invoice()
		paid = self.make_invoice(status=Invoice.PAID)
		res = self.api(self.receptionist).get('/api/invoices/', {'status': 'paid'})
		self.assertEqual(res.status_code, 200)
		self.assertEqual([row['id'] for row in res.data['results']], [paid.id])

	def test_stats_admin_only(self):
		invoice = self.make_invoice()
		self.add_order(invoice, '120', '0')
		recalculate_invoice(invoice)

		self.assertEqual(self.api(self.financial).get('/api/invoices/stats/').status_code, 403)
		res = self.api(self.admin).get('/api/invoices/stats/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['total_invoices'], 1)
		self.assertEqual(res.data['total_revenue'], Decimal('120'))
