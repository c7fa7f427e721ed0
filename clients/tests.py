"""Clients app tests."""

from django.test import SimpleTestCase, TestCase

from clients.models import Client
from clients.phones import normalize_phone


class PhoneNormalizationTests(SimpleTestCase):
	def test_local_number_uses_default_region(self):
		self.assertEqual(normalize_phone('010 1234 5678', region='EG'), '+201012345678')

	def test_international_prefixes(self):
		self.assertEqual(normalize_phone('+20 10-1234-5678'), '+201012345678')
		self.assertEqual(normalize_phone('0020 10 1234 5678'), '+201012345678')

	def test_unparseable_falls_back_to_digits(self):
		self.assertEqual(normalize_phone('ext. 12-34'), '1234')
		self.assertEqual(normalize_phone(''), '')


class ClientModelTests(TestCase):
	def test_save_normalizes_phone(self):
		client = Client.objects.create(name='Luxor Press', phone='010 1234 5678')
		self.assertEqual(client.normalized_phone, '+201012345678')

		client.phone = '+20 11 2345 6789'
		client.save(update_fields=['phone'])
		client.refresh_from_db()
		self.assertEqual(client.normalized_phone, '+201123456789')

	def test_snapshot(self):
		client = Client(name='Aswan Signs', phone='0100', factory_name='Aswan')
		self.assertEqual(client.snapshot(), {'name': 'Aswan Signs', 'phone': '0100', 'factory_name': 'Aswan'})
