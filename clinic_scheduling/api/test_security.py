"""
Tests for api/security.py

Run with: bench --site <site> run-tests --module clinic_scheduling.api.test_security
"""

from unittest.mock import patch

import frappe
from frappe.tests.utils import FrappeTestCase

from clinic_scheduling.api import security


class TestRateLimit(FrappeTestCase):

	def setUp(self):
		frappe.local.request_ip = "203.0.113.7"
		self.cache_key = "rate_limit:clinic_scheduling:lookup_client:203.0.113.7"
		frappe.cache.delete_value(self.cache_key)

	def tearDown(self):
		frappe.cache.delete_value(self.cache_key)

	def test_limit_per_endpoint(self):
		limit, _seconds = security.RATE_LIMITS["lookup_client"]

		for _i in range(limit):
			security.check_rate_limit("lookup_client")

		with self.assertRaises(frappe.TooManyRequestsError):
			security.check_rate_limit("lookup_client")

	def test_site_config_override(self):
		conf = frappe._dict(clinic_scheduling_rate_limits={"lookup_client": [1, 60]})

		with patch.object(security.frappe, "conf", conf):
			security.check_rate_limit("lookup_client")

			with self.assertRaises(frappe.TooManyRequestsError):
				security.check_rate_limit("lookup_client")

	def test_unknown_endpoint(self):
		with self.assertRaises(KeyError):
			security.check_rate_limit("delete_everything")


class TestInputValidation(FrappeTestCase):

	def test_validate_date(self):
		self.assertEqual(security.validate_date(" 2030-06-10 "), "2030-06-10")

		for value in ("", "10/06/2030", "2030-02-30", "2030-06-10; DROP TABLE"):
			with self.subTest(value=value):
				with self.assertRaises(frappe.ValidationError):
					security.validate_date(value)

	def test_validate_time(self):
		self.assertEqual(security.validate_time("9:05"), "09:05")
		self.assertEqual(security.validate_time("09:05:30"), "09:05")

		for value in ("", "25:00", "24:00", "09:60", "nueve"):
			with self.subTest(value=value):
				with self.assertRaises(frappe.ValidationError):
					security.validate_time(value)

	def test_validate_duration(self):
		self.assertEqual(security.validate_duration("45"), 45)

		for value in (0, -15, security.MAX_DURATION_MINUTES + 1, "abc"):
			with self.subTest(value=value):
				with self.assertRaises(frappe.ValidationError):
					security.validate_duration(value)

	def test_validate_link_requires_existing_record(self):
		with patch.object(security.frappe.db, "exists", return_value=False):
			with self.assertRaises(frappe.DoesNotExistError):
				security.validate_link("Clinic Organization", "Clinica Fantasma", "organization")

	def test_validate_link_accepts_existing_record(self):
		with patch.object(security.frappe.db, "exists", return_value=True) as exists:
			name = security.validate_link("Clinic Professional", " Dra. O'Neil ", "professional")

		self.assertEqual(name, "Dra. O'Neil")
		exists.assert_called_once_with("Clinic Professional", "Dra. O'Neil")

	def test_validate_link_rejects_empty_and_long_names(self):
		for value in ("", None, "x" * 141):
			with self.subTest(value=value):
				with self.assertRaises(frappe.ValidationError):
					security.validate_link("Clinic Organization", value, "organization")

	def test_clean_phone_input(self):
		self.assertEqual(security.clean_phone_input("  612\x00 345 678\n"), "612 345 678")
		self.assertEqual(len(security.clean_phone_input("6" * 100)), security.PHONE_MAX_LENGTH)

		with self.assertRaises(frappe.ValidationError):
			security.clean_phone_input("")
