"""
Tests for scheduling/frappe_store.py

Database reads are mocked; the tests check how rows are turned into
scheduling values and how bad rows are reported.
Run with: bench --site <site> run-tests --module clinic_scheduling.clinic_scheduling.scheduling.test_frappe_store
"""

from datetime import timedelta
from unittest.mock import patch

import frappe
from frappe.tests.utils import FrappeTestCase

from clinic_scheduling.clinic_scheduling.scheduling import frappe_store
from clinic_scheduling.clinic_scheduling.scheduling.frappe_store import FrappeSchedulingStore
from clinic_scheduling.clinic_scheduling.scheduling.store import StoreError


def row(**values):
	return frappe._dict(values)


class TestFrappeSchedulingStore(FrappeTestCase):

	def setUp(self):
		self.store = FrappeSchedulingStore()
		self.log_error = patch.object(frappe_store.frappe, "log_error")
		self.log_error.start()

	def tearDown(self):
		self.log_error.stop()

	def test_settings_with_closing_before_opening_raise_store_error(self):
		values = row(opens_at=None, closes_at="07:00:00", timezone="Europe/Madrid")

		with patch.object(frappe_store.frappe.db, "get_value", return_value=values):
			with self.assertRaises(StoreError):
				self.store.get_settings("Clinica Norte")

	def test_settings_from_organization(self):
		values = row(opens_at=timedelta(hours=9), closes_at=timedelta(hours=17), timezone="Europe/Madrid")

		with patch.object(frappe_store.frappe.db, "get_value", return_value=values):
			settings = self.store.get_settings("Clinica Norte")

		self.assertEqual((settings.default_opens, settings.default_closes), ("09:00", "17:00"))

	def test_appointments_carry_professional_email(self):
		rows = [row(
			name="APT-0001",
			start_time=timedelta(hours=9),
			end_time=timedelta(hours=9, minutes=30),
			status="confirmed",
			client_name="Ana García",
			professional_name=None
		)]

		with patch.object(frappe_store.frappe, "get_all", return_value=rows), \
				patch.object(frappe_store.frappe.db, "get_value", return_value="lopez@clinica.example") as get_value:
			appointments = self.store.get_appointments("Clinica Norte", "PROF-0001", "2030-06-10")

		get_value.assert_called_once_with("Clinic Professional", "PROF-0001", "email")
		self.assertEqual(appointments[0]["professional_email"], "lopez@clinica.example")
		self.assertNotEqual(appointments[0]["professional_email"], "PROF-0001")

	def test_reversed_work_schedule_raises_store_error(self):
		schedules = [row(name="WS-0001", weekday="Monday", start_time="14:00:00", end_time="09:00:00", buffer_minutes=0)]

		with patch.object(frappe_store.frappe, "get_all", side_effect=[schedules, []]):
			with self.assertRaises(StoreError):
				self.store.get_work_schedules("Clinica Norte", "PROF-0001")

	def test_work_schedules_with_breaks(self):
		schedules = [row(name="WS-0001", weekday="Monday", start_time="09:00:00", end_time="14:00:00", buffer_minutes=10)]
		breaks = [row(parent="WS-0001", start_time="11:00:00", end_time="11:30:00", is_active=1)]

		with patch.object(frappe_store.frappe, "get_all", side_effect=[schedules, breaks]):
			result = self.store.get_work_schedules("Clinica Norte", "PROF-0001")

		self.assertEqual(len(result), 1)
		self.assertEqual(result[0].buffer_minutes, 10)
		self.assertEqual(result[0].breaks[0].start_time, "11:00")

	def test_query_failure_raises_store_error(self):
		with patch.object(frappe_store.frappe, "get_all", side_effect=Exception("gone away")):
			with self.assertRaises(StoreError):
				self.store.get_vacations("Clinica Norte", "PROF-0001", "2030-06-10")
