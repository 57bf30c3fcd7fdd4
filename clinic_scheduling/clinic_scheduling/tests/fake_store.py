"""
In-memory SchedulingStore used by the unit tests.
"""

from clinic_scheduling.clinic_scheduling.scheduling.settings import SchedulingSettings
from clinic_scheduling.clinic_scheduling.scheduling.store import CANCELLED_STATUS, SchedulingStore, StoreError


class FakeSchedulingStore(SchedulingStore):

	def __init__(self, appointments=None, group_activities=None, special_days=None,
			clients=None, settings=None, fail=False, work_schedules=None, vacations=None):
		self.appointments = appointments or []
		self.group_activities = group_activities or []
		self.special_days = special_days or []
		self.clients = clients or []
		self.work_schedules = work_schedules or []
		self.vacations = vacations or []
		self.settings = settings or SchedulingSettings()
		self.fail = fail
		self.calls = []

	def get_appointments(self, organization_id, professional_id, date, exclude_id=None):
		self.calls.append(("get_appointments", organization_id, professional_id, date, exclude_id))
		return self._select(self.appointments, organization_id, professional_id, date, exclude_id)

	def get_group_activities(self, organization_id, professional_id, date, exclude_id=None):
		self.calls.append(("get_group_activities", organization_id, professional_id, date, exclude_id))
		return self._select(self.group_activities, organization_id, professional_id, date, exclude_id)

	def get_special_days(self, organization_id, professional_id=None):
		self.calls.append(("get_special_days", organization_id, professional_id))
		self._maybe_fail()
		return list(self.special_days)

	def get_work_schedules(self, organization_id, professional_id):
		self.calls.append(("get_work_schedules", organization_id, professional_id))
		self._maybe_fail()
		return list(self.work_schedules)

	def get_vacations(self, organization_id, professional_id, date):
		self.calls.append(("get_vacations", organization_id, professional_id, date))
		self._maybe_fail()
		return [v for v in self.vacations if v.covers(date)]

	def find_client_by_phone(self, organization_id, phone):
		self.calls.append(("find_client_by_phone", organization_id, phone))
		self._maybe_fail()
		for client in self.clients:
			if client["organization_id"] == organization_id and client["phone"] == phone:
				return client
		return None

	def get_settings(self, organization_id):
		self._maybe_fail()
		return self.settings

	def _select(self, rows, organization_id, professional_id, date, exclude_id):
		self._maybe_fail()
		return [
			row for row in rows
			if row.get("organization_id", 1) == organization_id
			and row.get("professional_id") == professional_id
			and row.get("date") == date
			and row.get("status") != CANCELLED_STATUS
			and (exclude_id is None or row.get("id") != exclude_id)
		]

	def _maybe_fail(self):
		if self.fail:
			raise StoreError("connection refused")


class LeakyStore(FakeSchedulingStore):
	"""Store that ignores exclusions and statuses, returning every row of the day."""

	def _select(self, rows, organization_id, professional_id, date, exclude_id):
		self._maybe_fail()
		return [row for row in rows if row.get("date") == date]
