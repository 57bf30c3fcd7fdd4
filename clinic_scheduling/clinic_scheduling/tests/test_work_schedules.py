"""
Tests for scheduling/work_schedules.py
"""

import unittest
from datetime import date, timedelta

from clinic_scheduling.clinic_scheduling.scheduling.work_schedules import (
	Vacation,
	WorkBreak,
	WorkSchedule,
	find_vacation,
	schedules_for_day,
	weekday_name,
)


class TestWorkSchedule(unittest.TestCase):

	def test_normalizes_values(self):
		schedule = WorkSchedule(
			weekday="monday",
			start_time=timedelta(hours=9),
			end_time="14:00:00",
			breaks=[WorkBreak(start_time="11:00", end_time="11:30")],
			buffer_minutes=None
		)

		self.assertEqual(schedule.weekday, "Monday")
		self.assertEqual((schedule.start_time, schedule.end_time), ("09:00", "14:00"))
		self.assertIsInstance(schedule.breaks, tuple)
		self.assertEqual(schedule.buffer_minutes, 0)

	def test_invalid_values_rejected(self):
		cases = [
			{"weekday": "Lunes"},
			{"start_time": "14:00", "end_time": "09:00"},
			{"end_time": None},
			{"buffer_minutes": -5},
		]
		for case in cases:
			values = {"weekday": "Monday", "start_time": "09:00", "end_time": "14:00"}
			values.update(case)
			with self.subTest(case=case):
				with self.assertRaises(ValueError):
					WorkSchedule(**values)

	def test_active_breaks(self):
		lunch = WorkBreak(start_time="13:00", end_time="14:00")
		coffee = WorkBreak(start_time="10:00", end_time="10:15", is_active=False)
		schedule = WorkSchedule(weekday="Monday", start_time="09:00", end_time="18:00", breaks=(lunch, coffee))

		self.assertEqual(schedule.active_breaks(), [lunch])

	def test_break_contains_is_half_open(self):
		lunch = WorkBreak(start_time="13:00", end_time="14:00")

		self.assertTrue(lunch.contains("13:00"))
		self.assertFalse(lunch.contains("14:00"))

	def test_reversed_break_rejected(self):
		with self.assertRaises(ValueError):
			WorkBreak(start_time="14:00", end_time="13:00")


class TestVacation(unittest.TestCase):

	def test_covers_both_ends(self):
		vacation = Vacation(start_date="2024-08-01", end_date=date(2024, 8, 15))

		self.assertTrue(vacation.covers("2024-08-01"))
		self.assertTrue(vacation.covers("2024-08-15"))
		self.assertFalse(vacation.covers("2024-08-16"))

	def test_only_approved_vacations_cover(self):
		vacation = Vacation(start_date="2024-08-01", end_date="2024-08-15", status="rejected")
		self.assertIsNone(find_vacation("2024-08-05", [vacation]))

	def test_status_is_case_insensitive(self):
		vacation = Vacation(start_date="2024-08-01", end_date="2024-08-15", status="Approved")
		self.assertEqual(find_vacation("2024-08-05", [vacation]), vacation)

	def test_reversed_dates_rejected(self):
		with self.assertRaises(ValueError):
			Vacation(start_date="2024-08-15", end_date="2024-08-01")


class TestSchedulesForDay(unittest.TestCase):

	def test_weekday_name(self):
		self.assertEqual(weekday_name("2024-06-10"), "Monday")
		self.assertEqual(weekday_name(date(2024, 6, 16)), "Sunday")

	def test_no_active_schedule_means_no_restriction(self):
		inactive = WorkSchedule(weekday="Monday", start_time="09:00", end_time="14:00", is_active=False)

		self.assertIsNone(schedules_for_day("2024-06-10", []))
		self.assertIsNone(schedules_for_day("2024-06-10", [inactive]))

	def test_day_not_worked(self):
		tuesday = WorkSchedule(weekday="Tuesday", start_time="09:00", end_time="14:00")
		self.assertEqual(schedules_for_day("2024-06-10", [tuesday]), [])

	def test_sorted_by_start(self):
		afternoon = WorkSchedule(weekday="Monday", start_time="16:00", end_time="20:00")
		morning = WorkSchedule(weekday="Monday", start_time="09:00", end_time="14:00")

		self.assertEqual(schedules_for_day("2024-06-10", [afternoon, morning]), [morning, afternoon])


if __name__ == "__main__":
	unittest.main()
