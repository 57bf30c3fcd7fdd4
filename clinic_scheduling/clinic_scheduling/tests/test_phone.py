"""
Tests for clients/phone.py

Tests normalization, comparison, display formatting and search variations.
"""

import unittest

from clinic_scheduling.clinic_scheduling.clients.phone import (
	format_phone,
	is_valid_phone,
	normalize_phone,
	phone_search_variations,
	phones_equal,
)


SAMPLE_PHONES = [
	"+34 612 34 56 78",
	"0034612345678",
	"34612345678",
	"612345678",
	"(612) 34-56-78",
	"0612345678",
	"+44 20 7946 0958",
	"+1 (555) 010-9999",
	"346123456",
	"+340034612345678",
	"+34346123456789",
	"",
	"abc",
	"+",
	"000",
]


class TestNormalizePhone(unittest.TestCase):

	def test_spanish_plus_prefix(self):
		"""Scenario: "+34 612 34 56 78" -> "612345678"."""
		self.assertEqual(normalize_phone("+34 612 34 56 78"), "612345678")

	def test_double_zero_prefix(self):
		self.assertEqual(normalize_phone("0034 612 345 678"), "612345678")

	def test_bare_country_code_followed_by_national_number(self):
		self.assertEqual(normalize_phone("34612345678"), "612345678")

	def test_national_number_starting_with_34_is_kept(self):
		self.assertEqual(normalize_phone("346123456"), "346123456")

	def test_strips_formatting_and_leading_zeros(self):
		self.assertEqual(normalize_phone("(0) 612-345-678"), "612345678")

	def test_other_countries_keep_plus(self):
		self.assertEqual(normalize_phone("+44 20 7946 0958"), "+442079460958")

	def test_empty_input(self):
		self.assertEqual(normalize_phone(""), "")
		self.assertEqual(normalize_phone(None), "")

	def test_idempotent(self):
		for phone in SAMPLE_PHONES:
			with self.subTest(phone=phone):
				once = normalize_phone(phone)
				self.assertEqual(normalize_phone(once), once)


class TestPhonesEqual(unittest.TestCase):

	def test_same_number_in_different_formats(self):
		self.assertTrue(phones_equal("+34 612 345 678", "612-34-56-78"))
		self.assertTrue(phones_equal("0034612345678", "34612345678"))

	def test_different_numbers(self):
		self.assertFalse(phones_equal("612345678", "612345679"))

	def test_short_numbers_never_equal(self):
		self.assertFalse(phones_equal("", ""))
		self.assertFalse(phones_equal("1234", "1234"))


class TestFormatPhone(unittest.TestCase):

	def test_groups_national_number(self):
		"""Scenario: "+34 612 34 56 78" -> "612 345 678"."""
		self.assertEqual(format_phone("+34 612 34 56 78"), "612 345 678")

	def test_returns_original_when_not_national(self):
		self.assertEqual(format_phone("+44 20 7946 0958"), "+44 20 7946 0958")
		self.assertEqual(format_phone("12345"), "12345")


class TestIsValidPhone(unittest.TestCase):

	def test_valid_numbers(self):
		self.assertTrue(is_valid_phone("612345678"))
		self.assertTrue(is_valid_phone("+34 612 34 56 78"))
		self.assertTrue(is_valid_phone("0044 20 7946 0958"))

	def test_too_short(self):
		self.assertFalse(is_valid_phone("61234567"))
		self.assertFalse(is_valid_phone(""))

	def test_too_long(self):
		self.assertFalse(is_valid_phone("1234567890123456"))

	def test_foreign_plus_is_not_all_digits(self):
		self.assertFalse(is_valid_phone("+44 20 7946 0958"))


class TestPhoneSearchVariations(unittest.TestCase):

	def test_national_number_variations_in_priority_order(self):
		self.assertEqual(
			phone_search_variations("+34 612 34 56 78"),
			["612345678", "+34612345678", "0034612345678", "34612345678"]
		)

	def test_non_national_number_single_variation(self):
		self.assertEqual(phone_search_variations("0044 20 7946 0958"), ["442079460958"])

	def test_fresh_list_each_call(self):
		first = phone_search_variations("612345678")
		first.append("mutated")
		self.assertEqual(len(phone_search_variations("612345678")), 4)

	def test_variations_normalize_back(self):
		for raw in ["612345678", "+34 612 34 56 78", "0034 712 345 678", "34912345678"]:
			with self.subTest(raw=raw):
				for variation in phone_search_variations(raw):
					self.assertEqual(normalize_phone(variation), normalize_phone(raw))


if __name__ == "__main__":
	unittest.main()
