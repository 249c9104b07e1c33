"""Unit tests for shared input validation rules."""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase

from shared.domain.validators import (
    format_phone_number,
    get_full_phone_number,
    is_valid_email,
    is_valid_phone,
    is_valid_traveler_age,
    validate_phone_for_country,
    validate_phone_number,
    validate_traveler_age,
)


class EmailRuleTests(SimpleTestCase):
    def test_accepts_regular_addresses(self) -> None:
        for value in ("asha@example.com", "a.b+tag@mail.co.in", "x@y.z"):
            with self.subTest(value=value):
                self.assertTrue(is_valid_email(value))

    def test_rejects_malformed_addresses(self) -> None:
        for value in ("", "plain", "no-at.example.com", "a@b", "a b@c.com", "a@b c.com", None):
            with self.subTest(value=value):
                self.assertFalse(is_valid_email(value))


class PhoneRuleTests(SimpleTestCase):
    def test_generic_rule_counts_digits(self) -> None:
        self.assertTrue(is_valid_phone("9876543210"))
        self.assertTrue(is_valid_phone("+91 98765-43210"))
        self.assertTrue(is_valid_phone("(201) 555-0123"))
        self.assertFalse(is_valid_phone("12345"))
        self.assertFalse(is_valid_phone("+91 98765 43210 1234"))
        self.assertFalse(is_valid_phone("98765abc10"))

    def test_country_rules(self) -> None:
        self.assertTrue(validate_phone_for_country("98765 43210", "IN"))
        self.assertTrue(validate_phone_for_country("+91 98765 43210", "IN"))
        self.assertFalse(validate_phone_for_country("5876543210", "IN"))
        self.assertTrue(validate_phone_for_country("(201) 555-0123", "US"))
        self.assertTrue(validate_phone_for_country("8123 4567", "SG"))
        self.assertFalse(validate_phone_for_country("7123 4567", "SG"))
        self.assertTrue(validate_phone_for_country("50 123 4567", "AE"))
        self.assertFalse(validate_phone_for_country("9876543210", "ZZ"))

    def test_formatting(self) -> None:
        self.assertEqual(format_phone_number("9876543210", "IN"), "98765 43210")
        self.assertEqual(format_phone_number("2015550123", "US"), "(201) 555-0123")
        self.assertEqual(format_phone_number("8123-4567", "SG"), "81234567")
        self.assertEqual(get_full_phone_number("98765 43210", "IN"), "+919876543210")
        self.assertEqual(get_full_phone_number("12345", "ZZ"), "12345")

    def test_django_validator_raises(self) -> None:
        with self.assertRaises(ValidationError):
            validate_phone_number("123")


class TravelerAgeTests(SimpleTestCase):
    def test_bounds_are_inclusive(self) -> None:
        self.assertTrue(is_valid_traveler_age(1))
        self.assertTrue(is_valid_traveler_age(120))
        self.assertFalse(is_valid_traveler_age(0))
        self.assertFalse(is_valid_traveler_age(121))

    def test_non_integers_are_rejected(self) -> None:
        for value in ("30", 30.5, None, True):
            with self.subTest(value=value):
                self.assertFalse(is_valid_traveler_age(value))

    def test_django_validator_raises(self) -> None:
        with self.assertRaises(ValidationError):
            validate_traveler_age(0)
