"""Input validation rules shared by serializers and models.

The same rules run in the booking wizard on the client, so the backend
must accept exactly what the client accepts:

- e-mail: something@something.tld with no whitespace
- phone: digits with optional spaces, dashes, plus sign and parentheses,
  10 to 13 digits overall; per-country rules apply after the separators
  are stripped
- traveler age: whole years between 1 and 120
"""

from __future__ import annotations

import re
from typing import Any, NamedTuple

from django.core.exceptions import ValidationError  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_CHARS_RE = re.compile(r"^[\d\s\-\+\(\)]+$")
PHONE_SEPARATORS_RE = re.compile(r"[\s\-\(\)]")

PHONE_MIN_DIGITS = 10
PHONE_MAX_DIGITS = 13

TRAVELER_MIN_AGE = 1
TRAVELER_MAX_AGE = 120


class PhoneRule(NamedTuple):
    dial_code: str
    pattern: re.Pattern
    example: str


COUNTRY_PHONE_RULES: dict[str, PhoneRule] = {
    "IN": PhoneRule("+91", re.compile(r"^[6-9]\d{9}$"), "98765 43210"),
    "US": PhoneRule("+1", re.compile(r"^\d{10}$"), "(201) 555-0123"),
    "GB": PhoneRule("+44", re.compile(r"^[1-9]\d{9,10}$"), "7400 123456"),
    "AU": PhoneRule("+61", re.compile(r"^[4-5]\d{8}$"), "412 345 678"),
    "CA": PhoneRule("+1", re.compile(r"^\d{10}$"), "(204) 234-5678"),
    "AE": PhoneRule("+971", re.compile(r"^5[0-9]{8}$"), "50 123 4567"),
    "SG": PhoneRule("+65", re.compile(r"^[89]\d{7}$"), "8123 4567"),
    "MY": PhoneRule("+60", re.compile(r"^1[0-9]{8,9}$"), "12-345 6789"),
}


def is_valid_email(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    return bool(EMAIL_RE.match(value.strip()))


def is_valid_phone(value: Any) -> bool:
    """Generic phone check used when the country is unknown."""
    if not isinstance(value, str) or not PHONE_CHARS_RE.match(value):
        return False
    digits = sum(ch.isdigit() for ch in value)
    return PHONE_MIN_DIGITS <= digits <= PHONE_MAX_DIGITS


def _clean_number(value: str) -> str:
    return PHONE_SEPARATORS_RE.sub("", value)


def _national_number(value: str, rule: PhoneRule) -> str:
    cleaned = _clean_number(value)
    dial_digits = rule.dial_code.lstrip("+")
    if cleaned.startswith(rule.dial_code):
        return cleaned[len(rule.dial_code):]
    if cleaned.startswith(dial_digits) and not rule.pattern.match(cleaned):
        return cleaned[len(dial_digits):]
    return cleaned


def validate_phone_for_country(value: Any, country_code: str) -> bool:
    rule = COUNTRY_PHONE_RULES.get((country_code or "").upper())
    if rule is None or not isinstance(value, str):
        return False
    return bool(rule.pattern.match(_national_number(value, rule)))


def format_phone_number(value: str, country_code: str) -> str:
    code = (country_code or "").upper()
    rule = COUNTRY_PHONE_RULES.get(code)
    if rule is None:
        return value
    number = _national_number(value, rule)
    if code == "IN" and len(number) == 10:
        return f"{number[:5]} {number[5:]}"
    if code in ("US", "CA") and len(number) == 10:
        return f"({number[:3]}) {number[3:6]}-{number[6:]}"
    return number


def get_full_phone_number(value: str, country_code: str) -> str:
    rule = COUNTRY_PHONE_RULES.get((country_code or "").upper())
    if rule is None:
        return value
    return f"{rule.dial_code}{_national_number(value, rule)}"


def is_valid_traveler_age(value: Any) -> bool:
    # bool is an int subclass, but True is not an age
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return TRAVELER_MIN_AGE <= value <= TRAVELER_MAX_AGE


# --- Django validators ------------------------------------------------------

def validate_email_address(value: str) -> None:
    if not is_valid_email(value):
        raise ValidationError(_("Enter a valid email address."), code="invalid_email")


def validate_phone_number(value: str) -> None:
    if not is_valid_phone(value):
        raise ValidationError(
            _("Enter a valid phone number (10 to 13 digits)."),
            code="invalid_phone",
        )


def validate_traveler_age(value: int) -> None:
    if not is_valid_traveler_age(value):
        raise ValidationError(
            _("Age must be between %(min)s and %(max)s.")
            % {"min": TRAVELER_MIN_AGE, "max": TRAVELER_MAX_AGE},
            code="invalid_age",
        )
