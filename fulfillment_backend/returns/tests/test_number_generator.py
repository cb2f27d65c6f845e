# returns/tests/test_number_generator.py

from __future__ import annotations

from unittest import mock

from django.test import SimpleTestCase, override_settings

from returns.services.exceptions import NumberGenerationExhaustedError
from returns.services.number_generator import generate_number


class NumberGeneratorTests(SimpleTestCase):
    def test_format_is_prefix_plus_nine_digits(self):
        number = generate_number(prefix="RA", exists=lambda candidate: False)

        self.assertRegex(number, r"^RA\d{9}$")

    def test_taken_candidates_are_skipped(self):
        exists = mock.Mock(side_effect=[True, True, False])

        number = generate_number(prefix="RA", exists=exists, max_attempts=5)

        self.assertEqual(exists.call_count, 3)
        self.assertEqual(exists.call_args.args[0], number)

    def test_exhaustion_raises(self):
        exists = mock.Mock(return_value=True)

        with self.assertRaises(NumberGenerationExhaustedError):
            generate_number(prefix="RA", exists=exists, max_attempts=3)

        self.assertEqual(exists.call_count, 3)

    @override_settings(NUMBER_GENERATION_MAX_ATTEMPTS=2)
    def test_attempt_budget_comes_from_settings(self):
        exists = mock.Mock(return_value=True)

        with self.assertRaises(NumberGenerationExhaustedError):
            generate_number(prefix="RI", exists=exists)

        self.assertEqual(exists.call_count, 2)

    def test_invalid_budget_is_rejected(self):
        with self.assertRaises(ValueError):
            generate_number(prefix="RA", exists=lambda c: False, max_attempts=0)
