# returns/tests/test_authorization_creation.py

from __future__ import annotations

import re
from decimal import Decimal
from unittest import mock

from django.core.exceptions import NON_FIELD_ERRORS, ValidationError
from django.db import IntegrityError
from django.test import TestCase, override_settings

from returns.models import ReturnAuthorization, ReturnItem
from returns.services.authorization_eligibility import (
    INVENTORY_UNIT_ALREADY_RETURNED,
    ITEMS_ALREADY_AWAITING_EXCHANGE,
    ORDER_MISSING_SHIPPED_UNITS,
    collect_creation_errors,
)
from returns.services.authorization_service import (
    create_return_authorization,
    register_customer_return,
    update_return_authorization,
)
from returns.services.exceptions import AuthorizationNumberCollisionError
from returns.tests.helpers import item_line, make_order, make_stock_location

RA_NUMBER = re.compile(r"^RA\d{9}$")


def _codes(exc: ValidationError, field: str) -> list[str]:
    return [e.code for e in exc.error_dict.get(field, [])]


@override_settings(EXPEDITED_EXCHANGES_ENABLED=False)
class ReturnAuthorizationCreationTests(TestCase):
    """
    GUARANTEES:
    - Creation rules block persistence (shipped units, exchange conflicts)
    - Numbers are unique RA + 9 digits, generated once
    - Aggregate read helpers are projections, recomputed on demand
    """

    def setUp(self):
        self.location = make_stock_location()
        self.order, self.units = make_order(shipped=3, unit_price="25.00")

    # =====================================================
    # CREATION RULES
    # =====================================================

    def test_order_without_shipped_units_is_rejected(self):
        order, units = make_order(shipped=0, on_hand=2)

        with self.assertRaises(ValidationError) as ctx:
            create_return_authorization(
                order=order,
                stock_location=self.location,
                items=[item_line(units[0])],
            )

        self.assertIn(ORDER_MISSING_SHIPPED_UNITS, _codes(ctx.exception, "order"))
        self.assertEqual(ReturnAuthorization.objects.count(), 0)
        self.assertEqual(ReturnItem.objects.count(), 0)

    def test_missing_order_is_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            create_return_authorization(order=None, stock_location=self.location)

        self.assertIn(ORDER_MISSING_SHIPPED_UNITS, _codes(ctx.exception, "order"))
        self.assertEqual(ReturnAuthorization.objects.count(), 0)

    def test_missing_stock_location_is_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            create_return_authorization(order=self.order, stock_location=None)

        self.assertIn("missing_stock_location", _codes(ctx.exception, "stock_location"))
        self.assertEqual(ReturnAuthorization.objects.count(), 0)

    def test_unit_already_awaiting_exchange_is_rejected(self):
        create_return_authorization(
            order=self.order,
            stock_location=self.location,
            items=[item_line(self.units[0], exchange_sku="SKU-0-BLUE")],
        )

        with self.assertRaises(ValidationError) as ctx:
            create_return_authorization(
                order=self.order,
                stock_location=self.location,
                items=[item_line(self.units[0]), item_line(self.units[1])],
            )

        self.assertIn(
            ITEMS_ALREADY_AWAITING_EXCHANGE,
            _codes(ctx.exception, NON_FIELD_ERRORS),
        )
        self.assertEqual(ReturnAuthorization.objects.count(), 1)

    def test_creation_checks_do_not_short_circuit(self):
        unit = mock.Mock(exchange_requested=True)

        errors = collect_creation_errors(order=None, inventory_units=[unit])

        self.assertEqual(errors["order"][0].code, ORDER_MISSING_SHIPPED_UNITS)
        self.assertEqual(
            errors[NON_FIELD_ERRORS][0].code, ITEMS_ALREADY_AWAITING_EXCHANGE
        )

    def test_unit_from_another_order_is_rejected(self):
        _, other_units = make_order(shipped=1)

        with self.assertRaises(ValidationError):
            create_return_authorization(
                order=self.order,
                stock_location=self.location,
                items=[item_line(other_units[0])],
            )

        self.assertEqual(ReturnAuthorization.objects.count(), 0)

    def test_duplicate_unit_is_rejected(self):
        with self.assertRaises(ValidationError):
            create_return_authorization(
                order=self.order,
                stock_location=self.location,
                items=[item_line(self.units[0]), item_line(self.units[0])],
            )

    def test_valid_creation_persists_items(self):
        result = create_return_authorization(
            order=self.order,
            stock_location=self.location,
            items=[item_line(self.units[0]), item_line(self.units[1], pre_tax_amount="10.00")],
            memo="  damaged in transit  ",
        )

        ra = result.authorization
        self.assertTrue(result.created)
        self.assertIsNone(result.reimbursement)
        self.assertEqual(ra.state, ReturnAuthorization.STATE_AUTHORIZED)
        self.assertEqual(ra.memo, "damaged in transit")
        self.assertEqual(ra.return_items.count(), 2)
        self.assertEqual(ra.inventory_units.count(), 2)

    # =====================================================
    # NUMBER GENERATION
    # =====================================================

    def test_numbers_are_unique_and_well_formed(self):
        numbers = []
        for _ in range(5):
            result = create_return_authorization(
                order=self.order,
                stock_location=self.location,
            )
            numbers.append(result.authorization.number)

        self.assertEqual(len(set(numbers)), 5)
        for number in numbers:
            self.assertRegex(number, RA_NUMBER)

    def test_number_is_never_regenerated(self):
        ra = create_return_authorization(
            order=self.order, stock_location=self.location
        ).authorization
        original = ra.number

        ra.memo = "updated"
        ra.save()
        ra.refresh_from_db()

        self.assertEqual(ra.number, original)

    def test_number_collision_at_commit_is_retryable_error(self):
        existing = create_return_authorization(
            order=self.order, stock_location=self.location
        ).authorization

        with mock.patch(
            "returns.models.return_authorization.generate_number",
            return_value=existing.number,
        ):
            with self.assertRaises(AuthorizationNumberCollisionError) as ctx:
                create_return_authorization(
                    order=self.order, stock_location=self.location
                )

        self.assertTrue(ctx.exception.retryable)
        self.assertEqual(ReturnAuthorization.objects.count(), 1)

    def test_other_integrity_errors_are_not_collisions(self):
        # Mentions the table and column but no stored number matches.
        error = IntegrityError(
            "UNIQUE constraint failed: returns_returnauthorization.number"
        )

        with mock.patch(
            "returns.services.authorization_service._create_return_items",
            side_effect=error,
        ):
            with self.assertRaises(IntegrityError) as ctx:
                create_return_authorization(
                    order=self.order, stock_location=self.location
                )

        self.assertNotIsInstance(ctx.exception, AuthorizationNumberCollisionError)
        self.assertEqual(ReturnAuthorization.objects.count(), 0)

    # =====================================================
    # READ HELPERS
    # =====================================================

    def test_pre_tax_total_tracks_added_and_removed_items(self):
        ra = create_return_authorization(
            order=self.order,
            stock_location=self.location,
            items=[item_line(self.units[0]), item_line(self.units[1], pre_tax_amount="30.00")],
        ).authorization

        self.assertEqual(ra.pre_tax_total, Decimal("55.00"))

        update_return_authorization(
            authorization=ra,
            add_items=[item_line(self.units[2], pre_tax_amount="5.50")],
        )
        self.assertEqual(ra.pre_tax_total, Decimal("60.50"))

        first = ra.return_items.get(inventory_unit=self.units[0])
        update_return_authorization(authorization=ra, remove_item_ids=[first.id])
        self.assertEqual(ra.pre_tax_total, Decimal("35.50"))

    def test_pre_tax_total_is_zero_without_items(self):
        ra = create_return_authorization(
            order=self.order, stock_location=self.location
        ).authorization

        self.assertEqual(ra.pre_tax_total, Decimal("0.00"))

    def test_unsaved_authorization_helpers(self):
        ra = ReturnAuthorization(order=self.order, stock_location=self.location)

        self.assertEqual(ra.pre_tax_total, Decimal("0.00"))
        self.assertTrue(ra.can_cancel_return_items())
        self.assertFalse(ra.has_customer_returned_items())

    def test_currency_comes_from_order(self):
        order, _ = make_order(currency="EUR")
        ra = create_return_authorization(
            order=order, stock_location=self.location
        ).authorization

        self.assertEqual(ra.currency, "EUR")

    @override_settings(DEFAULT_CURRENCY="GBP")
    def test_currency_falls_back_without_order(self):
        self.assertEqual(ReturnAuthorization().currency, "GBP")

    def test_refundable_amount_is_order_projection(self):
        order, _ = make_order(pre_tax_item_amount="100.00", promo_total="-10.00")
        ra = create_return_authorization(
            order=order, stock_location=self.location
        ).authorization

        self.assertEqual(ra.refundable_amount, Decimal("90.00"))

    def test_customer_returned_items(self):
        ra = create_return_authorization(
            order=self.order,
            stock_location=self.location,
            items=[item_line(self.units[0]), item_line(self.units[1])],
        ).authorization

        self.assertFalse(ra.has_customer_returned_items())

        customer_return = register_customer_return(
            stock_location=self.location,
            return_items=ra.return_items.filter(inventory_unit=self.units[0]),
        )

        self.assertTrue(ra.has_customer_returned_items())
        self.assertEqual(list(ra.customer_returns), [customer_return])
        self.assertTrue(customer_return.number.startswith("CR"))

    def test_deleting_authorization_deletes_items(self):
        ra = create_return_authorization(
            order=self.order,
            stock_location=self.location,
            items=[item_line(self.units[0])],
        ).authorization

        ra.delete()

        self.assertEqual(ReturnItem.objects.count(), 0)

    def test_canceled_authorization_cannot_be_updated(self):
        ra = create_return_authorization(
            order=self.order, stock_location=self.location
        ).authorization
        ra.state = ReturnAuthorization.STATE_CANCELED
        ra.save()

        with self.assertRaises(ValidationError):
            update_return_authorization(authorization=ra, memo="too late")

    # =====================================================
    # UPDATES
    # =====================================================

    def test_update_rejects_unit_already_on_authorization(self):
        ra = create_return_authorization(
            order=self.order,
            stock_location=self.location,
            items=[item_line(self.units[0])],
        ).authorization

        with self.assertRaises(ValidationError) as ctx:
            update_return_authorization(
                authorization=ra, add_items=[item_line(self.units[0])]
            )

        self.assertIn(
            INVENTORY_UNIT_ALREADY_RETURNED,
            _codes(ctx.exception, NON_FIELD_ERRORS),
        )
        self.assertEqual(ra.return_items.count(), 1)

    def test_update_rejects_unit_awaiting_exchange_elsewhere(self):
        create_return_authorization(
            order=self.order,
            stock_location=self.location,
            items=[item_line(self.units[0], exchange_sku="SKU-0-BLUE")],
        )
        ra = create_return_authorization(
            order=self.order,
            stock_location=self.location,
            items=[item_line(self.units[1])],
        ).authorization

        with self.assertRaises(ValidationError) as ctx:
            update_return_authorization(
                authorization=ra,
                memo="second try",
                add_items=[item_line(self.units[0], exchange_sku="SKU-0-RED")],
            )

        codes = _codes(ctx.exception, NON_FIELD_ERRORS)
        self.assertIn(ITEMS_ALREADY_AWAITING_EXCHANGE, codes)
        self.assertIn(INVENTORY_UNIT_ALREADY_RETURNED, codes)
        self.assertEqual(
            ReturnItem.objects.filter(inventory_unit=self.units[0]).count(), 1
        )
        self.assertEqual(ReturnAuthorization.objects.get(pk=ra.pk).memo, "")

    def test_removed_unit_can_be_added_back_in_same_update(self):
        ra = create_return_authorization(
            order=self.order,
            stock_location=self.location,
            items=[item_line(self.units[0])],
        ).authorization
        existing = ra.return_items.get()

        update_return_authorization(
            authorization=ra,
            remove_item_ids=[existing.id],
            add_items=[item_line(self.units[0], exchange_sku="SKU-0-GREEN")],
        )

        item = ra.return_items.get()
        self.assertNotEqual(item.id, existing.id)
        self.assertEqual(item.exchange_sku, "SKU-0-GREEN")
