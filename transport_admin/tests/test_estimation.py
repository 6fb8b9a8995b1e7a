"""
Unit tests for the transport cost estimation engine.
"""

import pytest

from transport_admin.app.domain.pricing.estimation import (
    base_rate, estimate_cost, round_half_up, special_requirements_multiplier, vehicle_multiplier
)
from transport_admin.app.models.transport_request_enums import QuantityUnit, Urgency


@pytest.mark.parametrize("quantity, unit, expected", [
    (10000, QuantityUnit.LITERS, 3.0),
    (10001, QuantityUnit.LITERS, 2.5),
    (20, QuantityUnit.TONS, 180.0),
    (21, QuantityUnit.TONS, 150.0),
    (100, QuantityUnit.BARRELS, 30.0),
    (101, QuantityUnit.BARRELS, 25.0),
])
def test_base_rate_switches_above_breakpoint(quantity, unit, expected):
    """The bulk rate applies strictly above the unit's threshold."""
    assert base_rate(quantity, unit) == expected


def test_base_rate_accepts_wire_values():
    assert base_rate(5, "tons") == 180.0


def test_vehicle_multiplier_defaults_to_one():
    assert vehicle_multiplier("Hazardous Material Truck") == 1.5
    assert vehicle_multiplier("Refrigerated Truck") == 1.3
    assert vehicle_multiplier("Flatbed") == 1.0
    assert vehicle_multiplier(None) == 1.0


def test_special_requirements_compound():
    assert special_requirements_multiplier(False, False, False) == 1.0
    assert special_requirements_multiplier(True, True, True) == pytest.approx(1.2 * 1.4 * 1.1)


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.4999) == 2


# Scenario A
def test_estimate_refrigerated_urgent_liters():
    """12000 x 2.5 x 1.8 x 1.3 x 1.32"""
    cost = estimate_cost(
        quantity=12000,
        quantity_unit=QuantityUnit.LITERS,
        urgency=Urgency.URGENT,
        vehicle_type="Refrigerated Truck",
        temperature_control=True,
        hazardous_material=False,
        insurance_required=True,
    )
    assert cost == 92664


def test_estimate_plain_request():
    # 10 tons at 180, medium urgency, no multipliers
    assert estimate_cost(10, QuantityUnit.TONS, Urgency.MEDIUM) == 1800


def test_estimate_low_urgency_discount():
    assert estimate_cost(200, QuantityUnit.BARRELS, Urgency.LOW) == 4000


def test_estimate_is_deterministic():
    args = (160, QuantityUnit.BARRELS, Urgency.HIGH, "Hazardous Material Truck", False, True, False)
    assert estimate_cost(*args) == estimate_cost(*args)
    # 160 x 25 x 1.3 x 1.5 x 1.4
    assert estimate_cost(*args) == 10920
