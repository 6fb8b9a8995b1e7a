"""
Transport cost estimation.

Pure, deterministic cost model used when a company submits a transport
request. The result is stored on the request and never recomputed.
"""

import math

from transport_admin.app.models.transport_request_enums import QuantityUnit, Urgency


# unit -> (threshold, rate above breakpoint, rate at or below breakpoint)
BASE_RATES = {
    QuantityUnit.LITERS: (10000, 2.5, 3.0),
    QuantityUnit.TONS: (20, 150.0, 180.0),
    QuantityUnit.BARRELS: (100, 25.0, 30.0),
}

URGENCY_MULTIPLIERS = {
    Urgency.LOW: 0.8,
    Urgency.MEDIUM: 1.0,
    Urgency.HIGH: 1.3,
    Urgency.URGENT: 1.8,
}

VEHICLE_MULTIPLIERS = {
    "Hazardous Material Truck": 1.5,
    "Refrigerated Truck": 1.3,
}

TEMPERATURE_CONTROL_MULTIPLIER = 1.2
HAZARDOUS_MATERIAL_MULTIPLIER = 1.4
INSURANCE_MULTIPLIER = 1.1


def base_rate(quantity: float, quantity_unit: QuantityUnit) -> float:
    """Per-unit rate; bulk quantities above the unit's breakpoint get the lower rate."""
    threshold, bulk_rate, standard_rate = BASE_RATES[QuantityUnit(quantity_unit)]
    return bulk_rate if quantity > threshold else standard_rate


def vehicle_multiplier(vehicle_type) -> float:
    return VEHICLE_MULTIPLIERS.get(vehicle_type, 1.0)


def special_requirements_multiplier(
    temperature_control: bool,
    hazardous_material: bool,
    insurance_required: bool,
) -> float:
    return (
        (TEMPERATURE_CONTROL_MULTIPLIER if temperature_control else 1.0)
        * (HAZARDOUS_MATERIAL_MULTIPLIER if hazardous_material else 1.0)
        * (INSURANCE_MULTIPLIER if insurance_required else 1.0)
    )


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def estimate_cost(
    quantity: float,
    quantity_unit: QuantityUnit,
    urgency: Urgency,
    vehicle_type=None,
    temperature_control: bool = False,
    hazardous_material: bool = False,
    insurance_required: bool = False,
) -> int:
    """
    Estimate the cost of moving `quantity` units of material.

    cost = quantity * base rate * urgency * vehicle * special requirements,
    rounded half up to a whole amount.

    Example:
        >>> estimate_cost(12000, "liters", "urgent", "Refrigerated Truck", True, False, True)
        92664
    """
    raw = (
        quantity
        * base_rate(quantity, quantity_unit)
        * URGENCY_MULTIPLIERS[Urgency(urgency)]
        * vehicle_multiplier(vehicle_type)
        * special_requirements_multiplier(temperature_control, hazardous_material, insurance_required)
    )
    return round_half_up(raw)
