"""Water unit conversion. Fluid ounces are the common base unit."""

WATER_UNITS = ('FLUID_OUNCES', 'GLASSES', 'CUPS', 'LITERS', 'MILLILITERS')

# Conversion rates to fluid ounces
WATER_UNIT_TO_FL_OZ = {
    'FLUID_OUNCES': 1,
    'GLASSES': 8,           # 1 glass = 8 fl oz
    'CUPS': 8,
    'LITERS': 33.814,
    'MILLILITERS': 0.033814,
}

WATER_UNIT_SHORT = {
    'FLUID_OUNCES': 'fl oz',
    'GLASSES': 'glasses',
    'CUPS': 'cups',
    'LITERS': 'L',
    'MILLILITERS': 'mL',
}

DEFAULT_DAILY_TARGET_FL_OZ = 64


def validate_unit(unit):
    if unit not in WATER_UNIT_TO_FL_OZ:
        raise ValueError(f"Invalid water unit: {unit}. Must be one of: {', '.join(WATER_UNITS)}")


def to_fluid_ounces(amount, unit):
    validate_unit(unit)
    return amount * WATER_UNIT_TO_FL_OZ[unit]


def from_fluid_ounces(fl_oz, target_unit):
    validate_unit(target_unit)
    return fl_oz / WATER_UNIT_TO_FL_OZ[target_unit]


def convert_water(amount, from_unit, to_unit):
    return from_fluid_ounces(to_fluid_ounces(amount, from_unit), to_unit)


def format_water_amount(amount, unit):
    return f"{round(amount, 1)} {WATER_UNIT_SHORT[unit]}"
