import pytest

from palm.units import convert_water, format_water_amount, from_fluid_ounces, to_fluid_ounces


def test_liters_and_milliliters_agree():
    """Test 2 L and 2000 mL reach the same fluid-ounce value"""
    assert to_fluid_ounces(2, 'LITERS') == pytest.approx(to_fluid_ounces(2000, 'MILLILITERS'), abs=1e-6)


def test_glasses_and_cups_are_eight_ounces():
    """Test glass and cup conversion"""
    assert to_fluid_ounces(3, 'GLASSES') == 24
    assert to_fluid_ounces(1, 'CUPS') == 8
    assert from_fluid_ounces(16, 'CUPS') == 2


def test_convert_water_round_trip():
    """Test converting between metric and imperial units"""
    assert convert_water(1, 'LITERS', 'MILLILITERS') == pytest.approx(1000)
    assert convert_water(64, 'FLUID_OUNCES', 'GLASSES') == 8


def test_invalid_unit_raises():
    """Test unknown units raise ValueError"""
    with pytest.raises(ValueError):
        to_fluid_ounces(1, 'GALLONS')


def test_format_water_amount():
    """Test short unit labels"""
    assert format_water_amount(2.04, 'LITERS') == '2.0 L'
    assert format_water_amount(8, 'FLUID_OUNCES') == '8 fl oz'
