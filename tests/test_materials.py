# test_materials.py
import dataclasses

import pytest

from heatequation.exceptions import InvalidParameterError
from heatequation.model.materials import COPPER, PRESET_MATERIALS, Material, get_material


def test_diffusivity_of_copper():
    assert COPPER.diffusivity == pytest.approx(389.0 / (8940.0 * 380.0))
    assert COPPER.volumetric_heat_capacity == pytest.approx(8940.0 * 380.0)


def test_material_is_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        COPPER.conductivity = 1.0


@pytest.mark.parametrize(
    "prop, value",
    [
        ("conductivity", 0.0),
        ("density", -1.0),
        ("specific_heat", float("nan")),
        ("conductivity", float("inf")),
        ("density", "heavy"),
        ("specific_heat", True),
    ],
)
def test_invalid_properties_raise(prop, value):
    params = dict(conductivity=1.0, density=1.0, specific_heat=1.0)
    params[prop] = value

    with pytest.raises(InvalidParameterError, match=prop):
        Material(**params)


def test_preset_lookup_is_case_insensitive():
    assert get_material("copper") is COPPER
    assert get_material("  COPPER ") is COPPER
    assert set(PRESET_MATERIALS) == {"copper", "iron", "glass", "polystyrene"}


def test_unknown_preset_raises():
    with pytest.raises(InvalidParameterError, match="Unknown material"):
        get_material("unobtainium")


def test_dict_round_trip():
    data = get_material("glass").to_dict()

    assert data == {"conductivity": 1.2, "density": 2530.0, "specific_heat": 840.0, "name": "Glass"}
    assert Material.from_dict(data) == get_material("glass")


def test_from_dict_missing_property_raises():
    with pytest.raises(InvalidParameterError, match="density"):
        Material.from_dict({"conductivity": 1.0, "specific_heat": 1.0})
