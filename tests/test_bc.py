# test_bc.py
import pytest

from heatequation.exceptions import InvalidParameterError
from heatequation.model.bc import (
    BoundaryCondition,
    BoundaryConditions1D,
    BoundaryConditions2D,
    BoundaryKind,
)


def test_defaults_are_dirichlet_at_initial_temperature():
    bc = BoundaryConditions2D().resolved(13.0)

    for edge in (bc.left, bc.right, bc.bottom, bc.top):
        assert edge.is_dirichlet
        assert edge.value == 13.0


def test_resolved_keeps_explicit_values_and_neumann():
    bc = BoundaryConditions1D(left=BoundaryCondition.neumann(), right=BoundaryCondition.dirichlet(2.5))

    resolved = bc.resolved(13.0)

    assert resolved.left.kind == BoundaryKind.NEUMANN
    assert resolved.left.value is None
    assert resolved.right.value == 2.5


def test_mixed_layouts():
    bar = BoundaryConditions1D.mixed_layout()
    plate = BoundaryConditions2D.mixed_layout()

    assert not bar.left.is_dirichlet and bar.right.is_dirichlet
    assert [e.is_dirichlet for e in plate.x_edges] == [False, True]
    assert [e.is_dirichlet for e in plate.y_edges] == [False, True]


def test_non_finite_value_raises():
    with pytest.raises(InvalidParameterError):
        BoundaryCondition.dirichlet(float("nan"))


def test_dict_round_trip():
    bc = BoundaryConditions2D(
        left=BoundaryCondition.neumann(),
        right=BoundaryCondition.dirichlet(1.0),
        bottom=BoundaryCondition.dirichlet(),
        top=BoundaryCondition.dirichlet(-4.0),
    )

    assert BoundaryConditions2D.from_dict(bc.to_dict()) == bc


def test_unknown_kind_raises():
    with pytest.raises(InvalidParameterError):
        BoundaryCondition.from_dict({"kind": "robin", "value": 1.0})


def test_kind_given_as_string_is_coerced():
    bc = BoundaryCondition(kind="neumann")

    assert bc.kind is BoundaryKind.NEUMANN
    assert not bc.is_dirichlet


def test_misspelt_kind_raises():
    with pytest.raises(InvalidParameterError, match="dirchlet"):
        BoundaryCondition(kind="dirchlet", value=5.0)


@pytest.mark.parametrize("value", ["5", True, [1.0]])
def test_non_numeric_value_raises(value):
    with pytest.raises(InvalidParameterError, match="must be a number"):
        BoundaryCondition.dirichlet(value)


def test_integer_value_is_stored_as_float():
    bc = BoundaryCondition.dirichlet(20)

    assert bc.value == 20.0
    assert isinstance(bc.value, float)


def test_solver_rejects_misspelt_boundary_from_dict():
    with pytest.raises(InvalidParameterError):
        BoundaryConditions1D.from_dict({"left": {"kind": "dirchlet", "value": 5.0}})
