import numpy as np
import pytest

from probability_navmesh.mesh_topology import TriangleIndexError
from probability_navmesh.probability_field import ProbabilityField


def test_starts_at_zero():
    field = ProbabilityField(4)
    assert len(field) == 4
    assert field.values.tolist() == [0.0, 0.0, 0.0, 0.0]


def test_initial_values_are_clamped():
    field = ProbabilityField(3, initial=[-0.5, 0.4, 1.7])
    assert field.values.tolist() == [0.0, 0.4, 1.0]


def test_initial_size_must_match():
    with pytest.raises(ValueError):
        ProbabilityField(3, initial=[0.1, 0.2])


@pytest.mark.parametrize("value, expected", [(-1.0, 0.0), (0.3, 0.3), (1.0, 1.0), (4.2, 1.0)])
def test_set_clamps(value, expected):
    field = ProbabilityField(2)
    field.set(1, value)
    assert field.get(1) == expected
    assert field[1] == expected


def test_set_all_and_reset():
    field = ProbabilityField(3)
    field.set_all(2.0)
    assert field.values.tolist() == [1.0, 1.0, 1.0]
    field.reset()
    assert field.values.tolist() == [0.5, 0.5, 0.5]


def test_nan_is_rejected():
    field = ProbabilityField(2)
    with pytest.raises(ValueError):
        field.set(0, float("nan"))
    with pytest.raises(ValueError):
        ProbabilityField(1, initial=[float("nan")])


@pytest.mark.parametrize("index", [-1, 3])
def test_out_of_range_access_fails(index):
    field = ProbabilityField(3)
    with pytest.raises(TriangleIndexError):
        field.get(index)
    with pytest.raises(TriangleIndexError):
        field.set(index, 0.5)


def test_argmax_prefers_earliest_on_ties():
    field = ProbabilityField(5, initial=[0.2, 0.7, 0.1, 0.7, 0.7])
    assert field.argmax() == 1


def test_argmax_of_uniform_field_is_first():
    field = ProbabilityField(3)
    field.reset()
    assert field.argmax() == 0


def test_argmax_of_empty_field_is_none():
    assert ProbabilityField(0).argmax() is None


def test_values_is_a_read_only_snapshot():
    field = ProbabilityField(2)
    snapshot = field.values
    with pytest.raises(ValueError):
        snapshot[0] = 1.0
    field.set(0, 0.8)
    assert snapshot[0] == 0.0


def test_apply_adds_and_clamps():
    field = ProbabilityField(3, initial=[0.2, 0.9, 0.5])
    field.apply(np.array([-0.5, 0.3, 0.1]))
    np.testing.assert_allclose(field.values, [0.0, 1.0, 0.6])


def test_apply_rejects_wrong_size():
    field = ProbabilityField(3)
    with pytest.raises(ValueError):
        field.apply(np.zeros(2))
