import math

import pytest

from cgutils.distance import CosineDistance, DistanceCalculator, EuclideanDistance
from cgutils.utils import CGraphError

V1 = [1.0, 2.0, 3.0, 4.0]
V2 = [0.5, -1.0, 2.5, 7.0]


def test_euclidean_known_value():
    calc = DistanceCalculator(EuclideanDistance())
    assert calc.calculate([0.0, 0.0], [3.0, 4.0]) == pytest.approx(5.0)


def test_euclidean_self_distance_is_zero():
    calc = DistanceCalculator(EuclideanDistance())
    assert calc.calculate(V1, V1) == 0.0


def test_euclidean_is_symmetric():
    calc = DistanceCalculator(EuclideanDistance())
    assert calc.calculate(V1, V2) == pytest.approx(calc.calculate(V2, V1))


def test_euclidean_without_sqrt_is_square():
    with_sqrt = DistanceCalculator(EuclideanDistance()).calculate(V1, V2)
    squared = DistanceCalculator(EuclideanDistance(need_sqrt=False)).calculate(V1, V2)
    assert squared == pytest.approx(with_sqrt ** 2)


def test_euclidean_check_rejects_mismatched_dims():
    calc = DistanceCalculator(EuclideanDistance(), need_check=True)
    with pytest.raises(CGraphError):
        calc.calculate([1.0, 2.0], [1.0])


def test_check_rejects_empty_and_none():
    calc = DistanceCalculator(CosineDistance(), need_check=True)
    with pytest.raises(CGraphError):
        calc.calculate([], [1.0])
    with pytest.raises(CGraphError):
        calc.calculate(None, [1.0])


def test_unchecked_empty_vectors_give_zero():
    calc = DistanceCalculator(EuclideanDistance())
    assert calc.calculate([], []) == 0.0


def test_cosine_of_scaled_vector_is_one():
    calc = DistanceCalculator(CosineDistance())
    assert calc.calculate(V1, [x * 3 for x in V1]) == pytest.approx(1.0)


def test_cosine_of_opposite_vectors_is_minus_one():
    calc = DistanceCalculator(CosineDistance())
    assert calc.calculate(V1, [-x for x in V1]) == pytest.approx(-1.0)


def test_cosine_zero_vector_is_nan():
    result = CosineDistance().calc([0.0, 0.0], [1.0, 1.0])
    assert str(result) == "nan"


def test_batch_matches_single_calculations():
    calc = DistanceCalculator(EuclideanDistance())
    nodes = [V1, V2, [0.0, 0.0, 0.0, 0.0]]
    assert calc.calculate_batch(V1, nodes) == [calc.calculate(V1, n) for n in nodes]


def test_normalize_gives_unit_length_and_same_direction():
    calc = DistanceCalculator(EuclideanDistance(), need_check=True)
    unit = calc.normalize(V2)
    assert math.sqrt(sum(x * x for x in unit)) == pytest.approx(1.0)
    assert DistanceCalculator(CosineDistance()).calculate(unit, V2) == pytest.approx(1.0)


def test_normalize_zero_vector_raises():
    with pytest.raises(CGraphError):
        DistanceCalculator(EuclideanDistance()).normalize([0.0, 0.0])


def test_normalize_checked_empty_raises():
    with pytest.raises(CGraphError):
        DistanceCalculator(EuclideanDistance(), need_check=True).normalize([])