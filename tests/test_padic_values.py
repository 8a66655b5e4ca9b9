import pytest

from sage.rings.infinity import Infinity
from sage.rings.rational_field import QQ

from diagonalFrobenius.padic_values import pAdicMatrix, pAdicValUnit


def test_normalisation():
    x = pAdicValUnit(5, 4, 50, 0)
    assert (x.unit, x.val) == (2, 2)
    assert pAdicValUnit(5, 4, 7, 4).is_zero()
    assert pAdicValUnit(5, 4, 25, 2).is_zero()
    z = pAdicValUnit.zero(5, 4)
    assert (z.unit, z.val) == (0, Infinity)


def test_arithmetic():
    x = pAdicValUnit(3, 6, 2, 1)
    y = pAdicValUnit(3, 6, 5, 2)
    assert (x * y).lift() == 270
    assert (-x).lift() % 3**6 == -6 % 3**6
    assert -pAdicValUnit.zero(3, 6) == pAdicValUnit.zero(3, 6)
    inv = x.inverse()
    assert inv.val == -1
    assert (x * inv).unit % 3**4 == 1
    with pytest.raises(ZeroDivisionError):
        pAdicValUnit.zero(3, 6).inverse()


def test_product_precision():
    x = pAdicValUnit(3, 5, 2, 1)
    y = pAdicValUnit(3, 5, 2, 2)
    assert (x * y).N == 6
    assert (x * y).val == 3
    z = pAdicValUnit(3, 5, 2, 3) * y
    assert (z.unit, z.val, z.N) == (4, 5, 7)
    w = pAdicValUnit.zero(3, 5) * x
    assert w.is_zero() and w.N == 6
    # an exact integer divided by a value known to fewer digits
    g = pAdicValUnit.from_integer(2 * 3**2, 3, 9)
    q = pAdicValUnit.from_integer(3**3 * 5, 3, 6 + 2) * g.inverse()
    assert (q.val, q.N) == (1, 6)
    assert q.unit * 2 % 3**5 == 5


def test_shifted_unit():
    x = pAdicValUnit(5, 4, 2, 1)
    assert x.shifted_unit(1) == 2
    assert x.shifted_unit(-1) == 50
    assert pAdicValUnit.zero(5, 4).shifted_unit(0) == 0
    with pytest.raises(ValueError):
        x.shifted_unit(2)


def test_matrix_canonicalise():
    F = pAdicMatrix(3, 5, [[0, 9], [18, 0]], -1)
    F.canonicalise()
    assert F.val == 1
    assert F.units.list() == [0, 1, 2, 0]
    assert F.entry_valuations() == [1, 1]
    assert F.lift() == pAdicMatrix(3, 5, [[0, 9], [18, 0]], -1).lift()


def test_zero_matrix():
    F = pAdicMatrix(7, 3, [[0, 0], [0, 0]], -2)
    F.canonicalise()
    assert F.is_zero()
    assert F.valuation() == 0


def test_reduction():
    F = pAdicMatrix(2, 3, [[9, 1]], 1)
    assert F.units.list() == [1, 1]
    assert pAdicMatrix(2, 3, [[9, 1]], 3).is_zero()


def test_transpose_and_entries():
    F = pAdicMatrix(5, 4, [[1, 2], [3, 4]], -1)
    T = F.transpose()
    assert T.entry(0, 1) == F.entry(1, 0)
    assert F.entry(1, 1).lift() == QQ(4) / 5
