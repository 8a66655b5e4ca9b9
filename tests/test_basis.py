import pytest

from sage.rings.integer_ring import ZZ

from diagonalFrobenius.basis import (
    CohomologyBasis,
    basis_size,
    congruence_classes,
    frobenius_exponents,
    frobenius_pairs,
)


@pytest.mark.parametrize("n,d", [(1, 2), (1, 4), (2, 2), (2, 3), (2, 4), (2, 5), (3, 3), (3, 4), (4, 3)])
def test_size_matches_enumeration(n, d):
    B = CohomologyBasis(n, d)
    assert len(B) == basis_size(n, d)


@pytest.mark.parametrize("n,d", [(1, 4), (2, 3), (2, 5), (3, 4)])
def test_monomials_and_degrees(n, d):
    B = CohomologyBasis(n, d)
    for u, k in zip(B, B.degrees):
        assert len(u) == n + 1
        assert all(0 <= ui <= d - 2 for ui in u)
        assert (n + 1 + sum(u)) == k * d
        assert 1 <= k <= n
    assert list(B.degrees) == sorted(B.degrees)
    for i, u in enumerate(B):
        assert B.index(u) == i


def test_order_within_degree():
    B = CohomologyBasis(2, 4)
    assert B.monomials == ((1, 0, 0), (0, 1, 0), (0, 0, 1), (2, 2, 1), (2, 1, 2), (1, 2, 2))
    assert B.offsets == {1: 0, 2: 3}
    assert (B.lo, B.hi) == (1, 2)


def test_fermat_cubic_basis():
    B = CohomologyBasis(2, 3)
    assert B.monomials == ((0, 0, 0), (1, 1, 1))
    assert B.degrees == (1, 2)


def test_empty_basis():
    B = CohomologyBasis(2, 2)
    assert len(B) == 0
    assert B.lo is None and B.hi is None
    assert congruence_classes(B, 3) == [[], [], []]


@pytest.mark.parametrize("n,d", [(0, 3), (2, 1)])
def test_invalid_parameters(n, d):
    with pytest.raises(ValueError):
        CohomologyBasis(n, d)


@pytest.mark.parametrize("n,d,p", [(2, 3, 5), (2, 3, 7), (1, 4, 3), (2, 4, 5), (3, 3, 2), (2, 5, 11)])
def test_exponents_in_range(n, d, p):
    B = CohomologyBasis(n, d)
    for i, j, e in frobenius_pairs(B, p):
        assert all(0 <= ei <= p - 1 for ei in e)
        u, v = B[i], B[j]
        assert all(p * (ui + 1) - (vi + 1) == d * ei for ui, vi, ei in zip(u, v, e))


def test_filter_rejects_non_divisible():
    assert frobenius_exponents((0, 0, 0), (0, 0, 0), 5, 3) is None
    assert frobenius_exponents((0, 0, 0), (1, 1, 1), 5, 3) == (1, 1, 1)
    assert frobenius_exponents((0, 0, 0), (0, 0, 0), 7, 3) == (2, 2, 2)


@pytest.mark.parametrize("n,d,p", [(2, 3, 5), (2, 3, 7), (1, 4, 3), (2, 4, 5), (3, 3, 7)])
def test_congruence_classes(n, d, p):
    B = CohomologyBasis(n, d)
    classes = congruence_classes(B, p)
    assert len(classes) == n + 1
    for c in classes:
        assert c == sorted(set(c))
        assert 1 <= len(c) <= len(B)
        assert all(0 <= e < p for e in c)


def test_congruence_classes_examples():
    assert congruence_classes(CohomologyBasis(2, 3), 5) == [[1, 3]] * 3
    assert congruence_classes(CohomologyBasis(2, 3), 7) == [[2, 4]] * 3
    assert congruence_classes(CohomologyBasis(1, 4), 3) == [[0, 1, 2]] * 2


def test_monomials_in_ring():
    from sage.rings.polynomial.polynomial_ring_constructor import PolynomialRing
    R = PolynomialRing(ZZ, 3, "x")
    x0, x1, x2 = R.gens()
    assert CohomologyBasis(2, 3).monomials_in(R) == [R.one(), x0 * x1 * x2]
