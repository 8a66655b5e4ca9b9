import pytest

from sage.arith.misc import power_mod
from sage.rings.integer_ring import ZZ

from diagonalFrobenius.precision import PrecisionPlan
from diagonalFrobenius.sequences import (
    DirectFactorials,
    InverseFactorials,
    dinv_powers,
    mu_tables,
    needed_indices,
    teichmuller_lifts,
)
from diagonalFrobenius.strategies import prime_strategy


@pytest.mark.parametrize("p,prec", [(2, 10), (3, 7), (5, 4), (11, 3)])
def test_inverse_factorials(p, prec):
    indices = [0, 1, 2, p, p + 1, 3 * p - 1, 50, 97]
    nu = InverseFactorials(indices, p, prec)
    pe = ZZ(p)**prec
    for i in indices:
        inv, v = nu[i]
        w, u = ZZ(i).factorial().val_unit(p)
        assert v == w
        assert inv * u % pe == 1


def test_inverse_factorials_batch_size():
    nu = InverseFactorials([3, 10, 100], 7, 2)
    assert nu.batch_size == 8
    assert nu[10] == DirectFactorials([10], 7, 2)[10]


def test_inverse_factorials_match_direct():
    nu = InverseFactorials(range(0, 200, 7), 5, 6)
    direct = DirectFactorials(range(0, 200, 7), 5, 6)
    assert all(nu[i] == direct[i] for i in range(0, 200, 7))


def test_dinv_powers():
    L = dinv_powers(4, 3, 5, 10)
    assert len(L) == 11
    assert all(x * power_mod(ZZ(4), r, 3**5) % 3**5 == 1 for r, x in enumerate(L))
    assert dinv_powers(4, 3, 5, 0) == [1]
    with pytest.raises(ValueError):
        dinv_powers(6, 3, 5, 10)


def test_teichmuller_lifts():
    L = teichmuller_lifts([1, 2, 3, 4, 6], 7, 5)
    for x, a in zip(L, [1, 2, 3, 4, 6]):
        assert x % 7 == a
        assert power_mod(x, 6, 7**5) == 1
    assert teichmuller_lifts([1, 3, 5], 2, 8) == [1, 1, 1]
    with pytest.raises(ValueError):
        teichmuller_lifts([1, 7], 7, 5)


def test_needed_indices():
    P = PrecisionPlan(1, 3, 8)
    m = needed_indices([[0], [2]], P)
    assert all(x % 3 in (0, 2) for x in m)
    assert m == sorted(m)
    assert max(m) <= P.M


def test_mu_tables_fold_weights():
    P = PrecisionPlan(2, 7, 4)
    S = prime_strategy(P, 3)
    classes = [[2, 4], [2, 4], [2, 4]]
    nu = InverseFactorials(needed_indices(classes, P), 7, P.N2)
    lifts = teichmuller_lifts([1, 2, 3], 7, P.N2)
    T = mu_tables(classes, lifts, S, nu)
    pe = ZZ(7)**P.N2
    for i, a in enumerate(lifts):
        for e in (2, 4):
            assert len(T[i][e]) == P.quotient_bound(e) + 1
            for r in (0, 1, 5):
                m = e + 7 * r
                expected = power_mod(a, e + r * 6, pe) * S.mu(m, *nu[m]) % pe
                assert T[i][e][r] == expected
