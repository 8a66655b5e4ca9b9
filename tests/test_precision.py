import pytest

from diagonalFrobenius.precision import PrecisionPlan, flog, val_fac


@pytest.mark.parametrize("n,p,N,C,N2,M", [
    (2, 5, 6, 2, 8, 150),
    (1, 3, 8, 1, 9, 85),
    (2, 2, 5, 2, 7, 56),
])
def test_plan_values(n, p, N, C, N2, M):
    P = PrecisionPlan(n, p, N)
    assert (P.C, P.N2, P.M) == (C, N2, M)
    assert P.delta == C - n


def test_plan_formulas():
    for n in range(1, 6):
        for p in [2, 3, 5, 7]:
            for N in [1, 5, 20]:
                P = PrecisionPlan(n, p, N)
                assert P.C == n + 2 * val_fac(n - 1, p) + (n + 1) * flog(n - 1, p)
                assert P.N2 == N - n + 2 * P.C
                assert P.C >= n
                assert P.guard == (1 if p == 2 else 0)


def test_plan_c_at_two():
    assert PrecisionPlan(3, 2, 4).C == 9


def test_plan_is_immutable():
    P = PrecisionPlan(2, 5, 6)
    with pytest.raises(AttributeError):
        P.N2 = 3


@pytest.mark.parametrize("n,N", [(0, 5), (2, 0), (2, -3)])
def test_plan_rejects(n, N):
    with pytest.raises(ValueError):
        PrecisionPlan(n, 5, N)


def test_word_size():
    PrecisionPlan(2, 5, 6).check_word_size(3)
    with pytest.raises(OverflowError):
        PrecisionPlan(2, 2, 5).check_word_size(10**4 + 1)
    with pytest.raises(OverflowError):
        PrecisionPlan(2, 5, 6).check_word_size(10**18)


def test_word_size_odd_prime_bound():
    # at odd p only p d and floor(M/p) d are bounded
    P = PrecisionPlan(1, 30011, 1)
    assert ((P.M + 1) * 3)**2 >= 2**63
    P.check_word_size(3)
    assert PrecisionPlan(2, 5, 6).M == 150
    PrecisionPlan(2, 5, 6).check_word_size(6 * 10**16)
    with pytest.raises(OverflowError):
        PrecisionPlan(2, 5, 6).check_word_size(4 * 10**17)


def test_flog_and_legendre():
    assert [flog(x, 2) for x in range(9)] == [0, 0, 1, 1, 2, 2, 2, 2, 3]
    assert val_fac(100, 5) == 24
    assert val_fac(1, 7) == 0
