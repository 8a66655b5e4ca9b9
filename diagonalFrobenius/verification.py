# Brute-force point counts and consistency checks for Frobenius on the diagonal fibre.

import itertools

from sage.rings.finite_rings.finite_field_constructor import GF
from sage.rings.integer_ring import ZZ

from .basis import basis_size
from .diagfrob import DiagonalFrobenius, diagonal_frobenius


def projective_points(n, p):
    """
    Iterate over the points of `P^n(F_p)`, normalised so that the first
    non-zero coordinate is 1.

    EXAMPLES::

        sage: from diagonalFrobenius.verification import projective_points
        sage: len(list(projective_points(2, 3)))
        13
    """
    for lead in range(n + 1):
        for tail in itertools.product(range(p), repeat=n - lead):
            yield (0,) * lead + (1,) + tail


def count_points(a, n, d, p):
    r"""
    Return the number of points of `\sum a_i x_i^d = 0` in `P^n(F_p)`.

    EXAMPLES::

        sage: from diagonalFrobenius.verification import count_points
        sage: count_points([1, 1, 1], 2, 3, 7), count_points([1, 1, 1], 2, 3, 5)
        (9, 6)
        sage: count_points([1, 1], 1, 4, 3), count_points([1, 2], 1, 4, 3)
        (0, 2)
    """
    k = GF(p)
    a = [k(x) for x in a]
    powers = [k(x)**d for x in range(p)]
    count = 0
    for x in projective_points(n, p):
        if sum(ai * powers[xi] for ai, xi in zip(a, x)) == 0:
            count += 1
    return ZZ(count)


def expected_trace(count, n, p):
    r"""
    Return the trace of Frobenius predicted by a point count, namely
    `(-1)^{n-1} (\#X(F_p) - \sum_{i<n} p^i)`.

    EXAMPLES::

        sage: from diagonalFrobenius.verification import expected_trace
        sage: expected_trace(9, 2, 7), expected_trace(2, 1, 3)
        (-1, 1)
    """
    p = ZZ(p)
    return (-1)**(n - 1) * (count - sum(p**i for i in range(n)))


def trace_matches(F, count, n):
    r"""
    Whether the trace of the :class:`~diagonalFrobenius.padic_values.pAdicMatrix`
    ``F`` agrees with the point count modulo `p^N`.
    """
    p, N = F.p, F.N
    diff = F.lift().trace() - expected_trace(count, n, p)
    return diff == 0 or diff.valuation(p) >= N


def test_point_counts(cases, N=None, algorithm="congruence"):
    r"""
    Compare traces with brute-force point counts.

    ``cases`` is a list of tuples ``(a, n, d, p)``.  When ``N`` is not given,
    a precision large enough to determine the trace is used.

    EXAMPLES::

        sage: from diagonalFrobenius.verification import test_point_counts
        sage: test_point_counts([([1, 1, 1], 2, 3, p) for p in [5, 7, 11]])
        True
        sage: test_point_counts([([1, 1], 1, 4, 3), ([1, 2], 1, 4, 3)], N=8)
        True
    """
    for (a, n, d, p) in cases:
        if N is None:
            # the eigenvalues have absolute value p^((n-1)/2)
            bound = 2 * basis_size(n, d) * ZZ(p)**n
            prec = 2
            while ZZ(p)**prec <= bound:
                prec += 1
        else:
            prec = N
        F = diagonal_frobenius(a, n, d, p, prec, algorithm=algorithm)
        if not trace_matches(F, count_points(a, n, d, p), n):
            print("trace mismatch for a=%s, n=%s, d=%s, p=%s" % (a, n, d, p))
            return False
    return True


def test_algorithms_agree(a, n, d, p, N):
    """
    Whether the congruence and naive algorithms give identical matrices.

    EXAMPLES::

        sage: from diagonalFrobenius.verification import test_algorithms_agree
        sage: test_algorithms_agree([1, 2, 3], 2, 3, 7, 5)
        True
        sage: test_algorithms_agree([1, 1, 1], 2, 3, 2, 5)
        True
    """
    F = diagonal_frobenius(a, n, d, p, N, algorithm="congruence", debug=True)
    G = diagonal_frobenius(a, n, d, p, N, algorithm="naive", debug=True)
    return F == G


def test_precision_stability(a, n, d, p, N):
    r"""
    Whether the matrices at precisions `N` and `N+1` agree modulo `p^N`.

    EXAMPLES::

        sage: from diagonalFrobenius.verification import test_precision_stability
        sage: test_precision_stability([1, 1, 1], 2, 3, 5, 4)
        True
    """
    F = diagonal_frobenius(a, n, d, p, N)
    G = diagonal_frobenius(a, n, d, p, N + 1)
    if F.nrows() != G.nrows():
        return False
    for i in range(F.nrows()):
        for j in range(F.ncols()):
            diff = F.entry(i, j).lift() - G.entry(i, j).lift()
            if diff != 0 and diff.valuation(p) < N:
                return False
    return True


def test_idempotence(a, n, d, p, N):
    """
    Whether two runs with the same input give identical matrices.

    EXAMPLES::

        sage: from diagonalFrobenius.verification import test_idempotence
        sage: test_idempotence([1, 1], 1, 4, 3, 6)
        True
    """
    return (DiagonalFrobenius(a, n, d, p, N).compute()
            == DiagonalFrobenius(a, n, d, p, N).compute())
