# Monomial basis of H^n_dR(U) for a diagonal hypersurface, and the congruence
# data describing which basis pairs Frobenius connects.

import itertools

from sage.rings.integer_ring import ZZ
from sage.structure.sage_object import SageObject


def basis_size(n, d):
    r"""
    Return the dimension of `H^n_{dR}(U)`, where `U` is the complement of a
    smooth hypersurface of degree `d` in `P^n`.

    This is `((d-1)^{n+1} + (-1)^{n+1}(d-1))/d`.

    EXAMPLES:

    A plane cubic is an elliptic curve::

        sage: from diagonalFrobenius.basis import basis_size
        sage: basis_size(2, 3)
        2

    A plane quartic has genus 3, and a quartic surface has 21 primitive classes::

        sage: basis_size(2, 4), basis_size(3, 4)
        (6, 21)
    """
    n, d = ZZ(n), ZZ(d)
    return ((d-1)**(n+1) + (-1)**(n+1)*(d-1)) // d


def degree(u, d):
    r"""
    Return `k_u = (n + 1 + \sum u_i)/d`, the pole order of `x^u \Omega / P^{k_u}`.

    EXAMPLES::

        sage: from diagonalFrobenius.basis import degree
        sage: degree((1, 1, 1), 3)
        2
    """
    return (len(u) + sum(u)) // d


class CohomologyBasis(SageObject):
    r"""
    The monomial basis `\{x^u \Omega / P^{k_u}\}` of `H^n_{dR}(U)` for a
    diagonal hypersurface `P = \sum a_i x_i^d` in `P^n`.

    The exponent vectors `u = (u_0, \ldots, u_n)` satisfy `0 \le u_i \le d-2`
    and `d \mid n + 1 + \sum u_i`.  They are ordered by degree `k_u`, and
    within a degree in decreasing lexicographic order.

    INPUT:

    - ``n`` -- a positive integer, one less than the number of variables
    - ``d`` -- an integer at least 2, the degree

    EXAMPLES::

        sage: from diagonalFrobenius.basis import CohomologyBasis
        sage: B = CohomologyBasis(2, 4); B
        Basis of H^2_dR(U) for a diagonal hypersurface of degree 4 in P^2
        sage: B.monomials
        ((1, 0, 0), (0, 1, 0), (0, 0, 1), (2, 2, 1), (2, 1, 2), (1, 2, 2))
        sage: len(B), B.lo, B.hi
        (6, 1, 2)
        sage: B.offsets
        {1: 0, 2: 3}

    The basis can be empty::

        sage: len(CohomologyBasis(2, 2))
        0
    """
    def __init__(self, n, d):
        if n < 1:
            raise ValueError("n must be at least 1")
        if d < 2:
            raise ValueError("d must be at least 2")
        self.n = n = ZZ(n)
        self.d = d = ZZ(d)
        monomials = [u for u in itertools.product(range(d-1), repeat=n+1)
                     if (n + 1 + sum(u)) % d == 0]
        monomials.sort(key=lambda u: tuple(-i for i in u))
        monomials.sort(key=lambda u: degree(u, d))
        self.monomials = tuple(tuple(ZZ(i) for i in u) for u in monomials)
        self.degrees = tuple(degree(u, d) for u in self.monomials)
        self._index = {u: i for i, u in enumerate(self.monomials)}

        self.offsets = {}
        for i, k in enumerate(self.degrees):
            self.offsets.setdefault(k, i)
        if self.monomials:
            self.lo = min(self.degrees)
            self.hi = max(self.degrees)
        else:
            self.lo = self.hi = None
        assert len(self.monomials) == basis_size(n, d)

    def _repr_(self):
        return "Basis of H^%s_dR(U) for a diagonal hypersurface of degree %s in P^%s" % (self.n, self.d, self.n)

    def __len__(self):
        return len(self.monomials)

    def __iter__(self):
        return iter(self.monomials)

    def __getitem__(self, i):
        return self.monomials[i]

    def index(self, u):
        """
        Return the position of the exponent vector ``u`` in the basis.

        EXAMPLES::

            sage: from diagonalFrobenius.basis import CohomologyBasis
            sage: CohomologyBasis(2, 3).index((1, 1, 1))
            1
        """
        return self._index[tuple(u)]

    def degree(self, u):
        """
        Return the degree `k_u` of the exponent vector ``u``.

        EXAMPLES::

            sage: from diagonalFrobenius.basis import CohomologyBasis
            sage: B = CohomologyBasis(2, 4)
            sage: [B.degree(u) for u in B] == list(B.degrees)
            True
        """
        return degree(u, self.d)

    def monomials_in(self, R):
        """
        Return the basis as monomials of the polynomial ring ``R`` in `n+1` variables.

        EXAMPLES::

            sage: from diagonalFrobenius.basis import CohomologyBasis
            sage: R.<x,y,z> = QQ[]
            sage: CohomologyBasis(2, 3).monomials_in(R)
            [1, x*y*z]
        """
        return [R.monomial(*u) for u in self.monomials]

    def table(self):
        """
        Return a printable description of the basis, one degree per line.

        EXAMPLES::

            sage: from diagonalFrobenius.basis import CohomologyBasis
            sage: print(CohomologyBasis(1, 4).table())
            k = 1: (2, 0) (1, 1) (0, 2)
        """
        lines = []
        if not self.monomials:
            return ""
        for k in range(self.lo, self.hi + 1):
            us = [u for u, ku in zip(self.monomials, self.degrees) if ku == k]
            if us:
                lines.append("k = %s: " % k + " ".join(str(u) for u in us))
        return "\n".join(lines)


def frobenius_exponents(u, v, p, d):
    r"""
    Return the exponents `e_i = (p(u_i+1) - (v_i+1))/d` if `d` divides all of
    the numerators, and ``None`` otherwise.

    Frobenius maps `x^u \Omega/P^{k_u}` to a multiple of `x^v \Omega/P^{k_v}`
    only if every `e_i` is an integer; these lie between 0 and `p-1`.

    EXAMPLES::

        sage: from diagonalFrobenius.basis import frobenius_exponents
        sage: frobenius_exponents((0, 0, 0), (1, 1, 1), 5, 3)
        (1, 1, 1)
        sage: frobenius_exponents((0, 0, 0), (0, 0, 0), 5, 3) is None
        True
    """
    e = []
    for ui, vi in zip(u, v):
        q, r = ZZ(p*(ui+1) - (vi+1)).quo_rem(d)
        if r:
            return None
        e.append(q)
    return tuple(e)


def frobenius_pairs(basis, p):
    r"""
    Return the list of triples `(i, j, e)` for basis pairs `(B[i], B[j])`
    passing the divisibility filter, with `e` the tuple of exponents.

    EXAMPLES::

        sage: from diagonalFrobenius.basis import CohomologyBasis, frobenius_pairs
        sage: frobenius_pairs(CohomologyBasis(1, 4), 3)
        [(0, 2, (2, 0)), (1, 1, (1, 1)), (2, 0, (0, 2))]
    """
    d = basis.d
    pairs = []
    for i, u in enumerate(basis):
        for j, v in enumerate(basis):
            e = frobenius_exponents(u, v, p, d)
            if e is not None:
                pairs.append((i, j, e))
    return pairs


def congruence_classes(basis, p):
    r"""
    For each coordinate `i`, return the sorted residues `e_i \bmod p` which
    occur among the basis pairs passing the divisibility filter.

    Only these classes of indices `m \equiv e_i \pmod p` enter the sums
    defining the Frobenius matrix.

    EXAMPLES::

        sage: from diagonalFrobenius.basis import CohomologyBasis, congruence_classes
        sage: congruence_classes(CohomologyBasis(2, 3), 5)
        [[1, 3], [1, 3], [1, 3]]
        sage: congruence_classes(CohomologyBasis(1, 4), 3)
        [[0, 1, 2], [0, 1, 2]]
    """
    classes = [set() for _ in range(basis.n + 1)]
    for _, _, e in frobenius_pairs(basis, p):
        for i, ei in enumerate(e):
            classes[i].add(ei % p)
    return [sorted(c) for c in classes]
