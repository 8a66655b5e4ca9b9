# Precomputed sequences shared by all entries of the Frobenius matrix:
# Teichmuller lifts, powers of 1/d, inverse factorials and tables of mu_m.

import logging

from sage.rings.integer_ring import ZZ
from sage.rings.padics.factory import Zp
from sage.structure.sage_object import SageObject

logger = logging.getLogger(__name__)


def teichmuller_lifts(a, p, prec):
    r"""
    Return the Teichmüller lifts of the coefficients ``a`` modulo `p^{prec}`,
    as integers.

    The coefficients may be integers or elements of `F_p`; they must be units.

    EXAMPLES::

        sage: from diagonalFrobenius.sequences import teichmuller_lifts
        sage: L = teichmuller_lifts([1, 2, 3], 5, 4); L
        [1, 182, 443]
        sage: all(power_mod(x, 4, 5^4) == 1 for x in L)
        True
        sage: teichmuller_lifts([GF(5)(2), 8], 5, 4)
        [182, 443]
        sage: teichmuller_lifts([3, 4], 2, 10)
        Traceback (most recent call last):
        ...
        ValueError: 4 is not a unit modulo 2
    """
    R = Zp(p, prec)
    lifts = []
    for x in a:
        try:
            x = ZZ(x)
        except TypeError:
            x = x.lift()
        if x % p == 0:
            raise ValueError("%s is not a unit modulo %s" % (x, p))
        if p == 2:
            lifts.append(ZZ(1))
            continue
        lifts.append(R.teichmuller(x).lift() % p**prec)
    return lifts


def dinv_powers(d, p, prec, R):
    r"""
    Return the list `[d^{-r} \bmod p^{prec} : 0 \le r \le R]`.

    EXAMPLES::

        sage: from diagonalFrobenius.sequences import dinv_powers
        sage: dinv_powers(3, 5, 2, 4)
        [1, 17, 14, 13, 21]
        sage: dinv_powers(5, 5, 2, 4)
        Traceback (most recent call last):
        ...
        ValueError: p = 5 divides d = 5
    """
    if d % p == 0:
        raise ValueError("p = %s divides d = %s" % (p, d))
    pe = ZZ(p)**prec
    powers = [ZZ(1) % pe]
    if R >= 1:
        dinv = ZZ(d).inverse_mod(pe)
        for r in range(1, R + 1):
            powers.append(powers[-1] * dinv % pe)
    return powers


class InverseFactorials(SageObject):
    r"""
    Inverses of the unit parts of `i!` modulo `p^{prec}`, together with
    `v_p(i!)`, for the indices `i` in ``indices``.

    The indices are visited in increasing order.  Between consecutive
    indices `j < i` the factors `j+1, \ldots, i` are stripped of their
    powers of `p` and multiplied in batches small enough for the batch
    product to fit into a machine word, before reducing modulo `p^{prec}`.
    A single modular inversion is done, at the largest index; the other
    inverses are recovered by multiplying back the products of the segments.

    EXAMPLES::

        sage: from diagonalFrobenius.sequences import InverseFactorials
        sage: nu = InverseFactorials([7, 3], 5, 3)
        sage: nu[3], nu[7]
        ((21, 0), (47, 1))
        sage: nu.indices
        [3, 7]
        sage: 8 * 47 % 125, factorial(7) // 5
        (1, 1008)
        sage: 7 in nu, 4 in nu
        (True, False)
    """
    def __init__(self, indices, p, prec):
        self.p = p = ZZ(p)
        self.prec = prec
        self.indices = sorted(set(ZZ(i) for i in indices))
        self.batch_size = l = max(1, 62 // max(1, self.indices[-1].nbits() if self.indices else 1))
        pe = p**prec

        segments = []
        vals = []
        v = ZZ(0)
        fac = ZZ(1) % pe
        j = 0
        for i in self.indices:
            seg = ZZ(1)
            batch = 1
            count = 0
            for k in range(j + 1, i + 1):
                w, q = ZZ(k).val_unit(p)
                v += w
                batch *= q
                count += 1
                if count == l:
                    seg = seg * batch % pe
                    batch = 1
                    count = 0
            seg = seg * batch % pe
            fac = fac * seg % pe
            segments.append(seg)
            vals.append(v)
            j = i

        self._table = {}
        if self.indices:
            inv = fac.inverse_mod(pe)
            for idx in reversed(range(len(self.indices))):
                self._table[self.indices[idx]] = (inv, vals[idx])
                inv = inv * segments[idx] % pe

    def _repr_(self):
        return "Inverse factorials modulo %s^%s at %s indices" % (self.p, self.prec, len(self.indices))

    def __getitem__(self, i):
        return self._table[i]

    def __contains__(self, i):
        return i in self._table

    def __len__(self):
        return len(self._table)


class DirectFactorials(SageObject):
    r"""
    The same data as :class:`InverseFactorials`, obtained by computing every
    factorial exactly and inverting its unit part separately.

    EXAMPLES::

        sage: from diagonalFrobenius.sequences import DirectFactorials, InverseFactorials
        sage: nu = DirectFactorials(range(20), 3, 5)
        sage: nu[7]
        (23, 2)
        sage: nu2 = InverseFactorials(range(20), 3, 5)
        sage: all(nu[i] == nu2[i] for i in range(20))
        True
    """
    def __init__(self, indices, p, prec):
        self.p = p = ZZ(p)
        self.prec = prec
        self.indices = sorted(set(ZZ(i) for i in indices))
        pe = p**prec
        self._table = {}
        for i in self.indices:
            v, u = i.factorial().val_unit(p)
            self._table[i] = (u.inverse_mod(pe), v)

    def _repr_(self):
        return "Factorials modulo %s^%s at %s indices" % (self.p, self.prec, len(self.indices))

    def __getitem__(self, i):
        return self._table[i]

    def __contains__(self, i):
        return i in self._table


def needed_indices(classes, plan):
    r"""
    Return the sorted indices `m = e + p r \le M` with `e` in some class.

    EXAMPLES::

        sage: from diagonalFrobenius.precision import PrecisionPlan
        sage: from diagonalFrobenius.sequences import needed_indices
        sage: P = PrecisionPlan(2, 5, 6)
        sage: m = needed_indices([[1, 3], [1, 3], [1, 3]], P)
        sage: len(m), m[:6], m[-1]
        (60, [1, 3, 6, 8, 11, 13], 148)
    """
    residues = sorted(set(e for c in classes for e in c))
    return sorted(e + plan.p*r for e in residues for r in range(plan.quotient_bound(e) + 1))


def mu_tables(classes, lifts, strategy, factorials):
    r"""
    Return the tables `T[i][e][r] = a_i^e \mu_{e + p r} \bmod p^{N_2}` for
    every coordinate `i`, every residue `e` in ``classes[i]``, and every
    `r` with `e + p r \le M`.

    Since `a_i` is a Teichmüller lift, `a_i^{p-1} = 1`, so `a_i^e` is the
    weight of every term `m \equiv e \pmod p`.  Values of `\mu_m` shared by
    several coordinates are computed once.

    INPUT:

    - ``classes`` -- the residues of :func:`~diagonalFrobenius.basis.congruence_classes`
    - ``lifts`` -- the Teichmüller lifts of the coefficients
    - ``strategy`` -- a :class:`~diagonalFrobenius.strategies.PrimeStrategy`
    - ``factorials`` -- an :class:`InverseFactorials` covering the indices

    EXAMPLES::

        sage: from diagonalFrobenius.precision import PrecisionPlan
        sage: from diagonalFrobenius.sequences import InverseFactorials, mu_tables, needed_indices
        sage: from diagonalFrobenius.strategies import prime_strategy
        sage: P = PrecisionPlan(1, 3, 8)
        sage: S = prime_strategy(P, 4)
        sage: classes = [[0, 1, 2], [0, 1, 2]]
        sage: nu = InverseFactorials(needed_indices(classes, P), 3, P.N2 + P.guard)
        sage: T = mu_tables(classes, [1, 1], S, nu)
        sage: len(T[0][2]), T[0][2][0] == (1/2) % 3^9
        (28, True)
        sage: T2 = mu_tables(classes, [1, 3^9 - 1], S, nu)
        sage: (T2[1][1][5] + T[1][1][5]) % 3^9
        0
    """
    plan = strategy.plan
    p = plan.p
    pe = p**plan.N2
    mus = {}

    def mu(m):
        if m not in mus:
            mus[m] = strategy.mu(m, *factorials[m])
        return mus[m]

    tables = []
    for c, a in zip(classes, lifts):
        table = {}
        for e in c:
            w = ZZ(a).powermod(e, pe)
            table[e] = [w * mu(e + p*r) % pe for r in range(plan.quotient_bound(e) + 1)]
        tables.append(table)
    logger.debug("computed %s values of mu", len(mus))
    return tables
