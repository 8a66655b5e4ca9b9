r"""
Frobenius on the diagonal fibre

Computes the matrix of Frobenius on `H^n_{dR}(U)`, where `U` is the complement
of the diagonal hypersurface

.. MATH::

    a_0 x_0^d + a_1 x_1^d + \cdots + a_n x_n^d = 0

in `P^n` over `F_p`, with respect to the monomial basis of
:class:`~diagonalFrobenius.basis.CohomologyBasis`, correct modulo `p^N`.

The entry at `(u, v)` vanishes unless `d` divides every `p(u_i+1) - (v_i+1)`,
and otherwise equals

.. MATH::

    \frac{(-1)^{k_u + k_v} (k_v - 1)!\, p^n}{(k_u - 1)!\, \alpha_{u,v}},
    \qquad
    \alpha_{u,v} = (-1)^{k_u} p^{k_u} \prod_{i=0}^{n} a_i^{e_i}
        \sum_{r \ge 0} \Bigl(\frac{u_i + 1}{d}\Bigr)_r \mu_{e_i + p r},

where `e_i = (p(u_i+1) - (v_i+1))/d` and, for odd `p`,
`\mu_m = \sum_k p^{\lfloor m/p \rfloor - k}/((m-pk)!\, k!)`.  The series in `r` is truncated at
`e_i + p r \le M`, see :class:`~diagonalFrobenius.precision.PrecisionPlan`.

Two algorithms are provided.  ``"congruence"`` only computes `\mu_m` for the
residues `m \bmod p` that occur among the basis pairs, obtains the inverse
factorials with a single modular inversion, and folds the weights `a_i^{e_i}`
into the tables of `\mu_m`.  ``"naive"`` computes every `\mu_m` for
`m \le M` from exact factorials; it serves as a reference.

EXAMPLES:

The Fermat cubic at `p = 7`, where `a_7 = -1`, is ordinary::

    sage: from diagonalFrobenius import diagonal_frobenius
    sage: F = diagonal_frobenius([1, 1, 1], 2, 3, 7, 4)
    sage: F.valuation(), F.entry(0, 0).val, F.entry(1, 1).val
    (0, 1, 0)
    sage: F.lift().trace() % 7^4 == -1 % 7^4
    True
"""

import logging
import resource

from sage.arith.misc import is_prime
from sage.misc.lazy_attribute import lazy_attribute
from sage.rings.integer_ring import ZZ
from sage.rings.padics.precision_error import PrecisionError
from sage.structure.sage_object import SageObject

from .basis import CohomologyBasis, congruence_classes, frobenius_exponents
from .padic_values import pAdicMatrix, pAdicValUnit
from .precision import PrecisionPlan
from .sequences import (
    DirectFactorials,
    InverseFactorials,
    dinv_powers,
    mu_tables,
    needed_indices,
    teichmuller_lifts,
)
from .strategies import prime_strategy

logger = logging.getLogger(__name__)

ALGORITHMS = ("congruence", "naive")


def get_utime():
    return resource.getrusage(resource.RUSAGE_SELF).ru_utime


class DiagonalFrobenius(SageObject):
    r"""
    One computation of Frobenius on the diagonal fibre.

    The computation goes through the states ``"Init"``, ``"Precompute"``,
    ``"Fill"``, ``"Canonicalize"`` and ``"Done"``; the current one is
    ``self.state``.  All preconditions are checked on construction, before
    anything is computed.

    INPUT:

    - ``a`` -- a list of `n+1` integers (or elements of `F_p`), units mod `p`
    - ``n`` -- a positive integer
    - ``d`` -- the degree, at least 2 and prime to `p`
    - ``p`` -- a prime
    - ``N`` -- a positive integer, the precision
    - ``algorithm`` -- ``"congruence"`` (default) or ``"naive"``
    - ``debug`` -- boolean (default ``False``), whether to run internal
      consistency checks

    EXAMPLES::

        sage: from diagonalFrobenius import DiagonalFrobenius
        sage: D = DiagonalFrobenius([1, 1], 1, 4, 3, 8); D
        Frobenius on the diagonal fibre of degree 4 in P^1 at p = 3 modulo 3^8
        sage: D.state
        'Init'
        sage: F = D.compute(); D.state
        'Done'
        sage: D.plan
        Precision plan for n=1, p=3, N=8: C=1, N2=9, M=85, delta=0
        sage: D.classes
        [[0, 1, 2], [0, 1, 2]]
        sage: F.entry(0, 0).is_zero(), F.entry(0, 1).is_zero(), F.entry(0, 2).is_zero()
        (True, True, False)
        sage: F.entry(1, 1).lift() % 3^8 == -1 % 3^8
        True

    Both algorithms agree::

        sage: F == DiagonalFrobenius([1, 1], 1, 4, 3, 8, algorithm="naive").compute()
        True

    Preconditions are checked before any computation::

        sage: DiagonalFrobenius([1, 3], 1, 4, 3, 8)
        Traceback (most recent call last):
        ...
        ValueError: the coefficient 3 is not a unit modulo 3
        sage: DiagonalFrobenius([1, 1], 1, 4, 2, 8)
        Traceback (most recent call last):
        ...
        ValueError: p = 2 divides d = 4
        sage: DiagonalFrobenius([1, 1, 1], 1, 4, 3, 8)
        Traceback (most recent call last):
        ...
        ValueError: expected 2 coefficients, got 3
    """
    def __init__(self, a, n, d, p, N, algorithm="congruence", debug=False):
        self.state = "Init"
        if n < 1:
            raise ValueError("the dimension n must be at least 1")
        if d < 2:
            raise ValueError("the degree d must be at least 2")
        if N < 1:
            raise ValueError("the precision N must be at least 1")
        if not is_prime(p):
            raise ValueError("%s is not prime" % p)
        if algorithm not in ALGORITHMS:
            raise ValueError("algorithm must be one of %s" % (ALGORITHMS,))
        self.n = n = ZZ(n)
        self.d = d = ZZ(d)
        self.p = p = ZZ(p)
        self.N = ZZ(N)
        if d % p == 0:
            raise ValueError("p = %s divides d = %s" % (p, d))
        if len(a) != n + 1:
            raise ValueError("expected %s coefficients, got %s" % (n + 1, len(a)))
        for x in a:
            if ZZ(x) % p == 0:
                raise ValueError("the coefficient %s is not a unit modulo %s" % (x, p))
        self.a = [ZZ(x) for x in a]
        self.algorithm = algorithm
        self.debug = debug

    def _repr_(self):
        return "Frobenius on the diagonal fibre of degree %s in P^%s at p = %s modulo %s^%s" % (
            self.d, self.n, self.p, self.p, self.N)

    def _stage(self, name, start):
        t = get_utime() - start
        logger.info("%s: %.2f s", name, t)
        self.times[name] = t

    def precompute(self):
        r"""
        Compute the basis, the precision plan and every sequence needed by
        the entries.

        EXAMPLES::

            sage: from diagonalFrobenius import DiagonalFrobenius
            sage: D = DiagonalFrobenius([1, 2, 3], 2, 3, 5, 6)
            sage: D.precompute(); D.state
            'Precompute'
            sage: D.basis.monomials
            ((0, 0, 0), (1, 1, 1))
            sage: all(power_mod(x, 4, 5^8) == 1 for x in D.lifts)
            True
            sage: len(D.dinv), sorted(D.tables[0])
            (31, [1, 3])
        """
        self.state = "Precompute"
        self.times = {}
        n, d, p = self.n, self.d, self.p

        start = get_utime()
        self.plan = plan = PrecisionPlan(n, p, self.N)
        plan.check_word_size(d)
        self.basis = CohomologyBasis(n, d)
        self.strategy = prime_strategy(plan, d)
        logger.info("N = %s, N2 = %s, M = %s, C = %s, delta = %s",
                    plan.N, plan.N2, plan.M, plan.C, plan.delta)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("basis of H^%s_dR(U):\n%s", n, self.basis.table())
        self._stage("Basis and plan", start)

        start = get_utime()
        self.lifts = teichmuller_lifts(self.a, p, plan.N2)
        self._stage("Teichmuller lifts", start)

        start = get_utime()
        self.dinv = dinv_powers(d, p, plan.N2, plan.M // p)
        self._stage("Sequence d^{-r}", start)

        start = get_utime()
        prec = plan.N2 + plan.guard
        if self.algorithm == "congruence":
            self.classes = congruence_classes(self.basis, p)
            self.factorials = InverseFactorials(needed_indices(self.classes, plan), p, prec)
            self.tables = mu_tables(self.classes, self.lifts, self.strategy, self.factorials)
        else:
            self.classes = [list(range(p)) for _ in range(n + 1)]
            self.factorials = DirectFactorials(range(plan.M + 1), p, prec)
            self.mus = self.strategy.mu_list(plan.M, self.factorials)
        self._stage("Sequence mu_m", start)

        if self.debug:
            self._check_sequences()

    def _check_sequences(self):
        p, plan = self.p, self.plan
        prec = plan.N2 + plan.guard
        direct = DirectFactorials(self.factorials.indices, p, prec)
        for i in self.factorials.indices:
            assert self.factorials[i] == direct[i], "inverse factorial of %s" % i
        if p == 2:
            assert self.strategy.check_closed_forms(DirectFactorials([3, 7], 2, prec)), \
                "closed forms of mu_3 and mu_7"

    def mus_for(self, i, e):
        r"""
        The list `[w_i \mu_{e + p r} : e + p r \le M]`, where `w_i` is
        `a_i^e` if the weights are folded into the tables and `1` otherwise.
        """
        if self.algorithm == "congruence":
            return self.tables[i][e]
        p = self.p
        return [self.mus[e + p*r] for r in range(self.plan.quotient_bound(e) + 1)]

    def alpha(self, u, e):
        r"""
        Return `\alpha_{u,v} \bmod p^{N_2}`, where ``e`` holds the exponents
        `e_i` of the pair `(u, v)`.

        EXAMPLES::

            sage: from diagonalFrobenius import DiagonalFrobenius
            sage: D = DiagonalFrobenius([1, 1, 1], 2, 3, 5, 6)
            sage: D.precompute()
            sage: x = D.alpha((0, 0, 0), (1, 1, 1)); x.valuation(5)
            1
            sage: D2 = DiagonalFrobenius([1, 1, 1], 2, 3, 5, 6, algorithm="naive")
            sage: D2.precompute()
            sage: D2.alpha((0, 0, 0), (1, 1, 1)) == x
            True
        """
        p, d = self.p, self.d
        pe = p**self.plan.N2
        k = (len(u) + sum(u)) // d
        x = p**k % pe
        folded = self.algorithm == "congruence"
        for i, (ui, ei) in enumerate(zip(u, e)):
            if not folded:
                x = x * self.lifts[i].powermod(ei, pe) % pe
            x = x * self.strategy.dsum(ui + 1, ei, self.mus_for(i, ei), self.dinv) % pe
        if k % 2 and x:
            x = pe - x
        return x

    def entry(self, u, v, e):
        r"""
        Return the entry at `(u, v)` as a :class:`~diagonalFrobenius.padic_values.pAdicValUnit`.

        Raises ``PrecisionError`` if `\alpha_{u,v}` vanishes to the working
        precision, or if the valuation of `(k_u - 1)! \alpha_{u,v}` exceeds
        the bound `C`.
        """
        p, n, N, C = self.p, self.n, self.N, self.plan.C
        ku = (len(u) + sum(u)) // self.d
        kv = (len(v) + sum(v)) // self.d
        f = (-1)**(ku + kv) * (kv - 1).factorial() * p**n
        x = self.alpha(u, e)
        if x == 0:
            raise PrecisionError("alpha vanishes modulo %s^%s at u = %s, v = %s" % (p, self.plan.N2, u, v))
        g = pAdicValUnit.from_integer((ku - 1).factorial() * x, p, self.plan.N2)
        if g.val > C:
            raise PrecisionError("valuation %s of (k_u - 1)! alpha exceeds %s at u = %s, v = %s" % (g.val, C, u, v))
        # f is exact, so it only needs to be known modulo p^(N + val(g))
        return pAdicValUnit.from_integer(f, p, N + g.val) * g.inverse()

    def fill(self):
        """
        Compute every entry of the matrix, as a list of rows of
        :class:`~diagonalFrobenius.padic_values.pAdicValUnit`.
        """
        self.state = "Fill"
        start = get_utime()
        p, d = self.p, self.d
        rows = []
        for u in self.basis:
            row = []
            for v in self.basis:
                e = frobenius_exponents(u, v, p, d)
                if e is None:
                    row.append(pAdicValUnit.zero(p, self.N))
                else:
                    row.append(self.entry(u, v, e))
            rows.append(row)
        self.entries = rows
        self._stage("Matrix F", start)
        return rows

    def canonicalize(self):
        r"""
        Write the entries relative to one shared valuation, equal to the
        smallest valuation of an entry (or 0 for the zero matrix).

        The congruence algorithm uses the lower bound `-\delta = n - C` on the
        valuations and then strips the common power of `p`; the naive
        algorithm uses the observed minimum.
        """
        self.state = "Canonicalize"
        p, N = self.p, self.N
        vals = [x.val for row in self.entries for x in row if not x.is_zero()]
        if self.algorithm == "congruence":
            base = -self.plan.delta
        elif vals:
            base = min(vals)
        else:
            base = ZZ(0)
        units = [[x.shifted_unit(base) for x in row] for row in self.entries]
        F = pAdicMatrix(p, N, units, base)
        F.canonicalise()
        if self.debug:
            assert F.val == (min(vals) if vals else 0), "canonical valuation"
        return F

    def compute(self):
        """
        Run the whole computation and return the :class:`~diagonalFrobenius.padic_values.pAdicMatrix`.
        """
        self.precompute()
        self.fill()
        F = self.canonicalize()
        self.state = "Done"
        return F

    @lazy_attribute
    def frobenius_matrix(self):
        """
        The result of :meth:`compute`, computed once.

        EXAMPLES::

            sage: from diagonalFrobenius import DiagonalFrobenius
            sage: D = DiagonalFrobenius([1, 1, 1], 2, 3, 5, 6)
            sage: F = D.frobenius_matrix; F.valuation()
            0
            sage: F.entry(0, 0).is_zero() and F.entry(1, 1).is_zero()
            True
        """
        return self.compute()

    def compare(self, Ns):
        r"""
        Time both algorithms at each precision in ``Ns``, checking that they
        give the same matrix.

        Returns a dictionary indexed by precision of dictionaries of timings.

        EXAMPLES::

            sage: from diagonalFrobenius import DiagonalFrobenius
            sage: D = DiagonalFrobenius([1, 1, 1], 2, 3, 5, 6)
            sage: D.compare([4, 6]) #random
            N = 4
            Congruence: 0.01 s
            Naive: 0.03 s
            <BLANKLINE>
            N = 6
            Congruence: 0.01 s
            Naive: 0.04 s
            sage: sorted(D.compare([3])[3])
            N = 3
            ...
            ['Congruence', 'Naive']
        """
        def report(res, name, t):
            res[name] = t
            print(f"{name}: {t:.2f} s")

        res = {}
        for N in Ns:
            res[N] = {}
            print("N = %s" % N)
            start = get_utime()
            F = DiagonalFrobenius(self.a, self.n, self.d, self.p, N).compute()
            report(res[N], "Congruence", get_utime() - start)
            start = get_utime()
            G = DiagonalFrobenius(self.a, self.n, self.d, self.p, N, algorithm="naive").compute()
            report(res[N], "Naive", get_utime() - start)
            assert F == G
            print("")
        return res


def diagonal_frobenius(a, n, d, p, N, algorithm="congruence", debug=False):
    r"""
    Return the matrix of Frobenius on `H^n_{dR}(U)` for the diagonal
    hypersurface `\sum a_i x_i^d = 0` in `P^n` over `F_p`, correct modulo `p^N`.

    EXAMPLES:

    The Fermat cubic at `p = 5` is supersingular::

        sage: from diagonalFrobenius import diagonal_frobenius
        sage: F = diagonal_frobenius([1, 1, 1], 2, 3, 5, 6, debug=True)
        sage: F.entry(0, 0).is_zero(), F.entry(1, 1).is_zero()
        (True, True)
        sage: A = F.lift()
        sage: A.trace() % 5^6, (A.det() - 5).valuation(5) >= 5
        (0, True)

    A plane quartic at `p = 3`::

        sage: F = diagonal_frobenius([1, 1, 1], 2, 4, 3, 4); F.nrows()
        6
    """
    return DiagonalFrobenius(a, n, d, p, N, algorithm=algorithm, debug=debug).compute()


def diagonal_coefficients(f):
    r"""
    Return ``(a, n, d)`` for the diagonal fibre `\sum a_i x_i^d` of the
    homogeneous polynomial ``f`` of degree `d` in `n+1` variables.

    EXAMPLES::

        sage: from diagonalFrobenius import diagonal_coefficients
        sage: R.<x,y,z> = QQ[]
        sage: diagonal_coefficients(x^3 + 2*y^3 + 3*z^3 + 5*x*y*z)
        ([1, 2, 3], 2, 3)
        sage: diagonal_coefficients(x^3 + y^2)
        Traceback (most recent call last):
        ...
        ValueError: x^3 + y^2 is not homogeneous
    """
    if not f.is_homogeneous():
        raise ValueError("%s is not homogeneous" % f)
    R = f.parent()
    n = R.ngens() - 1
    d = f.degree()
    a = [f.monomial_coefficient(x**d) for x in R.gens()]
    return a, ZZ(n), ZZ(d)
