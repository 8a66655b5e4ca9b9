# Working precision and truncation bounds for Frobenius on the diagonal fibre.

from sage.rings.integer_ring import ZZ
from sage.structure.sage_object import SageObject

# Largest integer the inner loops are allowed to multiply out before reducing.
WORD_BOUND = ZZ(2)**63


def flog(x, p):
    r"""
    Return `\lfloor \log_p x \rfloor`, or 0 when `x < p`.

    EXAMPLES::

        sage: from diagonalFrobenius.precision import flog
        sage: flog(9, 3), flog(8, 3), flog(2, 3), flog(0, 3)
        (2, 1, 0, 0)
    """
    k = 0
    q = p
    while q <= x:
        q *= p
        k += 1
    return ZZ(k)


def val_fac(k, p):
    r"""
    Return `v_p(k!)`, by Legendre's formula.

    EXAMPLES::

        sage: from diagonalFrobenius.precision import val_fac
        sage: val_fac(10, 2), val_fac(25, 5), val_fac(0, 3)
        (8, 6, 0)
    """
    v = 0
    q = p
    while q <= k:
        v += k // q
        q *= p
    return ZZ(v)


class PrecisionPlan(SageObject):
    r"""
    The precision parameters for one computation of Frobenius on the diagonal
    fibre of dimension `n` at the prime `p`, correct modulo `p^N`.

    - ``C`` bounds `v_p((k_u - 1)! \alpha_{u,v})`, so `n - C` is the smallest
      possible valuation of an entry
    - ``N2`` is the working precision for `\alpha_{u,v}`
    - ``M`` is the truncation index of the series in `m`
    - ``delta`` is `C - n`
    - ``guard`` is the number of extra digits carried by the inverse
      factorials (one at `p = 2`, where `\mu_3` and `\mu_7` are checked
      against twice their closed forms)

    EXAMPLES::

        sage: from diagonalFrobenius.precision import PrecisionPlan
        sage: P = PrecisionPlan(2, 5, 6); P
        Precision plan for n=2, p=5, N=6: C=2, N2=8, M=150, delta=0
        sage: P.guard
        0
        sage: PrecisionPlan(1, 3, 8)
        Precision plan for n=1, p=3, N=8: C=1, N2=9, M=85, delta=0
        sage: P = PrecisionPlan(2, 2, 5); (P.N2, P.M, P.guard)
        (7, 56, 1)
        sage: PrecisionPlan(3, 2, 4).C
        9

    Precision must be positive::

        sage: PrecisionPlan(2, 5, 0)
        Traceback (most recent call last):
        ...
        ValueError: the precision N must be at least 1
    """
    def __init__(self, n, p, N):
        if n < 1:
            raise ValueError("the dimension n must be at least 1")
        if N < 1:
            raise ValueError("the precision N must be at least 1")
        self.n = n = ZZ(n)
        self.p = p = ZZ(p)
        self.N = N = ZZ(N)
        self.C = C = n + 2*val_fac(n - 1, p) + (n + 1)*flog(n - 1, p)
        self.N2 = N2 = N - n + 2*C
        if N2 <= 0:
            raise ValueError("the working precision N2 = %s is not positive" % N2)
        self.M = (p**2 * N2) // (p - 1) + p**2 * flog(N2 // (p - 1) + 2, p) + 4*p**2
        self.delta = C - n
        self.guard = ZZ(1) if p == 2 else ZZ(0)

    def _repr_(self):
        return "Precision plan for n=%s, p=%s, N=%s: C=%s, N2=%s, M=%s, delta=%s" % (
            self.n, self.p, self.N, self.C, self.N2, self.M, self.delta)

    def __setattr__(self, name, value):
        if name in self.__dict__:
            raise AttributeError("a precision plan is immutable")
        SageObject.__setattr__(self, name, value)

    def quotient_bound(self, e):
        r"""
        The largest `r` with `e + p r \le M`.

        EXAMPLES::

            sage: from diagonalFrobenius.precision import PrecisionPlan
            sage: PrecisionPlan(2, 5, 6).quotient_bound(3)
            29
        """
        return (self.M - e) // self.p

    def check_word_size(self, d):
        r"""
        Raise ``OverflowError`` if the products formed while summing the
        series for the degree `d` do not fit into a signed 64-bit word.

        EXAMPLES::

            sage: from diagonalFrobenius.precision import PrecisionPlan
            sage: PrecisionPlan(2, 5, 6).check_word_size(3)
            sage: PrecisionPlan(1, 30011, 1).check_word_size(3)
            sage: PrecisionPlan(2, 2, 5).check_word_size(10^4)
            Traceback (most recent call last):
            ...
            OverflowError: (5d)^5 does not fit into a word for d = 10000
        """
        p, M = self.p, self.M
        if M >= WORD_BOUND:
            raise OverflowError("the truncation index M = %s does not fit into a word" % M)
        if p * d >= WORD_BOUND:
            raise OverflowError("p d does not fit into a word for p = %s, d = %s" % (p, d))
        if p != 2:
            if (M // p) * d >= WORD_BOUND:
                raise OverflowError("floor(M/p) d does not fit into a word for M = %s, d = %s" % (M, d))
            return
        if ((M + 1) * d)**2 >= WORD_BOUND:
            raise OverflowError("((M+1)d)^2 does not fit into a word for M = %s, d = %s" % (M, d))
        if (5 * d)**5 >= WORD_BOUND:
            raise OverflowError("(5d)^5 does not fit into a word for d = %s" % d)
