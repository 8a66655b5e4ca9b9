# The series mu_m and the inner sums over r, which take a different shape
# at p = 2 than at odd primes.

from sage.arith.misc import rising_factorial
from sage.rings.integer_ring import ZZ
from sage.rings.padics.precision_error import PrecisionError
from sage.structure.sage_object import SageObject


class PrimeStrategy(SageObject):
    r"""
    Base class for the computation of

    .. MATH::

        \mu_m = \sum_{k=0}^{\lfloor m/p \rfloor} \frac{p^{s(m) - k}}{(m-pk)!\, k!}

    modulo `p^{N_2}`, and of the sums

    .. MATH::

        \sum_{r \ge 0} f_r d^{-r} \mu_{e + p r},

    where `f_r` is a suitably normalised rising factorial of `u/d`.

    Subclasses provide the exact partial sum `s = m!\, p^{-s(m)} \mu_m`
    in :meth:`series`, the shift `s(m)` in :meth:`shift`, and :meth:`dsum`.
    """
    def __init__(self, plan, d):
        self.plan = plan
        self.p = plan.p
        self.d = ZZ(d)
        self.N2 = plan.N2
        self.modulus = plan.p**plan.N2

    def series(self, m):
        raise NotImplementedError

    def shift(self, m):
        return 0

    def generic_mu(self, m, fac_inv, fac_val, prec=None):
        r"""
        Return `\mu_m \bmod p^{prec}` from the exact sum :meth:`series`, given
        the inverse ``fac_inv`` of the unit part of `m!` (modulo at least
        `p^{prec}`) and `v_p(m!)`.

        Returns 0 once the valuation of `\mu_m` reaches ``prec``.
        """
        p = self.p
        if prec is None:
            prec = self.N2
        s_val, s_unit = self.series(m).val_unit(p)
        v = s_val - fac_val + self.shift(m)
        if v < 0:
            raise PrecisionError("mu_%s is not p-adically integral for p = %s" % (m, p))
        if v >= prec:
            return ZZ(0)
        return p**v * (s_unit * fac_inv % p**(prec - v))

    def mu(self, m, fac_inv, fac_val):
        return self.generic_mu(m, fac_inv, fac_val)

    def mu_list(self, M, factorials):
        r"""
        Return `[\mu_0, \ldots, \mu_M]`, with the factorials supplied by
        ``factorials``.
        """
        return [self.mu(m, *factorials[m]) for m in range(M + 1)]

    def dsum(self, u, e, mus, dinv):
        raise NotImplementedError


class OddPrimeStrategy(PrimeStrategy):
    r"""
    The series at an odd prime `p`, where `s(m) = \lfloor m/p \rfloor`.

    EXAMPLES::

        sage: from diagonalFrobenius.precision import PrecisionPlan
        sage: from diagonalFrobenius.sequences import DirectFactorials
        sage: from diagonalFrobenius.strategies import prime_strategy
        sage: P = PrecisionPlan(2, 5, 6)
        sage: S = prime_strategy(P, 3); S
        Strategy for odd p = 5 modulo 5^8
        sage: nu = DirectFactorials(range(10), 5, 8)
        sage: S.mu(2, *nu[2]) == (1/2) % 5^8
        True
        sage: S.mu(5, *nu[5]) == (25/24) % 5^8
        True
        sage: S.series(5)
        125
    """
    def _repr_(self):
        return "Strategy for odd p = %s modulo %s^%s" % (self.p, self.p, self.N2)

    def series(self, m):
        r"""
        Return `\sum_k p^{\lfloor m/p \rfloor - k} m!/((m-pk)!\, k!)`, via
        `t_{k+1} = t_k (m-pk-p+1) \cdots (m-pk) / (p(k+1))`.
        """
        p = self.p
        q = m // p
        t = p**q
        s = t
        for k in range(q):
            t = t * rising_factorial(m - p*k - (p-1), p) // (p*(k + 1))
            s += t
        return s

    def dsum(self, u, e, mus, dinv):
        r"""
        Return `\sum_r (u)(u+d)\cdots(u+(r-1)d)\, d^{-r}\, \mu_{e+pr} \bmod p^{N_2}`,
        where ``mus[r]`` holds (a multiple of) `\mu_{e+pr}`.

        EXAMPLES::

            sage: from diagonalFrobenius.precision import PrecisionPlan
            sage: from diagonalFrobenius.strategies import prime_strategy
            sage: S = prime_strategy(PrecisionPlan(2, 5, 6), 3)
            sage: S.dsum(1, 1, [2, 3, 5], [1, 10, 100])
            2032
        """
        pe = self.modulus
        d = self.d
        total = ZZ(0)
        f = ZZ(1)
        for r, mu in enumerate(mus):
            if r:
                f = f * (u + (r - 1)*d) % pe
            total += f * dinv[r] % pe * mu
        return total % pe


class TwoAdicStrategy(PrimeStrategy):
    r"""
    The series at `p = 2`, where `s(m) = \lfloor 3m/4 \rfloor`, except for
    the closed forms `\mu_3 = 4/3` and `\mu_7 = 8 \cdot 29/315`, which are half
    of the values of the general expression.

    EXAMPLES::

        sage: from diagonalFrobenius.precision import PrecisionPlan
        sage: from diagonalFrobenius.sequences import DirectFactorials
        sage: from diagonalFrobenius.strategies import prime_strategy
        sage: P = PrecisionPlan(2, 2, 5)
        sage: S = prime_strategy(P, 3); S
        Strategy for p = 2 modulo 2^7
        sage: nu = DirectFactorials(range(10), 2, 8)
        sage: S.mu(1, *nu[1]), S.mu(2, *nu[2])
        (1, 2)
        sage: S.mu(3, *nu[3]) == (4/3) % 2^7
        True
        sage: S.generic_mu(3, *nu[3], prec=8) == (8/3) % 2^8
        True
        sage: S.check_closed_forms(nu)
        True
    """
    def _repr_(self):
        return "Strategy for p = 2 modulo 2^%s" % self.N2

    def series(self, m):
        r"""
        Return `\sum_k 2^{-k} m!/((m-2k)!\, k!)`, via
        `t_{k+1} = t_k ((m-2k-1)(m-2k)/2)/(k+1)`.
        """
        t = s = ZZ(1)
        for k in range(m // 2):
            t = t * (((m - 2*k - 1) * (m - 2*k)) // 2) // (k + 1)
            s += t
        return s

    def shift(self, m):
        return (3*m) // 4

    def mu(self, m, fac_inv, fac_val):
        N = self.N2
        if m == 3:
            if 2 >= N:
                return ZZ(0)
            return 4 * ZZ(3).inverse_mod(ZZ(2)**(N - 2))
        if m == 7:
            if 3 >= N:
                return ZZ(0)
            return 8 * (29 * ZZ(315).inverse_mod(ZZ(2)**(N - 3)) % ZZ(2)**(N - 3))
        return self.generic_mu(m, fac_inv, fac_val)

    def check_closed_forms(self, factorials):
        r"""
        Check that twice the closed forms for `\mu_3` and `\mu_7` agree with
        the general expression, computed with one guard digit.

        ``factorials`` must hold the inverse factorials of 3 and 7 modulo
        `2^{N_2+1}`.
        """
        N = self.N2
        for m in (3, 7):
            closed = 2 * self.mu(m, *factorials[m]) % ZZ(2)**(N + 1)
            if self.generic_mu(m, *factorials[m], prec=N + 1) != closed:
                return False
        return True

    def dsum(self, u, e, mus, dinv):
        r"""
        Return `\sum_r f_r d^{-r} \mu_{e+2r} \bmod 2^{N_2}`, where `f_0 = 1`,
        `f_1 = u`, `f_5 = u(u+d)(u+2d)(u+3d)(u+4d)/(4` or `8)`, and otherwise
        `f_r = f_{r-2} (u+(r-2)d)(u+(r-1)d)/2`.

        EXAMPLES::

            sage: from diagonalFrobenius.precision import PrecisionPlan
            sage: from diagonalFrobenius.strategies import prime_strategy
            sage: S = prime_strategy(PrecisionPlan(2, 2, 5), 3)
            sage: S.dsum(1, 0, [1, 1, 1], [1, 1, 1])
            4
        """
        pe = self.modulus
        d = self.d
        total = ZZ(0)
        prev2 = prev1 = ZZ(1)
        for r, mu in enumerate(mus):
            if r == 0:
                f = ZZ(1)
            elif r == 1:
                f = ZZ(u)
            elif r == 5:
                f = ZZ(u * (u + d) * (u + 2*d) * (u + 3*d) * (u + 4*d)) // (4 if e == 0 else 8)
            else:
                f = prev2 * (((u + (r - 2)*d) * (u + (r - 1)*d)) // 2) % pe
            prev2, prev1 = prev1, f
            total += f * dinv[r] % pe * mu % pe
        return total % pe


def prime_strategy(plan, d):
    """
    Return the strategy for the prime of ``plan``.

    EXAMPLES::

        sage: from diagonalFrobenius.precision import PrecisionPlan
        sage: from diagonalFrobenius.strategies import prime_strategy
        sage: prime_strategy(PrecisionPlan(1, 2, 4), 5)
        Strategy for p = 2 modulo 2^5
    """
    if plan.p == 2:
        return TwoAdicStrategy(plan, d)
    return OddPrimeStrategy(plan, d)
