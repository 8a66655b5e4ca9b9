# Unit/valuation pairs and valuation-tagged matrices over Z_p.

from sage.matrix.constructor import matrix
from sage.rings.infinity import Infinity
from sage.rings.integer_ring import ZZ
from sage.rings.padics.factory import Qp
from sage.rings.rational_field import QQ
from sage.structure.sage_object import SageObject


class pAdicValUnit(SageObject):
    r"""
    A `p`-adic number `p^v u` known modulo `p^N`, stored as the pair `(u, v)`.

    The unit `u` is an integer prime to `p`, reduced modulo `p^{N-v}`.
    The exact zero has ``unit == 0`` and ``val == Infinity``; any value with
    ``v >= N`` is replaced by it.

    INPUT:

    - ``p`` -- a prime
    - ``N`` -- the absolute precision
    - ``unit`` -- an integer, the unit part (it is reduced, and any powers of
      `p` it contains are moved into the valuation)
    - ``val`` -- an integer, the valuation

    EXAMPLES::

        sage: from diagonalFrobenius.padic_values import pAdicValUnit
        sage: x = pAdicValUnit(5, 4, 3, 1); x
        3*5^1 + O(5^4)
        sage: x.unit, x.val
        (3, 1)
        sage: pAdicValUnit(5, 4, 50, 0)
        2*5^2 + O(5^4)
        sage: pAdicValUnit(5, 4, 2, 4).is_zero()
        True
    """
    def __init__(self, p, N, unit, val=0):
        self.p = p = ZZ(p)
        self.N = N
        unit = ZZ(unit)
        if unit == 0 or val >= N:
            self.unit = ZZ(0)
            self.val = Infinity
            return
        v, unit = unit.val_unit(p)
        val += v
        if val >= N:
            self.unit = ZZ(0)
            self.val = Infinity
        else:
            self.unit = unit % p**(N - val)
            self.val = ZZ(val)

    @classmethod
    def zero(cls, p, N):
        """
        The exact zero at precision `N`.

        EXAMPLES::

            sage: from diagonalFrobenius.padic_values import pAdicValUnit
            sage: pAdicValUnit.zero(3, 5)
            O(3^5)
        """
        return cls(p, N, 0)

    @classmethod
    def from_integer(cls, x, p, N):
        """
        Split the integer `x` into its unit and valuation modulo `p^N`.

        EXAMPLES::

            sage: from diagonalFrobenius.padic_values import pAdicValUnit
            sage: x = pAdicValUnit.from_integer(5040, 7, 3); (x.unit, x.val)
            (34, 1)
        """
        return cls(p, N, x, 0)

    def is_zero(self):
        return self.unit == 0

    def _repr_(self):
        if self.is_zero():
            return "O(%s^%s)" % (self.p, self.N)
        return "%s*%s^%s + O(%s^%s)" % (self.unit, self.p, self.val, self.p, self.N)

    def __eq__(self, other):
        if not isinstance(other, pAdicValUnit):
            return False
        return (self.p, self.N, self.unit, self.val) == (other.p, other.N, other.unit, other.val)

    def __ne__(self, other):
        return not (self == other)

    def __hash__(self):
        return hash((self.p, self.N, self.unit, self.val))

    def _val_bound(self):
        if self.is_zero():
            return self.N
        return self.val

    def __mul__(self, other):
        r"""
        Units multiply, valuations add.

        The product of `x + O(p^{N_x})` and `y + O(p^{N_y})` is known modulo
        `p^{\min(v_x + N_y, v_y + N_x)}`.

        EXAMPLES::

            sage: from diagonalFrobenius.padic_values import pAdicValUnit
            sage: pAdicValUnit(3, 5, 2, 1) * pAdicValUnit(3, 5, 2, 2)
            4*3^3 + O(3^6)
            sage: pAdicValUnit(3, 5, 2, 3) * pAdicValUnit(3, 5, 2, 2)
            4*3^5 + O(3^7)
            sage: pAdicValUnit.zero(3, 5) * pAdicValUnit(3, 5, 2, 1)
            O(3^6)
        """
        N = min(self._val_bound() + other.N, other._val_bound() + self.N)
        if self.is_zero() or other.is_zero():
            return pAdicValUnit.zero(self.p, N)
        return pAdicValUnit(self.p, N, self.unit * other.unit, self.val + other.val)

    def __neg__(self):
        if self.is_zero():
            return self
        return pAdicValUnit(self.p, self.N, -self.unit, self.val)

    def inverse(self):
        r"""
        The inverse `p^{-v} u^{-1}`, known modulo `p^{N-2v}`.

        EXAMPLES::

            sage: from diagonalFrobenius.padic_values import pAdicValUnit
            sage: x = pAdicValUnit(5, 4, 2, 1)
            sage: y = x.inverse(); y
            63*5^-1 + O(5^2)
            sage: (x * y).unit % 5^2
            1
        """
        if self.is_zero():
            raise ZeroDivisionError("inverse of a p-adic zero")
        N = self.N - 2*self.val
        return pAdicValUnit(self.p, N, self.unit.inverse_mod(self.p**(N + self.val)), -self.val)

    def lift(self):
        """
        The rational number `p^v u`.

        EXAMPLES::

            sage: from diagonalFrobenius.padic_values import pAdicValUnit
            sage: pAdicValUnit(5, 4, 2, -1).lift()
            2/5
        """
        if self.is_zero():
            return QQ(0)
        return QQ(self.p)**self.val * self.unit

    def shifted_unit(self, base):
        r"""
        The integer `w` with `p^{base} w` equal to this value modulo `p^N`,
        for ``base`` at most the valuation.

        EXAMPLES::

            sage: from diagonalFrobenius.padic_values import pAdicValUnit
            sage: pAdicValUnit(5, 4, 2, 1).shifted_unit(-1)
            50
            sage: pAdicValUnit.zero(5, 4).shifted_unit(-1)
            0
        """
        if self.is_zero():
            return ZZ(0)
        if base > self.val:
            raise ValueError("base %s exceeds the valuation %s" % (base, self.val))
        return self.p**(self.val - base) * self.unit % self.p**(self.N - base)

    def in_ring(self, R):
        """
        This value as an element of the `p`-adic ring or field ``R``.

        EXAMPLES::

            sage: from diagonalFrobenius.padic_values import pAdicValUnit
            sage: pAdicValUnit(5, 4, 7, 1).in_ring(Qp(5, 10))
            2*5 + 5^2 + O(5^4)
        """
        if self.is_zero():
            return R(0, absprec=self.N)
        return R(self.p)**self.val * R(self.unit, absprec=self.N - self.val)


class pAdicMatrix(SageObject):
    r"""
    A matrix over `Q_p` with one shared valuation, correct modulo `p^N`.

    The entry at `(i, j)` is `p^{val} U[i,j]` where `U` is an integer matrix
    whose entries are reduced modulo `p^{N - val}`.  After ``canonicalise``
    the shared valuation equals the smallest valuation of an entry (or 0 for
    the zero matrix).

    INPUT:

    - ``p`` -- a prime
    - ``N`` -- the absolute precision
    - ``units`` -- a matrix (or list of lists) of integers
    - ``val`` -- the shared valuation

    EXAMPLES::

        sage: from diagonalFrobenius.padic_values import pAdicMatrix
        sage: F = pAdicMatrix(3, 4, [[0, 9], [3, 0]], 0); F
        [0 9]
        [3 0] * 3^0 + O(3^4)
        sage: F.canonicalise(); F
        [0 3]
        [1 0] * 3^1 + O(3^4)
        sage: F.valuation()
        1
    """
    def __init__(self, p, N, units, val=0):
        self.p = ZZ(p)
        self.N = N
        self.val = ZZ(val)
        self.units = matrix(ZZ, units)
        self._reduce()

    def _reduce(self):
        if self.val >= self.N:
            self.units = self.units.parent().zero_matrix()
            return
        pe = self.p**(self.N - self.val)
        self.units = self.units.apply_map(lambda x: x % pe)

    def nrows(self):
        return self.units.nrows()

    def ncols(self):
        return self.units.ncols()

    def _repr_(self):
        return "%s * %s^%s + O(%s^%s)" % (self.units, self.p, self.val, self.p, self.N)

    def __eq__(self, other):
        if not isinstance(other, pAdicMatrix):
            return False
        return (self.p, self.N, self.val, self.units) == (other.p, other.N, other.val, other.units)

    def __ne__(self, other):
        return not (self == other)

    def is_zero(self):
        return self.units.is_zero()

    def valuation(self):
        """
        The shared valuation, which after ``canonicalise`` is the minimal
        valuation among the entries.
        """
        return self.val

    def entry(self, i, j):
        """
        The entry at `(i, j)` as a :class:`pAdicValUnit`.

        EXAMPLES::

            sage: from diagonalFrobenius.padic_values import pAdicMatrix
            sage: F = pAdicMatrix(3, 4, [[0, 3], [1, 0]], 1)
            sage: F.entry(0, 1)
            1*3^2 + O(3^4)
            sage: F.entry(0, 0).is_zero()
            True
        """
        return pAdicValUnit(self.p, self.N, self.units[i, j], self.val)

    def entry_valuations(self):
        """
        The valuations of the non-zero entries.
        """
        vals = []
        for i in range(self.nrows()):
            for j in range(self.ncols()):
                x = self.units[i, j]
                if x:
                    vals.append(self.val + x.valuation(self.p))
        return vals

    def canonicalise(self):
        """
        Move the largest common power of `p` of the units into the shared valuation.

        The zero matrix gets valuation 0.
        """
        if self.is_zero():
            self.val = ZZ(0)
            return
        v = min(x.valuation(self.p) for x in self.units.list() if x)
        if v:
            pv = self.p**v
            self.units = self.units.apply_map(lambda x: x // pv)
            self.val += v

    def transpose(self):
        """
        EXAMPLES::

            sage: from diagonalFrobenius.padic_values import pAdicMatrix
            sage: pAdicMatrix(3, 4, [[0, 1], [2, 0]], 1).transpose()
            [0 2]
            [1 0] * 3^1 + O(3^4)
        """
        return pAdicMatrix(self.p, self.N, self.units.transpose(), self.val)

    def lift(self):
        r"""
        The matrix over `\QQ` with entries `p^{val} U[i,j]`.

        EXAMPLES::

            sage: from diagonalFrobenius.padic_values import pAdicMatrix
            sage: pAdicMatrix(3, 4, [[0, 1], [2, 0]], -1).lift()
            [  0 1/3]
            [2/3   0]
        """
        return QQ(self.p)**self.val * self.units.change_ring(QQ)

    def to_matrix(self, R=None):
        """
        The matrix over ``R``, by default ``Qp(p, N)``, with every entry
        known to absolute precision `N`.

        EXAMPLES::

            sage: from diagonalFrobenius.padic_values import pAdicMatrix
            sage: F = pAdicMatrix(3, 4, [[0, 1], [2, 0]], 1).to_matrix()
            sage: F[0, 1]
            3 + O(3^4)
            sage: F.det() == -18
            True
        """
        if R is None:
            R = Qp(self.p, self.N)
        rows = [[self.entry(i, j).in_ring(R) for j in range(self.ncols())]
                for i in range(self.nrows())]
        return matrix(R, self.nrows(), self.ncols(), rows)
