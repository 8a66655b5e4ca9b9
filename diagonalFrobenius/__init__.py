from .diagfrob import DiagonalFrobenius, diagonal_frobenius, diagonal_coefficients

__all__ = ["DiagonalFrobenius", "diagonal_frobenius", "diagonal_coefficients"]

assert DiagonalFrobenius

from .basis import CohomologyBasis, basis_size, congruence_classes
from .padic_values import pAdicMatrix, pAdicValUnit
from .precision import PrecisionPlan

assert CohomologyBasis
assert PrecisionPlan
__all__ += ["CohomologyBasis", "basis_size", "congruence_classes",
            "pAdicMatrix", "pAdicValUnit", "PrecisionPlan"]
