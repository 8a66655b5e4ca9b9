# Load the Sage library before the package modules import from it piecemeal.
import sage.all  # noqa: F401
