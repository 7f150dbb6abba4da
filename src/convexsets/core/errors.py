"""
Exception types raised by set operations.
"""


class ConvexSetError(Exception):
    """Base class for all errors raised by convexsets."""


class DimensionMismatch(ConvexSetError, ValueError):
    """Operands live in ambient spaces of different dimension."""

    def __init__(self, n1: int, n2: int, operation: str = "intersection"):
        self.dims = (n1, n2)
        super().__init__(
            f"cannot take the {operation} between a {n1}-dimensional set "
            f"and a {n2}-dimensional set"
        )


class UnsupportedOperation(ConvexSetError, NotImplementedError):
    """No algorithm is available for the given representation kinds."""

    def __init__(self, operation: str, *kinds: str, reason: str = ""):
        self.operation = operation
        self.kinds = kinds
        message = f"{operation} is not supported for {' and '.join(kinds)}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class AmbiguousDispatch(UnsupportedOperation):
    """Several equally specific algorithms match the same pair of kinds."""


class PreconditionViolation(ConvexSetError, ValueError):
    """An input violates a structural precondition of an algorithm."""


class LPSolverError(ConvexSetError, RuntimeError):
    """The LP backend failed for a reason other than infeasibility."""

    def __init__(self, message: str, status=None):
        self.status = status
        super().__init__(message)
