"""Errors raised by the splitting core.

Routers translate these into HTTP responses; the core itself never knows
about HTTP.
"""

from typing import Optional


class SplitError(Exception):
    """Base class for every error the splitting core raises."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self) -> dict:
        return {"error": type(self).__name__, "message": self.message}


class ValidationError(SplitError):
    """A claimed quantity or contributor name was rejected.

    When the rejection is a quantity-conservation failure, ``capacity`` is the
    item's total quantity and ``attempted`` is the claimed sum the change would
    have produced.
    """

    status_code = 400

    def __init__(
        self,
        message: str,
        capacity: Optional[int] = None,
        attempted: Optional[int] = None,
    ):
        super().__init__(message)
        self.capacity = capacity
        self.attempted = attempted

    @property
    def excess(self) -> Optional[int]:
        if self.capacity is None or self.attempted is None:
            return None
        return self.attempted - self.capacity

    def to_detail(self) -> dict:
        detail = super().to_detail()
        if self.capacity is not None:
            detail["capacity"] = self.capacity
            detail["attempted"] = self.attempted
        return detail


class NotFoundError(SplitError):
    """An item or contribution index does not exist."""

    status_code = 404


class InputError(SplitError):
    """The calculator received malformed line items or charges."""

    status_code = 422
