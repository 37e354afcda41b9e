"""Exception types surfaced to the controller and UI."""

from __future__ import annotations


class DrinkSalesError(Exception):
    """Base class for every recoverable application error."""


class ConfigurationError(DrinkSalesError):
    """Invalid configuration value."""


class AuthError(DrinkSalesError):
    """Session or sign-in failure."""


class RepositoryError(DrinkSalesError):
    """A backend read or write failed."""


class SaleNotFoundError(RepositoryError):
    """The backend holds no sale with the given id."""

    def __init__(self, sale_id: int) -> None:
        self.sale_id = sale_id
        super().__init__(f"판매 내역을 찾을 수 없습니다 (id={sale_id})")


class ValidationError(DrinkSalesError):
    """User input rejected before any write is attempted."""


class PrinterError(DrinkSalesError):
    """Printer dependencies or hardware unavailable."""
