# domain/errors.py
from __future__ import annotations
from typing import Optional


class FreightError(Exception):
    """Bazowy błąd wyceny frachtu – zawsze z czytelnym komunikatem."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class TransportError(FreightError):
    """Nie udało się dojść do relay/providera (sieć, timeout, HTTP)."""


class ProviderHttpError(TransportError):
    def __init__(self, status: int, message: Optional[str] = None) -> None:
        super().__init__(message or f"Freight provider returned HTTP {status}")
        self.status = status


class ProviderDataError(FreightError):
    """HTTP 200, ale payload zawiera błąd albo ma zły kształt."""


class NoRatesAvailableError(FreightError):
    pass


class NoPriceDataError(FreightError):
    pass


class ValidationError(FreightError):
    """Brakujące / niepoprawne pole zapytania (np. waga <= 0)."""
