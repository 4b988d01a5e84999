# integration/freightos_payload.py
"""
Parser odpowiedzi kalkulatora Freightos.

Kształt (skrót):
  { "response": {
      "errors": "...",                              # opcjonalnie, przy HTTP 200
      "estimatedFreightRates": {
        "mode": [
          { "mode": "LCL",
            "price": { "min": {"moneyAmount": {"amount": 100, "currency": "USD"}},
                       "max": {"moneyAmount": {"amount": 300, "currency": "USD"}} },
            "transitTimes": {"min": 20, "max": 30, "unit": "days"} }
        ]
      }
  } }

Kontrakt walidujemy raz tutaj – dalej logika biznesowa dostaje już typy.
"""
from __future__ import annotations
from typing import Any, List, Optional

from domain.errors import NoRatesAvailableError, ProviderDataError
from domain.models import ProviderQuote, ProviderTier, TierPrice, TransitTimes


def embedded_error(payload: Any) -> Optional[str]:
    """Treść błędu zwróconego przez providera w body (lub None)."""
    if not isinstance(payload, dict):
        return None
    response = payload.get("response")
    if not isinstance(response, dict):
        return None
    errors = response.get("errors")
    if not errors:
        return None
    if isinstance(errors, list):
        return "; ".join(str(e) for e in errors)
    return str(errors)


def _amount(node: Any) -> Optional[float]:
    money = node.get("moneyAmount") if isinstance(node, dict) else None
    if not isinstance(money, dict):
        return None
    val = money.get("amount")
    if isinstance(val, bool):
        return None
    try:
        return float(val) if val is not None else None
    except (TypeError, ValueError):
        return None


def _currency(node: Any) -> Optional[str]:
    money = node.get("moneyAmount") if isinstance(node, dict) else None
    if not isinstance(money, dict):
        return None
    cur = money.get("currency")
    return str(cur) if cur else None


def _days(val: Any) -> Optional[int]:
    # 0 / brak / śmieci traktujemy jako "brak granicy"
    if isinstance(val, bool) or val is None:
        return None
    try:
        days = int(round(float(val)))
    except (TypeError, ValueError):
        return None
    return days if days > 0 else None


def _parse_tier(raw: Any) -> ProviderTier:
    if not isinstance(raw, dict):
        raise ProviderDataError(f"Freightos API: malformed rate entry {raw!r}")

    label = raw.get("mode")
    mode = str(label) if label else None

    price: Optional[TierPrice] = None
    raw_price = raw.get("price")
    if isinstance(raw_price, dict):
        lo, hi = raw_price.get("min"), raw_price.get("max")
        price = TierPrice(
            min_amount=_amount(lo),
            max_amount=_amount(hi),
            currency=_currency(lo) or _currency(hi),
        )

    transit: Optional[TransitTimes] = None
    raw_transit = raw.get("transitTimes")
    if isinstance(raw_transit, dict):
        transit = TransitTimes(min_days=_days(raw_transit.get("min")), max_days=_days(raw_transit.get("max")))

    return ProviderTier(mode=mode, price=price, transit_times=transit)


def parse_provider_quote(payload: Any) -> ProviderQuote:
    if not isinstance(payload, dict):
        raise ProviderDataError("Freightos API: unexpected response body")

    err = embedded_error(payload)
    if err:
        raise ProviderDataError(f"Freightos API: {err}")

    response = payload.get("response")
    if response is None:
        raise ProviderDataError("Freightos API: response object missing")
    if not isinstance(response, dict):
        raise ProviderDataError("Freightos API: response is not an object")

    rates = response.get("estimatedFreightRates")
    if rates is None:
        raise NoRatesAvailableError("No freight rates available for this route")
    if not isinstance(rates, dict):
        raise ProviderDataError("Freightos API: estimatedFreightRates is not an object")

    modes = rates.get("mode")
    if modes is None:
        raise NoRatesAvailableError("No freight rates available for this route")
    # pojedynczy tier bywa zwracany jako obiekt zamiast listy
    if isinstance(modes, dict):
        modes = [modes]
    if not isinstance(modes, list):
        raise ProviderDataError("Freightos API: estimatedFreightRates.mode is not a list")

    tiers: List[ProviderTier] = [_parse_tier(m) for m in modes]
    return ProviderQuote(tiers=tiers)
