# application/freight_quote_service.py
from __future__ import annotations
from typing import Dict, List, Optional, Sequence, Tuple
import logging

from domain.countries import lookup_country
from domain.errors import FreightError, NoPriceDataError, NoRatesAvailableError
from domain.models import Country, FreightEstimate, FreightQuoteResult, ProviderTier
from domain.shipment import ShipmentRequest, resolve_location, round_half_up
from integration.freight_relay_client import FreightRelayClient
from integration.freightos_payload import parse_provider_quote

log = logging.getLogger(__name__)

# tryb z formularza -> fragmenty etykiet Freightos (dopasowanie bez wielkości liter)
MODE_ALIASES: Dict[str, Tuple[str, ...]] = {
    "air": ("air",),
    "ocean": ("LCL", "FCL"),
    "express": ("express", "air"),
}


def _matches(label: Optional[str], aliases: Sequence[str]) -> bool:
    if not label:
        return False
    low = label.lower()
    return any(a.lower() in low for a in aliases)


def select_tier(tiers: List[ProviderTier], requested_mode: str) -> ProviderTier:
    """
    Pierwszy tier (w kolejności providera), którego etykieta zawiera alias
    żądanego trybu. Brak dopasowania -> pierwszy tier z listy, nawet jeśli
    to inny tryb; wołający widzi to w resolved_mode.
    """
    if not tiers:
        raise NoRatesAvailableError("No freight rates available for this route")

    aliases = MODE_ALIASES.get((requested_mode or "").lower(), ())
    for tier in tiers:
        if _matches(tier.mode, aliases):
            return tier

    fallback = tiers[0]
    log.warning(
        "No '%s' tier among %s, falling back to '%s'",
        requested_mode, [t.mode for t in tiers], fallback.mode,
    )
    return fallback


def reduce_tier(tier: ProviderTier, requested_mode: str) -> FreightEstimate:
    if tier.price is None:
        raise NoPriceDataError("No price data available in response")

    min_cost = tier.price.min_amount or 0.0
    max_cost = tier.price.max_amount or 0.0
    avg_cost = (min_cost + max_cost) / 2
    currency = tier.price.currency or "USD"

    t_min = tier.transit_times.min_days if tier.transit_times else None
    t_max = tier.transit_times.max_days if tier.transit_times else None
    if t_min is not None and t_max is not None:
        transit_days: Optional[int] = round_half_up((t_min + t_max) / 2)
    else:
        transit_days = t_min if t_min is not None else t_max

    return FreightEstimate(
        min_cost=min_cost,
        max_cost=max_cost,
        avg_cost=avg_cost,
        currency=currency,
        resolved_mode=tier.mode or requested_mode,
        requested_mode=requested_mode,
        transit_days=transit_days,
        transit_days_min=t_min,
        transit_days_max=t_max,
        mode_mismatch=tier.mode is not None
        and not _matches(tier.mode, MODE_ALIASES.get((requested_mode or "").lower(), ())),
    )


class FreightQuoteService:
    """Wycena frachtu: lokalizacje -> relay -> parser -> wybór trybu -> redukcja kosztu."""

    def __init__(self, client: Optional[FreightRelayClient] = None) -> None:
        self._client = client or FreightRelayClient()

    def quote(
        self,
        request: ShipmentRequest,
        origin_country: Optional[Country] = None,
        destination_country: Optional[Country] = None,
    ) -> FreightQuoteResult:
        # nigdy nie rzuca – UI ma dostać sukces albo czytelny błąd
        try:
            resolved = request.with_locations(
                resolve_location(request.origin, origin_country),
                resolve_location(request.destination, destination_country),
            )
            log.info(
                "Freight quote: %s -> %s (%skg, %s)",
                resolved.origin, resolved.destination, resolved.weight, resolved.mode,
            )
            payload = self._client.fetch(resolved)
            provider_quote = parse_provider_quote(payload)
            tier = select_tier(provider_quote.tiers, resolved.mode)
            estimate = reduce_tier(tier, resolved.mode)
        except FreightError as e:
            log.warning("Freight quote failed (%s): %s", type(e).__name__, e)
            return FreightQuoteResult.failure(e.message, type(e).__name__)
        except Exception:
            log.exception("Unexpected error while quoting freight")
            return FreightQuoteResult.failure(
                "Failed to fetch freight quote. Please try again later.", "UnexpectedError"
            )

        log.info(
            "Freight quote: %.2f %s (%s-%s), %s days, mode=%s",
            estimate.avg_cost, estimate.currency, estimate.min_cost, estimate.max_cost,
            estimate.transit_days if estimate.transit_days is not None else "N/A",
            estimate.resolved_mode,
        )
        return FreightQuoteResult.ok(estimate)

    def calculate_freight_cost(
        self,
        origin: str,
        destination: str,
        weight: float,
        mode: str = "air",
        load_type: str = "boxes",
    ) -> FreightQuoteResult:
        """Wycena po kodach krajów (ISO2/ISO3) – miasta-huby dobiera katalog krajów."""
        request = ShipmentRequest(
            origin=origin, destination=destination, weight=weight, mode=mode, load_type=load_type
        )
        return self.quote(request, lookup_country(origin), lookup_country(destination))
