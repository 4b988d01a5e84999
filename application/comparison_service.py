# application/comparison_service.py
from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union
import logging
import math

from core.config import Config
from application.freight_quote_service import FreightQuoteService
from application.landed_cost import ComparisonEntry, analyze, apply_landed_costs
from domain.countries import country_name
from domain.errors import FreightError, ValidationError
from domain.models import ComparisonAnalysis, ComparisonFailure
from integration.tariff_backend_client import TariffBackendClient

log = logging.getLogger(__name__)

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off", ""}


def _flag(value: Any, name: str) -> bool:
    """Checkbox z formularza: bool albo "true"/"false" (bez bool("false") == True)."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in _TRUE | _FALSE:
        return value.strip().lower() in _TRUE
    raise ValidationError(f"Field '{name}' must be a boolean")


@dataclass
class ComparisonRequest:
    destination_country: str
    source_countries: List[str]
    product_code: str
    trade_value: float
    transaction_date: str
    net_weight: Optional[float] = None
    include_freight: bool = False
    freight_mode: str = "ocean"
    include_insurance: bool = False
    insurance_rate: float = field(default_factory=lambda: Config.DEFAULT_INSURANCE_RATE)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "ComparisonRequest":
        sources = raw.get("sourceCountries") or []
        if isinstance(sources, str):
            sources = [s for s in sources.split(",") if s.strip()]
        if not isinstance(sources, list):
            raise ValidationError("Field 'sourceCountries' must be a list")
        try:
            trade_value = float(raw.get("tradeValue"))
            net_weight = float(raw["netWeight"]) if raw.get("netWeight") not in (None, "") else None
            insurance_rate = (
                float(raw["insuranceRate"]) if raw.get("insuranceRate") not in (None, "")
                else Config.DEFAULT_INSURANCE_RATE
            )
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid numeric field in comparison request: {e}") from e
        return cls(
            destination_country=str(raw.get("destinationCountry") or "").strip().upper(),
            source_countries=[str(s).strip().upper() for s in sources],
            product_code=str(raw.get("productCode") or "").strip(),
            trade_value=trade_value,
            transaction_date=str(raw.get("transactionDate") or ""),
            net_weight=net_weight,
            include_freight=_flag(raw.get("includeFreight"), "includeFreight"),
            freight_mode=str(raw.get("freightMode") or "ocean"),
            include_insurance=_flag(raw.get("includeInsurance"), "includeInsurance"),
            insurance_rate=insurance_rate,
        )

    def validate(self) -> None:
        if not self.destination_country:
            raise ValidationError("Missing required field: destinationCountry")
        if not self.source_countries:
            raise ValidationError("Select at least one source country")
        if not self.product_code:
            raise ValidationError("Missing required field: productCode")
        if not math.isfinite(self.trade_value) or self.trade_value <= 0:
            raise ValidationError("Trade value must be greater than 0")
        if self.net_weight is not None and not math.isfinite(self.net_weight):
            raise ValidationError("Net weight must be a finite number")
        if not math.isfinite(self.insurance_rate) or self.insurance_rate < 0:
            raise ValidationError("Insurance rate must be a non-negative number")
        if self.include_freight and (self.net_weight is None or self.net_weight <= 0):
            raise ValidationError("Net weight (kg) is required to estimate freight")

    def tariff_payload(self, source_country: str) -> Dict[str, Any]:
        return {
            "importerCode": self.destination_country,
            "exporterCode": source_country,
            "hs6": self.product_code,
            "tradeOriginal": self.trade_value,
            "netWeight": self.net_weight,
            "transactionDate": self.transaction_date,
        }


Outcome = Union[ComparisonEntry, ComparisonFailure]


class LandedCostComparisonService:
    """
    Porównanie krajów pochodzenia: dla każdego kraju osobno cło (backend),
    opcjonalnie fracht i ubezpieczenie; zadania lecą równolegle, a kraj z
    błędem wypada z rankingu zamiast psuć całe porównanie.
    """

    def __init__(
        self,
        tariff_client: Optional[TariffBackendClient] = None,
        freight_service: Optional[FreightQuoteService] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        self._tariffs = tariff_client or TariffBackendClient()
        self._freight = freight_service or FreightQuoteService()
        self._max_workers = max(1, max_workers or Config.COMPARISON_MAX_WORKERS)

    def _evaluate(self, req: ComparisonRequest, source: str) -> Outcome:
        # błąd jednego kraju nie może przerwać całego porównania
        name = country_name(source)
        try:
            return self._evaluate_country(req, source, name)
        except FreightError as e:
            log.warning("Tariff calculation failed for %s: %s", source, e)
            return ComparisonFailure(country=source, country_name=name, error=e.message)
        except Exception:
            log.exception("Unexpected error while comparing %s", source)
            return ComparisonFailure(
                country=source, country_name=name, error="Unexpected error while calculating landed cost"
            )

    def _evaluate_country(self, req: ComparisonRequest, source: str, name: str) -> Outcome:
        result = self._tariffs.calculate(req.tariff_payload(source))

        freight = None
        if req.include_freight:
            quote = self._freight.calculate_freight_cost(
                source, req.destination_country, req.net_weight or 0, req.freight_mode
            )
            if not quote.success:
                return ComparisonFailure(
                    country=source, country_name=name, error=f"Freight: {quote.error}"
                )
            freight = quote.data

        if freight is not None or req.include_insurance:
            result = apply_landed_costs(
                result,
                freight=freight,
                insurance_rate=req.insurance_rate if req.include_insurance else None,
            )
        return ComparisonEntry(country=source, country_name=name, result=result)

    def compare(self, req: ComparisonRequest) -> ComparisonAnalysis:
        req.validate()
        log.info(
            "Comparing %d source countries -> %s (HS %s)",
            len(req.source_countries), req.destination_country, req.product_code,
        )
        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(req.source_countries))) as pool:
            futures = [pool.submit(self._evaluate, req, src) for src in req.source_countries]
            # kolejność wejścia, nie ukończenia – od niej zależą remisy w rankingu
            outcomes: List[Outcome] = [f.result() for f in futures]

        entries = [o for o in outcomes if isinstance(o, ComparisonEntry)]
        failures = [o for o in outcomes if isinstance(o, ComparisonFailure)]
        if not entries:
            log.warning("No comparable results (%d failures)", len(failures))
        return analyze(entries, failures)
