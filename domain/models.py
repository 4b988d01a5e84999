# domain/models.py
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from domain.errors import ProviderDataError


@dataclass
class Country:
    country_code: str
    name: str
    numeric_code: str = ""
    city: Optional[str] = None


@dataclass
class Dimensions:
    width: str
    length: str
    height: str


# ---------------- Freightos (po sparsowaniu) ----------------

@dataclass
class TierPrice:
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None
    currency: Optional[str] = None


@dataclass
class TransitTimes:
    min_days: Optional[int] = None
    max_days: Optional[int] = None


@dataclass
class ProviderTier:
    mode: Optional[str]
    price: Optional[TierPrice] = None
    transit_times: Optional[TransitTimes] = None


@dataclass
class ProviderQuote:
    tiers: List[ProviderTier] = field(default_factory=list)


# ---------------- Wynik wyceny frachtu ----------------

@dataclass
class FreightEstimate:
    min_cost: float
    max_cost: float
    avg_cost: float
    currency: str
    resolved_mode: str
    requested_mode: str
    transit_days: Optional[int] = None
    transit_days_min: Optional[int] = None
    transit_days_max: Optional[int] = None
    # tier z innego trybu niż żądany (fallback na pierwszy tier)
    mode_mismatch: bool = False


@dataclass
class FreightQuoteResult:
    success: bool
    data: Optional[FreightEstimate] = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    @classmethod
    def ok(cls, data: FreightEstimate) -> "FreightQuoteResult":
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: str, error_type: Optional[str] = None) -> "FreightQuoteResult":
        return cls(success=False, error=error, error_type=error_type)

    def to_dict(self) -> Dict[str, Any]:
        if not self.success or self.data is None:
            return {"success": False, "error": self.error, "errorType": self.error_type}
        d = self.data
        return {
            "success": True,
            "data": {
                "minCost": d.min_cost,
                "maxCost": d.max_cost,
                "avgCost": d.avg_cost,
                "currency": d.currency,
                "transitDays": d.transit_days,
                "transitDaysMin": d.transit_days_min,
                "transitDaysMax": d.transit_days_max,
                "mode": d.resolved_mode,
                "resolvedMode": d.resolved_mode,
                "requestedMode": d.requested_mode,
                "modeMismatch": d.mode_mismatch,
            },
        }


# ---------------- Wynik backendu taryfowego ----------------

def _num(v: Any) -> Optional[float]:
    if v is None or v == "":
        return None
    try:
        return float(v)
    except (TypeError, ValueError):
        return None


@dataclass
class AppliedRate:
    suspension: Optional[float] = None
    pref_adval: Optional[float] = None
    mfn_adval: Optional[float] = None
    specific: Optional[float] = None

    @classmethod
    def from_dict(cls, raw: Optional[Dict[str, Any]]) -> "AppliedRate":
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ProviderDataError("Tariff result: appliedRate is not an object")
        return cls(
            suspension=_num(raw.get("suspension")),
            pref_adval=_num(raw.get("prefAdval")),
            mfn_adval=_num(raw.get("mfnAdval")),
            specific=_num(raw.get("specific")),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = {
            "suspension": self.suspension,
            "prefAdval": self.pref_adval,
            "mfnAdval": self.mfn_adval,
            "specific": self.specific,
        }
        return {k: v for k, v in out.items() if v is not None}


@dataclass
class TariffCalculationResult:
    trade_original: float
    trade_final: float
    transaction_id: Optional[str] = None
    hs6: Optional[str] = None
    importer_code: Optional[str] = None
    exporter_code: Optional[str] = None
    transaction_date: Optional[str] = None
    net_weight: Optional[float] = None
    applied_rate: AppliedRate = field(default_factory=AppliedRate)
    suspension_note: Optional[str] = None
    suspension_active: Optional[bool] = None
    warnings: List[str] = field(default_factory=list)
    freight_cost: Optional[float] = None
    freight_type: Optional[str] = None
    insurance_rate: Optional[float] = None
    insurance_cost: Optional[float] = None
    total_landed_cost: Optional[float] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "TariffCalculationResult":
        """Backend zwraca camelCase (Spring) – mapujemy raz, na wejściu."""
        if not isinstance(raw, dict):
            raise ProviderDataError("Tariff result is not an object")
        raw_warnings = raw.get("warnings")
        if raw_warnings is None:
            raw_warnings = []
        if not isinstance(raw_warnings, list):
            raise ProviderDataError("Tariff result: warnings is not a list")
        warnings = [str(w) for w in raw_warnings]
        if raw.get("warning"):
            warnings.append(str(raw["warning"]))
        return cls(
            trade_original=_num(raw.get("tradeOriginal")) or 0.0,
            trade_final=_num(raw.get("tradeFinal")) or 0.0,
            transaction_id=raw.get("transactionId"),
            hs6=raw.get("hs6"),
            importer_code=raw.get("importerCode"),
            exporter_code=raw.get("exporterCode"),
            transaction_date=raw.get("transactionDate"),
            net_weight=_num(raw.get("netWeight")),
            applied_rate=AppliedRate.from_dict(raw.get("appliedRate")),
            suspension_note=raw.get("suspensionNote"),
            suspension_active=raw.get("suspensionActive"),
            warnings=warnings,
            freight_cost=_num(raw.get("freightCost")),
            freight_type=raw.get("freightType"),
            insurance_rate=_num(raw.get("insuranceRate")),
            insurance_cost=_num(raw.get("insuranceCost")),
            total_landed_cost=_num(raw.get("totalLandedCost")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transactionId": self.transaction_id,
            "hs6": self.hs6,
            "importerCode": self.importer_code,
            "exporterCode": self.exporter_code,
            "transactionDate": self.transaction_date,
            "tradeOriginal": self.trade_original,
            "tradeFinal": self.trade_final,
            "netWeight": self.net_weight,
            "appliedRate": self.applied_rate.to_dict(),
            "suspensionNote": self.suspension_note,
            "suspensionActive": self.suspension_active,
            "warnings": list(self.warnings),
            "freightCost": self.freight_cost,
            "freightType": self.freight_type,
            "insuranceRate": self.insurance_rate,
            "insuranceCost": self.insurance_cost,
            "totalLandedCost": self.total_landed_cost,
        }

    def with_costs(self, **changes: Any) -> "TariffCalculationResult":
        return replace(self, **changes)


# ---------------- Porównanie krajów ----------------

@dataclass
class EffectiveRate:
    rate: float
    rate_type: str
    is_suspended: bool = False


@dataclass
class ComparisonResult:
    country: str
    country_name: str
    rank: int
    percent_diff: float
    result: TariffCalculationResult
    effective: Optional[EffectiveRate] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "country": self.country,
            "countryName": self.country_name,
            "rank": self.rank,
            "percentDiff": self.percent_diff,
            "result": self.result.to_dict(),
        }
        if self.effective is not None:
            out["effectiveRate"] = self.effective.rate
            out["rateType"] = self.effective.rate_type
            out["isSuspended"] = self.effective.is_suspended
        return out


@dataclass
class ComparisonFailure:
    country: str
    country_name: str
    error: str

    def to_dict(self) -> Dict[str, Any]:
        return {"country": self.country, "countryName": self.country_name, "error": self.error}


@dataclass
class ComparisonAnalysis:
    results: List[ComparisonResult] = field(default_factory=list)
    failures: List[ComparisonFailure] = field(default_factory=list)
    best_index: Optional[int] = None
    worst_index: Optional[int] = None
    chart_data: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def has_results(self) -> bool:
        return bool(self.results)

    @property
    def message(self) -> Optional[str]:
        return None if self.results else "No comparable results"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "failures": [f.to_dict() for f in self.failures],
            "bestIndex": self.best_index,
            "worstIndex": self.worst_index,
            "chartData": self.chart_data,
            "hasResults": self.has_results,
            "message": self.message,
        }
