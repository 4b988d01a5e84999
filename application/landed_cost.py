# application/landed_cost.py
"""
Koszt "landed" = wartość towaru + cło + fracht + ubezpieczenie, oraz ranking
krajów pochodzenia po tym koszcie.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from domain.models import (
    ComparisonAnalysis,
    ComparisonFailure,
    ComparisonResult,
    EffectiveRate,
    FreightEstimate,
    TariffCalculationResult,
)

BEST_FILL = "#22c55e"
WORST_FILL = "#ef4444"
DEFAULT_FILL = "#3b82f6"


@dataclass
class ComparisonEntry:
    country: str
    country_name: str
    result: TariffCalculationResult


def duty_amount(result: TariffCalculationResult) -> float:
    # zawieszenie / preferencja może dać 0
    return result.trade_final - result.trade_original


def total_cost(result: TariffCalculationResult) -> float:
    if result.total_landed_cost is not None:
        return result.total_landed_cost
    return result.trade_final


def effective_rate(result: TariffCalculationResult) -> EffectiveRate:
    """Stawka efektywna: zawieszenie > preferencja > MFN+specyficzna > MFN > specyficzna."""
    ar = result.applied_rate
    if ar.suspension is not None:
        rate = float(ar.suspension)
        return EffectiveRate(rate, "Suspended (0%)" if rate == 0 else "Suspended", True)
    if ar.pref_adval is not None:
        return EffectiveRate(float(ar.pref_adval), "Preferential")
    if ar.mfn_adval is not None and ar.specific is not None:
        return EffectiveRate(float(ar.mfn_adval), "Compound (MFN+Specific)")
    if ar.mfn_adval is not None:
        return EffectiveRate(float(ar.mfn_adval), "MFN (Ad-valorem)")
    if ar.specific is not None:
        specific_duty = float(ar.specific) * (result.net_weight or 1)
        if not result.trade_original:
            return EffectiveRate(0.0, "Specific Duty")
        return EffectiveRate(specific_duty / result.trade_original * 100, "Specific Duty")
    return EffectiveRate(0.0, "No Rate")


def apply_landed_costs(
    result: TariffCalculationResult,
    freight: Optional[FreightEstimate] = None,
    insurance_rate: Optional[float] = None,
) -> TariffCalculationResult:
    """Dokleja fracht (średnia z wyceny) i ubezpieczenie (% wartości towaru)."""
    freight_cost = freight.avg_cost if freight is not None else None
    insurance_cost = (
        result.trade_original * insurance_rate / 100 if insurance_rate is not None else None
    )
    total = result.trade_final + (freight_cost or 0.0) + (insurance_cost or 0.0)
    return result.with_costs(
        freight_cost=freight_cost,
        freight_type=freight.resolved_mode if freight is not None else None,
        insurance_rate=insurance_rate,
        insurance_cost=insurance_cost,
        total_landed_cost=total,
    )


def rank_results(entries: Sequence[ComparisonEntry]) -> List[ComparisonResult]:
    """
    Sortowanie rosnąco po koszcie; sort jest stabilny, więc remisy zostają
    w kolejności wejścia i dostają kolejne (różne) rangi.
    """
    ordered: List[Tuple[float, ComparisonEntry]] = sorted(
        ((total_cost(e.result), e) for e in entries), key=lambda pair: pair[0]
    )
    if not ordered:
        return []

    best = ordered[0][0]
    ranked: List[ComparisonResult] = []
    for pos, (cost, entry) in enumerate(ordered, start=1):
        if pos == 1 or best == 0:
            diff = 0.0
        else:
            diff = (cost - best) / best * 100
        ranked.append(
            ComparisonResult(
                country=entry.country,
                country_name=entry.country_name,
                rank=pos,
                percent_diff=diff,
                result=entry.result,
                effective=effective_rate(entry.result),
            )
        )
    return ranked


def analyze(
    entries: Sequence[ComparisonEntry],
    failures: Iterable[ComparisonFailure] = (),
) -> ComparisonAnalysis:
    results = rank_results(entries)
    analysis = ComparisonAnalysis(results=results, failures=list(failures))
    if not results:
        return analysis

    analysis.best_index = 0
    analysis.worst_index = len(results) - 1
    for idx, r in enumerate(results):
        if idx == analysis.best_index:
            fill = BEST_FILL
        elif idx == analysis.worst_index:
            fill = WORST_FILL
        else:
            fill = DEFAULT_FILL
        analysis.chart_data.append({"country": r.country_name, "cost": total_cost(r.result), "fill": fill})
    return analysis
