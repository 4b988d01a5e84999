# application/comparison_export.py
from __future__ import annotations

import pandas as pd

from application.landed_cost import duty_amount, effective_rate, total_cost
from domain.models import ComparisonAnalysis

COLUMNS = [
    "Rank",
    "Source Country",
    "Country Code",
    "Product Code",
    "Destination",
    "Product Value (USD)",
    "MFN Rate (%)",
    "Preferential Rate (%)",
    "Suspension Rate (%)",
    "Specific Duty (per kg)",
    "Effective Rate (%)",
    "Rate Type",
    "Duty Amount (USD)",
    "Freight Cost (USD)",
    "Freight Type",
    "Insurance Cost (USD)",
    "Insurance Rate (%)",
    "Total Landed Cost (USD)",
    "Percent Difference (%)",
]


def comparison_frame(analysis: ComparisonAnalysis, destination_country: str, product_code: str) -> pd.DataFrame:
    rows = []
    for r in analysis.results:
        res = r.result
        ar = res.applied_rate
        eff = r.effective or effective_rate(res)
        rows.append([
            r.rank,
            r.country_name,
            r.country,
            product_code,
            destination_country,
            res.trade_original or 0,
            ar.mfn_adval if ar.mfn_adval is not None else "",
            ar.pref_adval if ar.pref_adval is not None else "",
            ar.suspension if ar.suspension is not None else "",
            ar.specific if ar.specific is not None else "",
            f"{eff.rate:.2f}",
            eff.rate_type,
            duty_amount(res),
            res.freight_cost or 0,
            res.freight_type or "",
            res.insurance_cost or 0,
            res.insurance_rate or 0,
            total_cost(res),
            f"{r.percent_diff:.2f}",
        ])
    return pd.DataFrame(rows, columns=COLUMNS)


def comparison_to_csv(analysis: ComparisonAnalysis, destination_country: str, product_code: str) -> str:
    return comparison_frame(analysis, destination_country, product_code).to_csv(index=False)
