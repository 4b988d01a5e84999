# domain/countries.py
"""
Katalog krajów dla wyceny frachtu.

Kody ISO2/ISO3 normalizujemy przez pycountry, a miasto-hub (port/lotnisko)
dokładamy z tabeli poniżej – Freightos lepiej rozwiązuje nazwy miast niż
same kody krajów.
"""
from __future__ import annotations
from typing import Dict, Optional

import pycountry

from domain.models import Country

# ISO3 -> "miasto,kraj" w formacie akceptowanym przez Freightos
MAJOR_FREIGHT_HUBS: Dict[str, str] = {
    "USA": "New York,NY",
    "CHN": "Shanghai,China",
    "JPN": "Tokyo,Japan",
    "KOR": "Seoul,South Korea",
    "DEU": "Hamburg,Germany",
    "GBR": "London,UK",
    "FRA": "Paris,France",
    "IND": "Mumbai,India",
    "SGP": "Singapore",
    "AUS": "Sydney,Australia",
    "CAN": "Toronto,Canada",
    "MEX": "Mexico City,Mexico",
    "BRA": "Sao Paulo,Brazil",
    "ITA": "Milan,Italy",
    "ESP": "Barcelona,Spain",
    "NLD": "Rotterdam,Netherlands",
    "BEL": "Antwerp,Belgium",
    "THA": "Bangkok,Thailand",
    "VNM": "Ho Chi Minh City,Vietnam",
    "MYS": "Kuala Lumpur,Malaysia",
    "IDN": "Jakarta,Indonesia",
    "PHL": "Manila,Philippines",
    "ARE": "Dubai,UAE",
    "SAU": "Jeddah,Saudi Arabia",
    "ZAF": "Cape Town,South Africa",
    "EGY": "Cairo,Egypt",
    "TUR": "Istanbul,Turkey",
    "RUS": "Moscow,Russia",
    "POL": "Warsaw,Poland",
    "SWE": "Stockholm,Sweden",
    "NOR": "Oslo,Norway",
    "DNK": "Copenhagen,Denmark",
    "FIN": "Helsinki,Finland",
}


def _pycountry_record(code: str):
    code = (code or "").strip().upper()
    if len(code) == 2:
        return pycountry.countries.get(alpha_2=code)
    if len(code) == 3:
        if code.isdigit():
            return pycountry.countries.get(numeric=code)
        return pycountry.countries.get(alpha_3=code)
    return None


def lookup_country(code: str) -> Optional[Country]:
    rec = _pycountry_record(code)
    if rec is None:
        return None
    return Country(
        country_code=rec.alpha_3,
        name=getattr(rec, "common_name", None) or rec.name,
        numeric_code=rec.numeric,
        city=MAJOR_FREIGHT_HUBS.get(rec.alpha_3),
    )


def country_name(code: str) -> str:
    country = lookup_country(code)
    return country.name if country else code
