# integration/freightos_adapter.py
from __future__ import annotations
from typing import Dict, Mapping, Optional
import logging

import requests

from core.config import Config

log = logging.getLogger(__name__)


class FreightosAdapter:
    """
    Adapter do publicznego kalkulatora Freightos (strona serwera – używa go relay):
      GET https://ship.freightos.com/api/shippingCalculator
          ?origin=&destination=&weight=&width=&length=&height=&loadtype=&quantity=

    Bez autoryzacji, limit ~100 wywołań/h na IP.
    """

    DEFAULTS = {
        "width": "50",
        "length": "50",
        "height": "50",
        "loadtype": "boxes",
        "quantity": "1",
    }

    def __init__(self, session: Optional[requests.Session] = None, url: Optional[str] = None,
                 timeout: Optional[float] = None) -> None:
        self.s = session or requests.Session()
        self.url = url or Config.FREIGHTOS_API_URL
        self.timeout = timeout if timeout is not None else Config.FREIGHT_TIMEOUT

    def _headers(self) -> Dict[str, str]:
        # część API wymaga user-agenta
        return {"Accept": "application/json", "User-Agent": "Mozilla/5.0"}

    def build_params(self, params: Mapping[str, Optional[str]]) -> Dict[str, str]:
        out: Dict[str, str] = {
            "origin": str(params["origin"]),
            "destination": str(params["destination"]),
            "weight": str(params["weight"]),
        }
        for key, default in self.DEFAULTS.items():
            out[key] = str(params.get(key) or default)
        return out

    def shipping_calculator(self, params: Mapping[str, Optional[str]]) -> Dict:
        query = self.build_params(params)
        log.info("Freightos request: %s -> %s (%skg)", query["origin"], query["destination"], query["weight"])
        r = self.s.get(self.url, headers=self._headers(), params=query, timeout=self.timeout)
        if r.status_code >= 400:
            log.error("Freightos API error: %s %s", r.status_code, r.reason)
        r.raise_for_status()
        return r.json()
