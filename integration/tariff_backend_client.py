# integration/tariff_backend_client.py
from __future__ import annotations
from typing import Any, Dict, Optional

import requests

from core.config import Config
from domain.errors import ProviderDataError, ProviderHttpError, TransportError
from domain.models import TariffCalculationResult


class TariffBackendClient:
    """
    Backend taryfowy (POST /api/calculate) – liczy cło, my tylko czytamy wynik
    (tradeOriginal, tradeFinal, appliedRate, ...).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = (base_url or Config.TARIFF_API_BASE_URL).rstrip("/")
        self.token = token if token is not None else Config.TARIFF_API_TOKEN
        self.s = session or requests.Session()
        self.timeout = timeout if timeout is not None else Config.TARIFF_TIMEOUT

    def _headers(self) -> Dict[str, str]:
        h = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            h["Authorization"] = f"Bearer {self.token}"
        return h

    def calculate(self, payload: Dict[str, Any]) -> TariffCalculationResult:
        url = f"{self.base_url}/api/calculate"
        try:
            r = self.s.post(url, json=payload, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"Tariff backend unreachable: {e}") from e

        if r.status_code >= 400:
            raise ProviderHttpError(r.status_code, self._error_message(r))
        try:
            data = r.json()
        except ValueError as e:
            raise ProviderDataError("Tariff backend returned a non-JSON body") from e
        if not isinstance(data, dict):
            raise ProviderDataError("Tariff backend returned an unexpected body")
        return TariffCalculationResult.from_dict(data)

    @staticmethod
    def _error_message(r: requests.Response) -> str:
        # Spring zwraca 'message', nasze proxy 'error'
        try:
            body = r.json()
        except ValueError:
            text = (r.text or "").strip()
            return text[:500] if text else f"HTTP {r.status_code}"
        if isinstance(body, dict):
            if body.get("message"):
                return str(body["message"])
            if body.get("error"):
                return str(body["error"])
        if isinstance(body, str) and body:
            return body
        return f"HTTP {r.status_code}"
