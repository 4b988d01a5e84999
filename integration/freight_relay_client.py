# integration/freight_relay_client.py
from __future__ import annotations
from typing import Any, Dict, Optional, Tuple
import logging

import requests

from core.config import Config
from domain.errors import ProviderDataError, ProviderHttpError, TransportError
from domain.shipment import ShipmentRequest
from integration.freightos_payload import embedded_error

log = logging.getLogger(__name__)


class FreightRelayClient:
    """
    Klient wycen frachtu – idzie wyłącznie przez nasz relay (/api/freight),
    nigdy bezpośrednio do Freightos (CORS + dane dostępowe zostają po stronie serwera).

    Jedna próba na wywołanie, bez retry – o ponowieniu decyduje wołający.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        path: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = (base_url or Config.FREIGHT_RELAY_BASE_URL).rstrip("/")
        self.path = "/" + (path or Config.FREIGHT_RELAY_PATH).lstrip("/")
        self.s = session or requests.Session()
        self.timeout = timeout if timeout is not None else Config.FREIGHT_TIMEOUT

        # debug/diag
        self.last_request: Optional[Tuple[str, Dict[str, str]]] = None
        self.last_status: Optional[int] = None

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.path}"

    def fetch(self, request: ShipmentRequest) -> Dict[str, Any]:
        request.validate()
        params = request.to_query_params()
        self.last_request = (self.url, params.copy())
        log.debug("Freight relay request: %s %s", self.url, params)

        try:
            r = self.s.get(self.url, params=params, headers={"Accept": "application/json"}, timeout=self.timeout)
        except requests.Timeout as e:
            raise TransportError(f"Freight relay timed out after {self.timeout:g}s") from e
        except requests.RequestException as e:
            raise TransportError(f"Freight relay unreachable: {e}") from e

        self.last_status = r.status_code
        if r.status_code >= 400:
            raise ProviderHttpError(r.status_code, self._error_message(r))

        try:
            data = r.json()
        except ValueError as e:
            raise ProviderDataError("Freight relay returned a non-JSON body") from e

        err = embedded_error(data)
        if err:
            raise ProviderDataError(f"Freightos API: {err}")
        return data

    @staticmethod
    def _error_message(r: requests.Response) -> str:
        try:
            body = r.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        reason = getattr(r, "reason", "") or ""
        return f"Freight relay error: {r.status_code} {reason}".strip()
