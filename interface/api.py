# interface/api.py
import logging

import requests
from flask import Blueprint, Response, current_app, jsonify, request

from application.comparison_export import comparison_to_csv
from application.comparison_service import ComparisonRequest, LandedCostComparisonService
from application.freight_quote_service import FreightQuoteService
from application.landed_cost import ComparisonEntry, analyze
from domain.countries import country_name
from domain.errors import ProviderDataError, ValidationError
from domain.models import TariffCalculationResult
from integration.freight_relay_client import FreightRelayClient
from integration.freightos_adapter import FreightosAdapter
from integration.tariff_backend_client import TariffBackendClient

api_bp = Blueprint("api", __name__, url_prefix="/api")
log = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


# --------- Usługi (leniwie, per aplikacja – testy podmieniają w app.extensions) ----------

def _freightos() -> FreightosAdapter:
    ext = current_app.extensions
    if "freightos_adapter" not in ext:
        ext["freightos_adapter"] = FreightosAdapter(
            url=current_app.config["FREIGHTOS_API_URL"],
            timeout=current_app.config["FREIGHT_TIMEOUT"],
        )
    return ext["freightos_adapter"]


def _freight_service() -> FreightQuoteService:
    ext = current_app.extensions
    if "freight_quote_service" not in ext:
        cfg = current_app.config
        ext["freight_quote_service"] = FreightQuoteService(
            FreightRelayClient(
                base_url=cfg["FREIGHT_RELAY_BASE_URL"],
                path=cfg["FREIGHT_RELAY_PATH"],
                timeout=cfg["FREIGHT_TIMEOUT"],
            )
        )
    return ext["freight_quote_service"]


def _comparison_service() -> LandedCostComparisonService:
    ext = current_app.extensions
    if "comparison_service" not in ext:
        cfg = current_app.config
        ext["comparison_service"] = LandedCostComparisonService(
            tariff_client=TariffBackendClient(
                base_url=cfg["TARIFF_API_BASE_URL"],
                token=cfg["TARIFF_API_TOKEN"],
                timeout=cfg["TARIFF_TIMEOUT"],
            ),
            freight_service=_freight_service(),
            max_workers=cfg["COMPARISON_MAX_WORKERS"],
        )
    return ext["comparison_service"]


# --------- Relay do Freightos ----------

@api_bp.route("/freight", methods=["GET", "OPTIONS"])
def freight_relay():
    """
    Relay do kalkulatora Freightos (ta sama domena – brak CORS, brak kluczy w przeglądarce).

    Parametry:
      origin, destination, weight [wymagane]
      width/length/height (domyślnie 50), loadtype (boxes), quantity (1)
    """
    if request.method == "OPTIONS":
        return jsonify({}), 200, CORS_HEADERS

    origin = request.args.get("origin")
    destination = request.args.get("destination")
    weight = request.args.get("weight")
    if not origin or not destination or not weight:
        return jsonify({"error": "Missing required parameters: origin, destination, weight"}), 400

    params = {
        "origin": origin,
        "destination": destination,
        "weight": weight,
        "width": request.args.get("width"),
        "length": request.args.get("length"),
        "height": request.args.get("height"),
        "loadtype": request.args.get("loadtype"),
        "quantity": request.args.get("quantity"),
    }
    try:
        data = _freightos().shipping_calculator(params)
    except requests.HTTPError as e:
        resp = e.response
        status = resp.status_code if resp is not None else 502
        reason = (resp.reason if resp is not None else "") or ""
        return jsonify({"error": f"Freightos API error: {status} {reason}".strip()}), status
    except ValueError:
        # JSONDecodeError z requests dziedziczy też po RequestException – musi być wcześniej
        log.error("[Freight Proxy] Freightos returned a non-JSON body")
        return jsonify({"error": "Freightos API returned an invalid response"}), 502
    except requests.RequestException as e:
        log.error("[Freight Proxy] Error: %s", e)
        return jsonify({"error": str(e) or "Failed to fetch freight quote"}), 502

    return jsonify(data), 200, CORS_HEADERS


# --------- Wycena frachtu (znormalizowana) ----------

@api_bp.route("/freight/quote")
def freight_quote():
    """
    Zwraca znormalizowaną wycenę: {success, data: {minCost, maxCost, avgCost, ...}} albo {success: false, error}.

    Parametry:
      ?origin=CN&destination=US&weight=500&mode=ocean&loadtype=boxes
    """
    try:
        weight = float(request.args.get("weight", ""))
    except ValueError:
        return jsonify({"error": "Parameter 'weight' must be a number (kg)"}), 400

    result = _freight_service().calculate_freight_cost(
        origin=(request.args.get("origin") or "").strip(),
        destination=(request.args.get("destination") or "").strip(),
        weight=weight,
        mode=(request.args.get("mode") or current_app.config["FREIGHT_DEFAULT_MODE"]).lower(),
        load_type=(request.args.get("loadtype") or current_app.config["FREIGHT_DEFAULT_LOADTYPE"]).lower(),
    )
    return jsonify(result.to_dict())


# --------- Porównanie krajów ----------

def _json_body():
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Body must be a JSON object")
    return payload


def _entries_from_payload(payload):
    rows = payload.get("results")
    if not isinstance(rows, list):
        raise ValidationError("Body must contain a 'results' list")
    entries = []
    for row in rows:
        if not isinstance(row, dict) or not isinstance(row.get("result"), dict):
            raise ValidationError("Each entry needs 'country' and a 'result' object")
        code = str(row.get("country") or "").upper()
        entries.append(ComparisonEntry(
            country=code,
            country_name=row.get("countryName") or country_name(code),
            result=_tariff_result(code, row["result"]),
        ))
    return entries


def _tariff_result(code, raw):
    try:
        return TariffCalculationResult.from_dict(raw)
    except ProviderDataError as e:
        raise ValidationError(f"Invalid result for '{code}': {e.message}") from e


@api_bp.route("/compare/rank", methods=["POST"])
def rank_comparison():
    """Ranking gotowych wyników z backendu taryfowego (bez wołania usług zewnętrznych)."""
    try:
        payload = _json_body()
        entries = _entries_from_payload(payload)
    except ValidationError as e:
        return jsonify({"error": e.message}), 400
    return jsonify(analyze(entries).to_dict())


@api_bp.route("/compare", methods=["POST"])
def compare_countries():
    """
    Pełne porównanie: cło z backendu + (opc.) fracht i ubezpieczenie, per kraj.

    Body JSON (camelCase jak w formularzu):
      destinationCountry, sourceCountries[], productCode, tradeValue, transactionDate [wymagane]
      netWeight, includeFreight, freightMode, includeInsurance, insuranceRate (opc.)
    """
    try:
        req = ComparisonRequest.from_dict(_json_body())
        analysis = _comparison_service().compare(req)
    except ValidationError as e:
        return jsonify({"error": e.message}), 400
    return jsonify(analysis.to_dict())


@api_bp.route("/compare/export", methods=["POST"])
def export_comparison():
    try:
        payload = _json_body()
        entries = _entries_from_payload(payload)
    except ValidationError as e:
        return jsonify({"error": e.message}), 400

    destination = str(payload.get("destinationCountry") or "")
    product = str(payload.get("productCode") or "")
    csv_text = comparison_to_csv(analyze(entries), destination, product)
    file_name = payload.get("fileName") or "tariff-comparison"
    return Response(
        csv_text,
        mimetype="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{file_name}.csv"'},
    )
