import pytest
import requests

from application.freight_quote_service import FreightQuoteService
from integration.freight_relay_client import FreightRelayClient
from integration.freightos_adapter import FreightosAdapter


def test_relay_requires_origin_destination_weight(client):
    r = client.get("/api/freight?origin=Shanghai")
    assert r.status_code == 400
    assert r.get_json() == {"error": "Missing required parameters: origin, destination, weight"}


def test_relay_fills_defaults_and_passes_body_through(app, client, make_session, make_response, provider_payload, tier):
    upstream = provider_payload(tier("air", 10, 20))
    session = make_session(make_response(200, upstream))
    app.extensions["freightos_adapter"] = FreightosAdapter(session=session, url="https://freightos.test/calc")

    r = client.get("/api/freight", query_string={"origin": "Shanghai,China", "destination": "New York,NY", "weight": "5"})
    assert r.status_code == 200
    assert r.get_json() == upstream
    assert r.headers["Access-Control-Allow-Origin"] == "*"

    params = session.calls[0]["params"]
    assert (params["width"], params["length"], params["height"]) == ("50", "50", "50")
    assert params["loadtype"] == "boxes"
    assert params["quantity"] == "1"


def test_relay_passes_upstream_status(app, client, make_session, make_response):
    session = make_session(make_response(503, {}, reason="Service Unavailable"))
    app.extensions["freightos_adapter"] = FreightosAdapter(session=session)

    r = client.get("/api/freight?origin=A&destination=B&weight=1")
    assert r.status_code == 503
    assert r.get_json()["error"] == "Freightos API error: 503 Service Unavailable"


def test_relay_network_failure_is_bad_gateway(app, client, make_session):
    app.extensions["freightos_adapter"] = FreightosAdapter(session=make_session(error=requests.ConnectionError("down")))
    r = client.get("/api/freight?origin=A&destination=B&weight=1")
    assert r.status_code == 502
    assert "error" in r.get_json()


def test_relay_non_json_upstream_is_bad_gateway(app, client, make_session, make_response, no_json):
    app.extensions["freightos_adapter"] = FreightosAdapter(session=make_session(make_response(200, no_json)))
    r = client.get("/api/freight?origin=A&destination=B&weight=1")
    assert r.status_code == 502
    assert r.get_json() == {"error": "Freightos API returned an invalid response"}


def test_relay_json_decode_error_is_not_reported_as_network_failure(app, client, make_session):
    class HtmlResponse:
        status_code = 200

        def raise_for_status(self):
            pass

        def json(self):
            raise requests.exceptions.JSONDecodeError("Expecting value", "<html>", 0)

    app.extensions["freightos_adapter"] = FreightosAdapter(session=make_session(HtmlResponse()))
    r = client.get("/api/freight?origin=A&destination=B&weight=1")
    assert r.status_code == 502
    assert r.get_json()["error"] == "Freightos API returned an invalid response"


def test_relay_preflight(client):
    r = client.options("/api/freight")
    assert r.status_code == 200
    assert r.headers["Access-Control-Allow-Methods"] == "GET, OPTIONS"


def test_quote_endpoint_returns_tagged_result(app, client, make_session, make_response, provider_payload, tier):
    session = make_session(make_response(200, provider_payload(tier("FCL", 1000, 2000, transit={"min": 25, "max": 35}))))
    app.extensions["freight_quote_service"] = FreightQuoteService(
        FreightRelayClient(base_url="http://relay.test", session=session)
    )

    r = client.get("/api/freight/quote?origin=CN&destination=US&weight=500&mode=ocean")
    body = r.get_json()
    assert r.status_code == 200
    assert body["success"] is True
    assert body["data"]["avgCost"] == 1500
    assert body["data"]["transitDays"] == 30
    assert body["data"]["resolvedMode"] == "FCL"
    assert body["data"]["modeMismatch"] is False


def test_quote_endpoint_failure_is_still_200(app, client, make_session, make_response, provider_payload):
    app.extensions["freight_quote_service"] = FreightQuoteService(
        FreightRelayClient(base_url="http://relay.test", session=make_session(make_response(200, provider_payload())))
    )
    r = client.get("/api/freight/quote?origin=CN&destination=US&weight=5")
    assert r.status_code == 200
    assert r.get_json()["success"] is False


def test_quote_endpoint_rejects_non_numeric_weight(client):
    assert client.get("/api/freight/quote?origin=CN&destination=US&weight=abc").status_code == 400


def _ranking_body():
    return {"results": [
        {"country": "CHN", "result": {"tradeOriginal": 1000, "tradeFinal": 1200, "totalLandedCost": 1200}},
        {"country": "MEX", "result": {"tradeOriginal": 1000, "tradeFinal": 1000}},
    ]}


def test_rank_endpoint(client):
    r = client.post("/api/compare/rank", json=_ranking_body())
    body = r.get_json()
    assert r.status_code == 200
    assert [x["country"] for x in body["results"]] == ["MEX", "CHN"]
    assert body["results"][0]["countryName"] == "Mexico"
    assert body["results"][1]["percentDiff"] == 20.0
    assert body["bestIndex"] == 0


def test_rank_endpoint_validates_body(client):
    assert client.post("/api/compare/rank", json={"results": "nope"}).status_code == 400


def test_compare_endpoint_validation_error(client):
    r = client.post("/api/compare", json={"destinationCountry": "USA", "tradeValue": 10, "productCode": "24"})
    assert r.status_code == 400
    assert r.get_json()["error"] == "Select at least one source country"


def test_export_endpoint_returns_csv(client):
    body = dict(_ranking_body(), destinationCountry="USA", productCode="240120")
    r = client.post("/api/compare/export", json=body)
    assert r.status_code == 200
    assert r.mimetype == "text/csv"
    assert "tariff-comparison.csv" in r.headers["Content-Disposition"]
    lines = r.get_data(as_text=True).splitlines()
    assert lines[1].startswith("1,Mexico,MEX,240120,USA")


def test_quote_endpoint_forwards_loadtype(app, client, make_session, make_response, provider_payload, tier):
    session = make_session(make_response(200, provider_payload(tier("air", 10, 20))))
    app.extensions["freight_quote_service"] = FreightQuoteService(
        FreightRelayClient(base_url="http://relay.test", session=session)
    )
    r = client.get("/api/freight/quote?origin=CN&destination=US&weight=5&loadtype=Pallets")
    assert r.get_json()["success"] is True
    assert session.calls[0]["params"]["loadtype"] == "pallets"

    client.get("/api/freight/quote?origin=CN&destination=US&weight=5")
    assert session.calls[1]["params"]["loadtype"] == "boxes"


def test_quote_endpoint_unknown_loadtype_is_validation_failure(app, client, make_session, make_response):
    session = make_session(make_response(200, {}))
    app.extensions["freight_quote_service"] = FreightQuoteService(
        FreightRelayClient(base_url="http://relay.test", session=session)
    )
    body = client.get("/api/freight/quote?origin=CN&destination=US&weight=5&loadtype=barrels").get_json()
    assert body["success"] is False
    assert body["errorType"] == "ValidationError"
    assert session.calls == []


@pytest.mark.parametrize("path", ["/api/compare/rank", "/api/compare/export", "/api/compare"])
def test_compare_endpoints_reject_non_object_body(client, path):
    r = client.post(path, json=[1])
    assert r.status_code == 400
    assert r.get_json() == {"error": "Body must be a JSON object"}


@pytest.mark.parametrize("result", [
    {"tradeOriginal": 1, "tradeFinal": 2, "warnings": 5},
    {"tradeOriginal": 1, "tradeFinal": 2, "appliedRate": [5]},
])
@pytest.mark.parametrize("path", ["/api/compare/rank", "/api/compare/export"])
def test_malformed_result_is_bad_request(client, path, result):
    r = client.post(path, json={"results": [{"country": "CHN", "result": result}]})
    assert r.status_code == 400
    assert r.get_json()["error"].startswith("Invalid result for 'CHN'")


def test_rank_endpoint_exposes_effective_rate(client):
    body = _ranking_body()
    body["results"][0]["result"]["appliedRate"] = {"mfnAdval": 20}
    ranked = client.post("/api/compare/rank", json=body).get_json()["results"]
    chn = next(x for x in ranked if x["country"] == "CHN")
    assert chn["effectiveRate"] == 20.0
    assert chn["rateType"] == "MFN (Ad-valorem)"
    assert chn["isSuspended"] is False
