from __future__ import annotations

import fitz
from fastapi.testclient import TestClient
import httpx

from submittal_api.errors import PacketAssemblyError
from submittal_api.main import create_app
from submittal_api.services import DocumentFetcher, PacketAssembler
from submittal_api.settings import Settings


def _pdf_payload(text: str, *, page_count: int = 1) -> bytes:
    document = fitz.open()
    for page_index in range(page_count):
        page = document.new_page()
        page.insert_text((72, 72), f"{text} (page {page_index + 1})")
    payload = document.tobytes()
    document.close()
    return payload


def _assembler() -> PacketAssembler:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/docs/tds.pdf":
            return httpx.Response(200, content=_pdf_payload("TDS", page_count=2))
        return httpx.Response(404)

    return PacketAssembler(
        fetcher=DocumentFetcher(
            content_origin="https://assets.example.test",
            transport=httpx.MockTransport(handler),
        )
    )


def _client(settings: Settings | None = None, assembler=None, **kwargs) -> TestClient:
    app = create_app(settings or Settings(), assembler=assembler or _assembler())
    return TestClient(app, **kwargs)


def _request_body(documents: list[dict[str, str]] | None = None) -> dict[str, object]:
    return {
        "projectData": {
            "projectName": "Harbor Point #7",
            "submittedTo": "Coastal Architects",
            "preparedBy": "J. Rivera",
            "status": {"forReview": True},
            "submittalType": {"tds": True},
        },
        "documents": documents or [],
    }


def test_generate_packet_returns_pdf_attachment() -> None:
    client = _client()

    response = client.post(
        "/generate-packet",
        json=_request_body(
            [
                {"id": "tds", "name": "TDS", "url": "/docs/tds.pdf", "type": "TDS"},
                {"id": "leed", "name": "LEED Guide", "url": "/docs/leed.pdf", "type": "LEED"},
            ]
        ),
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert (
        response.headers["content-disposition"]
        == 'attachment; filename="Harbor_Point__7_Packet.pdf"'
    )
    assert response.headers["content-length"] == str(len(response.content))
    assert response.headers["x-packet-page-count"] == "7"
    assert response.headers["x-trace-id"]
    document = fitz.open(stream=response.content, filetype="pdf")
    assert document.page_count == 7
    document.close()


def test_generate_packet_alias_route_matches_primary_route() -> None:
    client = _client()

    response = client.post("/api/packets", json=_request_body())

    assert response.status_code == 200
    assert response.headers["x-packet-page-count"] == "1"
    assert response.content.startswith(b"%PDF")


def test_generate_packet_rejects_missing_project_fields() -> None:
    client = _client()
    body = _request_body()
    del body["projectData"]["projectName"]  # type: ignore[index]

    response = client.post("/generate-packet", json=body)

    assert response.status_code == 422
    payload = response.json()
    assert payload["error"]["code"] == "VALIDATION_ERROR"
    assert payload["error"]["message"] == "Request validation failed"
    assert "projectName" in payload["error"]["details"]
    assert payload["error"]["trace_id"] == response.headers["x-trace-id"]


def test_generate_packet_hides_validation_details_in_production() -> None:
    client = _client(Settings(environment="production"))

    response = client.post("/generate-packet", json={"projectData": {}})

    assert response.status_code == 422
    assert response.json()["error"]["details"] is None


def test_generate_packet_rejects_too_many_documents() -> None:
    client = _client(Settings(packet_max_documents=1))
    documents = [
        {"id": "a", "name": "A", "url": "/docs/a.pdf"},
        {"id": "b", "name": "B", "url": "/docs/b.pdf"},
    ]

    response = client.post("/generate-packet", json=_request_body(documents))

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["policy_reason"] == "packet_document_count_exceeded"
    assert error["message"] == "A packet may include at most 1 documents"


def test_generate_packet_returns_error_envelope_when_assembly_fails() -> None:
    class FailingAssembler(PacketAssembler):
        async def assemble(self, project, documents):
            raise PacketAssemblyError(details="composite save failed")

    client = _client(assembler=FailingAssembler())

    response = client.post("/generate-packet", json=_request_body())

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "PACKET_GENERATION_FAILED"
    assert error["message"] == "Failed to generate packet"
    assert error["details"] == "composite save failed"
    assert error["trace_id"] == response.headers["x-trace-id"]


def test_generate_packet_hides_assembly_details_in_production() -> None:
    class FailingAssembler(PacketAssembler):
        async def assemble(self, project, documents):
            raise PacketAssemblyError(details="composite save failed")

    client = _client(Settings(environment="prod-eu"), assembler=FailingAssembler())

    response = client.post("/generate-packet", json=_request_body())

    assert response.status_code == 500
    assert response.json()["error"]["details"] is None


def test_unexpected_exception_returns_packet_failure_envelope() -> None:
    class ExplodingAssembler(PacketAssembler):
        async def assemble(self, project, documents):
            raise KeyError("boom")

    client = _client(assembler=ExplodingAssembler(), raise_server_exceptions=False)

    response = client.post("/generate-packet", json=_request_body())

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "PACKET_GENERATION_FAILED"
    assert error["message"] == "Failed to generate packet"


def test_root_and_health_endpoints() -> None:
    client = _client(Settings(app_name="Packet API Test"))

    root = client.get("/")
    health = client.get("/healthz")

    assert root.status_code == 200
    assert root.text == "PDF Packet Generator"
    assert health.json() == {"status": "ok", "service": "Packet API Test"}


def test_ops_metrics_reports_packet_outcomes() -> None:
    client = _client(Settings(packet_max_documents=1))

    client.post(
        "/generate-packet",
        json=_request_body([{"id": "tds", "name": "TDS", "url": "/docs/tds.pdf"}]),
    )
    client.post(
        "/generate-packet",
        json=_request_body(
            [
                {"id": "a", "name": "A", "url": "/docs/a.pdf"},
                {"id": "b", "name": "B", "url": "/docs/b.pdf"},
            ]
        ),
    )
    snapshot = client.get("/ops/metrics").json()["request_metrics"]

    assert snapshot["requests"]["total"] == 2
    assert snapshot["errors"]["total"] == 1
    packets = snapshot["packets"]
    assert packets["generated"] == 1
    assert packets["failed"] == 1
    assert packets["pages_total"] == 4
    assert packets["document_outcomes"] == {"merged": 1}
    assert [event["outcome"] for event in packets["audit_recent"]] == ["generated", "rejected"]


def test_cors_preflight_allows_configured_origin() -> None:
    client = _client(Settings(cors_allowed_origins=("https://submittals.example.test",)))

    response = client.options(
        "/generate-packet",
        headers={
            "Origin": "https://submittals.example.test",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "https://submittals.example.test"
