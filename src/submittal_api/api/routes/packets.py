from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from submittal_api.errors import PacketAssemblyError, PayloadValidationError
from submittal_api.schemas import ErrorEnvelope, GeneratePacketRequest
from submittal_api.services import PacketAssembler
from submittal_api.telemetry import RequestMetrics


LOGGER = logging.getLogger(__name__)


def build_packets_router(
    *,
    assembler: PacketAssembler | None = None,
    request_metrics: RequestMetrics | None = None,
    max_documents: int = 100,
    expose_error_details: bool = True,
) -> APIRouter:
    router = APIRouter(tags=["packets"])
    assembler = assembler or PacketAssembler()

    def _error_response(
        *,
        status_code: int,
        trace_id: str,
        code: str,
        message: str,
        details: str | None = None,
        policy_reason: str | None = None,
    ) -> JSONResponse:
        payload = ErrorEnvelope(
            error={
                "code": code,
                "message": message,
                "trace_id": trace_id,
                "details": details,
                "policy_reason": policy_reason,
            }
        )
        return JSONResponse(
            status_code=status_code,
            content=payload.model_dump(mode="json"),
            headers={"x-trace-id": trace_id},
        )

    def _record_packet_outcome(
        *,
        trace_id: str,
        outcome: str,
        document_count: int,
        page_count: int = 0,
        byte_size: int = 0,
        document_outcomes: tuple[str, ...] = (),
    ) -> None:
        if request_metrics is None:
            return
        request_metrics.record_packet_outcome(
            trace_id=trace_id,
            outcome=outcome,
            document_count=document_count,
            page_count=page_count,
            byte_size=byte_size,
            document_outcomes=document_outcomes,
        )

    @router.post("/generate-packet")
    @router.post("/api/packets")
    async def generate_packet(
        request: Request,
        payload: GeneratePacketRequest,
    ) -> Response:
        trace_id = getattr(request.state, "trace_id", "")
        document_count = len(payload.documents)

        if document_count > max_documents:
            _record_packet_outcome(
                trace_id=trace_id,
                outcome="rejected",
                document_count=document_count,
            )
            raise PayloadValidationError(
                f"A packet may include at most {max_documents} documents",
                policy_reason="packet_document_count_exceeded",
            )

        try:
            packet = await assembler.assemble(payload.project_data, payload.documents)
        except PacketAssemblyError as exc:
            _record_packet_outcome(
                trace_id=trace_id,
                outcome="failed",
                document_count=document_count,
            )
            return _error_response(
                status_code=exc.status_code,
                trace_id=trace_id,
                code=exc.code,
                message=exc.message,
                details=exc.details if expose_error_details else None,
            )

        _record_packet_outcome(
            trace_id=trace_id,
            outcome="generated",
            document_count=document_count,
            page_count=packet.page_count,
            byte_size=len(packet.payload),
            document_outcomes=tuple(outcome.kind.value for outcome in packet.outcomes),
        )
        LOGGER.info(
            "Packet %s ready for %s (%s pages)",
            packet.filename,
            payload.project_data.project_name,
            packet.page_count,
        )
        return Response(
            content=packet.payload,
            media_type="application/pdf",
            headers={
                "Content-Disposition": f'attachment; filename="{packet.filename}"',
                "Content-Length": str(len(packet.payload)),
                "x-packet-page-count": str(packet.page_count),
                "x-trace-id": trace_id,
            },
        )

    return router
