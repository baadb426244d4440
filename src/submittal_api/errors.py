from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    code: str
    message: str
    status_code: int
    policy_reason: str | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)


class PayloadValidationError(ApiError):
    def __init__(
        self,
        message: str = "Request validation failed",
        *,
        policy_reason: str | None = None,
    ) -> None:
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=422,
            policy_reason=policy_reason,
        )


class PacketAssemblyError(ApiError):
    def __init__(
        self,
        message: str = "Failed to generate packet",
        *,
        details: str | None = None,
    ) -> None:
        super().__init__(code="PACKET_GENERATION_FAILED", message=message, status_code=500)
        self.details = details
