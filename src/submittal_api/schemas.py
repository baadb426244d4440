from __future__ import annotations

from datetime import date as date_type
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from submittal_api.branding import DEFAULT_BRAND


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class ProjectStatus(_WireModel):
    for_review: bool = False
    for_approval: bool = False
    for_record: bool = False
    for_information_only: bool = False


class SubmittalTypes(_WireModel):
    tds: bool = False
    three_part_specs: bool = False
    test_report_icc_esr5194: bool = False
    test_report_icc_esl1645: bool = False
    fire_assembly: bool = False
    fire_assembly01: bool = False
    fire_assembly02: bool = False
    fire_assembly03: bool = False
    msds: bool = False
    leed_guide: bool = False
    installation_guide: bool = False
    warranty: bool = False
    samples: bool = False
    other: bool = False
    other_text: str | None = Field(default=None, max_length=200)


def _today() -> str:
    return date_type.today().strftime("%m/%d/%Y")


class ProjectData(_WireModel):
    project_name: str = Field(min_length=1, max_length=200)
    submitted_to: str = Field(max_length=200)
    prepared_by: str = Field(max_length=200)
    date: str = Field(default_factory=_today, max_length=64)
    project_number: str | None = Field(default=None, max_length=100)
    email_address: str = Field(default="", max_length=320)
    phone_number: str = Field(default="", max_length=64)
    product: str = Field(default=DEFAULT_BRAND.default_product, max_length=200)
    status: ProjectStatus = Field(default_factory=ProjectStatus)
    submittal_type: SubmittalTypes = Field(default_factory=SubmittalTypes)

    @field_validator("project_name")
    @classmethod
    def _require_visible_project_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("project_name must not be blank")
        return value

    @field_validator("date", mode="before")
    @classmethod
    def _default_blank_date(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return _today()
        return value

    @field_validator("product", mode="before")
    @classmethod
    def _default_blank_product(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_BRAND.default_product
        return value


class DocumentReference(_WireModel):
    id: str = Field(min_length=1, max_length=128)
    name: str = Field(min_length=1, max_length=300)
    url: str = Field(min_length=1, max_length=2048)
    type: str = Field(default="", max_length=100)


class GeneratePacketRequest(_WireModel):
    project_data: ProjectData
    documents: list[DocumentReference] = Field(default_factory=list)


class PacketDocumentSummary(BaseModel):
    document_id: str
    name: str
    outcome: Literal["merged", "partial", "unavailable", "parse_failed", "processing_failed"]
    pages_contributed: int
    failed_pages: list[int]


class ErrorBody(BaseModel):
    code: Literal[
        "VALIDATION_ERROR",
        "PACKET_GENERATION_FAILED",
    ]
    message: str
    trace_id: str
    details: str | None = None
    policy_reason: str | None = None


class ErrorEnvelope(BaseModel):
    error: ErrorBody
