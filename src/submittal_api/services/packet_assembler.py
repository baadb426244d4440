from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import re
from typing import Sequence

import fitz
import httpx

from submittal_api.errors import PacketAssemblyError
from submittal_api.schemas import DocumentReference, PacketDocumentSummary, ProjectData
from submittal_api.services.document_fetcher import DocumentFetcher
from submittal_api.services.page_renderer import PageRenderer


LOGGER = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Document could not be loaded"
PARSE_FAILED_MESSAGE = "Document could not be loaded: not a readable PDF"
PROCESSING_FAILED_MESSAGE = "Document processing failed"
_FILENAME_DISALLOWED_PATTERN = re.compile(r"[^A-Za-z0-9]")


def page_failed_message(page_index: int) -> str:
    return f"Page {page_index + 1} could not be processed"


def packet_filename(project_name: str) -> str:
    """Filename stem for a packet; each character outside [A-Za-z0-9] becomes "_"."""
    return f"{_FILENAME_DISALLOWED_PATTERN.sub('_', project_name)}_Packet"


class DocumentOutcomeKind(str, Enum):
    MERGED = "merged"
    PARTIAL = "partial"
    UNAVAILABLE = "unavailable"
    PARSE_FAILED = "parse_failed"
    PROCESSING_FAILED = "processing_failed"


@dataclass(frozen=True)
class DocumentOutcome:
    document_id: str
    name: str
    kind: DocumentOutcomeKind
    pages_contributed: int
    failed_pages: tuple[int, ...] = ()

    def to_summary(self) -> PacketDocumentSummary:
        return PacketDocumentSummary(
            document_id=self.document_id,
            name=self.name,
            outcome=self.kind.value,
            pages_contributed=self.pages_contributed,
            failed_pages=list(self.failed_pages),
        )


@dataclass(frozen=True)
class AssembledPacket:
    payload: bytes
    page_count: int
    filename_stem: str
    outcomes: tuple[DocumentOutcome, ...]

    @property
    def filename(self) -> str:
        return f"{self.filename_stem}.pdf"


class PacketAssembler:
    def __init__(
        self,
        *,
        fetcher: DocumentFetcher | None = None,
        renderer: PageRenderer | None = None,
    ) -> None:
        self._fetcher = fetcher or DocumentFetcher()
        self._renderer = renderer or PageRenderer()

    async def assemble(
        self,
        project: ProjectData,
        documents: Sequence[DocumentReference],
    ) -> AssembledPacket:
        """Build the packet: cover, then divider and content per document, then page numbers.

        Per-document failures become error pages. Anything that breaks the
        composite itself is raised as PacketAssemblyError and no bytes are returned.
        """
        LOGGER.info("Generating packet for: %s", project.project_name)
        LOGGER.info("Processing %s documents", len(documents))

        try:
            composite = fitz.open()
        except Exception as exc:
            LOGGER.exception("Unable to create composite packet document")
            raise PacketAssemblyError(details=str(exc) or type(exc).__name__) from exc

        try:
            self._renderer.render_cover_page(composite, project)
            outcomes: list[DocumentOutcome] = []
            async with self._fetcher.open_client() as client:
                for reference in documents:
                    outcomes.append(
                        await self._process_document(composite, reference, client=client)
                    )
            self._renderer.apply_page_numbers(composite)
            page_count = composite.page_count
            payload = composite.tobytes(garbage=4, deflate=True)
        except Exception as exc:
            LOGGER.exception("Error generating packet for %s", project.project_name)
            raise PacketAssemblyError(details=str(exc) or type(exc).__name__) from exc
        finally:
            composite.close()

        LOGGER.info(
            "Packet generated successfully: %s pages, %s bytes", page_count, len(payload)
        )
        return AssembledPacket(
            payload=payload,
            page_count=page_count,
            filename_stem=packet_filename(project.project_name),
            outcomes=tuple(outcomes),
        )

    async def _process_document(
        self,
        composite: fitz.Document,
        reference: DocumentReference,
        *,
        client: httpx.AsyncClient,
    ) -> DocumentOutcome:
        LOGGER.info("Processing: %s", reference.name)
        divider_index = composite.page_count
        # Divider failures propagate to the whole-run handler in assemble().
        self._renderer.render_divider_page(
            composite, reference.name, reference.type, divider_index + 1
        )
        try:
            fetch_result = await self._fetcher.fetch(reference.url, client=client)
            if not fetch_result.ok or fetch_result.payload is None:
                self._renderer.render_error_page(composite, reference.name, FETCH_FAILED_MESSAGE)
                return self._outcome(
                    composite, reference, DocumentOutcomeKind.UNAVAILABLE, divider_index
                )

            source = self._load_source(fetch_result.payload, reference)
            if source is None:
                self._renderer.render_error_page(composite, reference.name, PARSE_FAILED_MESSAGE)
                return self._outcome(
                    composite, reference, DocumentOutcomeKind.PARSE_FAILED, divider_index
                )

            try:
                failed_pages = self._copy_pages(composite, source, reference)
                source_page_count = source.page_count
            finally:
                source.close()
        except Exception:
            LOGGER.exception("Error processing %s", reference.name)
            if composite.page_count > divider_index + 1:
                composite.delete_pages(
                    from_page=divider_index + 1, to_page=composite.page_count - 1
                )
            self._renderer.render_error_page(composite, reference.name, PROCESSING_FAILED_MESSAGE)
            return self._outcome(
                composite, reference, DocumentOutcomeKind.PROCESSING_FAILED, divider_index
            )

        LOGGER.info(
            "Successfully processed %s pages from %s", source_page_count, reference.name
        )
        kind = DocumentOutcomeKind.PARTIAL if failed_pages else DocumentOutcomeKind.MERGED
        return self._outcome(composite, reference, kind, divider_index, failed_pages)

    @staticmethod
    def _outcome(
        composite: fitz.Document,
        reference: DocumentReference,
        kind: DocumentOutcomeKind,
        divider_index: int,
        failed_pages: tuple[int, ...] = (),
    ) -> DocumentOutcome:
        return DocumentOutcome(
            document_id=reference.id,
            name=reference.name,
            kind=kind,
            pages_contributed=max(composite.page_count - divider_index - 1, 0),
            failed_pages=failed_pages,
        )

    @staticmethod
    def _load_source(payload: bytes, reference: DocumentReference) -> fitz.Document | None:
        try:
            source = fitz.open(stream=payload, filetype="pdf")
        except (RuntimeError, ValueError) as exc:
            LOGGER.warning("Unable to load %s as PDF: %s", reference.name, exc)
            return None
        if source.needs_pass or source.page_count < 1:
            LOGGER.warning(
                "Unable to load %s as PDF: encrypted=%s pages=%s",
                reference.name,
                source.needs_pass,
                source.page_count,
            )
            source.close()
            return None
        return source

    def _copy_pages(
        self,
        composite: fitz.Document,
        source: fitz.Document,
        reference: DocumentReference,
    ) -> tuple[int, ...]:
        failed_pages: list[int] = []
        for page_index in range(source.page_count):
            try:
                self._copy_page(composite, source, page_index)
            except Exception as exc:
                LOGGER.warning(
                    "Failed to copy page %s from %s: %s", page_index + 1, reference.name, exc
                )
                self._renderer.render_error_page(
                    composite, reference.name, page_failed_message(page_index)
                )
                failed_pages.append(page_index)
        return tuple(failed_pages)

    @staticmethod
    def _copy_page(composite: fitz.Document, source: fitz.Document, page_index: int) -> None:
        composite.insert_pdf(source, from_page=page_index, to_page=page_index)
