from submittal_api.services.document_fetcher import DocumentFetcher, FetchResult, FetchStatus
from submittal_api.services.packet_assembler import (
    AssembledPacket,
    DocumentOutcome,
    DocumentOutcomeKind,
    PacketAssembler,
    packet_filename,
)
from submittal_api.services.page_renderer import PageRenderer

__all__ = [
    "AssembledPacket",
    "DocumentFetcher",
    "DocumentOutcome",
    "DocumentOutcomeKind",
    "FetchResult",
    "FetchStatus",
    "PacketAssembler",
    "PageRenderer",
    "packet_filename",
]
