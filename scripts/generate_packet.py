#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from pydantic import ValidationError  # noqa: E402

from submittal_api.errors import PacketAssemblyError  # noqa: E402
from submittal_api.main import build_packet_assembler  # noqa: E402
from submittal_api.schemas import GeneratePacketRequest  # noqa: E402
from submittal_api.settings import load_settings  # noqa: E402


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Assemble a submittal packet PDF from a JSON request file."
    )
    parser.add_argument(
        "request",
        help="Path to a JSON file shaped like the /generate-packet request body.",
    )
    parser.add_argument(
        "--output-dir",
        default="artifacts/packets",
        help="Directory the packet PDF is written to.",
    )
    parser.add_argument(
        "--summary",
        default=None,
        help="Optional path for a JSON summary of per-document outcomes.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def generate_packet(
    *,
    request_path: Path,
    output_dir: Path,
    summary_path: Path | None = None,
) -> int:
    try:
        request = GeneratePacketRequest.model_validate_json(
            request_path.read_text(encoding="utf-8")
        )
    except (OSError, ValidationError) as exc:
        print(f"Invalid packet request {request_path}: {exc}", file=sys.stderr)
        return 2

    assembler = build_packet_assembler(load_settings())
    try:
        packet = asyncio.run(assembler.assemble(request.project_data, request.documents))
    except PacketAssemblyError as exc:
        print(f"{exc.message}: {exc.details}", file=sys.stderr)
        return 1

    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / packet.filename
    output_path.write_bytes(packet.payload)

    if summary_path is not None:
        summary_path.parent.mkdir(parents=True, exist_ok=True)
        summary = {
            "filename": packet.filename,
            "page_count": packet.page_count,
            "byte_size": len(packet.payload),
            "documents": [
                outcome.to_summary().model_dump(mode="json") for outcome in packet.outcomes
            ],
        }
        summary_path.write_text(json.dumps(summary, indent=2) + "\n", encoding="utf-8")

    print(f"Packet path: {output_path} ({packet.page_count} pages)")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return generate_packet(
        request_path=Path(args.request),
        output_dir=Path(args.output_dir),
        summary_path=Path(args.summary) if args.summary else None,
    )


if __name__ == "__main__":
    raise SystemExit(main())
