from __future__ import annotations

import json
from pathlib import Path
import subprocess
import sys

import fitz


def _run_script(repo_root: Path, *args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, str(repo_root / "scripts" / "generate_packet.py"), *args],
        cwd=repo_root,
        capture_output=True,
        text=True,
        check=False,
        timeout=120,
    )


def test_generate_packet_script_writes_cover_only_packet(tmp_path: Path) -> None:
    repo_root = Path(__file__).resolve().parents[1]
    request_path = tmp_path / "request.json"
    request_path.write_text(
        json.dumps(
            {
                "projectData": {
                    "projectName": "Harbor Point Tower",
                    "submittedTo": "Coastal Architects",
                    "preparedBy": "J. Rivera",
                    "status": {"forReview": True},
                },
                "documents": [],
            }
        ),
        encoding="utf-8",
    )
    output_dir = tmp_path / "packets"
    summary_path = tmp_path / "summary.json"

    result = _run_script(
        repo_root,
        str(request_path),
        "--output-dir",
        str(output_dir),
        "--summary",
        str(summary_path),
    )

    assert result.returncode == 0, result.stderr
    packet_path = output_dir / "Harbor_Point_Tower_Packet.pdf"
    assert packet_path.exists()
    assert "Packet path:" in result.stdout
    document = fitz.open(packet_path)
    assert document.page_count == 1
    document.close()

    summary = json.loads(summary_path.read_text(encoding="utf-8"))
    assert summary["filename"] == "Harbor_Point_Tower_Packet.pdf"
    assert summary["page_count"] == 1
    assert summary["documents"] == []


def test_generate_packet_script_rejects_invalid_request(tmp_path: Path) -> None:
    repo_root = Path(__file__).resolve().parents[1]
    request_path = tmp_path / "request.json"
    request_path.write_text(json.dumps({"projectData": {}}), encoding="utf-8")

    result = _run_script(repo_root, str(request_path), "--output-dir", str(tmp_path / "out"))

    assert result.returncode == 2
    assert "Invalid packet request" in result.stderr
    assert not (tmp_path / "out").exists()
