"""Shared fixtures and fakes for the pipeline tests."""

import io
import json
import os
from datetime import timedelta
from typing import Callable, Dict, List, Optional

import pytest
from openpyxl import Workbook

os.environ.setdefault("API_KEY", "test-key")
os.environ.setdefault("GCLOUD_BUCKET", "test-bucket")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from sheet_translator.core.storage.job_store import JobStore, create_db_engine, init_schema  # noqa: E402

SCENARIO_ROWS = [
    ["ID", "Field Value", "X", "Translated string (nb)"],
    ["1", "Hello"],
    ["2", "Hello"],
    ["3", "Bye"],
]


def make_workbook_bytes(rows: List[list], extra_sheets: Optional[Dict[str, List[list]]] = None) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Strings"
    for row in rows:
        ws.append(row)
    for title, sheet_rows in (extra_sheets or {}).items():
        extra = wb.create_sheet(title)
        for row in sheet_rows:
            extra.append(row)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def prompt_lines(prompt: str) -> List[str]:
    """The strings a batch prompt asks to translate."""
    return prompt.split("-->\n", 1)[1].split("\n")


def norwegian(lines: List[str]) -> str:
    return json.dumps([{"key": line, "value": f"NO {line}"} for line in lines])


class FakeGeminiClient:
    """Records prompts and answers with ``responder(prompt)``."""

    def __init__(self, responder: Optional[Callable[[str], str]] = None):
        self.prompts: List[str] = []
        self.responder = responder or (lambda prompt: norwegian(prompt_lines(prompt)))

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.responder(prompt)

    async def health_check(self) -> bool:
        return True


class FakeObjectStore:

    def __init__(self, objects: Optional[Dict[str, bytes]] = None):
        self.objects = dict(objects or {})
        self.content_types: Dict[str, str] = {}
        self.signed: List[tuple] = []

    def download(self, name: str) -> bytes:
        return self.objects[name]

    def upload(self, name: str, data: bytes, content_type: str) -> None:
        self.objects[name] = data
        self.content_types[name] = content_type

    def signed_read_url(self, name: str, ttl: timedelta) -> str:
        self.signed.append((name, ttl))
        return f"https://signed.example/{name}?ttl={int(ttl.total_seconds())}"


@pytest.fixture
def job_store():
    engine = create_db_engine("sqlite://")
    init_schema(engine)
    return JobStore(engine)


@pytest.fixture
def fake_client():
    return FakeGeminiClient()
