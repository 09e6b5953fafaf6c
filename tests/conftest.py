"""Shared fixtures, including an in-memory record service."""

import csv
import io
import json
from typing import Any, Dict, List

import httpx
import pytest
import pytest_asyncio
from fastapi import APIRouter, FastAPI, File, Query, UploadFile
from fastapi.responses import PlainTextResponse

from sheetsync.core.config import Settings
from sheetsync.main import ViewController
from sheetsync.models.row import Row
from sheetsync.models.upload import UploadFile as SheetFile
from sheetsync.services.record_client import RemoteRecordClient

BASE_URL = "http://testserver/api/excel"


class FakeRecordService:
    """Stores uploaded CSV rows the way the real service stores sheet rows."""

    def __init__(self) -> None:
        self.records: List[Dict[str, Any]] = []
        self.next_id = 1
        self.requests: List[str] = []
        # Raw records stored after the rows of every upload
        self.extra_on_upload: List[Dict[str, Any]] = []

    def add(self, **columns: Any) -> int:
        record_id = self.next_id
        self.next_id += 1
        self.records.append({"id": record_id, "rowData": json.dumps(columns)})
        return record_id

    def build_app(self) -> FastAPI:
        router = APIRouter()

        @router.post("/upload")
        async def upload(file: UploadFile = File(...)):
            self.requests.append("upload")
            text = (await file.read()).decode("utf-8")
            if not text.strip():
                return PlainTextResponse("File is empty", status_code=400)
            self.records.clear()
            for line in csv.DictReader(io.StringIO(text)):
                self.add(**line)
            self.records.extend(self.extra_on_upload)
            return PlainTextResponse("Saved")

        @router.get("/data")
        async def data(page: int = Query(0), size: int = Query(10)):
            self.requests.append(f"data:{page}")
            start = page * size
            return {
                "content": self.records[start:start + size],
                "totalElements": len(self.records),
            }

        @router.delete("/delete")
        async def delete(id: int = Query(...)):
            self.requests.append(f"delete:{id}")
            for record in self.records:
                if record["id"] == id:
                    self.records.remove(record)
                    return PlainTextResponse("Deleted")
            return PlainTextResponse(f"Record {id} not found", status_code=404)

        app = FastAPI()
        app.include_router(router, prefix="/api/excel")
        return app


def make_row(record_id: Any, **cells: str) -> Row:
    return Row(record_id=record_id, cells=cells)


@pytest.fixture
def settings():
    """Create a settings object for testing."""
    return Settings(backend_url=BASE_URL, page_size=10, search_column="ID")


@pytest.fixture
def service():
    """Create an empty fake record service."""
    return FakeRecordService()


@pytest_asyncio.fixture
async def record_client(settings, service):
    """Create a record client talking to the fake service in-process."""
    http_client = httpx.AsyncClient(
        transport=httpx.ASGITransport(app=service.build_app()),
        base_url=BASE_URL,
    )
    client = RemoteRecordClient(settings, http_client=http_client)
    yield client
    await http_client.aclose()


@pytest.fixture
def controller(settings, record_client):
    """Create a view controller backed by the fake service."""
    return ViewController(settings, client=record_client)


@pytest.fixture
def csv_file():
    """A small sheet with 25 people."""
    lines = ["ID,Name,Age"]
    lines += [f"P{i:03d},Person {i},{20 + i}" for i in range(25)]
    return SheetFile(filename="people.csv", content="\n".join(lines).encode(), content_type="text/csv")
