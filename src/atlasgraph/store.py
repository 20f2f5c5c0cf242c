"""
atlasgraph.store - Read-only access to exported workspace records.

The workspace application keeps its boards in a local record store. This
module reads an export of that store (a JSON file) and hands out the
boards of one workspace as Documents. Nothing is ever written back.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from atlasgraph.graph.deserializer import Document


class StoreError(Exception):
    """Raised when the store file cannot be read."""


def _record_to_document(record: dict[str, Any]) -> Document | None:
    record_id = record.get("id")
    if record_id is None:
        return None
    data = record.get("data", "")
    updated_at = record.get("updatedAt")
    return Document(
        id=str(record_id),
        serialized_graph=data if isinstance(data, str) else json.dumps(data),
        workspace_id=record.get("workspaceId"),
        title=record.get("title") or "",
        updated_at=updated_at if isinstance(updated_at, int) else None,
    )


class JsonDocumentStore:
    """Document store backed by a JSON export file.

    The file holds either a list of board records or an object with a
    "boards" list. A board record looks like:

        {"id": "b1", "workspaceId": "w1", "title": "Plan",
         "data": "{\\"nodes\\": [...], \\"edges\\": [...]}", "updatedAt": 0}

    The file is read on every fetch so edits to it show up on the next
    graph build.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _load_records(self) -> list[dict[str, Any]]:
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise StoreError(f"Store file not found: {self.path}") from None
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Cannot read store file {self.path}: {e}") from e

        if isinstance(payload, dict):
            payload = payload.get("boards", [])
        if not isinstance(payload, list):
            raise StoreError(f"Store file {self.path} has no board list")
        return [record for record in payload if isinstance(record, dict)]

    def fetch_documents(self, workspace_id: str) -> list[Document]:
        """Return the documents of one workspace, in file order.

        Args:
            workspace_id: Workspace to fetch.

        Returns:
            Documents of that workspace (empty for an unknown workspace).

        Raises:
            StoreError: If the store file is missing or unreadable.
        """
        documents = []
        for record in self._load_records():
            if record.get("workspaceId") != workspace_id:
                continue
            document = _record_to_document(record)
            if document is not None:
                documents.append(document)
        return documents

    def workspace_ids(self) -> list[str]:
        """Return every workspace id present in the store, in first-seen order."""
        seen: dict[str, None] = {}
        for record in self._load_records():
            workspace_id = record.get("workspaceId")
            if isinstance(workspace_id, str):
                seen.setdefault(workspace_id, None)
        return list(seen)
