# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

"""
Document store abstraction over Firestore, with an in-memory implementation
for tests and local runs.
"""

from __future__ import annotations

import copy
import threading
import uuid
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol

from google.cloud.firestore_v1 import SERVER_TIMESTAMP, Increment


class DocumentStore(Protocol):
    """The reads and writes the notification pipeline needs."""

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        ...

    def add(self, path: str, fields: dict) -> str:
        ...

    def merge(self, collection: str, doc_id: str, fields: dict) -> None:
        ...


class FirestoreDocumentStore:
    """
    Reads and writes through a Firestore client.

    `path` and `collection` arguments may be slash-separated, e.g.
    "users/u1/notifications".
    """

    def __init__(self, client):
        self.client = client

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        snapshot = self.client.collection(collection).document(doc_id).get()
        if not snapshot.exists:
            return None
        return snapshot.to_dict() or {}

    def add(self, path: str, fields: dict) -> str:
        _, doc_ref = self.client.collection(path).add(fields)
        return doc_ref.id

    def merge(self, collection: str, doc_id: str, fields: dict) -> None:
        self.client.collection(collection).document(doc_id).set(fields, merge=True)


class InMemoryDocumentStore:
    """
    Dict-backed store that applies Firestore's Increment and SERVER_TIMESTAMP
    sentinels the way the server would. All mutations hold a single lock so
    concurrent increments are never lost.
    """

    def __init__(self):
        self.collections: Dict[str, Dict[str, dict]] = {}
        self._lock = threading.Lock()

    def put(self, collection: str, doc_id: str, fields: dict) -> None:
        """Seeds a document, replacing any existing one."""
        with self._lock:
            self.collections.setdefault(collection, {})[doc_id] = copy.deepcopy(fields)

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        with self._lock:
            doc = self.collections.get(collection, {}).get(doc_id)
            return copy.deepcopy(doc) if doc is not None else None

    def add(self, path: str, fields: dict) -> str:
        doc_id = uuid.uuid4().hex
        with self._lock:
            docs = self.collections.setdefault(path, {})
            docs[doc_id] = self._apply(fields, {})
        return doc_id

    def merge(self, collection: str, doc_id: str, fields: dict) -> None:
        with self._lock:
            docs = self.collections.setdefault(collection, {})
            docs[doc_id] = self._apply(fields, docs.get(doc_id, {}))

    def documents(self, path: str) -> list[dict]:
        with self._lock:
            return [copy.deepcopy(doc) for doc in self.collections.get(path, {}).values()]

    @staticmethod
    def _apply(fields: dict, existing: dict) -> dict:
        result = dict(existing)
        for key, value in fields.items():
            if value is SERVER_TIMESTAMP:
                result[key] = datetime.now(timezone.utc)
            elif isinstance(value, Increment):
                current = result.get(key)
                if not isinstance(current, (int, float)):
                    current = 0
                result[key] = current + value.value
            else:
                result[key] = copy.deepcopy(value)
        return result
