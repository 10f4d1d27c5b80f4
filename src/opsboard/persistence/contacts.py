"""Firestore-backed contact list."""

from __future__ import annotations

import base64
import json
import logging
from functools import lru_cache
from typing import Protocol

import firebase_admin
from fastapi import Depends
from firebase_admin import credentials, firestore
from google.api_core.exceptions import GoogleAPIError

from ..config import Settings, get_settings
from ..errors import ConfigurationError, TransportError
from ..models.domain import Contact

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "opsboard"


class ContactStore(Protocol):
    def list_contacts(self) -> list[Contact]:
        ...


def _contact_from_document(doc_id: str, data: dict | None) -> Contact:
    data = data or {}
    return Contact(
        contact_id=doc_id,
        first_name=str(data.get("firstName") or ""),
        last_name=str(data.get("lastName") or ""),
        phone=str(data.get("phone") or ""),
    )


class FirestoreContactStore:
    """Reads every document of the public contacts collection."""

    def __init__(self, client, collection_path: str) -> None:
        self.client = client
        self.collection_path = collection_path

    def list_contacts(self) -> list[Contact]:
        try:
            snapshots = list(self.client.collection(self.collection_path).stream())
        except GoogleAPIError as exc:
            logger.error(f"Failed to read contacts from {self.collection_path}: {exc}")
            raise TransportError(f"Failed to read contacts: {exc}") from exc
        return [_contact_from_document(snapshot.id, snapshot.to_dict()) for snapshot in snapshots]


def _init_firebase(key_base64: str) -> firebase_admin.App:
    try:
        return firebase_admin.get_app(FIREBASE_APP_NAME)
    except ValueError:
        pass
    try:
        cred_dict = json.loads(base64.b64decode(key_base64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError) as exc:
        raise ConfigurationError("FIREBASE_KEY_BASE64 is not a valid service account key.") from exc
    cred = credentials.Certificate(cred_dict)
    return firebase_admin.initialize_app(cred, name=FIREBASE_APP_NAME)


@lru_cache()
def _firestore_store(key_base64: str, collection_path: str) -> FirestoreContactStore:
    app = _init_firebase(key_base64)
    return FirestoreContactStore(firestore.client(app), collection_path)


def build_contact_store(config: Settings) -> ContactStore:
    if not config.firebase_key_base64:
        logger.error("FIREBASE_KEY_BASE64 not set; contact store unavailable")
        raise ConfigurationError("Contact store is not configured.")
    return _firestore_store(config.firebase_key_base64, config.contacts_collection_path)


def get_contact_store(config: Settings = Depends(get_settings)) -> ContactStore:
    """FastAPI dependency; tests override it with an in-memory store."""
    return build_contact_store(config)
