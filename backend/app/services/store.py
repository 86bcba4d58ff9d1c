"""
Store Handle
============

Wraps the Firestore client the whole app shares.

A StoreHandle is either:
    - available:   has an async Firestore client, ready to use
    - unavailable: startup couldn't build a client; `reason` says why

The handle is created once in the app lifespan and put on `app.state`.
Nothing else in the app builds Firestore clients.

CREDENTIALS:
-----------
Looked up in this order:
    1. FIREBASE_SERVICE_ACCOUNT        - the service account JSON itself
    2. GOOGLE_APPLICATION_CREDENTIALS  - path to the service account file
    3. Application default credentials (Cloud Run, gcloud auth, ...)

The credential text goes to the Firebase Admin SDK unchanged.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

import firebase_admin
from firebase_admin import credentials, firestore_async

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreHandle:
    """Shared, read-only reference to the document store."""

    client: Any = None
    reason: Optional[str] = None
    project_id: Optional[str] = None

    @classmethod
    def available(cls, client, project_id: Optional[str] = None) -> "StoreHandle":
        return cls(client=client, project_id=project_id)

    @classmethod
    def unavailable(cls, reason: str) -> "StoreHandle":
        return cls(reason=reason)

    @property
    def is_available(self) -> bool:
        return self.client is not None


def _load_credentials(service_account_json: Optional[str], credentials_path: Optional[str]):
    if service_account_json:
        return credentials.Certificate(json.loads(service_account_json))
    if credentials_path:
        return credentials.Certificate(credentials_path)
    return credentials.ApplicationDefault()


def connect_store(
    service_account_json: Optional[str] = None,
    credentials_path: Optional[str] = None,
    project_id: Optional[str] = None,
) -> StoreHandle:
    """
    Initialize Firebase Admin (once) and return a handle to Firestore.

    Never raises: any failure comes back as an unavailable handle so the
    server still starts and can report the problem on every request.
    """
    try:
        try:
            app = firebase_admin.get_app()
            logger.warning("Firebase Admin SDK was already initialized, reusing it")
        except ValueError:
            cred = _load_credentials(service_account_json, credentials_path)
            options = {"projectId": project_id} if project_id else None
            app = firebase_admin.initialize_app(cred, options)

        client = firestore_async.client(app)
    except json.JSONDecodeError as e:
        logger.error(f"FIREBASE_SERVICE_ACCOUNT is not valid JSON (line {e.lineno}, column {e.colno})")
        return StoreHandle.unavailable("Service account credentials are not valid JSON")
    except Exception as e:
        # Exception text from the SDK can quote the key file; log the type only
        logger.error(f"Firebase Admin SDK initialization failed: {type(e).__name__}")
        return StoreHandle.unavailable(f"Firebase Admin SDK initialization failed ({type(e).__name__})")

    resolved_project = project_id or getattr(app, "project_id", None)
    logger.info(f"Firebase Admin SDK ready (project: {resolved_project})")
    return StoreHandle.available(client, project_id=resolved_project)
