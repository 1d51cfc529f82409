"""Process-wide Firestore client, opened in the app lifespan.

Credentials come from FIREBASE_SERVICE_ACCOUNT_KEY (inline JSON) or, failing
that, FIREBASE_SERVICE_ACCOUNT_PATH. Without either the app still starts and
the store-backed dependencies answer 503.
"""

import json
import logging
from pathlib import Path

from projectgrid.core.config import Settings, get_settings
from projectgrid.infrastructure.firebase._rest_client import (
    FirestoreRESTClient,
    load_service_account_credentials,
)

logger = logging.getLogger(__name__)

_firestore_client: FirestoreRESTClient | None = None


def _service_account_info(settings: Settings) -> dict | None:
    if settings.firebase_service_account_key is not None:
        raw = settings.firebase_service_account_key.get_secret_value()
        if raw:
            try:
                return json.loads(raw)
            except json.JSONDecodeError as exc:
                raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON") from exc
    if not settings.firebase_service_account_path:
        return None
    key_file = Path(settings.firebase_service_account_path).expanduser()
    if not key_file.is_file():
        logger.warning("Service account file not found: %s", key_file)
        return None
    return json.loads(key_file.read_text(encoding="utf-8"))


def init_firebase(settings: Settings | None = None) -> bool:
    """Open the client; False (and logged) when unconfigured or broken."""
    global _firestore_client
    settings = settings or get_settings()
    if not settings.firestore_configured:
        return False
    try:
        info = _service_account_info(settings)
        if info is None:
            return False
        project_id = info.get("project_id")
        if not project_id:
            logger.error("Service account JSON has no project_id")
            return False
        _firestore_client = FirestoreRESTClient(
            project_id, load_service_account_credentials(info)
        )
    except Exception:
        logger.exception("Firestore client initialization failed")
        return False
    logger.info("Firestore client ready (project=%s)", project_id)
    return True


def get_firestore_client() -> FirestoreRESTClient | None:
    return _firestore_client


async def close_firebase() -> None:
    global _firestore_client
    if _firestore_client is None:
        return
    await _firestore_client.aclose()
    _firestore_client = None
    logger.info("Firestore HTTP pool closed")
