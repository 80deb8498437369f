# bastion/core/firebase.py
from pathlib import Path
from typing import Optional
import firebase_admin
from firebase_admin import auth, credentials, firestore
from bastion.core.config import Settings
from bastion.core.errors import HttpsError
from bastion.models.assistant import AuthContext
import logging

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "

def _service_account_path(settings: Settings) -> Optional[Path]:
    if settings.FIREBASE_SERVICE_ACCOUNT_KEY:
        path = Path(settings.FIREBASE_SERVICE_ACCOUNT_KEY).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Firebase service account file not found: {path}")
        return path
    return None

def initialize_firebase(settings: Settings) -> firebase_admin.App:
    if firebase_admin._apps:
        return firebase_admin.get_app()

    options = {"projectId": settings.FIREBASE_PROJECT_ID} if settings.FIREBASE_PROJECT_ID else None
    svc_path = _service_account_path(settings)
    if svc_path:
        cred = credentials.Certificate(str(svc_path))
        return firebase_admin.initialize_app(cred, options)

    # Fallback to application default credentials
    return firebase_admin.initialize_app(credentials.ApplicationDefault(), options)

def get_firestore_client(settings: Settings):
    initialize_firebase(settings)
    return firestore.client()

def extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None

def firebase_ready() -> bool:
    return bool(firebase_admin._apps)

def verify_auth_context(authorization: str | None, check_revoked: bool = False) -> AuthContext | None:
    """
    Verifies a Firebase ID token from an Authorization header.
    Returns None when no token is present or it fails verification; the caller decides what that means.
    Raises HttpsError('internal') when the Firebase app itself is unavailable.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        return None
    if not firebase_ready():
        logger.error("Cannot verify ID token: Firebase Admin app is not initialized; check startup logs.")
        raise HttpsError("internal", "An internal error occurred. Check function logs for debug trace.")
    try:
        decoded = auth.verify_id_token(token, check_revoked=check_revoked)
    except (ValueError, auth.InvalidIdTokenError, auth.CertificateFetchError, auth.UserDisabledError) as e:
        # With the app present, ValueError means a malformed token.
        # ExpiredIdTokenError and RevokedIdTokenError are InvalidIdTokenError subclasses
        logger.warning(f"Rejected Firebase ID token: {e}")
        return None
    return AuthContext(uid=decoded["uid"], token=decoded)
