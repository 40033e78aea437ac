from __future__ import annotations

import json
import os
from typing import Any, Dict, Mapping, Optional

import httpx
from pydantic import BaseModel

from session.store import SessionStore

from .errors import ApiError, AuthenticationRequiredError
from .logging_conf import get_logger, setup_logging
from .payloads import Body, FormPayload, JsonBody, TextBody, read_body
from .resources import (
    AlumniApi,
    AuthApi,
    InfoApi,
    KlaimAlumniApi,
    NegaraApi,
    ProgramStudiApi,
    SukuApi,
    UserAdminApi,
)


DEFAULT_BASE_URL = "https://antekhub.eng.unhas.ac.id/api"
LOGIN_PATH = "/login"

# Environment variable names for `from_env`
ENV_BASE_URL = "ANTEKHUB_BASE_URL"
ENV_TIMEOUT = "ANTEKHUB_TIMEOUT"

logger = get_logger("antekhub.client")


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    val = os.environ.get(name)
    return val if val not in (None, "") else default


def _encode_json(body: Any) -> bytes:
    if isinstance(body, BaseModel):
        body = body.model_dump(mode="json", exclude_none=True)
    elif isinstance(body, Mapping):
        body = dict(body)
    return json.dumps(body).encode("utf-8")


def _describe_payload(body: Any) -> Any:
    if body is None:
        return None
    if isinstance(body, FormPayload):
        return body.describe()
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", exclude_none=True)
    return body


def _clean_params(params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    if not params:
        return {}
    return {k: v for k, v in params.items() if v is not None}


def _error_message(resp: httpx.Response, body: Body, fallback: Optional[str]) -> str:
    detail = body.value
    if isinstance(detail, dict) and detail.get("message"):
        return str(detail["message"])
    if fallback:
        # Operation-specific message wins over raw error pages
        return fallback.format(status=resp.status_code)
    if isinstance(detail, str):
        raw = detail.strip()
    elif detail:
        # JSON error document without a message field
        raw = resp.text.strip()
    else:
        raw = ""
    if raw:
        return raw
    return f"Error {resp.status_code}: {resp.reason_phrase}"


class AntekhubClient:
    """
    Client for the ANTEKHUB FT-UH REST API.

    Notes
    - The session (bearer token and cached user) lives in an explicit
      `SessionStore`; the token is read from it before every request.
    - Every endpoint goes through `request()`, JSON and multipart alike.
    - No retries: transport errors, unparseable success bodies and non-2xx
      statuses are logged and raised to the caller.
    - Endpoint groups: `alumni`, `klaim_alumni`, `negara`, `suku`,
      `program_studi`, `user_admin`, `info`, `auth`.
    """

    def __init__(
        self,
        store: Optional[SessionStore] = None,
        *,
        token: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._store = store if store is not None else SessionStore()
        if token:
            self._store.save_session(token)
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        if client is None:
            client = httpx.Client(timeout=timeout) if timeout is not None else httpx.Client()
        self._client = client

        self.alumni = AlumniApi(self)
        self.klaim_alumni = KlaimAlumniApi(self)
        self.negara = NegaraApi(self)
        self.suku = SukuApi(self)
        self.program_studi = ProgramStudiApi(self)
        self.user_admin = UserAdminApi(self)
        self.info = InfoApi(self)
        self.auth = AuthApi(self)

    @classmethod
    def from_env(cls, *, client: Optional[httpx.Client] = None) -> "AntekhubClient":
        setup_logging()
        timeout = _getenv(ENV_TIMEOUT)
        return cls(
            SessionStore.from_env(),
            base_url=_getenv(ENV_BASE_URL, DEFAULT_BASE_URL) or DEFAULT_BASE_URL,
            timeout=float(timeout) if timeout else None,
            client=client,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def session(self) -> SessionStore:
        return self._store

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "AntekhubClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --------------- Executor ---------------
    def request(
        self,
        path: str,
        *,
        method: str = "GET",
        body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        error_fallback: Optional[str] = None,
    ) -> Body:
        """
        Send one request and return its decoded body.

        - `body` is JSON-encoded unless it is a FormPayload, which is sent as
          multipart/form-data with the Content-Type left to httpx.
        - Raises AuthenticationRequiredError without touching the network when
          no token is stored and `path` is not the login endpoint.
        - Raises ApiError on non-2xx; `error_fallback` (may contain `{status}`)
          is used whenever the server gives no `message` field, ahead of the
          raw body and the generic "Error <status>: <reason>" line.
        """
        url = f"{self._base_url}{path}"
        token = self._store.token
        if not token and LOGIN_PATH not in path:
            logger.error(
                "auth.missing_token",
                extra={"event": "auth_missing_token", "method": method, "path": path},
            )
            raise AuthenticationRequiredError("Silakan login terlebih dahulu")

        is_form = isinstance(body, FormPayload)
        req_headers: Dict[str, str] = {}
        if token:
            req_headers["Authorization"] = f"Bearer {token}"
        if not is_form:
            req_headers["Content-Type"] = "application/json"
        if headers:
            req_headers.update(headers)
        query = _clean_params(params)

        logger.info(
            "request.start",
            extra={
                "event": "request_start",
                "method": method,
                "path": path,
                "params": query or None,
                "payload": _describe_payload(body),
            },
        )
        try:
            if is_form:
                resp = self._client.request(
                    method, url, params=query or None, headers=req_headers, files=body.multipart()
                )
            else:
                content = _encode_json(body) if body is not None else None
                resp = self._client.request(
                    method, url, params=query or None, headers=req_headers, content=content
                )

            logger.info(
                "response.received",
                extra={
                    "event": "response_received",
                    "method": method,
                    "path": path,
                    "status_code": resp.status_code,
                    "reason": resp.reason_phrase,
                    "headers": dict(resp.headers),
                },
            )

            if resp.is_success:
                return read_body(resp)
            data = read_body(resp, tolerant=True)
            raise ApiError(
                _error_message(resp, data, error_fallback),
                status_code=resp.status_code,
                reason=resp.reason_phrase,
                body=data,
            )
        except Exception as exc:
            logger.error(
                "request.failed",
                extra={
                    "event": "request_failed",
                    "method": method,
                    "path": path,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            raise


__all__ = [
    "AntekhubClient",
    "DEFAULT_BASE_URL",
    "JsonBody",
    "TextBody",
    "FormPayload",
]
