from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel

from session.models import Session

from .errors import MissingIdentifierError
from .payloads import Body, FormPayload

if TYPE_CHECKING:
    from .antekhub import AntekhubClient


JsonData = Union[Mapping[str, Any], BaseModel]
FormData = Union[Mapping[str, Any], FormPayload]

# Claim-request statuses the server filters on; "all" means no filter.
KLAIM_STATUSES = ("pending", "approved", "rejected", "all")


def _require_uuid(uuid: Optional[str]) -> str:
    if uuid is None or not str(uuid).strip():
        raise MissingIdentifierError("UUID tidak boleh kosong")
    return str(uuid).strip()


def _require_id(id_: Union[int, str, None]) -> str:
    if id_ is None or not str(id_).strip():
        raise MissingIdentifierError("ID tidak boleh kosong")
    return str(id_).strip()


def _as_form(data: FormData) -> FormPayload:
    if isinstance(data, FormPayload):
        return data
    return FormPayload.from_mapping(data)


class _Resource:
    def __init__(self, client: "AntekhubClient") -> None:
        self._client = client


class _CrudResource(_Resource):
    """GET/POST on the collection, GET/PATCH/DELETE on `{base_path}/{uuid}`."""

    base_path = ""

    def get_all(self) -> Body:
        return self._client.request(self.base_path)

    def get_one(self, uuid: Optional[str]) -> Body:
        return self._client.request(f"{self.base_path}/{_require_uuid(uuid)}")

    def create(self, data: JsonData) -> Body:
        return self._client.request(self.base_path, method="POST", body=data)

    def update(self, uuid: Optional[str], data: JsonData) -> Body:
        path = f"{self.base_path}/{_require_uuid(uuid)}"
        return self._client.request(path, method="PATCH", body=data)

    def delete(self, uuid: Optional[str]) -> Body:
        return self._client.request(f"{self.base_path}/{_require_uuid(uuid)}", method="DELETE")


class AlumniApi(_CrudResource):
    base_path = "/alumni"


class UserAdminApi(_CrudResource):
    base_path = "/user-admin"


class KlaimAlumniApi(_Resource):
    """Requests from users to be linked to an existing alumni record."""

    base_path = "/klaim-alumni"

    def get_all_requests(self, status: Optional[str] = None, q: Optional[str] = "") -> Body:
        """
        List claim requests.

        - `status` is sent only for pending/approved/rejected. "all" and any
          value outside the allow-list are dropped without error.
        - `q` is trimmed and sent when non-empty.
        """
        params: Dict[str, str] = {}
        if status in KLAIM_STATUSES and status != "all":
            params["status"] = status
        if q and q.strip():
            params["q"] = q.strip()
        return self._client.request(self.base_path, params=params or None)

    def get_request(self, uuid: Optional[str]) -> Body:
        return self._client.request(f"{self.base_path}/{_require_uuid(uuid)}")

    def approve_request(self, uuid: Optional[str]) -> Body:
        return self._client.request(f"{self.base_path}/{_require_uuid(uuid)}/approve", method="POST")

    def reject_request(self, uuid: Optional[str]) -> Body:
        return self._client.request(f"{self.base_path}/{_require_uuid(uuid)}/reject", method="POST")

    def delete_request(self, uuid: Optional[str]) -> Body:
        return self._client.request(f"{self.base_path}/{_require_uuid(uuid)}", method="DELETE")


class NegaraApi(_Resource):
    def get_all(self) -> Body:
        return self._client.request("/negara")


class SukuApi(_Resource):
    def get_all(self) -> Body:
        return self._client.request("/suku")


class ProgramStudiApi(_Resource):
    def get_all(self, params: Optional[Mapping[str, Any]] = None) -> Body:
        """List study programs; `params` are forwarded as query parameters."""
        return self._client.request("/program-studi", params=params)


class InfoApi(_Resource):
    """News/info items. Create and update upload an optional `image` file."""

    base_path = "/info"

    def get_all(self) -> Body:
        return self._client.request(self.base_path)

    def get_one(self, id_: Union[int, str, None]) -> Body:
        return self._client.request(f"{self.base_path}/{_require_id(id_)}")

    def create(self, data: FormData) -> Body:
        return self._client.request(
            self.base_path,
            method="POST",
            body=_as_form(data),
            error_fallback="Gagal membuat info ({status})",
        )

    def update(self, id_: Union[int, str, None], data: FormData) -> Body:
        return self._client.request(
            f"{self.base_path}/{_require_id(id_)}",
            method="PATCH",
            body=_as_form(data),
            error_fallback="Gagal update info ({status})",
        )

    def delete(self, id_: Union[int, str, None]) -> Body:
        return self._client.request(f"{self.base_path}/{_require_id(id_)}", method="DELETE")


class AuthApi(_Resource):
    def logout(self) -> None:
        """Forget the stored token and cached user profile."""
        self._client.session.clear()

    def is_authenticated(self) -> bool:
        return self._client.session.token is not None

    def current_user(self) -> Session:
        return self._client.session.load()


__all__ = [
    "AlumniApi",
    "AuthApi",
    "InfoApi",
    "KlaimAlumniApi",
    "KLAIM_STATUSES",
    "NegaraApi",
    "ProgramStudiApi",
    "SukuApi",
    "UserAdminApi",
]
