from __future__ import annotations

import mimetypes
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any, ClassVar, Dict, Iterable, List, Mapping, Tuple, Union

import httpx


FileContent = Union[bytes, IO[bytes]]
FilePart = Tuple[str, FileContent, str]  # (filename, content, content_type)

DEFAULT_FILE_FIELDS: Tuple[str, ...] = ("image",)
_OCTET = "application/octet-stream"


# --------------- Response bodies ---------------
@dataclass(frozen=True)
class JsonBody:
    """Response declared as application/json; `value` is the decoded document."""

    value: Any
    is_json: ClassVar[bool] = True


@dataclass(frozen=True)
class TextBody:
    """Any other response; `value` is the raw text."""

    value: str
    is_json: ClassVar[bool] = False


Body = Union[JsonBody, TextBody]


def read_body(resp: httpx.Response, *, tolerant: bool = False) -> Body:
    """
    Decode a response according to its declared content type.

    With `tolerant=True` an unparseable JSON document becomes an empty
    object instead of raising (used for error responses).
    """
    ctype = resp.headers.get("content-type", "")
    if "application/json" in ctype.lower():
        try:
            return JsonBody(resp.json())
        except ValueError:
            if not tolerant:
                raise
            return JsonBody({})
    return TextBody(resp.text)


# --------------- Multipart request payload ---------------
def _is_file_value(value: Any) -> bool:
    return isinstance(value, (bytes, bytearray, Path, tuple)) or hasattr(value, "read")


def _guess_type(filename: str) -> str:
    return mimetypes.guess_type(filename)[0] or _OCTET


def _file_part(name: str, value: Any) -> FilePart:
    if isinstance(value, tuple):
        if len(value) == 2:
            filename, content = value
            return (str(filename), content, _guess_type(str(filename)))
        if len(value) == 3:
            filename, content, ctype = value
            return (str(filename), content, str(ctype))
        raise ValueError(f"file tuple for {name!r} must be (filename, content[, content_type])")
    if isinstance(value, Path):
        return (value.name, value.read_bytes(), _guess_type(value.name))
    if isinstance(value, (bytes, bytearray)):
        return (name, bytes(value), _OCTET)
    if hasattr(value, "read"):
        filename = os.path.basename(str(getattr(value, "name", "") or name))
        return (filename, value, _guess_type(filename))
    raise TypeError(f"unsupported file value for {name!r}: {type(value).__name__}")


def _form_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass
class FormPayload:
    """
    multipart/form-data request body: text fields plus file parts.

    Sent through the same executor as JSON bodies; the executor leaves the
    Content-Type header unset so httpx writes the multipart boundary.
    """

    fields: Dict[str, str] = field(default_factory=dict)
    files: Dict[str, FilePart] = field(default_factory=dict)

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any],
        *,
        file_fields: Iterable[str] = DEFAULT_FILE_FIELDS,
    ) -> "FormPayload":
        """
        Build a payload from a plain mapping.

        - Keys in `file_fields` with a falsy value are skipped (no new upload).
          A string there (e.g. the current image path) is sent as text.
        - bytes, Path, (filename, content[, type]) tuples and binary file
          objects become file parts under any key.
        - None values are skipped; everything else is sent as text.
        """
        file_keys = set(file_fields)
        payload = cls()
        for key, value in data.items():
            if value is None:
                continue
            if key in file_keys and not value:
                continue
            if _is_file_value(value):
                payload.files[key] = _file_part(key, value)
            else:
                payload.fields[key] = _form_text(value)
        return payload

    def multipart(self) -> List[Tuple[str, Tuple[Any, ...]]]:
        # Text fields go in as (None, value) parts so the body is always
        # multipart, even when no file is attached.
        parts: List[Tuple[str, Tuple[Any, ...]]] = [
            (name, (None, value)) for name, value in self.fields.items()
        ]
        parts.extend((name, part) for name, part in self.files.items())
        return parts

    def describe(self) -> Dict[str, Any]:
        """Plain-mapping rendering for logs (file parts by name and type)."""
        out: Dict[str, Any] = dict(self.fields)
        for name, (filename, _content, ctype) in self.files.items():
            out[name] = f"<file {filename} ({ctype})>"
        return out


__all__ = [
    "Body",
    "FilePart",
    "FormPayload",
    "JsonBody",
    "TextBody",
    "read_body",
]
