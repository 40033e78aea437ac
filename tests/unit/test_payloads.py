from __future__ import annotations

import io
from pathlib import Path

import httpx
import pytest

from common.payloads import FormPayload, JsonBody, TextBody, read_body


def test_from_mapping_splits_text_and_file_parts(tmp_path: Path):
    img = tmp_path / "banner.png"
    img.write_bytes(b"png-bytes")

    form = FormPayload.from_mapping(
        {
            "title": "Reuni Akbar",
            "views": 12,
            "pinned": False,
            "draft": None,
            "image": img,
            "lampiran": ("jadwal.pdf", b"%PDF", "application/pdf"),
        }
    )

    assert form.fields == {"title": "Reuni Akbar", "views": "12", "pinned": "false"}
    assert form.files == {
        "image": ("banner.png", b"png-bytes", "image/png"),
        "lampiran": ("jadwal.pdf", b"%PDF", "application/pdf"),
    }


@pytest.mark.parametrize("empty", [None, "", b""])
def test_from_mapping_skips_empty_image(empty):
    form = FormPayload.from_mapping({"title": "x", "image": empty})
    assert form.files == {}
    assert form.fields == {"title": "x"}


def test_file_objects_use_their_name():
    fh = io.BytesIO(b"jpeg")
    fh.name = "/tmp/uploads/foto.jpg"

    form = FormPayload.from_mapping({"image": fh})

    filename, content, ctype = form.files["image"]
    assert filename == "foto.jpg"
    assert content is fh
    assert ctype == "image/jpeg"


def test_bad_file_tuple_is_rejected():
    with pytest.raises(ValueError):
        FormPayload.from_mapping({"image": ("only-name",)})


def test_multipart_parts_and_describe():
    form = FormPayload(
        fields={"title": "t"},
        files={"image": ("a.png", b"123", "image/png")},
    )

    assert form.multipart() == [
        ("title", (None, "t")),
        ("image", ("a.png", b"123", "image/png")),
    ]
    assert form.describe() == {"title": "t", "image": "<file a.png (image/png)>"}


def test_read_body_by_content_type():
    as_json = httpx.Response(200, json={"data": [1]})
    as_text = httpx.Response(200, text="plain", headers={"Content-Type": "text/html"})
    bad_json = httpx.Response(400, content=b"oops", headers={"Content-Type": "application/json"})

    assert read_body(as_json) == JsonBody({"data": [1]})
    assert read_body(as_text) == TextBody("plain")
    assert read_body(bad_json, tolerant=True) == JsonBody({})
    with pytest.raises(ValueError):
        read_body(bad_json)


def test_string_under_image_is_sent_as_text():
    form = FormPayload.from_mapping({"title": "t", "image": "uploads/old.png"})

    assert form.files == {}
    assert form.fields == {"title": "t", "image": "uploads/old.png"}
