"""Tests for gemini_image_mcp.core.extraction: provider response walking.

All tests use hand-built response trees; no network calls are made. Both
REST-shaped dicts (camelCase, base64 text) and SDK-shaped objects
(snake_case attributes, raw bytes) are covered.
"""

from __future__ import annotations

import base64
from types import SimpleNamespace

import pytest

from gemini_image_mcp.core.extraction import extract_image


def _b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


class TestExtractFromDicts:
    """REST-shaped responses."""

    def test_finds_image_after_text_part(self, response_factory, png_bytes):
        image = extract_image(response_factory(png_bytes, "image/png"))
        assert image is not None
        assert image.to_bytes() == png_bytes
        assert image.mime_type == "image/png"

    def test_declared_mime_type_is_kept(self, response_factory, jpeg_bytes):
        image = extract_image(response_factory(jpeg_bytes, "image/jpeg"))
        assert image.mime_type == "image/jpeg"

    def test_missing_mime_type_defaults_to_png(self, response_factory, png_bytes):
        image = extract_image(response_factory(png_bytes, None))
        assert image.mime_type == "image/png"

    def test_first_matching_part_wins(self):
        response = {
            "candidates": [
                {
                    "content": {
                        "parts": [
                            {"inlineData": {"data": _b64(b"first"), "mimeType": "image/webp"}},
                            {"inlineData": {"data": _b64(b"second"), "mimeType": "image/png"}},
                        ]
                    }
                }
            ]
        }
        image = extract_image(response)
        assert image.to_bytes() == b"first"
        assert image.mime_type == "image/webp"

    def test_only_first_candidate_is_inspected(self):
        """A later candidate's image is ignored when the first has none."""
        response = {
            "candidates": [
                {"content": {"parts": [{"text": "no image here"}]}},
                {"content": {"parts": [{"inlineData": {"data": _b64(b"later")}}]}},
            ]
        }
        assert extract_image(response) is None

    def test_empty_inline_data_is_skipped(self):
        response = {
            "candidates": [
                {
                    "content": {
                        "parts": [
                            {"inlineData": {"data": "", "mimeType": "image/png"}},
                            {"inlineData": {"data": _b64(b"real")}},
                        ]
                    }
                }
            ]
        }
        assert extract_image(response).to_bytes() == b"real"

    @pytest.mark.parametrize(
        "response",
        [
            None,
            {},
            {"candidates": None},
            {"candidates": []},
            {"candidates": [{}]},
            {"candidates": [{"content": None}]},
            {"candidates": [{"content": {}}]},
            {"candidates": [{"content": {"parts": []}}]},
            {"candidates": [{"content": {"parts": [{"text": "sorry"}]}}]},
            {"candidates": [{"content": {"parts": [{"inlineData": {}}]}}]},
            {"candidates": [{"content": {"parts": [{"inlineData": {"mimeType": "image/png"}}]}}]},
        ],
    )
    def test_shapes_without_image_return_none(self, response):
        """Incomplete trees yield None rather than raising."""
        assert extract_image(response) is None


class TestExtractFromSdkObjects:
    """SDK-shaped responses with attributes and raw bytes."""

    def _sdk_response(self, *parts):
        return SimpleNamespace(
            candidates=[SimpleNamespace(content=SimpleNamespace(parts=list(parts)))]
        )

    def test_raw_bytes_are_reencoded(self, png_bytes):
        part = SimpleNamespace(
            text=None,
            inline_data=SimpleNamespace(data=png_bytes, mime_type="image/png"),
        )
        image = extract_image(self._sdk_response(part))
        assert image.to_bytes() == png_bytes
        assert image.data == _b64(png_bytes)

    def test_text_only_parts(self):
        part = SimpleNamespace(text="just words", inline_data=None)
        assert extract_image(self._sdk_response(part)) is None

    def test_none_mime_type_defaults_to_png(self, png_bytes):
        part = SimpleNamespace(inline_data=SimpleNamespace(data=png_bytes, mime_type=None))
        assert extract_image(self._sdk_response(part)).mime_type == "image/png"

    def test_empty_bytes_are_skipped(self):
        part = SimpleNamespace(inline_data=SimpleNamespace(data=b"", mime_type="image/png"))
        assert extract_image(self._sdk_response(part)) is None

    def test_no_candidates_attribute(self):
        assert extract_image(SimpleNamespace()) is None
