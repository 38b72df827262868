"""Tests for form submission: cache, transport and error mapping."""

from __future__ import annotations

import json
import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from DocQuery.api import Api
from DocQuery.cache.memory import LruCache
from DocQuery.core.errors import (
    AuthenticationError,
    AuthorizationError,
    DecodingError,
    FormSearchError,
    NoReferenceSetError,
    RefNotFoundError,
    UnsupportedFormKindError,
)
from DocQuery.core.models import FieldSpec, FormTemplate, Ref
from DocQuery.forms.search_form import parse_max_age
from DocQuery.transport.http import TransportResponse

ACTION = "https://repo.example/api/documents/search"

_BODY = json.dumps(
    {
        "page": 1,
        "results_per_page": 20,
        "results_size": 1,
        "total_results_size": 1,
        "total_pages": 1,
        "next_page": None,
        "prev_page": None,
        "results": [
            {
                "id": "WKxlPCUAAIZ10EHU",
                "uid": "hello",
                "type": "blog-post",
                "href": "https://repo.example/api/documents/search?ref=abc&q=x",
                "tags": ["news"],
                "slugs": ["hello-world"],
                "lang": "en-us",
                "data": {"blog-post": {"title": {"type": "Text", "value": "Hello"}}},
            }
        ],
    }
)


class _RecordingTransport:
    def __init__(self, responses: list[TransportResponse] | None = None) -> None:
        self.responses = list(responses or [])
        self.calls: list[tuple[str, dict, dict]] = []

    def get(self, url, params, headers) -> TransportResponse:
        self.calls.append((url, dict(params), dict(headers)))
        return self.responses.pop(0)


class _RecordingCache:
    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.sets: list[tuple[str, str, int]] = []

    def get(self, key):
        return self.store.get(key)

    def set(self, key, body, ttl):
        self.sets.append((key, body, ttl))
        self.store[key] = body


class _BrokenCache:
    def get(self, key):
        raise RuntimeError("cache down")

    def set(self, key, body, ttl):
        raise RuntimeError("cache down")


def _template(method: str = "GET", enctype: str = "application/x-www-form-urlencoded") -> FormTemplate:
    return FormTemplate(
        name="everything",
        method=method,
        enctype=enctype,
        action=ACTION,
        fields={
            "ref": FieldSpec("String"),
            "q": FieldSpec("String", repeatable=True),
            "page": FieldSpec("Integer", default="1"),
            "lang": FieldSpec("String"),
        },
    )


def _ok(body: str = _BODY, cache_control: str | None = "max-age=30") -> TransportResponse:
    headers = {"Cache-Control": cache_control} if cache_control else {}
    return TransportResponse(status=200, body=body, headers=headers)


def _api(transport, cache=None, access_token=None, template=None) -> Api:
    return Api(
        {"everything": template or _template()},
        [Ref(id="master", ref="abc", label="Master", is_master=True)],
        access_token=access_token,
        transport=transport,
        cache=cache,
    )


class TestSubmitPreconditions(unittest.TestCase):
    def test_no_ref_fails_before_any_io(self) -> None:
        transport = _RecordingTransport([_ok()])
        cache = _RecordingCache()
        form = _api(transport, cache).form("everything")
        with self.assertRaises(NoReferenceSetError):
            form.submit()
        self.assertEqual(transport.calls, [])
        self.assertEqual(cache.sets, [])

    def test_unsupported_form_kind(self) -> None:
        transport = _RecordingTransport([_ok()])
        form = _api(transport, template=_template(method="POST")).form("everything")
        with self.assertRaises(UnsupportedFormKindError) as ctx:
            form.submit_raw("abc")
        self.assertIn("POST / application/x-www-form-urlencoded", str(ctx.exception))
        self.assertEqual(transport.calls, [])


class TestErrorPayloads(unittest.TestCase):
    def test_every_error_accepts_a_body(self) -> None:
        self.assertIsNone(NoReferenceSetError().body)
        self.assertEqual(NoReferenceSetError(body={"form": "everything"}).body, {"form": "everything"})
        error = UnsupportedFormKindError("POST", "multipart/form-data", body="everything")
        self.assertEqual(error.body, "everything")
        self.assertEqual(error.method, "POST")
        self.assertEqual(str(error), "Unsupported kind of form: POST / multipart/form-data")


class TestSubmitRequest(unittest.TestCase):
    def test_request_parameters(self) -> None:
        transport = _RecordingTransport([_ok()])
        api = _api(transport, access_token="secret")
        form = api.form("everything").set("q", "[[:d = has(my.a.b)]]").set("lang", "").set("page", 2)

        body = form.submit_raw(api.master_ref)

        self.assertEqual(body, _BODY)
        url, params, headers = transport.calls[0]
        self.assertEqual(url, ACTION)
        self.assertEqual(
            params,
            {"q": ["[[:d = has(my.a.b)]]"], "page": "2", "ref": "abc", "access_token": "secret"},
        )
        self.assertEqual(headers, {"Accept": "application/json"})

    def test_submission_does_not_mutate_form_data(self) -> None:
        transport = _RecordingTransport([_ok()])
        form = _api(transport, access_token="secret").form("everything").set("lang", "")
        before = dict(form.data)
        form.submit_raw("abc")
        self.assertEqual(form.data, before)

    def test_submit_ref_argument_binds_ref(self) -> None:
        transport = _RecordingTransport([_ok(), _ok()])
        form = _api(transport).form("everything")
        form.submit_raw("first")
        form.submit_raw()
        self.assertEqual([call[1]["ref"] for call in transport.calls], ["first", "first"])

    def test_submit_decodes_response(self) -> None:
        transport = _RecordingTransport([_ok()])
        response = _api(transport).form("everything", ref="abc").submit()
        self.assertEqual(response.total_results_size, 1)
        self.assertEqual(response[0].uid, "hello")
        self.assertEqual(response[0].fragments["title"]["value"], "Hello")

    def test_submit_invalid_json(self) -> None:
        transport = _RecordingTransport([_ok(body="<html>oops</html>")])
        with self.assertRaises(DecodingError):
            _api(transport).form("everything").submit("abc")


class TestSubmitCache(unittest.TestCase):
    def test_fresh_response_is_cached_and_reused(self) -> None:
        transport = _RecordingTransport([_ok(cache_control="public, max-age=30")])
        cache = _RecordingCache()
        api = _api(transport, cache)

        first = api.form("everything").query(("at", "document.type", "blog-post")).submit("abc")
        second = api.form("everything").query(("at", "document.type", "blog-post")).submit("abc")

        self.assertEqual(len(transport.calls), 1)
        self.assertEqual(cache.sets[0][2], 30)
        self.assertEqual(first.results[0].id, second.results[0].id)

    def test_cache_key_ignores_access_token(self) -> None:
        transport = _RecordingTransport([_ok()])
        cache = _RecordingCache()
        _api(transport, cache, access_token="secret").form("everything").submit_raw("abc")
        key = cache.sets[0][0]
        self.assertEqual(key, f"GET::{ACTION}?page=1&ref=abc")

    def test_without_max_age_nothing_is_cached(self) -> None:
        transport = _RecordingTransport([_ok(cache_control="no-cache"), _ok(cache_control=None)])
        cache = _RecordingCache()
        api = _api(transport, cache)
        api.form("everything").submit_raw("abc")
        api.form("everything").submit_raw("abc")
        self.assertEqual(cache.sets, [])
        self.assertEqual(len(transport.calls), 2)

    def test_lru_cache_expiry_triggers_new_request(self) -> None:
        now = [1000.0]
        cache = LruCache(clock=lambda: now[0])
        transport = _RecordingTransport([_ok(cache_control="max-age=30"), _ok(cache_control="max-age=30")])
        api = _api(transport, cache)

        api.form("everything").submit_raw("abc")
        now[0] += 29
        api.form("everything").submit_raw("abc")
        self.assertEqual(len(transport.calls), 1)
        now[0] += 2
        api.form("everything").submit_raw("abc")
        self.assertEqual(len(transport.calls), 2)

    def test_different_parameters_do_not_share_entries(self) -> None:
        transport = _RecordingTransport([_ok(), _ok()])
        api = _api(transport, LruCache())
        api.form("everything").page(1).submit_raw("abc")
        api.form("everything").page(2).submit_raw("abc")
        self.assertEqual(len(transport.calls), 2)

    def test_cache_failures_do_not_fail_submission(self) -> None:
        transport = _RecordingTransport([_ok()])
        body = _api(transport, _BrokenCache()).form("everything").submit_raw("abc")
        self.assertEqual(body, _BODY)
        self.assertEqual(len(transport.calls), 1)

    def test_failed_response_is_not_cached(self) -> None:
        transport = _RecordingTransport([TransportResponse(status=500, body="boom", headers={"Cache-Control": "max-age=30"})])
        cache = _RecordingCache()
        with self.assertRaises(FormSearchError):
            _api(transport, cache).form("everything").submit_raw("abc")
        self.assertEqual(cache.sets, [])


class TestSubmitErrors(unittest.TestCase):
    def _submit_with_status(self, status: int, body: str) -> FormSearchError:
        transport = _RecordingTransport([TransportResponse(status=status, body=body)])
        form = _api(transport).form("everything")
        with self.assertRaises(FormSearchError) as ctx:
            form.submit("abc")
        return ctx.exception

    def test_401(self) -> None:
        error = self._submit_with_status(401, '{"error": "Invalid access token"}')
        self.assertIsInstance(error, AuthenticationError)
        self.assertEqual(error.body, {"error": "Invalid access token"})
        self.assertEqual(error.status_code, 401)

    def test_403(self) -> None:
        error = self._submit_with_status(403, '{"error": "Forbidden"}')
        self.assertIsInstance(error, AuthorizationError)

    def test_404_carries_parsed_body(self) -> None:
        error = self._submit_with_status(404, '{"message": "Ref not found"}')
        self.assertIsInstance(error, RefNotFoundError)
        self.assertEqual(error.body, {"message": "Ref not found"})
        self.assertIn("Ref not found", str(error))

    def test_other_status_falls_back_to_raw_text(self) -> None:
        error = self._submit_with_status(502, "Bad gateway")
        self.assertIs(type(error), FormSearchError)
        self.assertEqual(error.body, "Bad gateway")
        self.assertEqual(error.status_code, 502)


class TestParseMaxAge(unittest.TestCase):
    def test_parse(self) -> None:
        self.assertEqual(parse_max_age("max-age=30"), 30)
        self.assertEqual(parse_max_age("public, max-age = 120, must-revalidate"), 120)
        self.assertIsNone(parse_max_age("no-cache"))
        self.assertIsNone(parse_max_age(None))


if __name__ == "__main__":
    unittest.main()
