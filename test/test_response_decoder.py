"""Tests for search response decoding."""

import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from DocQuery.core.errors import DecodingError
from DocQuery.parsers.response import decode_document, decode_response, parse_datetime


def _doc(**overrides):
    doc = {
        "id": "UlfoxUnM0wkXYXbm",
        "uid": None,
        "type": "product",
        "href": "https://repo.example/api/documents/search?ref=abc&q=x",
        "tags": ["Macaron"],
        "slugs": ["vanilla-macaron", "old-slug"],
        "first_publication_date": "2017-01-13T11:45:21.000Z",
        "last_publication_date": "2017-02-21T16:05:19+0000",
        "lang": "en-us",
        "alternate_languages": [
            {"id": "WZcAEyoAACcA0LHP", "uid": "macaron-vanille", "type": "product", "lang": "fr-fr"}
        ],
        "data": {"product": {"name": {"type": "StructuredText", "value": []}}},
    }
    doc.update(overrides)
    return doc


def _page(results, **overrides):
    page = {
        "page": 1,
        "results_per_page": 20,
        "results_size": len(results),
        "total_results_size": len(results),
        "total_pages": 1,
        "next_page": None,
        "prev_page": None,
        "results": results,
    }
    page.update(overrides)
    return page


class TestDecodeResponse(unittest.TestCase):
    def test_pagination_fields(self) -> None:
        response = decode_response(
            _page(
                [_doc()],
                page=2,
                total_pages=3,
                total_results_size=41,
                next_page="https://repo.example/api/documents/search?page=3",
                prev_page="https://repo.example/api/documents/search?page=1",
            )
        )
        self.assertEqual(response.current_page, 2)
        self.assertEqual(response.limit_value, 20)
        self.assertEqual(response.total_results_size, 41)
        self.assertTrue(response.next_page.endswith("page=3"))
        self.assertEqual(len(response), 1)

    def test_last_page_has_no_next(self) -> None:
        response = decode_response(_page([_doc()], page=1, total_pages=1))
        self.assertIsNone(response.next_page)

    def test_empty_result_set(self) -> None:
        response = decode_response(_page([], total_pages=0))
        self.assertEqual(list(response), [])

    def test_results_size_mismatch(self) -> None:
        with self.assertRaises(DecodingError):
            decode_response(_page([_doc()], results_size=2))

    def test_missing_required_field(self) -> None:
        payload = _page([_doc()])
        del payload["total_pages"]
        with self.assertRaises(DecodingError) as ctx:
            decode_response(payload)
        self.assertIn("total_pages", str(ctx.exception))

    def test_rejects_non_object(self) -> None:
        with self.assertRaises(DecodingError):
            decode_response([])
        with self.assertRaises(DecodingError):
            decode_response(_page("nope"))


class TestDecodeDocument(unittest.TestCase):
    def test_fields(self) -> None:
        doc = decode_document(_doc())
        self.assertEqual(doc.id, "UlfoxUnM0wkXYXbm")
        self.assertIsNone(doc.uid)
        self.assertEqual(doc.slug, "vanilla-macaron")
        self.assertEqual(doc.tags, ("Macaron",))
        self.assertEqual(doc.first_publication_date, datetime(2017, 1, 13, 11, 45, 21, tzinfo=timezone.utc))
        self.assertEqual(doc.last_publication_date, datetime(2017, 2, 21, 16, 5, 19, tzinfo=timezone.utc))
        self.assertEqual(doc.alternate_languages[0].lang, "fr-fr")
        self.assertEqual(doc.alternate_languages[0].uid, "macaron-vanille")

    def test_slug_placeholder(self) -> None:
        self.assertEqual(decode_document(_doc(slugs=[])).slug, "-")
        self.assertEqual(decode_document(_doc(slugs=None)).slug, "-")

    def test_fragments_are_unwrapped(self) -> None:
        doc = decode_document(_doc())
        self.assertEqual(list(doc.fragments), ["name"])

    def test_flat_fragments_are_kept(self) -> None:
        doc = decode_document(_doc(data={"title": "x", "body": "y"}))
        self.assertEqual(dict(doc.fragments), {"title": "x", "body": "y"})

    def test_fragments_are_read_only(self) -> None:
        doc = decode_document(_doc())
        with self.assertRaises(TypeError):
            doc.fragments["name"] = "changed"  # type: ignore[index]

    def test_missing_id(self) -> None:
        raw = _doc()
        del raw["id"]
        with self.assertRaises(DecodingError):
            decode_document(raw)

    def test_bad_tags(self) -> None:
        with self.assertRaises(DecodingError):
            decode_document(_doc(tags=[1, 2]))


class TestParseDatetime(unittest.TestCase):
    def test_naive_is_utc(self) -> None:
        self.assertEqual(parse_datetime("2020-05-01T10:00:00"), datetime(2020, 5, 1, 10, tzinfo=timezone.utc))

    def test_empty(self) -> None:
        self.assertIsNone(parse_datetime(None))
        self.assertIsNone(parse_datetime(""))

    def test_invalid(self) -> None:
        with self.assertRaises(DecodingError):
            parse_datetime("yesterday")
        with self.assertRaises(DecodingError):
            parse_datetime(12)


if __name__ == "__main__":
    unittest.main()
