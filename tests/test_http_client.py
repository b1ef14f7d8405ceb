import sys
import os
import json
import unittest
from unittest.mock import MagicMock

import requests

# Add the parent directory to sys.path to import the freshtime package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from freshtime.api.client import HttpClient, TokenProvider, extract_page, PAGE_SIZE
from freshtime.errors import ApiError, AuthExpiredError, ConfigError, DecodeError


def make_response(status=200, body=None, text=None, reason="OK"):
    """Build a fake requests.Response."""
    resp = MagicMock()
    resp.status_code = status
    resp.reason = reason
    if text is None:
        text = json.dumps(body) if body is not None else ""
    resp.text = text
    return resp


class TestHttpClient(unittest.TestCase):
    """Test request sending, status handling and the refresh-on-401 retry."""

    def setUp(self):
        """Set up a client with a mocked session."""
        self.session = MagicMock()
        self.on_refresh = MagicMock(return_value="new-token")
        self.provider = TokenProvider("old-token", on_refresh=self.on_refresh)
        self.client = HttpClient(self.provider, base_url="https://api.test/", session=self.session)

    def test_sends_bearer_token_and_json_body(self):
        self.session.request.return_value = make_response(200, {"ok": True})

        result = self.client.post("/things", {"name": "x"})

        self.assertEqual(result, {"ok": True})
        args, kwargs = self.session.request.call_args
        self.assertEqual(args, ("POST", "https://api.test/things"))
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer old-token")
        self.assertEqual(kwargs["headers"]["Content-Type"], "application/json")
        self.assertEqual(json.loads(kwargs["data"]), {"name": "x"})

    def test_get_sends_no_body(self):
        self.session.request.return_value = make_response(200, {})
        self.client.get("/things", {"a": "1"})
        kwargs = self.session.request.call_args[1]
        self.assertIsNone(kwargs["data"])
        self.assertEqual(kwargs["params"], {"a": "1"})

    def test_401_refreshes_and_retries_with_new_token(self):
        self.session.request.side_effect = [
            make_response(401, text="expired", reason="Unauthorized"),
            make_response(200, {"ok": True}),
        ]

        result = self.client.get("/things")

        self.assertEqual(result, {"ok": True})
        self.on_refresh.assert_called_once()
        second_headers = self.session.request.call_args_list[1][1]["headers"]
        self.assertEqual(second_headers["Authorization"], "Bearer new-token")

    def test_second_401_is_terminal(self):
        self.session.request.side_effect = [
            make_response(401, text="expired"),
            make_response(401, text="still expired"),
        ]

        with self.assertRaises(AuthExpiredError) as ctx:
            self.client.get("/things")

        self.assertEqual(ctx.exception.status, 401)
        self.assertEqual(self.session.request.call_count, 2)
        self.on_refresh.assert_called_once()

    def test_each_request_may_refresh_once(self):
        self.session.request.side_effect = [
            make_response(401), make_response(200, {"n": 1}),
            make_response(401), make_response(200, {"n": 2}),
        ]

        self.assertEqual(self.client.get("/a"), {"n": 1})
        self.assertEqual(self.client.get("/b"), {"n": 2})
        self.assertEqual(self.on_refresh.call_count, 2)

    def test_401_without_refresh_capability(self):
        client = HttpClient(TokenProvider("tok"), base_url="https://api.test", session=self.session)
        self.session.request.return_value = make_response(401, text="nope")

        with self.assertRaises(AuthExpiredError):
            client.get("/things")
        self.assertEqual(self.session.request.call_count, 1)

    def test_failed_refresh_is_auth_expired(self):
        self.on_refresh.side_effect = ConfigError("no refresh token")
        self.session.request.return_value = make_response(401)

        with self.assertRaises(AuthExpiredError):
            self.client.get("/things")
        self.assertEqual(self.session.request.call_count, 1)

    def test_non_2xx_raises_api_error(self):
        self.session.request.return_value = make_response(500, text="boom", reason="Internal Server Error")

        with self.assertRaises(ApiError) as ctx:
            self.client.get("/things")

        self.assertNotIsInstance(ctx.exception, AuthExpiredError)
        self.assertEqual(ctx.exception.status, 500)
        self.assertEqual(ctx.exception.body, "boom")
        self.assertIn("API error 500 Internal Server Error: boom", str(ctx.exception))

    def test_invalid_json_raises_decode_error(self):
        self.session.request.return_value = make_response(200, text="<html>")
        with self.assertRaises(DecodeError):
            self.client.get("/things")

    def test_empty_body_returns_none(self):
        self.session.request.return_value = make_response(200, text="")
        self.assertIsNone(self.client.put("/things/1", {"billed": True}))

    def test_network_error_becomes_api_error(self):
        self.session.request.side_effect = requests.ConnectionError("connection refused")
        with self.assertRaises(ApiError) as ctx:
            self.client.get("/things")
        self.assertEqual(ctx.exception.status, 0)


class TestPagination(unittest.TestCase):
    """Test page extraction and multi-page fetching."""

    def setUp(self):
        """Set up a client with a mocked session."""
        self.session = MagicMock()
        self.client = HttpClient(TokenProvider("tok"), base_url="https://api.test", session=self.session)

    def test_flat_shape_fetches_all_pages(self):
        self.session.request.side_effect = [
            make_response(200, {"time_entries": [{"id": 1}], "meta": {"pages": 2}}),
            make_response(200, {"time_entries": [{"id": 2}], "meta": {"pages": 2}}),
        ]

        results = self.client.get_paginated("/entries", "time_entries", {"billed": "false"})

        self.assertEqual(results, [{"id": 1}, {"id": 2}])
        pages = [c[1]["params"]["page"] for c in self.session.request.call_args_list]
        self.assertEqual(pages, ["1", "2"])
        first_params = self.session.request.call_args_list[0][1]["params"]
        self.assertEqual(first_params["per_page"], str(PAGE_SIZE))
        self.assertEqual(first_params["billed"], "false")

    def test_nested_shape_single_page(self):
        self.session.request.return_value = make_response(
            200, {"response": {"result": {"clients": [{"id": 7}], "pages": 1}}}
        )

        results = self.client.get_paginated("/clients", "clients")

        self.assertEqual(results, [{"id": 7}])
        self.assertEqual(self.session.request.call_count, 1)

    def test_missing_key_yields_no_items(self):
        self.session.request.return_value = make_response(200, {"something_else": []})
        self.assertEqual(self.client.get_paginated("/clients", "clients"), [])
        self.assertEqual(self.session.request.call_count, 1)

    def test_zero_pages_stops_after_first(self):
        self.session.request.return_value = make_response(
            200, {"time_entries": [{"id": 1}], "meta": {"pages": 0}}
        )
        self.assertEqual(self.client.get_paginated("/entries", "time_entries"), [{"id": 1}])
        self.assertEqual(self.session.request.call_count, 1)

    def test_extract_page_shapes(self):
        flat = extract_page({"projects": [1, 2], "meta": {"pages": 3}}, "projects")
        self.assertEqual((flat.items, flat.pages), ([1, 2], 3))

        nested = extract_page({"response": {"result": {"services": [1]}}}, "services")
        self.assertEqual((nested.items, nested.pages), ([1], 1))

        empty = extract_page(None, "services")
        self.assertEqual((empty.items, empty.pages), ([], 1))


if __name__ == '__main__':
    unittest.main()
