"""Unit tests for link-header parsing, body parsing and API error construction."""
import httpx

from mcp_github.errors import ApiError
from mcp_github.helpers import create_api_error, parse_link_header, parse_response_body


class TestParseLinkHeader:
    def test_next_and_last(self):
        header = '<https://api.example/x?page=2>; rel="next", <https://api.example/x?page=5>; rel="last"'
        assert parse_link_header(header) == {
            "next": "https://api.example/x?page=2",
            "last": "https://api.example/x?page=5",
        }

    def test_all_relations(self):
        header = (
            '<https://api.github.com/r?page=1>; rel="first", '
            '<https://api.github.com/r?page=2>; rel="prev", '
            '<https://api.github.com/r?page=4>; rel="next", '
            '<https://api.github.com/r?page=9>; rel="last"'
        )
        links = parse_link_header(header)
        assert set(links) == {"first", "prev", "next", "last"}
        assert links["prev"].endswith("page=2")

    def test_empty_and_missing(self):
        assert parse_link_header(None) == {}
        assert parse_link_header("") == {}

    def test_malformed_entries_are_skipped(self):
        header = 'garbage, <https://api.example/x?page=3>; rel="next", <https://api.example/y>'
        assert parse_link_header(header) == {"next": "https://api.example/x?page=3"}

    def test_no_next_on_last_page(self):
        header = '<https://api.example/x?page=1>; rel="first", <https://api.example/x?page=1>; rel="prev"'
        assert "next" not in parse_link_header(header)


class TestParseResponseBody:
    def test_json_content_type(self):
        resp = httpx.Response(200, json={"a": 1})
        assert parse_response_body(resp) == {"a": 1}

    def test_json_with_vendor_charset(self):
        resp = httpx.Response(
            200,
            content=b"[1, 2]",
            headers={"content-type": "application/json; charset=utf-8"},
        )
        assert parse_response_body(resp) == [1, 2]

    def test_text_content_type(self):
        resp = httpx.Response(200, text="diff --git a/x b/x")
        assert parse_response_body(resp) == "diff --git a/x b/x"

    def test_malformed_json_falls_back_to_text(self):
        resp = httpx.Response(
            200,
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        assert parse_response_body(resp) == "{not json"

    def test_empty_json_body_is_empty_text(self):
        resp = httpx.Response(204, headers={"content-type": "application/json"})
        assert parse_response_body(resp) == ""


class TestCreateApiError:
    def test_json_body_is_stringified(self):
        err = create_api_error(404, {"message": "Not Found"})
        assert isinstance(err, ApiError)
        assert err.status == 404
        assert "404" in str(err)
        assert '"message": "Not Found"' in str(err)

    def test_text_body_is_embedded_verbatim(self):
        err = create_api_error(502, "Bad Gateway")
        assert str(err) == "GitHub API error! Status: 502. Message: Bad Gateway"
        assert err.message == str(err)
