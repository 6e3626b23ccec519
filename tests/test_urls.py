"""Tests for location classification and attribute URL normalization."""

from __future__ import annotations

import pytest

from htmltool.core.normalize.urls import is_absolute_uri, is_url, normalize_attribute_url


ORIGIN = "https://example.com/dir/page.html"


class TestIsUrl:
    """Tests for the location classifier."""

    @pytest.mark.parametrize(
        "location",
        [
            "http://example.com",
            "https://example.com/a",
            "HTTPS://EXAMPLE.COM",
            "http:not-really-a-url",
        ],
    )
    def test_urls(self, location):
        assert is_url(location)

    @pytest.mark.parametrize(
        "location",
        [
            "index.html",
            "/var/www/index.html",
            "./http:file.html",
            "ftp://example.com/file.html",
            "httpx://example.com",
        ],
    )
    def test_paths(self, location):
        assert not is_url(location)


class TestIsAbsoluteUri:
    """Tests for absolute URI detection."""

    @pytest.mark.parametrize(
        "value",
        ["https://cdn.com/a.png", "mailto:me@example.com", "javascript:void(0)", "data:image/png;base64,AA"],
    )
    def test_absolute(self, value):
        assert is_absolute_uri(value)

    @pytest.mark.parametrize(
        "value",
        ["a.png", "#top", "?page=2", "1abc:def", "img/a.png", "http://exa\nmple.com/"],
    )
    def test_not_absolute(self, value):
        assert not is_absolute_uri(value)


class TestNormalizeAttributeUrl:
    """Tests for src/href normalization against an HTTP(S) origin."""

    def test_root_relative(self):
        assert normalize_attribute_url("/img/a.png", ORIGIN) == "https://example.com/img/a.png"

    def test_protocol_relative(self):
        assert normalize_attribute_url("//cdn.com/a.png", ORIGIN) == "https://cdn.com/a.png"

    def test_protocol_relative_on_http_origin_uses_https(self):
        assert normalize_attribute_url("//cdn.com/a.png", "http://example.com/") == "https://cdn.com/a.png"

    def test_path_relative_is_concatenated_with_full_origin_path(self):
        # Filename is kept and no path joining happens
        assert normalize_attribute_url("a.png", ORIGIN) == "https://example.com/dir/page.htmla.png"

    def test_dot_segments_are_not_collapsed(self):
        assert (
            normalize_attribute_url("../b.png", "https://example.com/dir/")
            == "https://example.com/dir/../b.png"
        )

    def test_absolute_value_unchanged(self):
        assert normalize_attribute_url("https://other.org/x?y=1", ORIGIN) == "https://other.org/x?y=1"

    def test_non_http_scheme_unchanged(self):
        assert normalize_attribute_url("mailto:me@example.com", ORIGIN) == "mailto:me@example.com"

    def test_origin_port_and_scheme_kept(self):
        assert (
            normalize_attribute_url("/a", "http://example.com:8080/x/y.html")
            == "http://example.com:8080/a"
        )

    def test_origin_query_not_included(self):
        assert (
            normalize_attribute_url("b.png", "https://example.com/dir/page.html?q=1")
            == "https://example.com/dir/page.htmlb.png"
        )

    def test_origin_userinfo_dropped(self):
        assert (
            normalize_attribute_url("/a", "https://user:pw@example.com/")
            == "https://example.com/a"
        )

    def test_fragment_is_path_relative(self):
        assert normalize_attribute_url("#top", ORIGIN) == "https://example.com/dir/page.html#top"

    def test_origin_path_kept_percent_encoded(self):
        assert (
            normalize_attribute_url("a.png", "https://e.com/a%20b/p.html")
            == "https://e.com/a%20b/p.htmla.png"
        )
