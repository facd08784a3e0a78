"""Tests for URL and model-output helpers."""

import pytest

from utils import InvalidUrlError, company_name_from_domain, extract_domain, strip_code_fences


class TestExtractDomain:
    def test_strips_scheme_www_and_path(self) -> None:
        assert extract_domain("https://www.example.com/path") == "example.com"

    def test_http_scheme(self) -> None:
        assert extract_domain("http://example.org") == "example.org"

    def test_without_scheme(self) -> None:
        assert extract_domain("www.stripe.com/pricing") == "stripe.com"

    def test_keeps_subdomain(self) -> None:
        assert extract_domain("https://app.example.com") == "app.example.com"

    def test_only_leading_www_removed(self) -> None:
        """'www.' in the middle of the hostname is left alone."""
        assert extract_domain("https://shop.www.example.com") == "shop.www.example.com"

    def test_lowercases_and_drops_port(self) -> None:
        assert extract_domain("HTTPS://WWW.Example.COM:8080/x?y=1") == "example.com"

    @pytest.mark.parametrize("value", ["", "   ", None, "https://"])
    def test_invalid(self, value) -> None:
        with pytest.raises(InvalidUrlError):
            extract_domain(value)


def test_company_name_from_domain() -> None:
    assert company_name_from_domain("stripe.com") == "stripe"
    assert company_name_from_domain("localhost") == "localhost"


class TestStripCodeFences:
    def test_json_fence(self) -> None:
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_bare_fence(self) -> None:
        assert strip_code_fences('```\n{"a": 1}\n```  ') == '{"a": 1}'

    def test_uppercase_json_fence(self) -> None:
        assert strip_code_fences('```JSON\n{"a": 1}```') == '{"a": 1}'

    def test_no_fence_unchanged(self) -> None:
        assert strip_code_fences('  {"a": 1}\n') == '{"a": 1}'

    def test_none(self) -> None:
        assert strip_code_fences(None) == ""
