# utils.py
import re
from urllib.parse import urlsplit


class InvalidUrlError(ValueError):
    """분석 대상 URL이 비어 있거나 호스트명을 찾을 수 없을 때 발생하는 예외"""
    pass


_FENCE_START = re.compile(r"^```(?:json)?\s*\n?", re.IGNORECASE)
_FENCE_END = re.compile(r"\n?```\s*$")


def extract_domain(url):
    """URL에서 스킴과 선행 'www.'를 제거한 호스트명을 반환합니다.

    'https://www.example.com/path' -> 'example.com'
    스킴이 없는 입력('example.com')은 https로 간주합니다.
    """
    if not url or not str(url).strip():
        raise InvalidUrlError("URL is required")

    url = str(url).strip()
    if "://" not in url:
        url = "https://" + url

    try:
        hostname = urlsplit(url).hostname
    except ValueError as e:
        raise InvalidUrlError(f"Invalid URL: {url}") from e

    if not hostname:
        raise InvalidUrlError(f"Invalid URL: {url}")

    if hostname.startswith("www."):
        hostname = hostname[len("www."):]
    return hostname


def company_name_from_domain(domain):
    """도메인의 첫 번째 레이블을 회사 이름으로 사용합니다. ('stripe.com' -> 'stripe')"""
    return domain.split(".")[0]


def strip_code_fences(text):
    """모델이 응답을 ```json ... ``` 으로 감싼 경우 코드 블록 표시를 제거합니다."""
    if text is None:
        return ""
    text = text.strip()
    text = _FENCE_START.sub("", text)
    text = _FENCE_END.sub("", text)
    return text.strip()
