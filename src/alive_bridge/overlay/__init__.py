"""
Alive Studio 오버레이 URL: 브라우저 소스 URL의 파라미터를 읽고 합쳐서 새 URL 생성.
"""

from alive_bridge.overlay.url_params import (
    PRESERVED_KEYS,
    extract_url_params,
    iso_timestamp,
    parse_params,
    stringify_params,
    update_url,
)

__all__ = [
    "PRESERVED_KEYS",
    "extract_url_params",
    "iso_timestamp",
    "parse_params",
    "stringify_params",
    "update_url",
]
