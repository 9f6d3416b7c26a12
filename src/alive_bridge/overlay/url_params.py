"""
Alive Studio 오버레이 URL 파라미터 처리.

OBS 브라우저 소스 URL은 `BASE_URL + "k=v&k2=v2..."` 형태. 값은 인코딩하지 않고
그대로 이어붙인다 (오버레이 쪽이 그 형태를 기대함).
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Dict, Mapping, Optional

# 이전 URL에서 유지할 기본 파라미터 (화면 크기, 오버레이 버전)
PRESERVED_KEYS = ("width", "height", "version")

_PARAMS_RE = re.compile(r"\?slot=alive-studio-ctrl&(.+)$")


def iso_timestamp(now: Optional[datetime] = None) -> str:
    """UTC ISO-8601, 밀리초 + Z. 예: 2024-05-01T12:00:00.000Z"""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc).replace(tzinfo=None)
    return now.isoformat(timespec="milliseconds") + "Z"


def extract_url_params(url: str) -> str:
    """URL에서 슬롯 마커 뒤의 파라미터 문자열 추출. 없으면 빈 문자열."""
    if not url or not isinstance(url, str):
        return ""
    match = _PARAMS_RE.search(url)
    return match.group(1) if match else ""


def parse_params(params_str: str) -> Dict[str, str]:
    """`k=v&k2=v2` → dict. 키나 값이 비어 있는 항목은 버림."""
    params: Dict[str, str] = {}
    if not params_str:
        return params
    for part in params_str.split("&"):
        key, _, value = part.partition("=")
        if key and value:
            params[key] = value
    return params


def stringify_params(params: Mapping[str, str]) -> str:
    return "&".join(f"{key}={value}" for key, value in params.items())


def update_url(
    input_param: str,
    current_url: str,
    base_url: str,
    now: Optional[datetime] = None,
) -> str:
    """
    새 오버레이 URL 생성.

    현재 URL의 기본 파라미터(width/height/version)만 유지하고, 요청 파라미터로
    덮어쓴 뒤 timestamp는 항상 현재 시각으로 설정한다 (요청에 있어도 무시).

    Args:
        input_param: 요청 파라미터 문자열 (`background=blue&sound=on`)
        current_url: 소스에 현재 설정된 URL (없으면 빈 문자열)
        base_url: 새 URL의 접두어
        now: timestamp 기준 시각 (테스트용)
    """
    incoming = parse_params(input_param)

    preserved: Dict[str, str] = {}
    if current_url:
        current = parse_params(extract_url_params(current_url))
        preserved = {k: v for k, v in current.items() if k in PRESERVED_KEYS}

    combined = {**preserved, **incoming, "timestamp": iso_timestamp(now)}
    return f"{base_url}{stringify_params(combined)}"
