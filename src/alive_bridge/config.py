"""
브리지 설정. .env(python-dotenv)와 환경 변수에서 읽는다.

- OBS_HOST / OBS_PORT / OBS_PASSWORD: OBS WebSocket 접속 정보
- SERVER_HOST / SERVER_PORT: StreamDeck, Max for Live가 호출하는 HTTP 서버
- RETRY_INTERVAL_MS: OBS 재연결 간격 (밀리초)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

# Alive Studio 컨트롤 슬롯 URL. 소스 탐색과 새 URL 생성에 모두 사용.
BASE_URL = "https://studio.alive-project.com/item?slot=alive-studio-ctrl&"

DEFAULT_OBS_HOST = "localhost"
DEFAULT_OBS_PORT = 4455
DEFAULT_SERVER_HOST = "0.0.0.0"
DEFAULT_SERVER_PORT = 5001
DEFAULT_RETRY_INTERVAL_MS = 5000


@dataclass(frozen=True)
class BridgeConfig:
    obs_host: str = DEFAULT_OBS_HOST
    obs_port: int = DEFAULT_OBS_PORT
    obs_password: Optional[str] = None
    server_host: str = DEFAULT_SERVER_HOST
    server_port: int = DEFAULT_SERVER_PORT
    retry_interval_ms: int = DEFAULT_RETRY_INTERVAL_MS
    base_url: str = BASE_URL

    @property
    def retry_interval(self) -> float:
        """재연결 간격 (초). threading.Timer 용."""
        return self.retry_interval_ms / 1000.0


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("%s 값이 정수가 아님 (%r), 기본값 %d 사용", name, raw, default)
        return default


def load_config(env: Optional[Mapping[str, str]] = None) -> BridgeConfig:
    """환경 변수에서 BridgeConfig 생성. .env 로드는 호출 측(main)에서 먼저 수행."""
    if env is None:
        env = os.environ
    return BridgeConfig(
        obs_host=(env.get("OBS_HOST") or "").strip() or DEFAULT_OBS_HOST,
        obs_port=_int_env(env, "OBS_PORT", DEFAULT_OBS_PORT),
        obs_password=env.get("OBS_PASSWORD") or None,
        server_host=(env.get("SERVER_HOST") or "").strip() or DEFAULT_SERVER_HOST,
        server_port=_int_env(env, "SERVER_PORT", DEFAULT_SERVER_PORT),
        retry_interval_ms=_int_env(env, "RETRY_INTERVAL_MS", DEFAULT_RETRY_INTERVAL_MS),
    )
