"""
StreamDeck / Max for Live 요청 → Alive Studio 브라우저 소스 URL 갱신.

HTTP와 무관한 처리 흐름만 담당하고, 결과(UpdateResult)를 서버가 상태 코드로 변환한다.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from alive_bridge.models import SendRequest
from alive_bridge.obs import ObsSession, find_target_source
from alive_bridge.overlay import update_url

logger = logging.getLogger(__name__)


class UpdateResult(Enum):
    """처리 결과: (HTTP 상태 코드, 응답 본문)."""

    OK = (200, "OK")
    BAD_REQUEST = (400, "Missing parameters. Expected either 'url' or both 'key' and 'value'.")
    NOT_FOUND = (404, "No Alive Studio source found in current scene")
    FAILED = (500, "Failed to update OBS source")
    UNAVAILABLE = (503, "OBS is not connected. Reconnection attempts are in progress.")

    @property
    def status_code(self) -> int:
        return self.value[0]

    @property
    def message(self) -> str:
        return self.value[1]


class BridgeError(Exception):
    """처리 중 예기치 못한 실패. 서버에서 500 `Server error: ...`로 변환."""


def resolve_update_params(body: Optional[SendRequest]) -> Optional[str]:
    """
    요청 본문에서 파라미터 문자열 추출.

    - StreamDeck 형식: {"url": "background=blue&sound=on"}
    - 기존 형식: {"key": "background", "value": "blue"}
    둘 다 아니면 None.
    """
    if body is None:
        return None
    if body.url:
        return body.url
    if body.key and body.value:
        return f"{body.key}={body.value}"
    return None


class Bridge:
    def __init__(self, session: ObsSession, base_url: str):
        self.session = session
        self.base_url = base_url

    def send(self, url_param: str) -> UpdateResult:
        """
        파라미터를 현재 씬의 Alive Studio 소스 URL에 합쳐서 반영.

        Raises:
            BridgeError: OBS 요청 도중 실패. 연결을 끊긴 상태로 바꾸고 재연결을 예약한 뒤 올림.
        """
        logger.info("요청 파라미터 수신: %s", url_param)

        if not self.session.connected:
            logger.warning("OBS 미연결, 연결 시도...")
            if not self.session.connect():
                return UpdateResult.UNAVAILABLE

        try:
            source_name = find_target_source(self.session, self.base_url)
            if not source_name:
                return UpdateResult.NOT_FOUND

            settings = self.session.get_input_settings(source_name)
            new_url = update_url(url_param, settings.get("url") or "", self.base_url)
            logger.info("URL 갱신: %s", new_url)

            if self.session.update_source_url(source_name, new_url):
                return UpdateResult.OK
            return UpdateResult.FAILED
        except Exception as e:
            logger.error("요청 처리 실패: %s", e)
            self.session.mark_disconnected(str(e))
            raise BridgeError(str(e)) from e

    def update_source(self, source_name: str, url: str) -> UpdateResult:
        """지정한 소스의 URL을 그대로 설정 (소스 탐색/병합 없음)."""
        logger.info("소스 URL 직접 설정: %s → %s", source_name, url)
        try:
            if self.session.update_source_url(source_name, url):
                return UpdateResult.OK
            return UpdateResult.FAILED
        except Exception as e:
            logger.error("소스 URL 직접 설정 실패 (%s): %s", source_name, e)
            self.session.mark_disconnected(str(e))
            raise BridgeError(str(e)) from e
