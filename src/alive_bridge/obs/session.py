"""
OBS WebSocket 세션. obswebsocket(obs-websocket-py)로 연결하고 끊기면 재연결.

연결 상태(connected)와 클라이언트 핸들은 락으로 보호한다. 끊김 콜백은 obsws 수신
스레드에서, 요청 처리는 서버 스레드풀에서, 재연결은 threading.Timer에서 들어온다.
재연결은 고정 간격으로 성공할 때까지 무한 반복 (백오프 없음).
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from obswebsocket import obsws, requests as obsreq

from alive_bridge.config import (
    DEFAULT_OBS_HOST,
    DEFAULT_OBS_PORT,
    DEFAULT_RETRY_INTERVAL_MS,
    BridgeConfig,
)

logger = logging.getLogger(__name__)


class ObsError(RuntimeError):
    """OBS 요청 관련 에러의 기본 클래스."""


class ObsNotConnectedError(ObsError):
    pass


class ObsRequestError(ObsError):
    """OBS가 요청 실패 상태를 반환함."""

    def __init__(self, request_type: str, detail: Any = None):
        self.request_type = request_type
        self.detail = detail
        msg = f"{request_type} 요청 실패"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


def _build_request(request_type: str, **data: Any):
    return getattr(obsreq, request_type)(**data)


class ObsSession:
    """
    OBS 연결 하나와 그 위의 요청들.
    연결: connect() (이미 연결돼 있으면 바로 True) → 끊기면 retry_interval 후 자동 재연결.
    """

    def __init__(
        self,
        host: str = DEFAULT_OBS_HOST,
        port: int = DEFAULT_OBS_PORT,
        password: Optional[str] = None,
        retry_interval: float = DEFAULT_RETRY_INTERVAL_MS / 1000.0,
        client_factory: Callable[..., Any] = obsws,
        request_factory: Callable[..., Any] = _build_request,
        timer_factory: Callable[..., Any] = threading.Timer,
    ):
        self.host = host
        self.port = port
        self.password = password
        self.retry_interval = retry_interval
        self._client_factory = client_factory
        self._request_factory = request_factory
        self._timer_factory = timer_factory

        self._lock = threading.RLock()
        self._connect_lock = threading.Lock()
        self._client = None
        self._connected = False
        self._retry_timer = None
        self._closed = False

    @classmethod
    def from_config(cls, config: BridgeConfig, **kwargs: Any) -> "ObsSession":
        return cls(
            host=config.obs_host,
            port=config.obs_port,
            password=config.obs_password,
            retry_interval=config.retry_interval,
            **kwargs,
        )

    @property
    def connected(self) -> bool:
        with self._lock:
            return self._connected

    def get_connection_status(self) -> bool:
        return self.connected

    # ---- 연결 관리 ----

    def connect(self) -> bool:
        """OBS에 연결. 실패해도 재시도는 예약하지 않음 (호출 측이 결정)."""
        # 접속 시도는 _connect_lock으로 한 번에 하나만. 네트워크 대기 중에는 _lock을 잡지 않으므로
        # connected 조회(/health 등)는 막히지 않는다.
        with self._connect_lock:
            with self._lock:
                if self._connected:
                    return True
                if self._closed:
                    return False
                stale, self._client = self._client, None
            self._disconnect_quietly(stale)

            client = self._client_factory(
                host=self.host,
                port=self.port,
                password=self.password or "",
                on_disconnect=self._on_channel_closed,
            )
            try:
                client.connect()
            except Exception as e:
                logger.error("OBS 연결 실패 (%s:%s): %s", self.host, self.port, e)
                # 인증 실패 등으로 반쯤 열린 소켓 정리
                self._disconnect_quietly(client)
                return False

            with self._lock:
                closed = self._closed
                if not closed:
                    self._client = client
                    self._connected = True
            if closed:
                self._disconnect_quietly(client)
                return False
            logger.info("OBS WebSocket 연결됨 (%s:%s)", self.host, self.port)
            return True

    @staticmethod
    def _disconnect_quietly(client: Any) -> None:
        """이전/실패한 클라이언트 정리. _client가 아니므로 그 끊김 콜백은 무시됨."""
        if client is None:
            return
        try:
            client.disconnect()
        except Exception as e:
            logger.debug("이전 OBS 클라이언트 정리 중 무시: %s", e)

    def _on_channel_closed(self, client: Any = None) -> None:
        """obsws 끊김 콜백 (수신 스레드)."""
        with self._lock:
            if self._closed or (client is not None and client is not self._client):
                return
            if not self._connected:
                return
            self._connected = False
        logger.warning("OBS 연결 끊김")
        self.schedule_reconnect()

    def mark_disconnected(self, reason: str = "") -> None:
        """원격 호출 실패를 본 쪽(브리지)이 연결을 끊긴 것으로 처리하고 재연결 예약."""
        with self._lock:
            self._connected = False
        logger.warning("OBS 연결을 끊긴 상태로 전환: %s", reason or "원격 호출 실패")
        self.schedule_reconnect()

    def schedule_reconnect(self) -> None:
        """retry_interval 후 재연결 1회 예약. 이미 예약돼 있으면 무시."""
        with self._lock:
            if self._closed or self._retry_timer is not None:
                return
            timer = self._timer_factory(self.retry_interval, self._retry)
            timer.daemon = True
            self._retry_timer = timer
        timer.start()
        logger.debug("OBS 재연결 예약: %.1f초 후", self.retry_interval)

    def _retry(self) -> None:
        with self._lock:
            self._retry_timer = None
            if self._closed:
                return
        logger.info("OBS 재연결 시도...")
        if not self.connect():
            self.schedule_reconnect()

    def close(self) -> None:
        """프로세스 종료 시 호출. 예약된 재연결 취소 후 연결 해제."""
        with self._lock:
            self._closed = True
            timer, self._retry_timer = self._retry_timer, None
            self._connected = False
            client, self._client = self._client, None
        if timer is not None:
            timer.cancel()
        self._disconnect_quietly(client)
        logger.info("OBS 세션 종료")

    # ---- 요청 ----

    def _call(self, request_type: str, **data: Any) -> Dict[str, Any]:
        with self._lock:
            client = self._client
        if client is None:
            raise ObsNotConnectedError(f"{request_type}: OBS 미연결")
        response = client.call(self._request_factory(request_type, **data))
        if not response.status:
            raise ObsRequestError(request_type, response.datain)
        return response.datain or {}

    def get_current_scene_name(self) -> str:
        try:
            return str(self._call("GetCurrentProgramScene")["currentProgramSceneName"])
        except Exception as e:
            logger.error("현재 씬 조회 실패: %s", e)
            raise

    def get_scene_item_list(self, scene_name: str) -> List[Dict[str, Any]]:
        try:
            return list(self._call("GetSceneItemList", sceneName=scene_name).get("sceneItems") or [])
        except Exception as e:
            logger.error("씬 아이템 조회 실패 (%s): %s", scene_name, e)
            raise

    def get_input_settings(self, input_name: str) -> Dict[str, Any]:
        """소스 설정 조회. 브라우저 소스가 아니면 OBS가 실패를 돌려주므로 로그 없이 전파."""
        return dict(self._call("GetInputSettings", inputName=input_name).get("inputSettings") or {})

    def set_input_settings(self, input_name: str, settings: Dict[str, Any]) -> None:
        try:
            self._call("SetInputSettings", inputName=input_name, inputSettings=settings)
        except Exception as e:
            logger.error("소스 설정 변경 실패 (%s): %s", input_name, e)
            raise

    def update_source_url(self, source_name: str, new_url: str) -> bool:
        """브라우저 소스의 url만 바꾸고 다시 읽어서 반영됐는지 확인."""
        settings = self.get_input_settings(source_name)
        self.set_input_settings(source_name, {**settings, "url": new_url})

        updated = self.get_input_settings(source_name).get("url") == new_url
        if updated:
            logger.info("소스 URL 변경됨: %s", source_name)
        else:
            logger.error("소스 URL 변경 확인 실패: %s", source_name)
        return updated
