import threading
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from alive_bridge.bridge import Bridge
from alive_bridge.config import BASE_URL
from alive_bridge.obs import ObsSession
from alive_bridge.server import create_app

ALIVE_URL = f"{BASE_URL}width=1920&height=1080&background=red"


class FakeRequest:
    def __init__(self, request_type: str, **data: Any):
        self.request_type = request_type
        self.data = data


class FakeResponse:
    def __init__(self, status: bool, datain: Optional[Dict[str, Any]] = None):
        self.status = status
        self.datain = datain or {}


class FakeObs:
    """OBS 쪽 상태. 클라이언트가 몇 번 새로 만들어져도 같은 씬/설정을 본다."""

    def __init__(self):
        self.scene = "Main"
        self.items: List[Dict[str, Any]] = [
            {"sourceName": "Camera", "sceneItemId": 1},
            {"sourceName": "Alive Studio", "sceneItemId": 2},
        ]
        self.settings: Dict[str, Dict[str, Any]] = {
            "Alive Studio": {"url": ALIVE_URL, "width": 1920, "height": 1080, "css": "body {}"},
        }
        self.fail_connect = False
        # set되면 connect()가 gate가 열릴 때까지 대기 (느린 OBS 접속 재현)
        self.connect_gate: Optional[threading.Event] = None
        self.connect_started = threading.Event()
        self.raise_on: set = set()
        self.ignore_writes = False
        self.calls: List[FakeRequest] = []
        self.clients: List["FakeObsClient"] = []

    def client(self, **kwargs: Any) -> "FakeObsClient":
        c = FakeObsClient(self, **kwargs)
        self.clients.append(c)
        return c

    def calls_of(self, request_type: str) -> List[FakeRequest]:
        return [c for c in self.calls if c.request_type == request_type]


class FakeObsClient:
    def __init__(self, obs: FakeObs, host: str, port: int, password: str, on_disconnect=None):
        self.obs = obs
        self.host = host
        self.port = port
        self.password = password
        self.on_disconnect = on_disconnect
        self.connected = False
        self.disconnect_calls = 0

    def connect(self) -> None:
        self.obs.connect_started.set()
        if self.obs.connect_gate is not None:
            self.obs.connect_gate.wait(timeout=5)
        if self.obs.fail_connect:
            raise ConnectionRefusedError("connection refused")
        self.connected = True

    def disconnect(self) -> None:
        self.disconnect_calls += 1
        self.connected = False

    def drop(self) -> None:
        """OBS 종료 등으로 연결이 끊긴 상황 재현."""
        self.connected = False
        if self.on_disconnect:
            self.on_disconnect(self)

    def call(self, request: FakeRequest) -> FakeResponse:
        obs = self.obs
        obs.calls.append(request)
        if request.request_type in obs.raise_on:
            raise ConnectionResetError(f"{request.request_type}: socket closed")
        if request.request_type == "GetCurrentProgramScene":
            return FakeResponse(True, {"currentProgramSceneName": obs.scene})
        if request.request_type == "GetSceneItemList":
            if request.data.get("sceneName") != obs.scene:
                return FakeResponse(False, {"comment": "No source was found"})
            return FakeResponse(True, {"sceneItems": list(obs.items)})
        if request.request_type == "GetInputSettings":
            name = request.data["inputName"]
            if name not in obs.settings:
                return FakeResponse(False, {"comment": "not an input"})
            return FakeResponse(True, {"inputSettings": dict(obs.settings[name]), "inputKind": "browser_source"})
        if request.request_type == "SetInputSettings":
            name = request.data["inputName"]
            if name not in obs.settings:
                return FakeResponse(False, {"comment": "not an input"})
            if not obs.ignore_writes:
                obs.settings[name] = dict(request.data["inputSettings"])
            return FakeResponse(True)
        return FakeResponse(False, {"comment": "unknown request"})


class ManualTimer:
    def __init__(self, interval: float, function):
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self.function()


class TimerLog(list):
    def create(self, interval: float, function) -> ManualTimer:
        timer = ManualTimer(interval, function)
        self.append(timer)
        return timer


@pytest.fixture()
def fake_obs() -> FakeObs:
    return FakeObs()


@pytest.fixture()
def timers() -> TimerLog:
    return TimerLog()


@pytest.fixture()
def session(fake_obs: FakeObs, timers: TimerLog) -> ObsSession:
    s = ObsSession(
        port=4455,
        password="secret",
        retry_interval=5.0,
        client_factory=fake_obs.client,
        request_factory=FakeRequest,
        timer_factory=timers.create,
    )
    yield s
    s.close()


@pytest.fixture()
def connected_session(session: ObsSession) -> ObsSession:
    assert session.connect()
    return session


@pytest.fixture()
def bridge(session: ObsSession) -> Bridge:
    return Bridge(session, BASE_URL)


@pytest.fixture()
def client(bridge: Bridge) -> TestClient:
    return TestClient(create_app(bridge))
