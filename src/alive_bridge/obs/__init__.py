"""
OBS 연동: WebSocket 세션(연결/재연결/요청)과 Alive Studio 소스 탐색.
"""

from .locator import find_target_source
from .session import ObsError, ObsNotConnectedError, ObsRequestError, ObsSession

__all__ = [
    "ObsSession",
    "ObsError",
    "ObsNotConnectedError",
    "ObsRequestError",
    "find_target_source",
]
