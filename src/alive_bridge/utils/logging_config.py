"""
브리지 공통 로깅 설정.

- 콘솔: LOG_CONSOLE_LEVEL (기본 INFO)
- 통합: logs/app.log (INFO 이상)
- 에러: logs/error.log (ERROR 이상)
- 카테고리: logs/obs.log (OBS 연결/요청), logs/http.log (HTTP 요청 처리)
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union


class _PrefixFilter(logging.Filter):
    """logger name prefix 기반 필터."""

    def __init__(self, *prefixes: str):
        super().__init__()
        self._prefixes = tuple(p for p in prefixes if p)

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name or ""
        return any(name.startswith(p) for p in self._prefixes)


def _default_log_dir() -> Path:
    raw = (os.environ.get("LOG_DIR") or "").strip()
    return Path(raw) if raw else Path.cwd() / "logs"


def _level_from_env(name: str, default: int) -> int:
    level_name = (os.environ.get(name) or "").upper()
    return getattr(logging, level_name, default) if level_name else default


def _mk_rotating_handler(path: Path, level: int, fmt: logging.Formatter) -> RotatingFileHandler:
    max_mb = int(os.environ.get("LOG_MAX_MB", "10"))
    backups = int(os.environ.get("LOG_BACKUP_COUNT", "5"))
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(path),
        maxBytes=max_mb * 1024 * 1024,
        backupCount=backups,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(fmt)
    return handler


def setup_logging(log_dir: Optional[Union[Path, str]] = None) -> Path:
    """루트 로거/핸들러를 재설정하고 로그 디렉터리 경로 반환."""
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    root.setLevel(logging.DEBUG)

    log_dir = Path(log_dir) if log_dir else _default_log_dir()
    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    )

    ch = logging.StreamHandler()
    ch.setLevel(_level_from_env("LOG_CONSOLE_LEVEL", logging.INFO))
    ch.setFormatter(fmt)
    root.addHandler(ch)

    root.addHandler(_mk_rotating_handler(log_dir / "app.log", logging.INFO, fmt))
    root.addHandler(_mk_rotating_handler(log_dir / "error.log", logging.ERROR, fmt))

    obs_h = _mk_rotating_handler(log_dir / "obs.log", logging.DEBUG, fmt)
    obs_h.addFilter(_PrefixFilter("alive_bridge.obs", "obswebsocket"))
    root.addHandler(obs_h)

    http_h = _mk_rotating_handler(log_dir / "http.log", logging.DEBUG, fmt)
    http_h.addFilter(_PrefixFilter("alive_bridge.server", "alive_bridge.bridge", "uvicorn"))
    root.addHandler(http_h)

    # obswebsocket/websocket-client는 수신 스레드에서 DEBUG를 많이 남김
    noisy_level = _level_from_env("OBSWS_LOG_LEVEL", logging.WARNING)
    logging.getLogger("obswebsocket").setLevel(noisy_level)
    logging.getLogger("websocket").setLevel(noisy_level)

    return log_dir
