"""
브리지 실행: .env 로드 → 로깅 → OBS 연결 → HTTP 서버.

실행: python -m alive_bridge  (또는 alive-bridge)
.env에 OBS_PORT, OBS_PASSWORD, SERVER_PORT 등 설정 (없으면 기본값).
"""

from __future__ import annotations

import logging

import uvicorn
from dotenv import load_dotenv

from alive_bridge.bridge import Bridge
from alive_bridge.config import load_config
from alive_bridge.obs import ObsSession
from alive_bridge.server import create_app
from alive_bridge.utils import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    load_dotenv()
    log_dir = setup_logging()
    config = load_config()

    session = ObsSession.from_config(config)
    bridge = Bridge(session, config.base_url)
    app = create_app(bridge)

    logger.info("로그 디렉터리: %s", log_dir)
    logger.info("시작 시 OBS 연결 시도...")
    if not session.connect():
        logger.warning("초기 연결 실패, %.1f초 간격으로 재연결 시도", config.retry_interval)
        session.schedule_reconnect()

    logger.info("서버 시작: http://%s:%d", config.server_host, config.server_port)
    try:
        uvicorn.run(app, host=config.server_host, port=config.server_port, log_level="warning")
    finally:
        session.close()


if __name__ == "__main__":
    main()
