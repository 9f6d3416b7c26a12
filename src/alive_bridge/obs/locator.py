"""현재 프로그램 씬에서 Alive Studio 브라우저 소스 찾기."""

from __future__ import annotations

import logging
from typing import Optional

from alive_bridge.obs.session import ObsSession

logger = logging.getLogger(__name__)


def find_target_source(session: ObsSession, base_url: str) -> Optional[str]:
    """
    씬 아이템을 목록 순서대로 훑어 url에 base_url이 들어 있는 첫 소스 이름 반환.
    못 찾거나 씬/아이템 조회가 실패하면 None (에러로 올리지 않음).
    """
    try:
        scene_name = session.get_current_scene_name()
        logger.info("Alive Studio 소스 검색: 씬=%s", scene_name)
        items = session.get_scene_item_list(scene_name)
    except Exception as e:
        logger.error("Alive Studio 소스 검색 실패: %s", e)
        return None

    for item in items:
        source_name = str(item.get("sourceName"))
        try:
            settings = session.get_input_settings(source_name)
        except Exception:
            # 브라우저 소스가 아닌 아이템은 설정 조회가 실패함
            continue
        url = settings.get("url")
        if isinstance(url, str) and base_url in url:
            logger.info("Alive Studio 소스 발견: %s", source_name)
            return source_name

    logger.info("현재 씬에 Alive Studio 소스 없음")
    return None
