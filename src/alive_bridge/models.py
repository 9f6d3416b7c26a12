"""
HTTP 요청 본문 모델. JSON과 form(urlencoded) 모두 같은 모델로 검증.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class SendRequest(BaseModel):
    """POST /send. StreamDeck은 url, Max for Live는 key/value로 보냄."""

    # Max for Live에서 value를 숫자로 보내는 경우가 있음
    model_config = ConfigDict(coerce_numbers_to_str=True)

    url: Optional[str] = None
    key: Optional[str] = None
    value: Optional[str] = None


class ObsUpdateRequest(BaseModel):
    """POST /obs"""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    sourceName: Optional[str] = None
    url: Optional[str] = None
