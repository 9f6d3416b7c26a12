"""
StreamDeck / Max for Live가 호출하는 HTTP 서버. POST /send, POST /obs, GET /health.
ObsSession은 호출 측(main)에서 만들어 Bridge로 넘긴다.
"""

from __future__ import annotations

import logging
from typing import Optional, Type, TypeVar

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ValidationError

from alive_bridge.bridge import Bridge, BridgeError, UpdateResult, resolve_update_params
from alive_bridge.models import ObsUpdateRequest, SendRequest
from alive_bridge.overlay import iso_timestamp

logger = logging.getLogger(__name__)

GREETING = "Max for Live to Alive Studio Bridge"
OBS_MISSING_PARAMS = "Missing parameters: sourceName and url are required"

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

ModelT = TypeVar("ModelT", bound=BaseModel)


async def _parse_body(request: Request, model: Type[ModelT]) -> Optional[ModelT]:
    """JSON 또는 form 본문을 모델로 검증. 본문이 없으면 None, 형식이 틀리면 RequestValidationError."""
    try:
        if request.headers.get("content-type", "").startswith(_FORM_TYPES):
            form = await request.form()
            return model.model_validate(dict(form))
        raw = await request.body()
        if not raw:
            return None
        return model.model_validate_json(raw)
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from e


async def send_body(request: Request) -> Optional[SendRequest]:
    return await _parse_body(request, SendRequest)


async def obs_update_body(request: Request) -> Optional[ObsUpdateRequest]:
    return await _parse_body(request, ObsUpdateRequest)


def _result_response(result: UpdateResult) -> PlainTextResponse:
    return PlainTextResponse(result.message, status_code=result.status_code)


def create_app(bridge: Bridge) -> FastAPI:
    app = FastAPI(title="Alive Studio Bridge", docs_url=None, redoc_url=None)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST"],
    )
    app.state.bridge = bridge

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        """본문 형식 오류는 422 대신 400."""
        logger.error("잘못된 요청 형식 (%s): %s", request.url.path, exc.errors())
        if request.url.path == "/obs":
            return PlainTextResponse(OBS_MISSING_PARAMS, status_code=400)
        return _result_response(UpdateResult.BAD_REQUEST)

    @app.post("/send")
    async def send(body: Optional[SendRequest] = Depends(send_body)):
        """파라미터를 현재 씬의 Alive Studio 소스 URL에 반영."""
        url_param = resolve_update_params(body)
        if url_param is None:
            logger.error("잘못된 요청 형식: %s", body)
            return _result_response(UpdateResult.BAD_REQUEST)
        try:
            result = await run_in_threadpool(bridge.send, url_param)
        except BridgeError as e:
            return PlainTextResponse(f"Server error: {e}", status_code=500)
        return _result_response(result)

    @app.post("/obs")
    async def update_obs_source(body: Optional[ObsUpdateRequest] = Depends(obs_update_body)):
        """소스 이름과 URL을 직접 지정해서 설정."""
        if body is None or not body.sourceName or not body.url:
            return PlainTextResponse(OBS_MISSING_PARAMS, status_code=400)
        try:
            result = await run_in_threadpool(bridge.update_source, body.sourceName, body.url)
        except BridgeError as e:
            return PlainTextResponse(f"Server error: {e}", status_code=500)
        return _result_response(result)

    @app.get("/")
    def index():
        return PlainTextResponse(GREETING)

    @app.get("/ping")
    def ping():
        return PlainTextResponse("pong")

    @app.get("/health")
    def health():
        return JSONResponse({
            "status": "ok",
            "obsConnected": bridge.session.connected,
            "timestamp": iso_timestamp(),
        })

    return app
