"""
app/rpc.py — Minimal JSON-RPC 2.0 dispatch for the HTTP transport.

Supported:
  - single requests and batches (JSON array, must not be empty)
  - notifications (no "id"): executed, never answered
  - params as an object, or as a one-element array holding that object

Error codes:
  -32700  parse error          -32601  method not found
  -32600  invalid request      -32602  invalid params
  -32603  internal error       -32000  method raised an AdviceError
"""
import json
import logging
from typing import Any, Awaitable, Callable, Optional, Type

from pydantic import BaseModel, ValidationError

from app.errors import AdviceError
from app.schemas import AdviceArgs
from app.service import AdviceService

logger = logging.getLogger(__name__)

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
SERVER_ERROR = -32000

Handler = Callable[[Any], Awaitable[BaseModel]]


class RPCError(Exception):
    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


def _error(code: int, message: str, request_id: Any = None) -> dict:
    return {"jsonrpc": "2.0", "error": {"code": code, "message": message}, "id": request_id}


class RPCDispatcher:
    def __init__(self) -> None:
        self._methods: dict[str, tuple[Handler, Type[BaseModel]]] = {}

    def register(self, name: str, handler: Handler, params_model: Type[BaseModel]) -> None:
        self._methods[name] = (handler, params_model)

    async def handle(self, body: bytes) -> Optional[Any]:
        """
        Process a raw request body. Returns the JSON-ready reply, or None
        when every request in it was a notification.
        """
        try:
            payload = json.loads(body)
        except ValueError:
            return _error(PARSE_ERROR, "Parse error")

        if isinstance(payload, list):
            if not payload:
                return _error(INVALID_REQUEST, "Invalid Request")
            replies = [await self._handle_one(item) for item in payload]
            replies = [r for r in replies if r is not None]
            return replies or None

        return await self._handle_one(payload)

    async def _handle_one(self, request: Any) -> Optional[dict]:
        if not isinstance(request, dict):
            return _error(INVALID_REQUEST, "Invalid Request")

        request_id = request.get("id")
        is_notification = "id" not in request
        if (
            request.get("jsonrpc") != "2.0"
            or not isinstance(request.get("method"), str)
            or not isinstance(request_id, (str, int, type(None)))
            or isinstance(request_id, bool)
        ):
            return _error(INVALID_REQUEST, "Invalid Request")

        try:
            result = await self._call(request["method"], request.get("params"))
        except RPCError as exc:
            reply = _error(exc.code, exc.message, request_id)
        except AdviceError as exc:
            logger.info("RPC %s failed: %s", request["method"], exc)
            reply = _error(SERVER_ERROR, str(exc), request_id)
        except Exception:
            logger.exception("Unexpected error in RPC %s", request["method"])
            reply = _error(INTERNAL_ERROR, "Internal error", request_id)
        else:
            reply = {"jsonrpc": "2.0", "result": result, "id": request_id}

        return None if is_notification else reply

    async def _call(self, method: str, params: Any) -> Any:
        if method not in self._methods:
            raise RPCError(METHOD_NOT_FOUND, f"Method not found: {method}")
        handler, params_model = self._methods[method]

        if isinstance(params, list) and len(params) == 1:
            params = params[0]
        if not isinstance(params, dict):
            raise RPCError(INVALID_PARAMS, "Invalid params: expected a single object")

        try:
            args = params_model.model_validate(params)
        except ValidationError as exc:
            raise RPCError(INVALID_PARAMS, f"Invalid params: {exc.errors()[0]['msg']}") from exc

        reply = await handler(args)
        return reply.model_dump(by_alias=True)


def build_dispatcher(service: AdviceService) -> RPCDispatcher:
    dispatcher = RPCDispatcher()
    dispatcher.register("AdviceService.GiveMeAdvice", service.give_me_advice, AdviceArgs)
    dispatcher.register("GiveMeAdvice", service.give_me_advice, AdviceArgs)
    return dispatcher


class AcceptJSONMiddleware:
    """ASGI middleware rewriting `Accept: */*` to `Accept: application/json`."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http":
            headers = [
                (name, b"application/json")
                if name == b"accept" and value.strip() == b"*/*"
                else (name, value)
                for name, value in scope["headers"]
            ]
            scope = dict(scope, headers=headers)
        await self.app(scope, receive, send)
