"""JSON-RPC 2.0 message types for the stdio server.

Incoming lines are parsed first and classified second: an object with an
``id`` member is a Request, one without is a Notification. Anything that
doesn't fit raises ProtocolError and is dropped by the transport.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union

JSONRPC_VERSION = "2.0"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
# tool failures share the internal-error code; never METHOD_NOT_FOUND
TOOL_EXECUTION_FAILED = INTERNAL_ERROR

RequestId = Union[int, str]


class ProtocolError(ValueError):
    pass


@dataclass(frozen=True)
class Request:
    id: RequestId
    method: str
    params: Any = None


@dataclass(frozen=True)
class Notification:
    method: str
    params: Any = None


Message = Union[Request, Notification]


@dataclass(frozen=True)
class RpcError:
    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            d["data"] = self.data
        return d


@dataclass(frozen=True)
class Response:
    id: RequestId
    result: Any = None
    error: RpcError | None = None

    @staticmethod
    def success(rid: RequestId, result: Any) -> "Response":
        return Response(id=rid, result=result)

    @staticmethod
    def failure(rid: RequestId, code: int, message: str, data: Any = None) -> "Response":
        return Response(id=rid, error=RpcError(code, message, data))

    def to_dict(self) -> dict[str, Any]:
        msg: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "id": self.id}
        if self.error is not None:
            msg["error"] = self.error.to_dict()
        else:
            msg["result"] = self.result if self.result is not None else {}
        return msg

    def to_line(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False) + "\n"


def classify(obj: Any) -> Message:
    if not isinstance(obj, dict):
        raise ProtocolError(f"expected a JSON object, got {type(obj).__name__}")
    if obj.get("jsonrpc") != JSONRPC_VERSION:
        raise ProtocolError(f"unsupported jsonrpc version: {obj.get('jsonrpc')!r}")
    method = obj.get("method")
    if not isinstance(method, str) or not method:
        raise ProtocolError("missing or non-string 'method'")
    params = obj.get("params")
    if "id" not in obj:
        return Notification(method=method, params=params)
    rid = obj["id"]
    # bool is an int subclass but not a valid id
    if isinstance(rid, bool) or not isinstance(rid, (int, str)):
        raise ProtocolError(f"invalid request id: {rid!r}")
    return Request(id=rid, method=method, params=params)


def parse_message(line: str) -> Message:
    try:
        obj = json.loads(line)
    except json.JSONDecodeError as e:
        raise ProtocolError(f"invalid JSON: {e}") from e
    return classify(obj)
