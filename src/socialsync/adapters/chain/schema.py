"""Pydantic models for JSON-RPC ``eth_call`` responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class JsonRpcError(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: int
    message: str
    data: object | None = None


class JsonRpcResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    jsonrpc: str = "2.0"
    id: int | str | None = None
    result: str | None = None
    error: JsonRpcError | None = None


class EthCallParams(BaseModel):
    to: str
    data: str


class JsonRpcRequest(BaseModel):
    jsonrpc: str = "2.0"
    id: int
    method: str
    params: list[object] = Field(default_factory=list[object])
