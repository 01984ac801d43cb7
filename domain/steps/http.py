# domain/steps/http.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class Method(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"


# str / int / float / bool、または JSON 値のリスト（同じキーで複数送信）
ParamValue = Union[str, int, float, bool, List[Any]]


@dataclass(frozen=True)
class FileBody:
    file: str


@dataclass(frozen=True)
class InlineBody:
    content: str
    trim: bool = False


Body = Union[FileBody, InlineBody]


@dataclass(frozen=True)
class BasicAuth:
    username: str
    password: Optional[str] = None


@dataclass(frozen=True)
class BearerAuth:
    token: str


Authentication = Union[BasicAuth, BearerAuth]


@dataclass(frozen=True)
class RequestTemplate:
    """
    Declarative, unresolved description of one HTTP call.

    uri / header values / query values / body / authentication are templates;
    name, method and extractors are used as written.
    """

    name: str
    uri: str
    method: Method
    query_params: Optional[Dict[str, ParamValue]] = None
    headers: Optional[Dict[str, str]] = None
    body: Optional[Body] = None
    authentication: Optional[Authentication] = None
    extractors: Optional[Dict[str, str]] = None
