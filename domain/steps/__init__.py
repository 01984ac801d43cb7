from domain.steps.http import (
    Authentication,
    BasicAuth,
    BearerAuth,
    Body,
    FileBody,
    InlineBody,
    Method,
    ParamValue,
    RequestTemplate,
)

__all__ = [
    "Authentication",
    "BasicAuth",
    "BearerAuth",
    "Body",
    "FileBody",
    "InlineBody",
    "Method",
    "ParamValue",
    "RequestTemplate",
]
