"""
Error taxonomy for the markdown context server.

Every failure a client can observe is a ContextError subclass carrying a
JSON-RPC error code and a structured `data` payload.  The dispatcher is the
only place these are turned into wire responses.

Startup problems (bad bindings, duplicate capabilities, bad settings) are
ConfigurationErrors and never reach a client: the process exits instead.
"""

from typing import Any, Dict, Optional


# MCP reserves -32002 for "resource not found"
RESOURCE_NOT_FOUND = -32002
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class ContextError(Exception):
    """Base class for errors reported back to the client."""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def data(self) -> Dict[str, Any]:
        """Structured context attached to the JSON-RPC error object."""
        return {"type": type(self).__name__}


class NotFound(ContextError):
    """A document, or the file behind it, does not exist."""

    code = RESOURCE_NOT_FOUND

    def __init__(self, target: str, path: Optional[str] = None):
        self.target = target
        self.path = path
        where = f" ({path})" if path and path != target else ""
        super().__init__(f"Document not found: {target}{where}")

    def data(self) -> Dict[str, Any]:
        result = super().data()
        result["target"] = self.target
        if self.path:
            result["path"] = self.path
        return result


class UnknownCapability(ContextError):
    """No tool, prompt or resource is registered under the given id."""

    code = INVALID_PARAMS

    def __init__(self, kind: str, capability_id: str):
        self.kind = kind
        self.capability_id = capability_id
        super().__init__(f"Unknown {kind}: {capability_id}")

    def data(self) -> Dict[str, Any]:
        result = super().data()
        result["kind"] = self.kind
        result["id"] = self.capability_id
        return result


class DocumentIOError(ContextError):
    """A read failed for a reason other than absence."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to read {path}: {reason}")

    def data(self) -> Dict[str, Any]:
        result = super().data()
        result["path"] = self.path
        return result


class AggregationFailed(ContextError):
    """
    A section of a composite document could not be fetched.

    Aggregation is all-or-nothing, so one failing section fails the whole
    request.  `cause` is the underlying NotFound or DocumentIOError.
    """

    def __init__(self, key: str, cause: ContextError):
        self.key = key
        self.cause = cause
        super().__init__(f"Failed to assemble section '{key}': {cause.message}")

    def data(self) -> Dict[str, Any]:
        result = super().data()
        result["key"] = self.key
        result["cause"] = self.cause.data()
        return result


class InvalidArguments(ContextError):
    """The request parameters do not match what the capability accepts."""

    code = INVALID_PARAMS


class ConfigurationError(Exception):
    """Invalid startup configuration; fatal."""


class DuplicateCapability(ConfigurationError):
    """The same (kind, id) pair was registered twice."""

    def __init__(self, kind: str, capability_id: str):
        self.kind = kind
        self.capability_id = capability_id
        super().__init__(f"Duplicate {kind} registration: {capability_id}")
