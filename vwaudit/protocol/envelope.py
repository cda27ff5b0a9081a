"""
VW-AUDIT Message Envelopes

Request/response envelopes exchanged between the web page, the injected
script, the content script and the background service.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

REQUEST_TYPE = "VW_REQ"
RESPONSE_TYPE = "VW_RES"

METHOD_NOT_FOUND = "Method not found"
INVALID_REQUEST = "Invalid request: method must be a non-empty string"


@dataclass
class ResponseError:
    """Error payload carried by a failed response"""
    message: str
    
    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message}


@dataclass
class VWRequest:
    """
    A VW_REQ envelope.
    
    ``id`` is caller-supplied and is neither checked for uniqueness nor for
    emptiness. ``method`` is typed as a string but a request decoded from
    untrusted input may carry anything, so the dispatcher re-checks it.
    """
    
    id: str
    method: Any
    args: List[Any] = field(default_factory=list)
    type: str = REQUEST_TYPE
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "id": self.id,
            "method": self.method,
            "args": list(self.args)
        }


@dataclass
class VWResponse:
    """A VW_RES envelope. ``id`` echoes the originating request's id."""
    
    id: str
    success: bool
    result: Any = None
    data: Optional[List[Any]] = None
    error: Optional[ResponseError] = None
    persist: Optional[bool] = None
    type: str = RESPONSE_TYPE
    
    @classmethod
    def ok(
        cls,
        request_id: str,
        data: Optional[List[Any]] = None,
        result: Any = True,
        persist: Optional[bool] = None
    ) -> "VWResponse":
        """Build a successful response"""
        return cls(id=request_id, success=True, result=result, data=data, persist=persist)
    
    @classmethod
    def fail(cls, request_id: str, message: str) -> "VWResponse":
        """Build a failed response"""
        return cls(id=request_id, success=False, error=ResponseError(message))
    
    def to_dict(self) -> Dict[str, Any]:
        """Plain dict with absent optional fields omitted"""
        out: Dict[str, Any] = {"type": self.type, "id": self.id, "success": self.success}
        if self.result is not None:
            out["result"] = self.result
        if self.data is not None:
            out["data"] = list(self.data)
        if self.error is not None:
            out["error"] = self.error.to_dict()
        if self.persist is not None:
            out["persist"] = self.persist
        return out
