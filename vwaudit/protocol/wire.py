"""
VW-AUDIT Wire Codec

Translates envelopes to and from the JSON shape used on an actual channel:

    {"type": "VW_REQ", "id": ..., "params": {"method": ..., "params": [...]}}
    {"type": "VW_RES", "id": ..., "params": {"success": ..., "response": ...,
                                             "data": [...], "error": {...},
                                             "saveToStorage": ...}}
"""

from typing import Any, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from vwaudit.errors import EnvelopeValidationError
from vwaudit.protocol.envelope import (
    REQUEST_TYPE, RESPONSE_TYPE, ResponseError, VWRequest, VWResponse
)


# ========== Wire Models ==========

class WireRequestParams(BaseModel):
    """``params`` object of a VW_REQ message"""
    model_config = ConfigDict(extra="allow")
    
    method: str = Field(..., description="Method name to dispatch")
    params: List[Any] = Field(default_factory=list, description="Positional method arguments")
    
    @field_validator("method")
    @classmethod
    def validate_method(cls, v: str) -> str:
        """Method must be a non-empty string"""
        if not v.strip():
            raise ValueError("params.method cannot be empty")
        return v


class WireRequest(BaseModel):
    """VW_REQ message as it appears on the wire"""
    type: Literal["VW_REQ"]
    id: str = Field(..., description="Correlation id echoed by the response")
    params: WireRequestParams


class WireError(BaseModel):
    """Error object of a failed response"""
    model_config = ConfigDict(extra="allow")
    
    message: str


class WireResponseParams(BaseModel):
    """``params`` object of a VW_RES message"""
    success: bool
    response: Any = None
    data: Optional[List[Any]] = None
    error: Optional[WireError] = None
    saveToStorage: Optional[bool] = None


class WireResponse(BaseModel):
    """VW_RES message as it appears on the wire"""
    type: Literal["VW_RES"]
    id: str
    params: WireResponseParams


# ========== Codec ==========

def decode_request(payload: Mapping[str, Any]) -> VWRequest:
    """
    Validate a wire payload and turn it into a request envelope.
    
    Raises:
        EnvelopeValidationError: if ``type`` is not VW_REQ, ``id`` is
            missing or ``params.method`` is not a non-empty string
    """
    try:
        wire = WireRequest.model_validate(payload)
    except ValidationError as e:
        raise EnvelopeValidationError(_summarize(e, REQUEST_TYPE), e.errors()) from e
    
    return VWRequest(id=wire.id, method=wire.params.method, args=list(wire.params.params))


def decode_response(payload: Mapping[str, Any]) -> VWResponse:
    """
    Validate a wire payload and turn it into a response envelope.
    
    Raises:
        EnvelopeValidationError: if ``type`` is not VW_RES or ``id`` is missing
    """
    try:
        wire = WireResponse.model_validate(payload)
    except ValidationError as e:
        raise EnvelopeValidationError(_summarize(e, RESPONSE_TYPE), e.errors()) from e
    
    params = wire.params
    return VWResponse(
        id=wire.id,
        success=params.success,
        result=params.response,
        data=params.data,
        error=ResponseError(params.error.message) if params.error else None,
        persist=params.saveToStorage
    )


def encode_request(request: VWRequest) -> Dict[str, Any]:
    """Wire shape of a request envelope"""
    return {
        "type": request.type,
        "id": request.id,
        "params": {
            "method": request.method,
            "params": list(request.args)
        }
    }


def encode_response(response: VWResponse) -> Dict[str, Any]:
    """Wire shape of a response envelope, omitting absent fields"""
    params: Dict[str, Any] = {"success": response.success}
    if response.result is not None:
        params["response"] = response.result
    if response.data is not None:
        params["data"] = list(response.data)
    if response.error is not None:
        params["error"] = response.error.to_dict()
    if response.persist is not None:
        params["saveToStorage"] = response.persist
    
    return {"type": response.type, "id": response.id, "params": params}


def _summarize(error: ValidationError, expected_type: str) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "<root>"
        problems.append(f"{location}: {item['msg']}")
    return f"Invalid {expected_type} envelope: " + "; ".join(problems)
