"""VW-AUDIT Message Protocol Module"""

from .envelope import VWRequest, VWResponse, ResponseError, METHOD_NOT_FOUND, INVALID_REQUEST
from .dispatcher import MethodDispatcher
from .simulator import MessageFlowSimulator, new_message_id
from .wire import decode_request, decode_response, encode_request, encode_response

__all__ = [
    "VWRequest", "VWResponse", "ResponseError", "METHOD_NOT_FOUND", "INVALID_REQUEST",
    "MethodDispatcher", "MessageFlowSimulator", "new_message_id",
    "decode_request", "decode_response", "encode_request", "encode_response",
]
