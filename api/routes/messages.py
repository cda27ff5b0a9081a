"""
VW-AUDIT Messages API Routes

Wire-level access to the simulated background dispatcher.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body

from vwaudit.protocol import MessageFlowSimulator, decode_request, encode_response

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.post("")
async def post_message(
    payload: Dict[str, Any] = Body(..., examples=[{
        "type": "VW_REQ", "id": "t1", "params": {"method": "eth_requestAccounts", "params": []}
    }]),
    extension: bool = False
):
    """
    Dispatch a VW_REQ wire message and return the VW_RES wire message.
    
    An invalid wire shape is rejected with 422. Unknown methods are not an
    HTTP error; they come back as a failed VW_RES.
    """
    request = decode_request(payload)
    simulator = MessageFlowSimulator(include_extension_methods=extension)
    response = await simulator.handle_message(request)
    return encode_response(response)
