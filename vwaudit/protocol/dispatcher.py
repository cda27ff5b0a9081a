"""
VW-AUDIT Method Dispatcher

Maps a method name to the handler that produces its response envelope.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Optional

from vwaudit.protocol.envelope import (
    INVALID_REQUEST, METHOD_NOT_FOUND, VWRequest, VWResponse
)
from vwaudit.utils.logger import get_logger

Handler = Callable[[VWRequest], Awaitable[VWResponse]]

logger = get_logger(__name__)


class MethodDispatcher:
    """
    Single-lookup dispatcher over an explicit method table.
    
    Every request yields exactly one response. Failures (unknown method,
    malformed request, handler fault) are encoded in the response's
    ``error`` field; ``handle`` never raises.
    
    The dispatcher does not check what a handler returns. A handler that
    answers with the wrong id or a malformed envelope is passed through
    unchanged, as in the audited extension.
    """
    
    def __init__(self, log: Optional[logging.Logger] = None):
        """
        Initialize dispatcher.
        
        Args:
            log: Logger receiving diagnostic output (defaults to the module logger)
        """
        self._handlers: Dict[str, Handler] = {}
        self._logger = log or logger
    
    def register(self, method: str, handler: Handler):
        """Register (or replace) the handler for a method"""
        if not isinstance(method, str) or not method:
            raise ValueError("Method name must be a non-empty string")
        if method in self._handlers:
            self._logger.debug(f"Replacing handler for {method}")
        self._handlers[method] = handler
    
    def unregister(self, method: str) -> bool:
        """Remove a handler; returns False if none was registered"""
        return self._handlers.pop(method, None) is not None
    
    def has_method(self, method: str) -> bool:
        return method in self._handlers
    
    def methods(self) -> List[str]:
        """Registered method names, sorted"""
        return sorted(self._handlers)
    
    async def handle(self, request: VWRequest) -> VWResponse:
        """
        Dispatch a request envelope.
        
        Args:
            request: Request envelope
            
        Returns:
            Response envelope echoing the request id
        """
        method = request.method
        self._logger.info(
            f"[Background] Received message: {request.type} id: {request.id} method: {method}"
        )
        
        if not request.id:
            self._logger.warning("Request has an empty id; caller cannot correlate the response")
        
        if not isinstance(method, str) or not method:
            self._logger.warning(f"Rejecting malformed request {request.id!r}: method={method!r}")
            return VWResponse.fail(request.id, INVALID_REQUEST)
        
        handler = self._handlers.get(method)
        if handler is None:
            self._logger.info(f"[Background] No handler for {method}")
            return VWResponse.fail(request.id, METHOD_NOT_FOUND)
        
        try:
            return await handler(request)
        except Exception as e:
            self._logger.error(f"Handler for {method} failed: {e}")
            return VWResponse.fail(request.id, f"Handler error: {e}")
    
    def dispatch(self, request: VWRequest) -> VWResponse:
        """
        Synchronous form of ``handle``.
        
        Must not be called from inside a running event loop.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.handle(request))
        raise RuntimeError("dispatch() cannot be called from a running event loop; await handle() instead")
