"""VW-AUDIT - message-flow and trust-boundary audit harness for a wallet extension"""

__version__ = "0.1.0"
