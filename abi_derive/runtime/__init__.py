"""
abi_derive.runtime: execution host protocol and the in-memory LocalHost.
"""

from .host import CallRecord, Dispatchable, Host, LocalHost, LogRecord

__all__ = ["CallRecord", "Dispatchable", "Host", "LocalHost", "LogRecord"]
