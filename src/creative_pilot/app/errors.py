from __future__ import annotations

from typing import Optional


class AppError(Exception):
    """Base application error"""


class ConfigError(AppError):
    """Missing or invalid configuration"""


class ToolInvocationError(AppError):
    """Tool execution failed (image ops, relay calls, etc.)"""


class RemoteServiceError(ToolInvocationError):
    """Remote background-removal call failed or returned an unusable payload"""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
