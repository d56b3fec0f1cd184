"""Action Handlers - One handler per supported Docker action.

Handlers translate a plan action's parameter bag into a single
container runtime call.
"""

from .base import BaseToolHandler
from .container_actions import (
    CreateNetworkHandler,
    CreateContainerHandler,
    CreateVolumeHandler,
    RunContainerHandler,
    PullImageHandler,
    default_handlers,
)

__all__ = [
    "BaseToolHandler",
    "CreateNetworkHandler",
    "CreateContainerHandler",
    "CreateVolumeHandler",
    "RunContainerHandler",
    "PullImageHandler",
    "default_handlers",
]
