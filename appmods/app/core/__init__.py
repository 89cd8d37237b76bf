"""
Core orchestration: the Application, its lifecycle, fan-out joins and
shutdown coordination.
"""

from .app import Application
from .config import find_manifest, get_config_from_pkg, load_app_config
from .fanout import Outcome, StopResult, start_all, stop_all
from .lifecycle import Lifecycle, LifecycleState
from .shutdown import ShutdownCoordinator

__all__ = [
    "Application",
    "Lifecycle",
    "LifecycleState",
    "Outcome",
    "ShutdownCoordinator",
    "StopResult",
    "find_manifest",
    "get_config_from_pkg",
    "load_app_config",
    "start_all",
    "stop_all",
]
