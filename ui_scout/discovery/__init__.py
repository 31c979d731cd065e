"""
Discovery services.

Exports:
- BaseDiscovery: interface of every category scanner
- ButtonDiscovery, InputDiscovery, NavigationDiscovery, ComponentDiscovery
- GenericDiscoveryService: count/nth-only scanner for minimal backends
- DiscoveryService: aggregate scan with per-category results
- AnalysisService: page structure and accessibility metrics
"""

from .base import BaseDiscovery
from .buttons import ButtonDiscovery
from .inputs import InputDiscovery, infer_input_type
from .navigation import NavigationDiscovery
from .components import ComponentDiscovery
from .generic import GenericDiscoveryService
from .service import DiscoveryService
from .analysis import AnalysisService

__all__ = [
    "BaseDiscovery",
    "ButtonDiscovery",
    "InputDiscovery",
    "NavigationDiscovery",
    "ComponentDiscovery",
    "GenericDiscoveryService",
    "DiscoveryService",
    "AnalysisService",
    "infer_input_type",
]
