from concept_graph.core.config import Settings, get_settings, settings
from concept_graph.core.logging import GraphLogger, get_logger

__all__ = ["Settings", "get_settings", "settings", "GraphLogger", "get_logger"]
