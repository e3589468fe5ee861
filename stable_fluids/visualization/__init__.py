"""Visualization tools for Stable Fluids runs"""

from .flow_viz import FlowVisualizer
from .diagnostics import DiagnosticPlotter

__all__ = [
    'FlowVisualizer',
    'DiagnosticPlotter'
]
