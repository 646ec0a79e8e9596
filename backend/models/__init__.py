"""
Backend models package.
"""

from backend.models.request import (
    OptimizationRequest, PreviewRequest, PanelTemplateInput,
    ConstraintOverrides, OptionOverrides
)
from backend.models.response import OptimizationResponse, PreviewResponse, PanelListResponse

__all__ = [
    "OptimizationRequest",
    "PreviewRequest",
    "PanelTemplateInput",
    "ConstraintOverrides",
    "OptionOverrides",
    "OptimizationResponse",
    "PreviewResponse",
    "PanelListResponse",
]
