"""
Response models for layout optimization.
"""

from pydantic import BaseModel
from typing import Any, Dict, List


class OptimizationResponse(BaseModel):
    """Ranked layouts plus search diagnostics."""
    solutions: List[Dict[str, Any]]
    generations_run: int
    termination_reason: str
    best_score_history: List[float] = []


class PreviewResponse(BaseModel):
    """Grid preview result."""
    panels: List[Dict[str, Any]]
    total_fit: int
    coverage: float


class PanelListResponse(BaseModel):
    """Registered panel templates."""
    panels: List[Dict[str, Any]]
