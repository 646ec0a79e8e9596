"""
Compliance Engine Module.

This module contains the compliance checks that inspect candidate layouts.
Each check implements one rule family (setbacks, structural load, access...).

CRITICAL PRINCIPLES:
- Reports violations as data
- NEVER rejects a layout
- NEVER scores
- NEVER modifies a layout
"""

from compliance_engine.base import ComplianceCheck, ValidationContext
from compliance_engine.setback import SetbackCheck
from compliance_engine.structural import StructuralLoadCheck
from compliance_engine.maintenance import MaintenanceAccessCheck
from compliance_engine.aesthetic import AestheticUniformityCheck
from compliance_engine.mounting import MountingTiltCheck
from compliance_engine.spacing import PanelSpacingCheck
from compliance_engine.obstacle_clearance import ObstacleClearanceCheck
from compliance_engine.validator import ComplianceValidator, default_checks, validate_solution

__all__ = [
    'ComplianceCheck',
    'ValidationContext',
    'SetbackCheck',
    'StructuralLoadCheck',
    'MaintenanceAccessCheck',
    'AestheticUniformityCheck',
    'MountingTiltCheck',
    'PanelSpacingCheck',
    'ObstacleClearanceCheck',
    'ComplianceValidator',
    'default_checks',
    'validate_solution',
]
