"""
Enumeration types for wgmesh.

This module defines the enumeration types shared by the master and the
worker agent for status tracking and configuration options.
"""

from enum import Enum


# =============================================================================
# Enrollment Enums
# =============================================================================


class EnrollmentState(str, Enum):
    """
    Master-side view of a worker enrollment.

    State transitions:
        DRAFT -> PERSISTED -> IFACE_REQUESTED -> MESHING_IN_PROGRESS
        MESHING_IN_PROGRESS -> MESHING_COMPLETE

    The admin receives its response at PERSISTED. MESHING_COMPLETE only
    means every fan-out call has returned, successfully or not.
    """

    DRAFT = "draft"  # Request accepted, keys generated
    PERSISTED = "persisted"  # Row written, address allocated
    IFACE_REQUESTED = "iface_requested"  # Interface creation sent to new worker
    MESHING_IN_PROGRESS = "meshing_in_progress"  # Peer exchange running
    MESHING_COMPLETE = "meshing_complete"  # All fan-out calls returned


# =============================================================================
# Configuration Enums
# =============================================================================


class LogLevel(str, Enum):
    """
    Logging verbosity levels for wgmesh components.

    Levels (from most to least verbose):
        - FULL: Complete trace with detailed stack information
        - DEBUG: Debug messages and above
        - INFO: Informational messages and above
        - WARNING: Only warnings and errors
    """

    FULL = "full"
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
