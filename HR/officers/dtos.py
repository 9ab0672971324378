"""
Data Transfer Objects for the Officer Directory.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from core.privacy.policy import OVERRIDE_COLUMNS


@dataclass
class OfficerVisibilityUpdateDTO:
    """
    DTO for changing an officer's visibility override columns.

    Only columns present in `overrides` are touched. A None value clears
    the override so the baseline applies again.
    """
    officer_id: int
    overrides: Dict[str, Optional[str]] = field(default_factory=dict)

    def __post_init__(self):
        unknown = set(self.overrides) - set(OVERRIDE_COLUMNS)
        if unknown:
            raise ValueError(f"Unknown visibility columns: {', '.join(sorted(unknown))}")
