"""Gates — индивидуальные гейты ConstraintValidator.

- GATE 0: Draft Started (PICK и SKIP)
- GATE 1: Roster Cap
- GATE 2: Item Availability
- GATE 3: Budget
- GATE 4: Category Quota
"""

from .gate_00_draft_started import Gate00DraftStarted, Gate00Result
from .gate_01_roster_cap import Gate01RosterCap, Gate01Result
from .gate_02_item_availability import Gate02ItemAvailability, Gate02Result
from .gate_03_budget import Gate03Budget, Gate03Result
from .gate_04_category_quota import Gate04CategoryQuota, Gate04Result

__all__ = [
    "Gate00DraftStarted",
    "Gate00Result",
    "Gate01RosterCap",
    "Gate01Result",
    "Gate02ItemAvailability",
    "Gate02Result",
    "Gate03Budget",
    "Gate03Result",
    "Gate04CategoryQuota",
    "Gate04Result",
]
