"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class TermUnit(str, Enum):
    DAYS = "days"
    MONTHS = "months"


@dataclass
class RateTier:
    """Configured (amount range x term range) -> rate mapping.

    Upper bounds are inclusive; ``None`` means open-ended. Terms are in days.
    Lower bounds and rate are optional only so that incomplete admin input can
    reach the validator.
    """

    amount_from: Optional[Decimal]
    amount_to: Optional[Decimal]
    term_from: Optional[int]
    term_to: Optional[int]
    rate: Optional[Decimal]
    id: Optional[int] = None


@dataclass
class SimulationQuery:
    """Depositor input to the rate resolver"""

    capital: Optional[Decimal]
    term: Optional[Decimal]
    term_unit: TermUnit = TermUnit.DAYS


@dataclass
class Simulation:
    """Output of a successful resolution"""

    tier: RateTier
    capital: Decimal
    term_days: int
    rate: Decimal
    net_interest: Decimal
    total_payout: Decimal


@dataclass
class TierGrid:
    """Cross-tab of rates: rows are term ranges, columns are amount ranges"""

    row_labels: List[str]
    column_labels: List[str]
    cells: List[List[Optional[Decimal]]] = field(default_factory=list)

    placeholder = "—"

    def cell_text(self, row: int, column: int) -> str:
        rate = self.cells[row][column]
        if rate is None:
            return self.placeholder
        return f"{rate:.2f}%"

    def as_text_rows(self) -> List[List[str]]:
        return [
            [self.cell_text(r, c) for c in range(len(self.column_labels))]
            for r in range(len(self.row_labels))
        ]
