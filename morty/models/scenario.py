from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from morty.models.loan import LoanParameters


@dataclass(frozen=True)
class SavedScenario:
    id: UUID
    saved_at: datetime  # UTC
    params: LoanParameters

    # Free-text listing details
    title: str = ""
    address: str = ""
    notes: str = ""
    image_url: str = ""
    listing_url: str = ""

    @property
    def display_title(self) -> str:
        return self.title or self.address or "Untitled Property"
