"""Guest booking selection and date-picker stages."""

from datetime import date
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

from src.models.extras import Event, SelectedEnhancement


class ExtraBedSelection(BaseModel):
    """Extra beds requested for the selected room."""

    enabled: bool = False
    count: int = 0

    class Config:
        populate_by_name = True
        frozen = True


class BookingSelection(BaseModel):
    """Draft reservation owned by the caller.

    Mutated between recomputations; the engine only reads it.
    """

    check_in: Optional[date] = Field(None, alias="checkIn")
    check_out: Optional[date] = Field(None, alias="checkOut")
    adults: int = 1
    room_count: int = Field(default=1, alias="roomCount")
    selected_room_id: Optional[str] = Field(None, alias="selectedRoomId")
    selected_rate_id: Optional[str] = Field(None, alias="selectedRateId")
    selected_enhancements: list[SelectedEnhancement] = Field(
        default_factory=list, alias="selectedEnhancements"
    )
    selected_events: list[Event] = Field(default_factory=list, alias="selectedEvents")
    extra_bed: ExtraBedSelection = Field(default_factory=ExtraBedSelection, alias="extraBed")
    voucher_code: Optional[str] = Field(None, alias="voucherCode")

    class Config:
        extra = "allow"
        populate_by_name = True

    @property
    def has_dates(self) -> bool:
        return self.check_in is not None and self.check_out is not None

    @property
    def nights(self) -> int:
        if not self.has_dates:
            return 0
        return max(0, (self.check_out - self.check_in).days)


class ArrivalStage(BaseModel):
    """Picker is waiting for an arrival date."""

    kind: Literal["arrival"] = "arrival"

    class Config:
        frozen = True


class DepartureStage(BaseModel):
    """Arrival chosen, picker is waiting for the departure date."""

    kind: Literal["departure"] = "departure"
    arrival: date

    class Config:
        frozen = True


SelectionStage = Union[ArrivalStage, DepartureStage]
