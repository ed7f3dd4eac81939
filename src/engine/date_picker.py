"""Two-step arrival/departure picker as an explicit state machine."""

from datetime import date
from typing import NamedTuple, Optional

from src.engine.restrictions import PAST_DATE
from src.models.selection import ArrivalStage, DepartureStage, SelectionStage


class PickerState(NamedTuple):
    """Picker state after a click."""

    stage: SelectionStage
    arrival: Optional[date]
    departure: Optional[date]
    warning: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.arrival is not None and self.departure is not None


def initial_state() -> PickerState:
    return PickerState(stage=ArrivalStage(), arrival=None, departure=None)


def advance_selection(state: PickerState, clicked: date, today: date) -> PickerState:
    """Apply a date click to the picker.

    A past date leaves the state unchanged and sets a warning. In the
    arrival stage, or once a pair is complete, the click starts a new
    selection. In the departure stage a click before the arrival swaps the
    two dates, and a click on the arrival itself restarts from it.
    """
    if clicked < today:
        return state._replace(warning=PAST_DATE)

    if isinstance(state.stage, ArrivalStage) or state.is_complete:
        return PickerState(stage=DepartureStage(arrival=clicked), arrival=clicked, departure=None)

    arrival = state.stage.arrival
    if clicked == arrival:
        return PickerState(stage=DepartureStage(arrival=clicked), arrival=clicked, departure=None)
    if clicked < arrival:
        return PickerState(stage=ArrivalStage(), arrival=clicked, departure=arrival)
    return PickerState(stage=ArrivalStage(), arrival=arrival, departure=clicked)
