# Facade: views import widgets from `src.components` without knowing the
# module layout.

from .choice_card import choice_card
from .result_row import result_row, row_state
from .scoreboard import scoreboard

__all__ = [
    "choice_card",
    "result_row",
    "row_state",
    "scoreboard",
]
