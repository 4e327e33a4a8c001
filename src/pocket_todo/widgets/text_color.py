# src/pocket_todo/widgets/text_color.py

from __future__ import annotations

from dataclasses import dataclass

BLACK = "#000"
RED = "#F00"

_ANSI = {
    BLACK: "",
    RED: "\033[31m",
}
_RESET = "\033[0m"


@dataclass(slots=True)
class TextColor:
    """Task text color; flips between black and red."""

    value: str = BLACK

    def toggle(self) -> str:
        self.value = RED if self.value == BLACK else BLACK
        return self.value

    def paint(self, text: str, *, enabled: bool = True) -> str:
        code = _ANSI.get(self.value, "")
        if not enabled or not code:
            return text
        return f"{code}{text}{_RESET}"
