"""Records for categories and clues as the board sees them."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple


class RevealState(str, Enum):
    HIDDEN = "hidden"
    QUESTION = "question"
    ANSWER = "answer"


@dataclass(frozen=True)
class Clue:
    question: str
    answer: str
    value: Optional[int] = None
    showing: RevealState = RevealState.HIDDEN

    @property
    def usable(self):
        """A clue can go on the board only if it has question text."""
        return bool(self.question.strip())

    def hidden(self):
        return replace(self, showing=RevealState.HIDDEN)

    def display(self):
        """Text a cell shows for this clue's current reveal state."""
        if self.showing is RevealState.QUESTION:
            return self.question
        if self.showing is RevealState.ANSWER:
            return self.answer
        return "?"


@dataclass(frozen=True)
class Category:
    id: int
    title: str
    clues: Tuple[Clue, ...] = field(default_factory=tuple)
