"""Yes/no questions put to the operator.

Answers are classified by a pure function so the prompt loops can be
driven from tests without a terminal.
"""
import re
from enum import Enum
from typing import Callable

import typer

Prompt = Callable[[str], str]

_AFFIRMATIVE = re.compile(r"^[Yy]")
_NEGATIVE = re.compile(r"^[Nn]")
_STRICT_YES = re.compile(r"^[Yy]$")


class Answer(Enum):
    AFFIRMATIVE = "affirmative"
    NEGATIVE = "negative"
    INVALID = "invalid"


def classify_answer(raw: str) -> Answer:
    """Classify free text: anything starting with y is yes, with n is no."""
    text = raw.strip()
    if _AFFIRMATIVE.match(text):
        return Answer.AFFIRMATIVE
    if _NEGATIVE.match(text):
        return Answer.NEGATIVE
    return Answer.INVALID


def is_strict_yes(raw: str) -> bool:
    """Only a lone 'y' or 'Y' counts."""
    return _STRICT_YES.match(raw.strip()) is not None


def default_prompt(text: str) -> str:
    # Empty input is a valid (invalid) answer, so don't let typer reprompt on it
    return typer.prompt(text, default="", show_default=False)


def ask_yes_no(text: str, prompt: Prompt = default_prompt) -> Answer:
    """Ask until the answer is yes or no."""
    while True:
        answer = classify_answer(prompt(text))
        if answer is not Answer.INVALID:
            return answer
        typer.echo("Please answer yes or no.")


def confirm_once(text: str, prompt: Prompt = default_prompt) -> bool:
    """Ask a single time; anything but y is a no."""
    return is_strict_yes(prompt(text))
