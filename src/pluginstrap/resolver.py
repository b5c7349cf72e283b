"""
pluginstrap.resolver - Question Resolution
==========================================

Turns a ``QuestionSchema`` plus command-line overrides into a confirmed
``AnswerSet``.

Algorithm
---------
Resolution is a single top-to-bottom pass over the schema, repeated until
the user confirms the summary:

    1. Start from an empty, ordered answer dict
    2. For each question, by mode:
       - skipped    -> omitted
       - derived    -> transform(answers[source])
       - predefined -> the override (canonicalized to yes/no if flagged)
       - prompted   -> asked through the prompter
    3. Show the summary and ask "Looks good?"
    4. If declined, start over from step 1

Declining is a "start over" path, not per-field editing: derived and
predefined answers come out identical, prompted ones are asked again.

Prompting is delegated to a ``Prompter`` so the pass can be driven by
questionary in the terminal or by a scripted fake in tests.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Protocol

import questionary
from rich.console import Console
from rich.table import Table
from rich.text import Text

from pluginstrap.errors import UserCancelled
from pluginstrap.models import AnswerSet, Question, QuestionKind, QuestionMode, QuestionSchema


logger = logging.getLogger(__name__)

console = Console()

# Case-insensitive answers that count as "yes"; anything else is "no"
YES_ANSWERS = frozenset({"y", "yes", "1", "true", "confirm", "i do", "i am"})


# =============================================================================
# Prompt Provider
# =============================================================================

class Prompter(Protocol):
    """Asks the user for a single answer or a yes/no confirmation."""

    def ask(self, question: Question) -> str: ...

    def confirm(self, message: str) -> bool: ...


class QuestionaryPrompter:
    """
    Interactive prompter backed by questionary.

    questionary returns None when the prompt is interrupted (Ctrl-C);
    that is turned into ``UserCancelled`` so the run stops.
    """

    def ask(self, question: Question) -> str:
        if question.kind == QuestionKind.LIST:
            result = questionary.select(
                question.message,
                choices=list(question.choices),
                default=question.default,
            ).ask()
        else:
            result = questionary.text(
                question.message,
                default=question.default or "",
            ).ask()

        if result is None:
            raise UserCancelled(f"Cancelled while answering '{question.name}'.")

        return result

    def confirm(self, message: str) -> bool:
        result = questionary.confirm(message, default=True).ask()

        if result is None:
            raise UserCancelled("Cancelled at confirmation.")

        return result


# =============================================================================
# Helpers
# =============================================================================

def canonicalize_yes_no(value: str) -> str:
    """
    Map a fuzzy yes/no answer to ``"yes"`` or ``"no"``.

    Matching is exact after lowercasing; unmatched input is ``"no"``,
    never an error.

    Examples
    --------
    >>> canonicalize_yes_no("I Do")
    'yes'
    >>> canonicalize_yes_no("yes")
    'yes'
    >>> canonicalize_yes_no("nope")
    'no'
    """
    return "yes" if value.lower() in YES_ANSWERS else "no"


def show_summary(answers: Mapping[str, str]) -> None:
    """Print every resolved answer as a table."""
    console.print()
    table = Table(title="Summary", show_header=False)
    table.add_column("Question", style="cyan")
    table.add_column("Answer", style="green")

    for key, value in answers.items():
        table.add_row(key, Text(value))

    console.print(table)
    console.print()


# =============================================================================
# Resolution
# =============================================================================

def resolve_once(schema: QuestionSchema, prompter: Prompter) -> dict[str, str]:
    """
    Run one resolution pass over the schema.

    Parameters
    ----------
    schema : QuestionSchema
        Validated schema, overrides already applied.

    prompter : Prompter
        Used for questions in ``PROMPTED`` mode.

    Returns
    -------
    dict[str, str]
        Answers in declaration order; skipped questions are absent.
    """
    answers: dict[str, str] = {}

    for question in schema.questions:
        mode = question.mode

        if mode == QuestionMode.SKIPPED:
            continue

        if mode == QuestionMode.DERIVED:
            derive = question.derive
            answers[question.name] = derive.transform(answers[derive.source])
            if question.predefined:
                logger.debug("Ignoring override for derived question %s", question.name)
        elif mode == QuestionMode.PREDEFINED:
            value = question.predefined
            if question.yes_no:
                value = canonicalize_yes_no(value)
            answers[question.name] = value
        else:
            answers[question.name] = prompter.ask(question)

        logger.debug("Resolved %s (%s) = %r", question.name, mode.value, answers[question.name])

    return answers


def resolve(
    schema: QuestionSchema,
    overrides: Mapping[str, str | None] | None = None,
    *,
    auto_confirm: bool = False,
    prompter: Prompter | None = None,
) -> AnswerSet:
    """
    Resolve every question into a confirmed answer set.

    Parameters
    ----------
    schema : QuestionSchema
        The questions, in resolution order.

    overrides : Mapping[str, str | None] | None
        Out-of-band answers (usually CLI flags). ``None``/empty values
        are ignored.

    auto_confirm : bool, default=False
        Skip the summary and confirmation.

    prompter : Prompter | None
        Defaults to ``QuestionaryPrompter``.

    Returns
    -------
    AnswerSet
        One answer per non-skipped question, in schema order.

    Raises
    ------
    ConfigurationError
        If an override names an unknown question or is not a valid choice.
        Raised before anything is prompted.
    UserCancelled
        If the user interrupts a prompt.

    Examples
    --------
    >>> from pluginstrap.questions import PLUGIN_QUESTIONS
    >>> answers = resolve(PLUGIN_QUESTIONS, overrides, auto_confirm=True)  # doctest: +SKIP
    """
    schema = schema.apply_overrides(overrides)
    prompter = prompter or QuestionaryPrompter()

    while True:
        answers = resolve_once(schema, prompter)

        if auto_confirm:
            break

        show_summary(answers)
        if prompter.confirm("Looks good?"):
            break

        logger.info("Summary declined, starting over")
        console.print()

    return AnswerSet(answers)
