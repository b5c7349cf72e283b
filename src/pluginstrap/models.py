"""
pluginstrap.models - Pydantic Models for Questions, Answers and Settings
========================================================================

This module defines the data model shared by the resolver, the rewriter
and the CLI. Questions and settings are Pydantic models so that a broken
schema or settings file fails loudly before anything is cloned or
rewritten.

Architecture Notes
------------------
The models are organized like this:

    QuestionSchema
    └── Question (one per configurable project attribute)
        ├── QuestionKind (enum: text, list)
        ├── Derivation (source question + pure transform)
        └── mode -> QuestionMode (skipped, derived, predefined, prompted)

    AnswerSet (read-only ordered mapping produced by the resolver)

    StrapSettings (repository, branch, clone timeout, installers)

A question's ``mode`` is the tagged variant the resolver dispatches on. The
precedence mirrors the resolution order: a skipped question is never
derived, a derived question ignores any predefined value, and only a
question with neither is prompted.

Usage Example
-------------
>>> from pluginstrap.models import Derivation, Question, QuestionSchema
>>> schema = QuestionSchema.of(
...     Question(name="projectName", message="Project name:"),
...     Question(
...         name="package",
...         message="Package name:",
...         derive=Derivation(source="projectName", transform=str.lower),
...     ),
... )
>>> [q.mode.value for q in schema.questions]
['prompted', 'derived']
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from enum import Enum
from pathlib import Path

import tomli
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from pluginstrap.errors import ConfigurationError


# =============================================================================
# Enumerations
# =============================================================================

class QuestionKind(str, Enum):
    """
    How a question is presented when it has to be prompted.

    Attributes
    ----------
    TEXT : str
        Free-text input with an optional default.

    LIST : str
        Single choice out of a fixed list of ``choices``.
    """

    TEXT = "text"
    LIST = "list"


class QuestionMode(str, Enum):
    """
    Which resolution path produces a question's answer.

    Listed in precedence order; see ``Question.mode``.
    """

    SKIPPED = "skipped"
    DERIVED = "derived"
    PREDEFINED = "predefined"
    PROMPTED = "prompted"


# Installer kinds the shell module knows how to run
INSTALLER_KINDS = ("composer", "webpack")

# Looked up in the working directory when no --config is given
SETTINGS_FILE = "pluginstrap.toml"


# =============================================================================
# Question Definitions
# =============================================================================

class Derivation(BaseModel):
    """
    Computes an answer from an earlier answer instead of asking for it.

    Attributes
    ----------
    source : str
        Name of the question whose resolved value feeds ``transform``.
        It must be declared earlier in the schema.

    transform : Callable[[str], str]
        Pure function of the source value.
    """

    model_config = ConfigDict(frozen=True)

    source: str = Field(min_length=1)
    transform: Callable[[str], str]


class Question(BaseModel):
    """
    One configurable project attribute.

    Attributes
    ----------
    name : str
        Unique key of the answer in the final ``AnswerSet``.

    message : str
        Prompt text shown to the user.

    kind : QuestionKind
        Free text or single-choice list.

    default : str | None
        Pre-filled answer for the prompt.

    choices : tuple[str, ...]
        Allowed values for ``QuestionKind.LIST``.

    derive : Derivation | None
        When set, the question is never asked.

    predefined : str | None
        Out-of-band value (usually a CLI flag) that short-circuits prompting.

    skip_prompt : bool
        Exclude the question from resolution entirely.

    yes_no : bool
        Canonicalize a predefined value to ``yes``/``no``.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    message: str
    kind: QuestionKind = QuestionKind.TEXT
    default: str | None = None
    choices: tuple[str, ...] = ()
    derive: Derivation | None = None
    predefined: str | None = None
    skip_prompt: bool = False
    yes_no: bool = False

    @model_validator(mode="after")
    def validate_choices(self) -> Question:
        """A list question needs choices, and its default must be one of them."""
        if self.kind == QuestionKind.LIST:
            if not self.choices:
                raise ConfigurationError(f"List question '{self.name}' has no choices.")
            if self.default is not None and self.default not in self.choices:
                raise ConfigurationError(
                    f"Default '{self.default}' of question '{self.name}' "
                    f"is not one of: {', '.join(self.choices)}"
                )
        return self

    @property
    def mode(self) -> QuestionMode:
        """
        The resolution path for this question.

        Returns
        -------
        QuestionMode
            SKIPPED if ``skip_prompt``, else DERIVED if ``derive`` is set,
            else PREDEFINED if a non-empty ``predefined`` value exists,
            else PROMPTED.
        """
        if self.skip_prompt:
            return QuestionMode.SKIPPED
        if self.derive is not None:
            return QuestionMode.DERIVED
        if self.predefined:
            return QuestionMode.PREDEFINED
        return QuestionMode.PROMPTED


class QuestionSchema(BaseModel):
    """
    Ordered, validated sequence of questions.

    Resolution is a single top-to-bottom pass, so the schema rejects any
    derivation whose source is missing, declared later, or skipped.
    Validation problems raise ``ConfigurationError`` directly.

    Examples
    --------
    >>> QuestionSchema.of(
    ...     Question(
    ...         name="slug",
    ...         message="Slug:",
    ...         derive=Derivation(source="title", transform=str.lower),
    ...     ),
    ...     Question(name="title", message="Title:"),
    ... )
    Traceback (most recent call last):
        ...
    pluginstrap.errors.ConfigurationError: Question 'slug' derives from 'title', which is not declared before it.
    """

    model_config = ConfigDict(frozen=True)

    questions: tuple[Question, ...] = ()

    @classmethod
    def of(cls, *questions: Question) -> QuestionSchema:
        """Build a schema from questions in declaration order."""
        return cls(questions=questions)

    @model_validator(mode="after")
    def validate_order(self) -> QuestionSchema:
        """Check name uniqueness, derivation sources and list overrides."""
        seen: dict[str, Question] = {}

        for question in self.questions:
            if question.name in seen:
                raise ConfigurationError(f"Duplicate question name '{question.name}'.")

            if question.derive is not None and not question.skip_prompt:
                source = seen.get(question.derive.source)
                if source is None:
                    raise ConfigurationError(
                        f"Question '{question.name}' derives from "
                        f"'{question.derive.source}', which is not declared before it."
                    )
                if source.skip_prompt:
                    raise ConfigurationError(
                        f"Question '{question.name}' derives from "
                        f"'{source.name}', which is skipped."
                    )

            if (
                question.kind == QuestionKind.LIST
                and question.predefined
                and not question.yes_no
                and question.predefined not in question.choices
            ):
                raise ConfigurationError(
                    f"'{question.predefined}' is not a valid {question.name}. "
                    f"Valid: {', '.join(question.choices)}"
                )

            seen[question.name] = question

        return self

    @property
    def names(self) -> list[str]:
        """Question names in declaration order."""
        return [q.name for q in self.questions]

    def get(self, name: str) -> Question:
        """
        Look up a question by name.

        Raises
        ------
        ConfigurationError
            If no question has that name.
        """
        for question in self.questions:
            if question.name == name:
                return question
        raise ConfigurationError(f"Unknown question '{name}'.")

    def apply_overrides(self, overrides: Mapping[str, str | None] | None) -> QuestionSchema:
        """
        Return a copy of the schema with override values predefined.

        ``None`` and empty values are ignored so that unset CLI options
        fall through to prompting.

        Parameters
        ----------
        overrides : Mapping[str, str | None] | None
            Question name to out-of-band value.

        Returns
        -------
        QuestionSchema
            A new, re-validated schema.

        Raises
        ------
        ConfigurationError
            If an override names an unknown question, or a list question
            receives a value outside its choices.
        """
        values = {k: v for k, v in (overrides or {}).items() if v}
        unknown = sorted(set(values) - set(self.names))
        if unknown:
            raise ConfigurationError(f"Unknown question(s): {', '.join(unknown)}")

        return QuestionSchema(
            questions=tuple(
                q.model_copy(update={"predefined": values[q.name]}) if q.name in values else q
                for q in self.questions
            )
        )


# =============================================================================
# Answer Set
# =============================================================================

class AnswerSet(Mapping[str, str]):
    """
    Read-only mapping of question name to resolved value.

    Iteration follows schema declaration order. Once built it cannot be
    changed; the rewriter only ever reads from it.

    Examples
    --------
    >>> answers = AnswerSet({"package": "acme-tools"})
    >>> answers["package"]
    'acme-tools'
    >>> dict(answers)
    {'package': 'acme-tools'}
    """

    __slots__ = ("_answers",)

    def __init__(self, answers: Mapping[str, str] | Iterable[tuple[str, str]] = ()) -> None:
        self._answers: dict[str, str] = dict(answers)

    def __getitem__(self, key: str) -> str:
        return self._answers[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._answers)

    def __len__(self) -> int:
        return len(self._answers)

    def __repr__(self) -> str:
        return f"AnswerSet({self._answers!r})"


# =============================================================================
# Settings
# =============================================================================

class StrapSettings(BaseModel):
    """
    Where the boilerplate comes from and how the new project is finished.

    Attributes
    ----------
    repository : str
        Git URL of the boilerplate.

    branch : str
        Branch to clone; empty means the remote's default branch.

    clone_timeout : float
        Seconds before the clone is killed and the run fails.

    installers : list[str]
        Dependency installers to run after the rewrite, in order.

    Examples
    --------
    >>> StrapSettings().clone_timeout
    45.0
    """

    model_config = ConfigDict(extra="forbid")

    repository: str = Field(
        default="https://github.com/CODEREXLTD/rex-plugin-boilerplate",
        min_length=1,
        description="Git URL of the plugin boilerplate",
    )
    branch: str = Field(
        default="",
        description="Branch to clone (default: remote HEAD)",
    )
    clone_timeout: float = Field(
        default=45.0,
        gt=0,
        description="Clone timeout in seconds",
    )
    installers: list[str] = Field(
        default_factory=lambda: ["composer"],
        description="Dependency installers to run",
    )

    @field_validator("installers")
    @classmethod
    def validate_installers(cls, v: list[str]) -> list[str]:
        """Reject installers the shell module can't run."""
        unknown = [kind for kind in v if kind not in INSTALLER_KINDS]
        if unknown:
            msg = (
                f"Unknown installer(s): {', '.join(unknown)}. "
                f"Valid: {', '.join(INSTALLER_KINDS)}"
            )
            raise ValueError(msg)
        return v

    @classmethod
    def from_toml(cls, path: Path) -> StrapSettings:
        """
        Load settings from a TOML file.

        Parameters
        ----------
        path : Path
            Path to the settings file.

        Returns
        -------
        StrapSettings
            Validated settings.

        Raises
        ------
        ConfigurationError
            If the file can't be read, isn't valid TOML, or holds
            invalid values.
        """
        try:
            with open(path, "rb") as f:
                data = tomli.load(f)
        except OSError as e:
            raise ConfigurationError(f"Cannot read settings file {path}: {e}") from e
        except tomli.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings in {path}: {e}") from e

    @classmethod
    def load(cls, path: Path | None = None, cwd: Path | None = None) -> StrapSettings:
        """
        Load explicit settings, else ``pluginstrap.toml`` from ``cwd``, else defaults.
        """
        if path is not None:
            return cls.from_toml(path)

        candidate = (cwd or Path.cwd()) / SETTINGS_FILE
        if candidate.is_file():
            return cls.from_toml(candidate)

        return cls()

