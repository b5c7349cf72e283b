"""
Tests for pluginstrap.models
============================

Test Organization
-----------------
- TestQuestion: Question validation and resolution mode
- TestQuestionSchema: Ordering rules and overrides
- TestAnswerSet: Read-only ordered mapping
- TestStrapSettings: Defaults and TOML loading
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from pluginstrap.errors import ConfigurationError
from pluginstrap.models import (
    AnswerSet,
    Derivation,
    Question,
    QuestionKind,
    QuestionMode,
    QuestionSchema,
    StrapSettings,
)


def derived(name: str, source: str) -> Question:
    return Question(name=name, message=f"{name}:", derive=Derivation(source=source, transform=str.upper))


# =============================================================================
# Question Tests
# =============================================================================

class TestQuestion:
    """Tests for the Question model."""

    def test_defaults_to_prompted_text(self) -> None:
        """A bare question is free text and prompted."""
        q = Question(name="projectName", message="Name:")
        assert q.kind == QuestionKind.TEXT
        assert q.mode == QuestionMode.PROMPTED

    def test_predefined_mode(self) -> None:
        """A non-empty predefined value short-circuits prompting."""
        q = Question(name="license", message="License:", predefined="MIT")
        assert q.mode == QuestionMode.PREDEFINED

    def test_empty_predefined_is_prompted(self) -> None:
        """An empty override falls through to the prompt."""
        q = Question(name="license", message="License:", predefined="")
        assert q.mode == QuestionMode.PROMPTED

    def test_derived_wins_over_predefined(self) -> None:
        """Derivation takes precedence over an override."""
        q = Question(
            name="package",
            message="Package:",
            derive=Derivation(source="projectName", transform=str.lower),
            predefined="ignored",
        )
        assert q.mode == QuestionMode.DERIVED

    def test_skip_wins_over_everything(self) -> None:
        """Skipped questions are never derived or predefined."""
        q = Question(
            name="package",
            message="Package:",
            derive=Derivation(source="projectName", transform=str.lower),
            predefined="x",
            skip_prompt=True,
        )
        assert q.mode == QuestionMode.SKIPPED

    def test_list_requires_choices(self) -> None:
        """A list question without choices is a configuration error."""
        with pytest.raises(ConfigurationError):
            Question(name="framework", message="Framework?", kind=QuestionKind.LIST)

    def test_list_default_must_be_a_choice(self) -> None:
        """A list default outside its choices is rejected."""
        with pytest.raises(ConfigurationError):
            Question(
                name="framework",
                message="Framework?",
                kind=QuestionKind.LIST,
                choices=("react", "vue"),
                default="svelte",
            )

    def test_empty_name_rejected(self) -> None:
        """Question names can't be empty."""
        with pytest.raises(ValidationError):
            Question(name="", message="?")

    def test_is_frozen(self) -> None:
        """Questions are immutable configuration."""
        q = Question(name="projectName", message="Name:")
        with pytest.raises(ValidationError):
            q.name = "other"  # type: ignore[misc]


# =============================================================================
# QuestionSchema Tests
# =============================================================================

class TestQuestionSchema:
    """Tests for schema validation and overrides."""

    def test_preserves_order(self) -> None:
        """Names come back in declaration order."""
        schema = QuestionSchema.of(
            Question(name="b", message="b"),
            Question(name="a", message="a"),
            derived("c", "a"),
        )
        assert schema.names == ["b", "a", "c"]

    def test_duplicate_names_rejected(self) -> None:
        """Two questions can't share a name."""
        with pytest.raises(ConfigurationError, match="Duplicate"):
            QuestionSchema.of(
                Question(name="a", message="a"),
                Question(name="a", message="again"),
            )

    def test_forward_derivation_rejected(self) -> None:
        """A derivation must come after its source."""
        with pytest.raises(ConfigurationError, match="not declared before"):
            QuestionSchema.of(derived("slug", "title"), Question(name="title", message="t"))

    def test_unknown_source_rejected(self) -> None:
        """A derivation from a missing question fails at schema time."""
        with pytest.raises(ConfigurationError):
            QuestionSchema.of(Question(name="title", message="t"), derived("slug", "nope"))

    def test_skipped_source_rejected(self) -> None:
        """A derivation can't depend on a skipped question."""
        with pytest.raises(ConfigurationError, match="skipped"):
            QuestionSchema.of(
                Question(name="title", message="t", skip_prompt=True),
                derived("slug", "title"),
            )

    def test_skipped_derived_question_allowed(self) -> None:
        """A skipped derived question doesn't need a valid source."""
        schema = QuestionSchema.of(
            Question(name="title", message="t", skip_prompt=True),
            Question(
                name="slug",
                message="s",
                derive=Derivation(source="title", transform=str.lower),
                skip_prompt=True,
            ),
        )
        assert len(schema.questions) == 2

    def test_get(self) -> None:
        """Questions can be looked up by name."""
        schema = QuestionSchema.of(Question(name="a", message="A?"))
        assert schema.get("a").message == "A?"
        with pytest.raises(ConfigurationError):
            schema.get("missing")

    def test_apply_overrides(self) -> None:
        """Overrides become predefined values on a new schema."""
        schema = QuestionSchema.of(
            Question(name="a", message="a"),
            Question(name="b", message="b"),
        )
        updated = schema.apply_overrides({"a": "value", "b": None})

        assert updated.get("a").predefined == "value"
        assert updated.get("b").predefined is None
        # Original is untouched
        assert schema.get("a").predefined is None

    def test_apply_overrides_unknown_name(self) -> None:
        """Overrides for unknown questions are a configuration error."""
        schema = QuestionSchema.of(Question(name="a", message="a"))
        with pytest.raises(ConfigurationError, match="Unknown question"):
            schema.apply_overrides({"zzz": "x"})

    def test_apply_overrides_invalid_choice(self) -> None:
        """A list override must be one of the choices."""
        schema = QuestionSchema.of(
            Question(
                name="framework",
                message="?",
                kind=QuestionKind.LIST,
                choices=("react", "vue"),
            ),
        )
        with pytest.raises(ConfigurationError, match="not a valid framework"):
            schema.apply_overrides({"framework": "angular"})

    def test_apply_overrides_yes_no_list(self) -> None:
        """Yes/no list questions accept fuzzy overrides."""
        schema = QuestionSchema.of(
            Question(
                name="confirmed",
                message="?",
                kind=QuestionKind.LIST,
                choices=("yes", "no"),
                yes_no=True,
            ),
        )
        assert schema.apply_overrides({"confirmed": "I do"}).get("confirmed").predefined == "I do"


# =============================================================================
# AnswerSet Tests
# =============================================================================

class TestAnswerSet:
    """Tests for the AnswerSet mapping."""

    def test_mapping_behaviour(self) -> None:
        """AnswerSet reads like a dict."""
        answers = AnswerSet({"a": "1", "b": "2"})
        assert answers["a"] == "1"
        assert len(answers) == 2
        assert "b" in answers
        assert answers.get("c") is None

    def test_preserves_insertion_order(self) -> None:
        """Iteration follows insertion order."""
        answers = AnswerSet([("z", "1"), ("a", "2"), ("m", "3")])
        assert list(answers) == ["z", "a", "m"]

    def test_is_read_only(self) -> None:
        """Answers can't be changed after construction."""
        answers = AnswerSet({"a": "1"})
        with pytest.raises(TypeError):
            answers["a"] = "2"  # type: ignore[index]

    def test_copies_input(self) -> None:
        """Mutating the source dict doesn't leak in."""
        source = {"a": "1"}
        answers = AnswerSet(source)
        source["a"] = "2"
        assert answers["a"] == "1"

    def test_equality(self) -> None:
        """AnswerSets compare equal to mappings with the same items."""
        assert AnswerSet({"a": "1"}) == {"a": "1"}


# =============================================================================
# StrapSettings Tests
# =============================================================================

class TestStrapSettings:
    """Tests for settings defaults and loading."""

    def test_defaults(self) -> None:
        """Defaults point at the boilerplate with a 45s clone timeout."""
        settings = StrapSettings()
        assert settings.repository.endswith("rex-plugin-boilerplate")
        assert settings.branch == ""
        assert settings.clone_timeout == 45.0
        assert settings.installers == ["composer"]

    def test_unknown_installer_rejected(self) -> None:
        """Only known installer kinds are accepted."""
        with pytest.raises(ValidationError):
            StrapSettings(installers=["npm"])

    def test_from_toml(self, tmp_path: Path) -> None:
        """Settings load from TOML."""
        path = tmp_path / "pluginstrap.toml"
        path.write_text(
            'branch = "develop"\nclone_timeout = 10\ninstallers = ["composer", "webpack"]\n'
        )

        settings = StrapSettings.from_toml(path)

        assert settings.branch == "develop"
        assert settings.clone_timeout == 10.0
        assert settings.installers == ["composer", "webpack"]

    def test_from_toml_invalid_syntax(self, tmp_path: Path) -> None:
        """Broken TOML is a configuration error."""
        path = tmp_path / "pluginstrap.toml"
        path.write_text("branch = \n")
        with pytest.raises(ConfigurationError, match="Invalid TOML"):
            StrapSettings.from_toml(path)

    def test_from_toml_unknown_key(self, tmp_path: Path) -> None:
        """Unknown settings are rejected."""
        path = tmp_path / "pluginstrap.toml"
        path.write_text('colour = "blue"\n')
        with pytest.raises(ConfigurationError, match="Invalid settings"):
            StrapSettings.from_toml(path)

    def test_from_toml_missing_file(self, tmp_path: Path) -> None:
        """A missing explicit settings file is a configuration error."""
        with pytest.raises(ConfigurationError, match="Cannot read"):
            StrapSettings.from_toml(tmp_path / "missing.toml")

    def test_load_finds_file_in_cwd(self, tmp_path: Path) -> None:
        """load() picks up pluginstrap.toml from the working directory."""
        (tmp_path / "pluginstrap.toml").write_text('branch = "main"\n')
        assert StrapSettings.load(cwd=tmp_path).branch == "main"

    def test_load_defaults_without_file(self, tmp_path: Path) -> None:
        """load() falls back to defaults."""
        assert StrapSettings.load(cwd=tmp_path) == StrapSettings()
