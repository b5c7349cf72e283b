"""
pluginstrap.rewriter - Boilerplate Token Rewriting
==================================================

This module rewrites a freshly cloned plugin boilerplate in place so that
every placeholder token carries the project's own names.

Architecture
------------
The rewrite is a fixed pipeline:

    1. Check the answer set has everything the rules need
    2. Apply the substitution rules, strictly in declared order
       (PHP sources, composer.json, phpcs.xml)
    3. Re-encode composer.json with 4-space indentation
    4. Rename the entry file and the translation catalog (if present)
    5. Apply the translation catalog, Gruntfile and PHPUnit rules
    6. Resolve the framework variant (React or Vue)

Rule Order
----------
Rules are not independent: later rules run on text earlier rules have
already rewritten. For example ``ThePluginName`` -> namespace runs before
the ``namespace ThePluginName`` rule, so the latter normally finds nothing
left to replace. Each rule is applied exactly once; reordering or repeating
them changes the output.

Exclusions
----------
Dependency trees (``node_modules``, ``vendor``, ``packages``) at the root of
the project are never touched, even when a selector glob reaches into them.

Failure
-------
The rewrite fails fast. An unreadable or unwritable file raises
``RewriteError`` naming the rule; nothing already rewritten is rolled back.
"""

from __future__ import annotations

import json
import logging
import re
import shutil
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from fnmatch import fnmatch
from operator import itemgetter
from pathlib import Path

from pluginstrap.errors import ConfigurationError, ManifestError, RewriteError


logger = logging.getLogger(__name__)


# =============================================================================
# Module-Level Configuration
# =============================================================================

# Root-relative subtrees no rule may modify
EXCLUDED_GLOBS = ("node_modules/**", "vendor/**", "packages/**")

ENTRY_FILE = "the-plugin-name.php"
COMPOSER_FILE = "composer.json"
TRANSLATION_FILE = "languages/the-plugin-name-text-domain.pot"
GRUNT_FILE = "Gruntfile.js"
PHPUNIT_BOOTSTRAP_FILE = "tests/phpunit/bootstrap.php"

PHP_FILES = (
    ENTRY_FILE,
    "includes/Abstracts/**/*.php",
    "includes/Admin/**/*.php",
    "includes/Assets/**/*.php",
    "includes/Common/**/*.php",
    "includes/Databases/**/*.php",
    "includes/Hooks/**/*.php",
    "includes/Rest/**/*.php",
    "includes/Setup/**/*.php",
)

CODESNIFFER_FILES = ("phpcs.xml",)

# The PHP rules only run when all of these are answered
PHP_REQUIRED_ANSWERS = (
    "projectName",
    "description",
    "url",
    "package",
    "author",
    "authorEmail",
    "license",
)

REQUIRED_ANSWERS = (
    *PHP_REQUIRED_ANSWERS,
    "pluginVersion",
    "vendor",
    "namespace",
    "prefix",
    "lowerCasePrefix",
)

# Answer that selects the framework variant
VARIANT_SELECTOR = "framework"


# =============================================================================
# Substitution Rules
# =============================================================================

@dataclass(frozen=True)
class SubstitutionRule:
    """
    One (files, pattern, replacement) rewrite step.

    Attributes
    ----------
    files : tuple[str, ...]
        Root-relative paths or glob patterns. A literal path must exist
        unless ``optional``; a glob may match nothing.

    pattern : re.Pattern[str]
        What to replace.

    value : Callable[[Mapping[str, str]], str]
        Computes the replacement from the answer set. The result is
        inserted literally (backslashes and ``$`` are not special).

    description : str
        Shown in logs and errors.

    count : int
        Matches to replace per file; 0 means all.

    optional : bool
        Missing literal files are skipped instead of failing.
    """

    files: tuple[str, ...]
    pattern: re.Pattern[str]
    value: Callable[[Mapping[str, str]], str]
    description: str
    count: int = 0
    optional: bool = False


def rule(
    files: tuple[str, ...] | str,
    pattern: str,
    value: Callable[[Mapping[str, str]], str],
    description: str,
    *,
    flags: int = 0,
    count: int = 0,
    optional: bool = False,
) -> SubstitutionRule:
    """Shorthand for building a rule from a regex source string."""
    if isinstance(files, str):
        files = (files,)
    return SubstitutionRule(
        files=files,
        pattern=re.compile(pattern, flags),
        value=value,
        description=description,
        count=count,
        optional=optional,
    )


def _https(key: str) -> Callable[[Mapping[str, str]], str]:
    return lambda a: f"https://{a[key]}"


def _copyright(answers: Mapping[str, str]) -> str:
    return f"{datetime.now().year} {answers['projectName']}"


# Content, namespace, meta-header and identifier rules for PHP sources.
PHP_RULES: list[SubstitutionRule] = [
    # All occurrences
    rule(PHP_FILES, r"\{\{The Plugin Name\}\}", itemgetter("projectName"), "plugin name"),
    rule(PHP_FILES, r"\{\{plugin_description\}\}", itemgetter("description"), "plugin description"),
    rule(PHP_FILES, r"\{\{plugin_url\}\}", _https("url"), "plugin url"),
    rule(PHP_FILES, r"\{\{the-plugin-name\}\}", itemgetter("package"), "package name"),
    rule(PHP_FILES, r"\{\{the-project-name\}\}", itemgetter("package"), "project name"),
    rule(PHP_FILES, r"\{\{author_name\}\}", itemgetter("author"), "author name"),
    rule(PHP_FILES, r"\{\{version\}\}", itemgetter("pluginVersion"), "plugin version"),
    rule(PHP_FILES, r"\{\{author_email\}\}", itemgetter("authorEmail"), "author email"),
    rule(PHP_FILES, r"\{\{author_url\}\}", _https("url"), "author url"),
    rule(PHP_FILES, r"\{\{author_copyright\}\}", _copyright, "copyright"),
    rule(PHP_FILES, r"\{\{author_license\}\}", itemgetter("license"), "license"),
    # Main class name
    rule(PHP_FILES, r"ThePluginName", itemgetter("namespace"), "main class name"),
    # Namespace
    rule(
        PHP_FILES,
        r"namespace ThePluginName",
        lambda a: f"namespace {a['namespace']}",
        "file namespace",
    ),
    rule(PHP_FILES, r"ThePluginName\\", lambda a: f"{a['namespace']}\\", "namespace references"),
    # Meta headers, first occurrence per file
    rule(
        PHP_FILES,
        r"^ \* Text Domain:[^\r\n]*",
        lambda a: f" * Text Domain:     {a['package']}",
        "meta text domain",
        flags=re.MULTILINE,
        count=1,
    ),
    rule(
        PHP_FILES,
        r"^ \* Namespace:[^\r\n]*",
        lambda a: f" * Namespace:       {a['namespace']}",
        "meta namespace",
        flags=re.MULTILINE,
        count=1,
    ),
    # Translation functions
    rule(PHP_FILES, r"the-plugin-name-text-domain", itemgetter("package"), "text domain"),
    # REST API class map
    rule(
        PHP_FILES,
        r"plugin_name_rest_api_class_map",
        lambda a: f"{a['prefix']}_rest_api_class_map ",
        "rest api class map",
    ),
    # Functions, constants, variables
    rule(PHP_FILES, r"_PLUGIN_NAME_", lambda a: f"{a['prefix']}_", "constants"),
    rule(PHP_FILES, r"\$plugin_name_", lambda a: f"${a['lowerCasePrefix']}_", "global variables"),
    rule(PHP_FILES, r"plugin_name_", lambda a: f"{a['lowerCasePrefix']}_", "prefixed identifiers"),
    rule(
        PHP_FILES,
        r"the_plugin_name_main_function",
        itemgetter("lowerCasePrefix"),
        "main function",
    ),
    rule(PHP_FILES, r"plugin_name-slug", itemgetter("lowerCasePrefix"), "slug"),
]

COMPOSER_RULES: list[SubstitutionRule] = [
    rule(
        COMPOSER_FILE,
        r'"name"\s*:\s*"[^"/]*/the-plugin-name"',
        lambda a: f'"name": "{a["vendor"]}/{a["package"]}"',
        "composer package name",
        count=1,
    ),
    rule(
        COMPOSER_FILE,
        r"ThePluginName\\",
        lambda a: f"{a['namespace']}\\",
        "composer autoload namespace",
    ),
]

CODESNIFFER_RULES: list[SubstitutionRule] = [
    rule(
        CODESNIFFER_FILES,
        r'<ruleset name="The Plugin Name ruleset">',
        lambda a: f'<ruleset name="{a["projectName"]} ruleset">',
        "phpcs ruleset name",
    ),
    rule(
        CODESNIFFER_FILES,
        r"<description>Generally-applicable sniffs for The Plugin Name\.</description>",
        lambda a: f"<description>Generally-applicable sniffs for {a['projectName']}.</description>",
        "phpcs description",
    ),
    rule(
        CODESNIFFER_FILES,
        r'<element value="ThePluginName"/>',
        lambda a: f'<element value="{a["namespace"]}"/>',
        "phpcs namespace",
    ),
    rule(
        CODESNIFFER_FILES,
        r'<element value="_THE_PLUGIN_NAME"/>',
        lambda a: f'<element value="{a["prefix"]}"/>',
        "phpcs constant prefix",
    ),
    rule(
        CODESNIFFER_FILES,
        r'<element value="the_plugin_name"/>',
        lambda a: f'<element value="{a["lowerCasePrefix"]}"/>',
        "phpcs global prefix",
    ),
    rule(
        CODESNIFFER_FILES,
        r'<element value="the-plugin-name-text-domain"/>',
        lambda a: f'<element value="{a["package"]}"/>',
        "phpcs text domain",
    ),
]

TRANSLATION_RULES: list[SubstitutionRule] = [
    rule(
        TRANSLATION_FILE,
        r"the-plugin-name\.php",
        lambda a: f"{a['package']}.php",
        "translation catalog entry file",
        optional=True,
    ),
]

GRUNT_RULES: list[SubstitutionRule] = [
    rule(GRUNT_FILE, r"the-plugin-name-text-domain", itemgetter("package"), "grunt text domain"),
    rule(
        GRUNT_FILE,
        r"the-plugin-name-text-domain\.pot",
        lambda a: f"{a['package']}.pot",
        "grunt translation catalog",
    ),
    rule(GRUNT_FILE, r"\{\{the-plugin-name\}\}", itemgetter("package"), "grunt package name"),
    rule(GRUNT_FILE, r"\{\{plugin_url\}\}", _https("url"), "grunt plugin url"),
    rule(GRUNT_FILE, r"\{\{author_email\}\}", itemgetter("authorEmail"), "grunt author email"),
]

PHPUNIT_RULES: list[SubstitutionRule] = [
    rule(
        PHPUNIT_BOOTSTRAP_FILE,
        r"rex_plugin_boilerplate",
        itemgetter("package"),
        "phpunit bootstrap package",
    ),
]


# =============================================================================
# File Selection
# =============================================================================

def _has_magic(pattern: str) -> bool:
    return any(ch in pattern for ch in "*?[")


def is_excluded(relative_path: Path) -> bool:
    """
    Whether a root-relative path lies in an excluded dependency subtree.

    Examples
    --------
    >>> is_excluded(Path("vendor/autoload.php"))
    True
    >>> is_excluded(Path("includes/vendor/Thing.php"))
    False
    """
    posix = relative_path.as_posix()
    return any(fnmatch(posix, glob) for glob in EXCLUDED_GLOBS)


def select_files(root: Path, patterns: tuple[str, ...], *, optional: bool = False) -> list[Path]:
    """
    Resolve selector patterns to existing files under ``root``.

    Parameters
    ----------
    root : Path
        Project root.

    patterns : tuple[str, ...]
        Root-relative literal paths and glob patterns.

    optional : bool, default=False
        Skip missing literal paths instead of failing.

    Returns
    -------
    list[Path]
        Matching files, de-duplicated, in pattern order, with
        ``EXCLUDED_GLOBS`` removed.

    Raises
    ------
    RewriteError
        If a literal path doesn't exist and ``optional`` is False.
    """
    selected: dict[Path, None] = {}

    for pattern in patterns:
        if _has_magic(pattern):
            matches = sorted(p for p in root.glob(pattern) if p.is_file())
        else:
            target = root / pattern
            if not target.is_file():
                if optional:
                    continue
                raise RewriteError(f"No files match the pattern: {pattern}")
            matches = [target]

        for path in matches:
            if not is_excluded(path.relative_to(root)):
                selected[path] = None

    return list(selected)


# =============================================================================
# Rule Application
# =============================================================================

def _read(path: Path) -> str:
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def _write(path: Path, content: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)


def apply_rule(rule: SubstitutionRule, answers: Mapping[str, str], root: Path) -> int:
    """
    Apply a single rule to every file it selects.

    Parameters
    ----------
    rule : SubstitutionRule
        The rule to apply.

    answers : Mapping[str, str]
        Resolved answers.

    root : Path
        Project root.

    Returns
    -------
    int
        Total number of replacements made.

    Raises
    ------
    RewriteError
        If a selected file can't be read or written.
    """
    replacement = rule.value(answers)
    total = 0

    for path in select_files(root, rule.files, optional=rule.optional):
        try:
            content = _read(path)
            new_content, replaced = rule.pattern.subn(
                lambda _match: replacement, content, count=rule.count
            )
            if replaced:
                _write(path, new_content)
        except (OSError, UnicodeError) as e:
            raise RewriteError(f"Rule '{rule.description}' failed on {path}: {e}") from e
        total += replaced

    logger.debug("Rule '%s': %d replacement(s)", rule.description, total)
    return total


def apply_rules(rules: list[SubstitutionRule], answers: Mapping[str, str], root: Path) -> int:
    """Apply rules one after another, in list order. Returns total replacements."""
    total = 0
    for current in rules:
        try:
            total += apply_rule(current, answers, root)
        except RewriteError:
            logger.error("Rewrite stopped at rule '%s'", current.description)
            raise
    return total


# =============================================================================
# Manifest and Renames
# =============================================================================

def reencode_manifest(path: Path) -> None:
    """
    Parse a JSON manifest and write it back with 4-space indentation.

    Done unconditionally, even when nothing in it changed, so the
    generated project's manifest has stable formatting.

    Raises
    ------
    ManifestError
        If the file isn't valid JSON.
    RewriteError
        If the file can't be read or written.
    """
    try:
        data = json.loads(_read(path))
    except json.JSONDecodeError as e:
        raise ManifestError(f"Malformed manifest {path}: {e}") from e
    except (OSError, UnicodeError) as e:
        raise RewriteError(f"Cannot read manifest {path}: {e}") from e

    try:
        _write(path, json.dumps(data, indent=4, ensure_ascii=False))
    except OSError as e:
        raise RewriteError(f"Cannot write manifest {path}: {e}") from e


def rename_if_exists(source: Path, target: Path) -> bool:
    """
    Rename ``source`` to ``target`` when ``source`` exists.

    Returns
    -------
    bool
        True if a rename happened. A missing source is not an error.
    """
    if not source.exists():
        logger.debug("Nothing to rename at %s", source)
        return False

    try:
        source.rename(target)
    except OSError as e:
        raise RewriteError(f"Cannot rename {source} to {target}: {e}") from e

    logger.debug("Renamed %s -> %s", source.name, target.name)
    return True


# =============================================================================
# Framework Variants
# =============================================================================

@dataclass(frozen=True)
class FrameworkVariant:
    """
    File operations that turn the boilerplate into one framework's layout.

    Applied in attribute order: ``remove``, ``copies``, ``moves``,
    ``discard``. All paths are root-relative.

    Attributes
    ----------
    name : str
        Selector value (``react`` or ``vue``).

    remove : tuple[str, ...]
        Build files of the other variants.

    copies : tuple[tuple[str, str], ...]
        (variant file, canonical file) pairs; the canonical file is
        overwritten.

    moves : tuple[tuple[str, str], ...]
        (variant dir, canonical dir) pairs; the canonical dir is replaced.

    discard : tuple[str, ...]
        Sibling files and directories of the other variants.
    """

    name: str
    remove: tuple[str, ...] = ()
    copies: tuple[tuple[str, str], ...] = ()
    moves: tuple[tuple[str, str], ...] = ()
    discard: tuple[str, ...] = ()


FRAMEWORK_VARIANTS: dict[str, FrameworkVariant] = {
    "react": FrameworkVariant(
        name="react",
        remove=("vite.config.js",),
        copies=(
            ("package.json.react", "package.json"),
            ("includes/Admin/Menu.react.php", "includes/Admin/Menu.php"),
            ("includes/Assets/LoadAssets-react.php", "includes/Assets/LoadAssets.php"),
        ),
        moves=(("src-react", "src"),),
        discard=("includes/Assets/Vite.php", "src-vue"),
    ),
    "vue": FrameworkVariant(
        name="vue",
        remove=("webpack.config.js",),
        copies=(
            ("package.json.vue", "package.json"),
            ("includes/Admin/Menu.vue.php", "includes/Admin/Menu.php"),
            ("includes/Assets/LoadAssets-vue.php", "includes/Assets/LoadAssets.php"),
        ),
        moves=(("src-vue", "src"),),
        discard=("src-react",),
    ),
}

# Per-variant sources, deleted whichever variant was chosen
VARIANT_SCAFFOLDING = (
    "package.json.vue",
    "package.json.react",
    "includes/Assets/LoadAssets-react.php",
    "includes/Assets/LoadAssets-vue.php",
    "includes/Admin/Menu.vue.php",
    "includes/Admin/Menu.react.php",
)


def remove_path(path: Path) -> None:
    """Delete a file or directory tree; a missing path is fine."""
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink(missing_ok=True)
    except OSError as e:
        raise RewriteError(f"Cannot delete {path}: {e}") from e


def resolve_framework(framework: str | None, root: Path) -> None:
    """
    Promote one framework variant's files and delete the rest.

    Parameters
    ----------
    framework : str | None
        Selected variant. None only deletes the scaffolding.

    root : Path
        Project root.

    Raises
    ------
    ConfigurationError
        If ``framework`` isn't a known variant.
    RewriteError
        If a variant file is missing or a file operation fails.
    """
    if framework is not None:
        variant = FRAMEWORK_VARIANTS.get(framework)
        if variant is None:
            valid = ", ".join(FRAMEWORK_VARIANTS)
            raise ConfigurationError(f"Unknown framework '{framework}'. Valid: {valid}")

        for relative in variant.remove:
            remove_path(root / relative)

        for source, target in variant.copies:
            try:
                shutil.copyfile(root / source, root / target)
            except OSError as e:
                raise RewriteError(f"Cannot copy {source} to {target}: {e}") from e

        for source, target in variant.moves:
            if not (root / source).exists():
                raise RewriteError(f"Missing {variant.name} directory: {source}")
            remove_path(root / target)
            try:
                shutil.move(root / source, root / target)
            except OSError as e:
                raise RewriteError(f"Cannot move {source} to {target}: {e}") from e

        for relative in variant.discard:
            remove_path(root / relative)

        logger.debug("Resolved framework variant %s", variant.name)

    for relative in VARIANT_SCAFFOLDING:
        remove_path(root / relative)


# =============================================================================
# Main Rewrite Function
# =============================================================================

def check_answers(answers: Mapping[str, str]) -> None:
    """
    Make sure every answer the rules reference exists.

    Raises
    ------
    ConfigurationError
        Listing the missing answers.
    """
    missing = [key for key in REQUIRED_ANSWERS if key not in answers]
    if missing:
        raise ConfigurationError(f"Missing answer(s) for rewrite: {', '.join(missing)}")

    framework = answers.get(VARIANT_SELECTOR)
    if framework is not None and framework not in FRAMEWORK_VARIANTS:
        valid = ", ".join(FRAMEWORK_VARIANTS)
        raise ConfigurationError(f"Unknown framework '{framework}'. Valid: {valid}")


def rewrite(answers: Mapping[str, str], root: Path) -> None:
    """
    Rewrite a cloned boilerplate in place with the resolved answers.

    Parameters
    ----------
    answers : Mapping[str, str]
        The confirmed answer set.

    root : Path
        Root of the cloned boilerplate.

    Raises
    ------
    ConfigurationError
        If answers are missing or the framework is unknown. Raised before
        any file is touched.
    RewriteError
        If a required file is missing or any file operation fails. Files
        rewritten before the failure stay rewritten.
    ManifestError
        If composer.json isn't valid JSON.

    Notes
    -----
    The PHP rules are skipped (with a warning) when any of the basic
    project answers is empty, leaving PHP placeholders in place.
    """
    check_answers(answers)

    if all(answers[key] for key in PHP_REQUIRED_ANSWERS):
        apply_rules(PHP_RULES, answers, root)
    else:
        empty = [key for key in PHP_REQUIRED_ANSWERS if not answers[key]]
        logger.warning("Skipping PHP rewrite, empty answer(s): %s", ", ".join(empty))

    apply_rules(COMPOSER_RULES, answers, root)
    reencode_manifest(root / COMPOSER_FILE)

    apply_rules(CODESNIFFER_RULES, answers, root)

    rename_if_exists(root / ENTRY_FILE, root / f"{answers['package']}.php")

    apply_rules(TRANSLATION_RULES, answers, root)
    rename_if_exists(root / TRANSLATION_FILE, root / "languages" / f"{answers['package']}.pot")

    apply_rules(GRUNT_RULES, answers, root)
    apply_rules(PHPUNIT_RULES, answers, root)

    resolve_framework(answers.get(VARIANT_SELECTOR), root)
