"""
pluginstrap.questions - The Plugin Question Schema
==================================================

Questions asked (or derived) when creating a WordPress plugin from the
boilerplate. Order matters: derived questions come after their source,
because the resolver makes a single pass over the schema.

Derived identifiers
-------------------
Given the project name ``"My Cool Plugin!"``:

=================  ==================  ===============================
Question           Value               Used for
=================  ==================  ===============================
package            my-cool-plugin      folder, text domain, entry file
namespace          MyCoolPlugin        PHP namespace, main class
prefix             MY_COOL_PLUGIN      constants
lowerCasePrefix    my_cool_plugin      actions, filters, globals
=================  ==================  ===============================
"""

from __future__ import annotations

import re

from pluginstrap.models import Derivation, Question, QuestionKind, QuestionSchema


# =============================================================================
# Derivation Transforms
# =============================================================================

def to_slug(value: str) -> str:
    """
    Lowercase, hyphen-separated slug.

    Everything except letters, digits, spaces and hyphens is dropped, then
    each single space becomes a hyphen.

    Examples
    --------
    >>> to_slug("My Cool Plugin!")
    'my-cool-plugin'
    >>> to_slug("Code Rex")
    'code-rex'
    """
    return "-".join(re.sub(r"[^a-z0-9 -]", "", value, flags=re.IGNORECASE).lower().split(" "))


def to_namespace(value: str) -> str:
    """
    PascalCase PHP namespace.

    Examples
    --------
    >>> to_namespace("My Cool Plugin!")
    'MyCoolPlugin'
    >>> to_namespace("rest_api helper")
    'RestApiHelper'
    """
    words = re.split(r"[ _]+", re.sub(r"[^a-z0-9 _]", "", value, flags=re.IGNORECASE).lower())
    return "".join(word[:1].upper() + word[1:] for word in words)


def to_constant_prefix(value: str) -> str:
    """
    Upper-case prefix for PHP constants.

    Examples
    --------
    >>> to_constant_prefix("My Cool Plugin!")
    'MY_COOL_PLUGIN'
    """
    words = re.split(r"[ _]+", re.sub(r"[^a-z0-9 _]", "", value, flags=re.IGNORECASE))
    return "_".join(words).upper()


def to_lower_prefix(value: str) -> str:
    """Lower-case prefix for hooks and globals, derived from the constant prefix."""
    return value.lower()


# =============================================================================
# Schema
# =============================================================================

FRAMEWORKS = ("react", "vue")

PLUGIN_QUESTIONS = QuestionSchema.of(
    Question(
        name="projectName",
        message="Please enter your project name (e.g. The Plugin Name):",
    ),
    Question(
        name="description",
        message="The plugin description:",
    ),
    Question(
        name="pluginVersion",
        message="The plugin version (default: 1.0.0):",
        default="1.0.0",
    ),
    Question(
        name="license",
        message="The plugin license (default: MIT):",
        default="MIT",
    ),
    Question(
        name="author",
        message="The plugin author's name (default: Code Rex):",
        default="Code Rex",
    ),
    Question(
        name="authorEmail",
        message="The plugin author's e-mail address (default: engineering@coderex.co):",
        default="engineering@coderex.co",
    ),
    Question(
        name="url",
        message="The author url without https:// (e.g. coderex.co):",
        default="coderex.co",
    ),
    Question(
        name="framework",
        message="Which admin front-end framework?",
        kind=QuestionKind.LIST,
        choices=FRAMEWORKS,
        default="react",
    ),
    Question(
        name="vendor",
        message="Composer.json vendor name:",
        derive=Derivation(source="author", transform=to_slug),
    ),
    Question(
        name="package",
        message="Package name: name of the folder, text domain name (e.g. plugin-name):",
        derive=Derivation(source="projectName", transform=to_slug),
    ),
    Question(
        name="namespace",
        message="Namespace for your project / files (e.g. PackageName):",
        derive=Derivation(source="projectName", transform=to_namespace),
    ),
    Question(
        name="prefix",
        message="Project prefix for any globals with uppercase letters (e.g. PLUGIN_NAME):",
        derive=Derivation(source="projectName", transform=to_constant_prefix),
    ),
    Question(
        name="lowerCasePrefix",
        message="Project prefix for lowercase occurrences incl. actions, filters (e.g. plugin_name):",
        derive=Derivation(source="prefix", transform=to_lower_prefix),
    ),
)
