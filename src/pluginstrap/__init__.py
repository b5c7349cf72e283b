"""
pluginstrap - WordPress Plugin Bootstrapper
===========================================

A CLI tool that creates a WordPress plugin from the plugin boilerplate:
it asks for the project's metadata, clones the boilerplate, renames every
placeholder after your project and keeps only the admin front-end
framework you chose.

Features
--------
- **Few Questions**: package name, namespace and prefixes are derived
  from the project name
- **Scriptable**: every question can be answered with a flag
- **Framework Variants**: React or Vue admin screens
- **Clean Output**: git history and unused variants are removed

Quick Start
-----------
```bash
pip install pluginstrap

cd wp-content/plugins
pluginstrap plugin
```

Example
-------
>>> from pluginstrap import PLUGIN_QUESTIONS, resolve, rewrite
>>> answers = resolve(PLUGIN_QUESTIONS, {"projectName": "Acme Tools"})  # doctest: +SKIP
>>> rewrite(answers, Path("acme-tools"))  # doctest: +SKIP

Architecture
------------
- ``cli``: Typer-based command line interface
- ``models``: Pydantic models for questions, answers and settings
- ``questions``: The plugin question schema and derivations
- ``resolver``: Resolves questions into a confirmed answer set
- ``rewriter``: Rewrites the cloned boilerplate in place
- ``shell``: git and dependency installer commands
- ``pipeline``: Clone, rewrite, install, clean up

License
-------
MIT License.
"""

# =============================================================================
# Package Metadata
# =============================================================================
__version__ = "0.1.0"
__license__ = "MIT"

# =============================================================================
# Public API Exports
# =============================================================================

from pluginstrap.models import AnswerSet, Derivation, Question, QuestionKind, QuestionSchema, StrapSettings
from pluginstrap.pipeline import create_plugin
from pluginstrap.questions import PLUGIN_QUESTIONS
from pluginstrap.resolver import resolve
from pluginstrap.rewriter import rewrite


__all__ = [
    "PLUGIN_QUESTIONS",
    "AnswerSet",
    "Derivation",
    "Question",
    "QuestionKind",
    "QuestionSchema",
    "StrapSettings",
    "__version__",
    "create_plugin",
    "resolve",
    "rewrite",
]
