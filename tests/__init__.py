"""
pluginstrap test suite
======================

Test Modules
------------
- test_models.py: Question, schema, answer set and settings models
- test_questions.py: The plugin schema and derivation transforms
- test_resolver.py: Question resolution and the confirmation loop
- test_rewriter.py: Substitution rules, renames and framework variants
- test_shell.py: git and installer wrappers
- test_pipeline.py: Plugin creation steps
- test_cli.py: Command-line interface
- test_logging_config.py: Logging setup

Running Tests
-------------
    # Run all tests
    pytest

    # Run specific module
    pytest tests/test_rewriter.py

    # Run specific test class
    pytest tests/test_rewriter.py::TestRewrite
"""
