"""
pytest configuration and shared fixtures for pluginstrap tests.

Fixtures
--------
answers : AnswerSet
    A fully resolved answer set for "Acme Tools".

boilerplate : Path
    A miniature copy of the plugin boilerplate with every placeholder
    the rewriter knows about, plus vendor/node_modules trees that must
    stay untouched.
"""

from pathlib import Path

import pytest

from pluginstrap.models import AnswerSet


ENTRY_PHP = """<?php
/**
 * Plugin Name:       {{The Plugin Name}}
 * Plugin URI:        {{plugin_url}}
 * Description:       {{plugin_description}}
 * Version:           {{version}}
 * Author:            {{author_name}}
 * Author URI:        {{author_url}}
 * License:           {{author_license}}
 * Text Domain:       the-plugin-name-text-domain
 * Namespace:         ThePluginName
 * Text Domain:       second-header-line
 *
 * @package   {{the-plugin-name}}
 * @author    {{author_name}} <{{author_email}}>
 * @copyright {{author_copyright}}
 */

namespace ThePluginName;

define( '_PLUGIN_NAME_VERSION', '{{version}}' );

$plugin_name_instance = null;

function the_plugin_name_main_function() {
    return ThePluginName\\Bootstrap::instance();
}

add_action( 'plugin_name_init', 'plugin_name-slug' );
__( 'Hello', 'the-plugin-name-text-domain' );
"""

INSTALLER_PHP = """<?php
namespace ThePluginName\\Setup;

class Installer {
    const VERSION = _PLUGIN_NAME_VERSION;
}
"""

REST_PHP = """<?php
namespace ThePluginName\\Rest;

function plugin_name_rest_api_class_map() {
    return array();
}
"""

MENU_PHP = """<?php
namespace ThePluginName\\Admin;

// {variant} menu for {{{{The Plugin Name}}}}
class Menu {{}}
"""

LOAD_ASSETS_PHP = """<?php
namespace ThePluginName\\Assets;

// {variant} assets
class LoadAssets {{}}
"""

COMPOSER_JSON = (
    '{"name": "coderex/the-plugin-name", '
    '"autoload": {"psr-4": {"ThePluginName\\\\": "includes/"}}}'
)

PHPCS_XML = """<?xml version="1.0"?>
<ruleset name="The Plugin Name ruleset">
    <description>Generally-applicable sniffs for The Plugin Name.</description>
    <property name="prefixes" type="array">
        <element value="ThePluginName"/>
        <element value="_THE_PLUGIN_NAME"/>
        <element value="the_plugin_name"/>
    </property>
    <property name="text_domain" type="array">
        <element value="the-plugin-name-text-domain"/>
    </property>
</ruleset>
"""

POT = """# Copyright (C) The Plugin Name
#: the-plugin-name.php:12
msgid "Hello"
msgstr ""
"""

GRUNTFILE = """module.exports = function ( grunt ) {
    grunt.initConfig( {
        textdomain: 'the-plugin-name-text-domain',
        potFilename: 'the-plugin-name-text-domain.pot',
        package: '{{the-plugin-name}}',
        url: '{{plugin_url}}',
        email: '{{author_email}}',
    } );
};
"""

PHPUNIT_BOOTSTRAP = """<?php
require dirname( __DIR__, 2 ) . '/rex_plugin_boilerplate.php';
"""

# Must survive the rewrite byte for byte
VENDOR_PHP = """<?php
namespace ThePluginName\\Vendor;
// {{The Plugin Name}} plugin_name_ _PLUGIN_NAME_
"""


def write_tree(root: Path, files: dict[str, str]) -> None:
    """Write ``{relative path: content}`` under root."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


@pytest.fixture
def answers() -> AnswerSet:
    """Resolved answers for the 'Acme Tools' plugin."""
    return AnswerSet({
        "projectName": "Acme Tools",
        "description": "Handy tools for WordPress",
        "pluginVersion": "2.0.0",
        "license": "GPL-2.0",
        "author": "Jane Roe",
        "authorEmail": "jane@acme.dev",
        "url": "acme.dev",
        "framework": "react",
        "vendor": "jane-roe",
        "package": "acme-tools",
        "namespace": "AcmeTools",
        "prefix": "ACME_TOOLS",
        "lowerCasePrefix": "acme_tools",
    })


@pytest.fixture
def boilerplate(tmp_path: Path) -> Path:
    """
    Create a miniature plugin boilerplate.

    Returns
    -------
    Path
        Root of the boilerplate tree.
    """
    root = tmp_path / "acme-tools"
    write_tree(root, {
        "the-plugin-name.php": ENTRY_PHP,
        "includes/Setup/Installer.php": INSTALLER_PHP,
        "includes/Rest/Api.php": REST_PHP,
        "includes/Admin/Menu.php": MENU_PHP.format(variant="default"),
        "includes/Admin/Menu.react.php": MENU_PHP.format(variant="react"),
        "includes/Admin/Menu.vue.php": MENU_PHP.format(variant="vue"),
        "includes/Assets/LoadAssets.php": LOAD_ASSETS_PHP.format(variant="default"),
        "includes/Assets/LoadAssets-react.php": LOAD_ASSETS_PHP.format(variant="react"),
        "includes/Assets/LoadAssets-vue.php": LOAD_ASSETS_PHP.format(variant="vue"),
        "includes/Assets/Vite.php": "<?php\n// vite\n",
        "composer.json": COMPOSER_JSON,
        "phpcs.xml": PHPCS_XML,
        "languages/the-plugin-name-text-domain.pot": POT,
        "Gruntfile.js": GRUNTFILE,
        "tests/phpunit/bootstrap.php": PHPUNIT_BOOTSTRAP,
        "package.json": '{"name": "default"}',
        "package.json.react": '{"name": "react"}',
        "package.json.vue": '{"name": "vue"}',
        "vite.config.js": "export default {};\n",
        "webpack.config.js": "module.exports = {};\n",
        "src-react/index.jsx": "// react\n",
        "src-vue/main.js": "// vue\n",
        "vendor/acme/lib/Thing.php": VENDOR_PHP,
        "node_modules/pkg/index.php": VENDOR_PHP,
        "packages/shared/Shared.php": VENDOR_PHP,
    })
    return root


# =============================================================================
# pytest Configuration
# =============================================================================

def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests requiring external resources"
    )
