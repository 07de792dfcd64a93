"""
Test configuration and fixtures for xmlcompose tests.

This module provides pytest fixtures for unit tests.
"""

import os
import sys
import pytest
from lxml import etree
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from xmlcompose.core.xml import parse_string

# Test fixtures path
FIXTURES_DIR = os.path.join(os.path.abspath(os.path.dirname(__file__)), 'fixtures')


@pytest.fixture
def fixture_path():
    """Return the path to the fixtures directory."""
    return Path(FIXTURES_DIR)


@pytest.fixture
def site_file(fixture_path):
    """Return the path to the sample site template."""
    return fixture_path / "site.xml"


@pytest.fixture
def module_file(fixture_path):
    """Return the path to the sample module template."""
    return fixture_path / "module.xml"


@pytest.fixture
def site_replacements():
    """Return replacements filling in the site and module templates."""
    return {
        "@SITE_NAME@": "shop",
        "@HOST@": "shop.example.org",
        "@MODULE@": "cache",
    }


@pytest.fixture
def sample_xml_string():
    """Return a sample configuration document with formatting whitespace."""
    return """
    <config version="2">
      <server name="alpha">
        <port>8080</port>
        <retries>abc</retries>
        <description>Primary server</description>
      </server>
      <server name="beta">
        <port>9090</port>
      </server>
      <empty/>
    </config>
    """


@pytest.fixture
def sample_document(sample_xml_string):
    """Return the sample configuration parsed and normalized."""
    return parse_string(sample_xml_string.strip())


@pytest.fixture
def sample_root(sample_document):
    """Return the root element of the sample configuration."""
    return sample_document.getroot()


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep user settings files and XMLCOMPOSE_* variables out of tests."""
    for name in list(os.environ):
        if name.startswith("XMLCOMPOSE_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)


def structure(node):
    """Return a comparable (tag, attributes, text, children) view of a tree."""
    if isinstance(node, etree._ElementTree):
        node = node.getroot()
    return (
        node.tag,
        dict(node.attrib),
        (node.text or "").strip(),
        [structure(child) for child in node if isinstance(child.tag, str)],
    )


@pytest.fixture
def structure_of():
    """Return the tree comparison helper."""
    return structure
