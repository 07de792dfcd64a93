"""
Tests for the XPath query facade.
"""

import pytest

from xmlcompose.core.exceptions import FormatError, NodeNotFoundError, XPathError
from xmlcompose.core.xml import parse_string
from xmlcompose.core.xml.query import (
    XmlQuery,
    query_all,
    query_int,
    query_single,
    query_string,
)


class TestQueryAll:
    """Tests for query_all."""

    def test_elements_in_document_order(self, sample_root):
        servers = query_all(sample_root, "//server")
        assert [server.get("name") for server in servers] == ["alpha", "beta"]

    def test_no_match(self, sample_root):
        assert query_all(sample_root, ".//nothing") == []

    def test_attribute_values(self, sample_root):
        assert query_all(sample_root, "//server/@name") == ["alpha", "beta"]

    def test_document_as_ancestor(self, sample_document):
        assert len(query_all(sample_document, "/config/server")) == 2

    def test_relative_to_ancestor(self, sample_root):
        """Relative expressions are evaluated from the given node."""
        beta = query_single(sample_root, "server[2]")
        assert [node.tag for node in query_all(beta, "*")] == ["port"]

    @pytest.mark.parametrize("xpath", ["//[", "//server[", "//x:server"])
    def test_invalid_expression(self, sample_root, xpath):
        with pytest.raises(XPathError):
            query_all(sample_root, xpath)

    @pytest.mark.parametrize("xpath", ["count(//server)", "string(//port)", "1 = 1"])
    def test_non_node_set_result(self, sample_root, xpath):
        with pytest.raises(XPathError):
            query_all(sample_root, xpath)


class TestDocumentQueries:
    """Relative expressions against a parsed document start at the document node."""

    @pytest.fixture
    def site(self):
        return parse_string("<site><name>x</name><alias>y</alias></site>")

    def test_relative_child_path(self, site):
        names = query_all(site, "site/name")
        assert [node.text for node in names] == ["x"]
        assert query_string(site, "site/name") == "x"

    def test_root_is_the_only_child(self, site):
        assert query_all(site, "name") == []
        assert [node.tag for node in query_all(site, "*")] == ["site"]

    def test_union_of_relative_paths(self, site):
        nodes = query_all(site, "site/alias | site/name")
        assert [node.tag for node in nodes] == ["name", "alias"]

    def test_absolute_and_predicate_paths_are_unchanged(self, site):
        assert len(query_all(site, "/site/name")) == 1
        assert query_string(site, "site/*[text() = 'y']") == "y"

    def test_document_prefixes(self):
        document = parse_string(
            '<manifest xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" '
            'xsi:noNamespaceSchemaLocation="manifest.xsd"><entry xsi:nil="true"/></manifest>'
        )

        assert query_string(document, "/manifest/@xsi:noNamespaceSchemaLocation") == "manifest.xsd"
        assert len(query_all(document, "//entry[@xsi:nil = 'true']")) == 1
        assert query_all(document.getroot(), "entry/@xsi:nil") == ["true"]


class TestQuerySingle:
    """Tests for query_single."""

    def test_first_match(self, sample_root):
        assert query_single(sample_root, "//server").get("name") == "alpha"

    def test_no_match(self, sample_root):
        assert query_single(sample_root, "//nothing") is None

    def test_invalid_expression(self, sample_root):
        with pytest.raises(XPathError):
            query_single(sample_root, "///")


class TestQueryString:
    """Tests for query_string."""

    def test_element_text(self, sample_root):
        assert query_string(sample_root, "//server[@name='alpha']/description") == "Primary server"

    def test_attribute(self, sample_root):
        assert query_string(sample_root, "//server/@name") == "alpha"

    def test_text_node(self, sample_root):
        assert query_string(sample_root, "//server[2]/port/text()") == "9090"

    def test_element_without_text(self, sample_root):
        """An empty element yields an empty string."""
        assert query_string(sample_root, "//empty") == ""

    def test_element_with_only_children(self, sample_root):
        """Normalized structural elements have no leading text."""
        assert query_string(sample_root, "/config") == ""

    def test_no_match(self, sample_root):
        with pytest.raises(NodeNotFoundError) as excinfo:
            query_string(sample_root, "//missing")
        assert excinfo.value.xpath == "//missing"

    def test_result_is_plain_string(self, sample_root):
        assert type(query_string(sample_root, "//server/@name")) is str


class TestQueryInt:
    """Tests for query_int."""

    def test_integer_value(self, sample_root):
        assert query_int(sample_root, "//server[@name='alpha']/port") == 8080

    def test_integer_attribute(self, sample_root):
        assert query_int(sample_root, "/config/@version") == 2

    def test_not_an_integer(self, sample_root):
        with pytest.raises(FormatError) as excinfo:
            query_int(sample_root, "//server[@name='alpha']/retries")
        assert excinfo.value.value == "abc"

    def test_no_match(self, sample_root):
        with pytest.raises(NodeNotFoundError):
            query_int(sample_root, "//server[@name='gamma']/port")

    @pytest.mark.parametrize(
        "value,expected",
        [("42", 42), ("-5", -5), ("+7", 7), ("007", 7), ("123456789012345", 123456789012345)],
    )
    def test_accepted_values(self, value, expected):
        root = parse_string(f"<n>{value}</n>").getroot()
        assert query_int(root, "/n") == expected

    @pytest.mark.parametrize("value", ["", " 42", "42 ", "4_2", "1.5", "0x10", "--1", "١٢"])
    def test_rejected_values(self, value):
        root = parse_string(f"<n>{value}</n>").getroot()
        with pytest.raises(FormatError):
            query_int(root, "/n")


class TestXmlQuery:
    """Tests for the XmlQuery helper."""

    def test_queries(self, sample_document):
        query = XmlQuery(sample_document)

        assert query.xml_root.tag == "config"
        assert query.count("//server") == 2
        assert query.exists("//empty")
        assert not query.exists("//missing")
        assert query.find("//server").get("name") == "alpha"
        assert len(query.find_all("//port")) == 2
        assert query.get_string("//server[2]/@name") == "beta"
        assert query.get_int("//server[2]/port") == 9090

    def test_element_ancestor(self, sample_root):
        query = XmlQuery(sample_root)
        assert query.xml_root is sample_root
