"""
XML package for xmlcompose.

This package provides the document pipeline: loading with literal
replacements, whitespace normalization, XPath queries, node composition and
formatted serialization.

The package is organized into several modules:
- loader: Reading, decoding, substituting and parsing sources
- normalizer: Removal of formatting whitespace
- query: XPath query functions and the XmlQuery helper
- composer: Importing nodes and whole documents into other documents
- serializer: Rendering and saving documents

Most common functionality is available from the package directly.
"""

from .loader import (
    make_parser,
    read_source,
    strip_default_namespace,
    parse,
    parse_string,
)

from .normalizer import (
    clean,
    is_blank,
)

from .query import (
    query_all,
    query_single,
    query_string,
    query_int,
    node_text,
    XmlQuery,
)

from .composer import (
    import_node,
    append,
    append_from_file,
)

from .serializer import (
    render,
    save,
)

# Explicitly define the public API
__all__ = [
    # Loader exports
    'make_parser',
    'read_source',
    'strip_default_namespace',
    'parse',
    'parse_string',

    # Normalizer exports
    'clean',
    'is_blank',

    # Query exports
    'query_all',
    'query_single',
    'query_string',
    'query_int',
    'node_text',
    'XmlQuery',

    # Composer exports
    'import_node',
    'append',
    'append_from_file',

    # Serializer exports
    'render',
    'save',
]
