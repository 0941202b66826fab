"""
Load an RDF graph from a local file or an HTTP(S) URL.

The media type of the response selects the parser for URLs, the file
extension (or an explicit format) for files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from xml.sax import SAXParseException

import requests
from requests.auth import HTTPBasicAuth
from rdflib import Graph
from rdflib.exceptions import ParserError
from rdflib.plugin import PluginException
from rdflib.util import guess_format

from . import RdfHashError

log = logging.getLogger(__name__)

HTTP_TIMEOUT_S = 30.0

ACCEPT = ", ".join([
    "text/turtle",
    "application/n-triples",
    "application/rdf+xml",
    "application/ld+json",
    "text/n3;q=0.9",
    "application/trig;q=0.8",
    "application/n-quads;q=0.8",
])

_PARSE_ERRORS = (ParserError, SAXParseException, SyntaxError, ValueError)


class LoadError(RdfHashError):
    """Raised when no graph could be loaded from a source."""


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def media_type(content_type: str | None) -> str | None:
    """Return the bare media type of a Content-Type header value."""
    if not content_type:
        return None
    value = content_type.split(";", 1)[0].strip().lower()
    return value or None


def _parse(data: bytes, base_uri: str, format: str, source: str) -> Graph:
    graph = Graph()
    try:
        graph.parse(data=data, format=format, publicID=base_uri)
    except PluginException as exc:
        raise LoadError(f"{source}: unsupported format {format!r}") from exc
    except _PARSE_ERRORS as exc:
        raise LoadError(f"{source}: could not parse as {format}: {exc}") from exc
    log.debug("parsed %d triples from %s as %s", len(graph), source, format)
    return graph


def load_file(path: str, base_uri: str | None = None, format: str | None = None) -> Graph:
    file_path = Path(path)
    if not file_path.is_file():
        raise LoadError(f"{path}: no such file")
    format = format or guess_format(file_path.name)
    if format is None:
        raise LoadError(f"{path}: could not infer RDF format; provide a format")
    try:
        data = file_path.read_bytes()
    except OSError as exc:
        raise LoadError(f"{path}: {exc}") from exc
    return _parse(data, base_uri or file_path.resolve().as_uri(), format, path)


def load_url(
    url: str,
    base_uri: str | None = None,
    format: str | None = None,
    username: str | None = None,
    password: str | None = None,
    timeout: float = HTTP_TIMEOUT_S,
) -> Graph:
    auth = HTTPBasicAuth(username, password) if username is not None else None
    try:
        resp = requests.get(url, headers={"Accept": ACCEPT}, auth=auth, timeout=timeout)
    except requests.RequestException as exc:
        raise LoadError(f"{url}: {exc}") from exc
    if resp.status_code == 401:
        raise LoadError(f"{url}: not authorized (HTTP 401)")
    try:
        resp.raise_for_status()
    except requests.HTTPError as exc:
        raise LoadError(f"{url}: {exc}") from exc

    content_type = resp.headers.get("Content-Type")
    log.debug("fetched %s (%s, %d bytes)", url, content_type, len(resp.content))
    format = format or media_type(content_type)
    if format is None:
        raise LoadError(f"{url}: response has no content type")
    return _parse(resp.content, base_uri or url, format, url)


def load_graph(
    source: str,
    base_uri: str | None = None,
    format: str | None = None,
    username: str | None = None,
    password: str | None = None,
    timeout: float = HTTP_TIMEOUT_S,
) -> Graph:
    """
    Load the graph at ``source``, a file path or an ``http(s)`` URL.

    Credentials apply to URLs only and must be given together.
    Raises LoadError when nothing could be loaded.
    """
    if (username is None) != (password is None):
        raise ValueError("You must provide both --username and --password, or neither")
    if is_url(source):
        return load_url(source, base_uri, format, username, password, timeout)
    return load_file(source, base_uri, format)
