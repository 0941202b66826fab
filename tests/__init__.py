import os

from rdflib import Graph, BNode
from rdflib.util import guess_format

TESTDATA = os.environ.get(
    "RDF_HASH_TESTDATA", os.path.join(os.path.dirname(__file__), "testdata")
)


def testdata_path(name: str) -> str:
    return os.path.join(TESTDATA, name)


testdata_path.__test__ = False  # helper, not a test


def load_testdata(name: str, format: str | None = None, base: str = "http://example.org/test") -> Graph:
    g = Graph()
    g.parse(testdata_path(name), format=format or guess_format(name), publicID=base)
    return g


def read_testdata(name: str) -> str:
    with open(testdata_path(name), encoding="utf-8") as f:
        return f.read().rstrip("\n")


def graph_from_triples(*triples) -> Graph:
    g = Graph()
    for triple in triples:
        g.add(triple)
    return g


def relabel_bnodes(graph: Graph, prefix: str) -> Graph:
    """Copy ``graph`` giving every blank node a new identifier."""
    mapping: dict[BNode, BNode] = {}

    def relabel(node):
        if isinstance(node, BNode):
            if node not in mapping:
                mapping[node] = BNode(f"{prefix}{len(mapping)}")
            return mapping[node]
        return node

    # Reverse sorted order changes insertion order as well as labels.
    return graph_from_triples(*(tuple(map(relabel, t)) for t in sorted(graph, reverse=True)))
