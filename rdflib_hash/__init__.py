"""Stable content digest of an RDF graph.

The graph is encoded into a canonical string that does not depend on triple
order or blank node labels, and the string is hashed with SHA-256.
"""
import hashlib
import logging

from rdflib import BNode, Graph, Literal, URIRef
from rdflib.term import Node

__version__ = "1.0.0"

log = logging.getLogger(__name__)

SUBJECT_START = "{"
SUBJECT_END = "}"
PROPERTY_START = "("
PROPERTY_END = ")"
OBJECT_START = "["
OBJECT_END = "]"
BLANK_NODE = "*"

HASH_ALGORITHM = "sha256"


class RdfHashError(Exception):
    pass


class HashAlgorithmUnavailable(RdfHashError):
    pass


def encode_literal(literal: Literal) -> str:
    # Datatype is not part of the encoding.
    if literal.language:
        return '"' + str(literal) + '"@' + literal.language
    return '"' + str(literal) + '"'


def _predicate_key(predicate: URIRef) -> tuple[str, str]:
    iri = str(predicate)
    return iri.lower(), iri


class SubjectEncoder():
    """Encodes the tree rooted at one top-level subject.

    Blank nodes are expanded the first time they are reached and encode as
    the empty string on any later visit, which also breaks cycles. The
    visited set lives on the instance, so a fresh encoder is needed for
    every top-level subject. A trial encoder sees everything its parent has
    visited but records its own visits separately.
    """

    def __init__(self, graph: Graph, parent: "SubjectEncoder | None" = None) -> None:
        self.graph = graph
        self.parent = parent
        self.visited: set[str] = set()

    def trial(self) -> "SubjectEncoder":
        return SubjectEncoder(self.graph, self)

    def seen(self, id_: str) -> bool:
        encoder: SubjectEncoder | None = self
        while encoder is not None:
            if id_ in encoder.visited:
                return True
            encoder = encoder.parent
        return False

    def encode_subject(self, node: Node) -> str:
        if isinstance(node, BNode):
            id_ = str(node)
            if self.seen(id_):
                return ""
            self.visited.add(id_)
            label = BLANK_NODE
        else:
            label = str(node)
        return label + self.encode_properties(node)

    def encode_properties(self, node: Node) -> str:
        result = []
        predicates = sorted(set(self.graph.predicates(node)), key=_predicate_key)
        for predicate in predicates:
            result.append(PROPERTY_START + str(predicate))
            objects = self._encode_objects(set(self.graph.objects(node, predicate)))
            for object_string in sorted(set(objects)):
                result.append(OBJECT_START + object_string + OBJECT_END)
            result.append(PROPERTY_END)
        return "".join(result)

    def encode_object(self, node: Node) -> str:
        if isinstance(node, Literal):
            return encode_literal(node)
        if isinstance(node, BNode):
            return self.encode_subject(node)
        return str(node)

    def _encode_objects(self, nodes: set[Node]) -> list[str]:
        bnodes = [n for n in nodes if isinstance(n, BNode)]
        encoded = [self.encode_object(n) for n in nodes if not isinstance(n, BNode)]
        if len(bnodes) < 2:
            return encoded + [self.encode_subject(n) for n in bnodes]

        # Which occurrence of a shared blank node gets expanded depends on
        # the order its parents are expanded in. Fix that order by what each
        # parent encodes to from the current state.
        trials = []
        for node in bnodes:
            trial = self.trial()
            trials.append((trial.encode_subject(node), trial.visited, node))
        trials.sort(key=lambda t: t[0])

        for trial_string, expanded, node in trials:
            # A trial that reached no node taken by an earlier sibling is
            # exactly what encoding from the current state gives.
            if expanded.isdisjoint(self.visited):
                self.visited |= expanded
                encoded.append(trial_string)
                continue
            actual = self.encode_subject(node)
            if actual != trial_string:
                log.debug("shared blank node below %s encoded as %r, alone as %r", node, actual, trial_string)
            encoded.append(actual)
        return encoded


def canonical_string(graph: Graph) -> str:
    subject_strings: set[str] = set()
    subjects = set(graph.subjects())
    for subject in subjects:
        subject_strings.add(SubjectEncoder(graph).encode_subject(subject))
    log.debug("encoded %d subjects into %d blocks", len(subjects), len(subject_strings))
    return "".join(SUBJECT_START + s + SUBJECT_END for s in sorted(subject_strings))


def hash_string(value: str) -> str:
    try:
        hash_ = hashlib.new(HASH_ALGORITHM)
    except ValueError as exc:
        raise HashAlgorithmUnavailable(f"hash algorithm {HASH_ALGORITHM} is not available") from exc
    hash_.update(value.encode('utf-8'))
    return hash_.hexdigest()


def graph_digest(graph: Graph) -> str:
    return hash_string(canonical_string(graph))


class HashedGraph:
    def __init__(self, graph: Graph) -> None:
        self.graph = graph
        self.canonical = canonical_string(graph)
        self.digest = hash_string(self.canonical)
        log.debug("digest of %d triples: %s", len(graph), self.digest)
