"""Trees, nodes, edges and tree blocks.

A tree is a connected graph of nodes joined by directed edges
(source -> target). Tips are nodes with no outgoing edge; each tip must
reference exactly one OTU, internal nodes reference none.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field

from ..core.exceptions import InvalidStructure
from ..metadata import Annotation


@dataclass
class Node:
    """A tree node.

    Attributes:
        id: Node identifier.
        label: Display label; for tips given as input, the taxon label used
            to find the OTU.
        otu: OTU identifier (tips only).
        root: Whether this node is the root.
        meta: Node annotations.
    """

    id: str
    label: str | None = None
    otu: str | None = None
    root: bool = False
    meta: list[Annotation] = field(default_factory=list)


@dataclass
class Edge:
    """A directed edge with an optional non-negative length."""

    id: str
    source: str
    target: str
    length: float | None = None
    meta: list[Annotation] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.length is not None:
            self.length = float(self.length)


@dataclass
class Tree:
    """A rooted or unrooted phylogenetic tree."""

    id: str
    nodes: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    label: str | None = None
    meta: list[Annotation] = field(default_factory=list)

    @property
    def rooted(self) -> bool:
        return any(node.root for node in self.nodes)

    def get_node(self, node_id: str) -> Node | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def children(self) -> dict[str, list[str]]:
        """Map node id to the ids of its child nodes, in edge order."""
        result: dict[str, list[str]] = defaultdict(list)
        for edge in self.edges:
            result[edge.source].append(edge.target)
        return result

    def tips(self) -> list[Node]:
        """Get nodes without outgoing edges, in node order."""
        sources = {edge.source for edge in self.edges}
        return [node for node in self.nodes if node.id not in sources]

    def internal_nodes(self) -> list[Node]:
        sources = {edge.source for edge in self.edges}
        return [node for node in self.nodes if node.id in sources]

    def check_structure(self) -> None:
        """Check the tree is a well-formed connected graph.

        Does not check OTU references; see Document for that.

        Raises:
            InvalidStructure: Naming the offending tree, node or edge.
        """
        if not self.nodes:
            raise InvalidStructure(self.id, "tree has no nodes")

        node_ids: set[str] = set()
        for node in self.nodes:
            if node.id in node_ids:
                raise InvalidStructure(node.id, "duplicate node id")
            node_ids.add(node.id)

        edge_ids: set[str] = set()
        incoming: dict[str, int] = defaultdict(int)
        for edge in self.edges:
            if edge.id in edge_ids:
                raise InvalidStructure(edge.id, "duplicate edge id")
            edge_ids.add(edge.id)
            for end in (edge.source, edge.target):
                if end not in node_ids:
                    raise InvalidStructure(edge.id, f"edge endpoint '{end}' is not in tree")
            if edge.source == edge.target:
                raise InvalidStructure(edge.id, "edge connects a node to itself")
            if edge.length is not None and edge.length < 0:
                raise InvalidStructure(edge.id, f"negative edge length {edge.length}")
            incoming[edge.target] += 1

        for node_id, count in incoming.items():
            if count > 1:
                raise InvalidStructure(node_id, "node has more than one parent")

        if len(self.edges) != len(self.nodes) - 1 or not self._connected():
            raise InvalidStructure(self.id, "tree is not connected")

        roots = [node for node in self.nodes if node.root]
        if len(roots) > 1:
            raise InvalidStructure(roots[1].id, "tree has more than one root")

        tip_ids = {node.id for node in self.tips()}
        for node in self.nodes:
            if node.id not in tip_ids and node.otu is not None:
                raise InvalidStructure(node.id, "internal node references an OTU")

    def _connected(self) -> bool:
        neighbours: dict[str, list[str]] = defaultdict(list)
        for edge in self.edges:
            neighbours[edge.source].append(edge.target)
            neighbours[edge.target].append(edge.source)

        start = self.nodes[0].id
        seen = {start}
        stack = [start]
        while stack:
            for other in neighbours[stack.pop()]:
                if other not in seen:
                    seen.add(other)
                    stack.append(other)
        return len(seen) == len(self.nodes)


@dataclass
class TreeBlock:
    """An ordered group of trees, e.g. a posterior sample.

    Attributes:
        id: Block identifier.
        otus: OTU block the labelled tips were resolved against.
        trees: Trees in order.
    """

    id: str
    otus: str | None = None
    trees: list[Tree] = field(default_factory=list)
    label: str | None = None
    meta: list[Annotation] = field(default_factory=list)
