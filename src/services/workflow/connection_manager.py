"""Builds id-keyed connection maps between generated nodes."""

from typing import Dict, List

from schemas.workflow import ConnectionTarget, GeneratedNode

Connections = Dict[str, List[List[ConnectionTarget]]]


class ConnectionManager:
    """Wires generated nodes together."""

    @staticmethod
    def linear(nodes: List[GeneratedNode]) -> Connections:
        """node[i] -> node[i + 1] on output 0."""
        connections: Connections = {}
        for source, target in zip(nodes, nodes[1:]):
            connections[source.id] = [[ConnectionTarget(node_id=target.id, index=0)]]
        return connections

    @staticmethod
    def conditional(nodes: List[GeneratedNode]) -> Connections:
        """node0 -> node1, then node1 fans out: output 0 -> node2, output 1 -> node3."""
        connections: Connections = {}
        if len(nodes) >= 2:
            connections[nodes[0].id] = [[ConnectionTarget(node_id=nodes[1].id, index=0)]]
        if len(nodes) >= 4:
            connections[nodes[1].id] = [
                [ConnectionTarget(node_id=nodes[2].id, index=0)],
                [ConnectionTarget(node_id=nodes[3].id, index=0)],
            ]
        return connections
