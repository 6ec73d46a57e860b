"""Ephemeral dependency graph built from a task/edge snapshot.

Nothing here is cached: every call builds fresh adjacency maps from the
collections it is handed.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

import networkx as nx
import structlog

from .model import Task, TaskDependency

log = structlog.get_logger()


@dataclass
class DependencyGraph:
    # task id -> ids it depends on (prerequisites)
    forward: Dict[str, List[str]] = field(default_factory=dict)
    # task id -> ids that depend on it
    reverse: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def task_ids(self) -> List[str]:
        return list(self.forward)

    def edge_count(self) -> int:
        return sum(len(v) for v in self.forward.values())


def build_graph(tasks: Iterable[Task], dependencies: Iterable[TaskDependency]) -> DependencyGraph:
    """Build forward and reverse adjacency maps keyed by every task id.

    Edges that reference an unknown task are skipped and duplicate edges are
    collapsed; neighbour lists keep the order edges were first seen in.
    """
    g = DependencyGraph()
    for t in tasks:
        g.forward.setdefault(t.id, [])
        g.reverse.setdefault(t.id, [])
    dangling = 0
    for dep in dependencies:
        if dep.task_id not in g.forward or dep.depends_on_task_id not in g.forward:
            dangling += 1
            continue
        prereqs = g.forward[dep.task_id]
        if dep.depends_on_task_id in prereqs:
            continue
        prereqs.append(dep.depends_on_task_id)
        g.reverse[dep.depends_on_task_id].append(dep.task_id)
    if dangling:
        log.warning("dangling_dependencies_ignored", count=dangling)
    return g


def to_networkx(graph: DependencyGraph) -> nx.DiGraph:
    """Edges point from prerequisite to dependent."""
    G = nx.DiGraph()
    G.add_nodes_from(graph.forward)
    for tid, prereqs in graph.forward.items():
        for pr in prereqs:
            G.add_edge(pr, tid)
    return G


def find_cycle(tasks: Iterable[Task], dependencies: Iterable[TaskDependency]) -> List[str]:
    """Return one cycle as a path of task ids in dependency order, or [] if acyclic.

    The path starts and ends on the same id, e.g. ``['A', 'B', 'C', 'A']``
    where A depends on B, B on C and C on A.
    """
    G = to_networkx(build_graph(tasks, dependencies)).reverse(copy=False)
    try:
        edges = nx.find_cycle(G)
    except nx.NetworkXNoCycle:
        return []
    return [u for u, _ in edges] + [edges[0][0]]
