"""Rooted tree of configurations stored as an index-addressed arena."""

from collections import namedtuple

import numpy as np


TreeSnapshot = namedtuple("TreeSnapshot", ["positions", "parents", "root", "frontier"])
TreeSnapshot.__doc__ = """Read-only copy of a tree for observers.

positions : (N, d) array, row i is node i
parents   : (N,) int array, -1 for the root
root      : index of the root (always 0)
frontier  : index of the most recently added node, None before the first add
"""


class Node:
    """A configuration plus index links into its owning tree."""

    __slots__ = ("index", "state", "parent", "children")

    def __init__(self, index, state, parent=None):
        self.index = index
        self.state = np.array(state, dtype=float)
        self.state.setflags(write=False)
        self.parent = parent
        self.children = []

    @property
    def is_root(self):
        return self.parent is None

    def __repr__(self):
        return f"Node(index={self.index}, state={self.state.tolist()}, parent={self.parent})"


class Tree:
    def __init__(self, root_state):
        root = Node(0, root_state)
        self.dim = root.state.shape[0]
        self.nodes = [root]
        self._frontier = None

        # row cache for vectorised nearest-neighbour queries
        self._positions = np.empty((16, self.dim), dtype=float)
        self._positions[0] = root.state

    @property
    def root(self):
        return self.nodes[0]

    def __len__(self):
        return len(self.nodes)

    def frontier(self):
        """Most recently added node; the root never counts."""
        return self._frontier

    def node(self, index):
        return self.nodes[index]

    def nearest_neighbor(self, state):
        """Linear scan; ties go to the earliest inserted node."""
        assert self.nodes, "tree is never empty"
        n = len(self.nodes)
        d2 = np.sum((self._positions[:n] - np.asarray(state, dtype=float)) ** 2, axis=1)
        return self.nodes[int(np.argmin(d2))]

    def add_node(self, state):
        """Attach a new node to its nearest neighbour and make it the frontier."""
        parent = self.nearest_neighbor(state)
        node = Node(len(self.nodes), state, parent=parent.index)
        parent.children.append(node.index)
        self.nodes.append(node)

        if node.index >= self._positions.shape[0]:
            grown = np.empty((2 * self._positions.shape[0], self.dim), dtype=float)
            grown[:node.index] = self._positions[:node.index]
            self._positions = grown
        self._positions[node.index] = node.state

        self._frontier = node
        return node

    def parent_of(self, node):
        if node.parent is None:
            return None
        return self.nodes[node.parent]

    def children_of(self, node):
        return [self.nodes[i] for i in node.children]

    def path_to_root(self, node):
        """States from node up to and including the root."""
        path = []
        cur = node
        while cur is not None:
            path.append(cur.state)
            cur = self.parent_of(cur)
        return np.array(path)

    def edges(self):
        """(parent_state, child_state) pairs in insertion order."""
        return [(self.nodes[n.parent].state, n.state) for n in self.nodes[1:]]

    def snapshot(self):
        n = len(self.nodes)
        positions = self._positions[:n].copy()
        parents = np.array([-1 if nd.parent is None else nd.parent for nd in self.nodes], dtype=int)
        positions.setflags(write=False)
        parents.setflags(write=False)
        frontier = None if self._frontier is None else self._frontier.index
        return TreeSnapshot(positions, parents, 0, frontier)
