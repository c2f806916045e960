"""
Augmented AVL interval tree.

Nodes are ordered by (start, seq) and carry the maximum end of their subtree,
so overlap queries skip every subtree that ends before the query range.
The EventIndex keeps one node per resolved event.
"""

from typing import Any, Generic, Iterator, Optional, TypeVar

# T represents the totally ordered coordinate type (datetime for events)
T = TypeVar('T')


class IntervalNode(Generic[T]):
    """Tree node; also the handle returned by insert() for later removal."""
    __slots__ = ['start', 'end', 'data', 'seq', 'left', 'right', 'parent', 'max_end', 'height']

    def __init__(self, start: T, end: T, data: Any, seq: int):
        self.start: T = start
        self.end: T = end
        self.data: Any = data
        self.seq: int = seq
        self.left: Optional['IntervalNode[T]'] = None
        self.right: Optional['IntervalNode[T]'] = None
        self.parent: Optional['IntervalNode[T]'] = None
        self.max_end: T = end
        self.height: int = 1

    def key(self):
        return (self.start, self.seq)


class IntervalTree(Generic[T]):
    def __init__(self):
        self.root: Optional[IntervalNode[T]] = None
        self._size = 0
        self._next_seq = 0

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[IntervalNode[T]]:
        """In-order traversal (by start, then insertion order)."""
        stack = []
        node = self.root
        while stack or node:
            while node:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node
            node = node.right

    def clear(self):
        self.root = None
        self._size = 0

    # --- Internal Utilities ---

    @staticmethod
    def _height(node: Optional[IntervalNode[T]]) -> int:
        return node.height if node else 0

    def _update(self, node: IntervalNode[T]):
        node.height = 1 + max(self._height(node.left), self._height(node.right))
        m = node.end
        if node.left and node.left.max_end > m:
            m = node.left.max_end
        if node.right and node.right.max_end > m:
            m = node.right.max_end
        node.max_end = m

    def _replace_child(self, parent, old, new):
        if parent is None:
            self.root = new
        elif parent.left is old:
            parent.left = new
        else:
            parent.right = new
        if new:
            new.parent = parent

    def _rotate_left(self, x: IntervalNode[T]):
        y = x.right
        x.right = y.left
        if y.left:
            y.left.parent = x
        self._replace_child(x.parent, x, y)
        y.left = x
        x.parent = y
        self._update(x)
        self._update(y)

    def _rotate_right(self, y: IntervalNode[T]):
        x = y.left
        y.left = x.right
        if x.right:
            x.right.parent = y
        self._replace_child(y.parent, y, x)
        x.right = y
        y.parent = x
        self._update(y)
        self._update(x)

    def _rebalance(self, node: Optional[IntervalNode[T]]):
        """Walk up from node, restoring heights, max_end and AVL balance."""
        while node:
            self._update(node)
            balance = self._height(node.left) - self._height(node.right)
            if balance > 1:
                if self._height(node.left.left) < self._height(node.left.right):
                    self._rotate_left(node.left)
                self._rotate_right(node)
                node = node.parent
            elif balance < -1:
                if self._height(node.right.right) < self._height(node.right.left):
                    self._rotate_right(node.right)
                self._rotate_left(node)
                node = node.parent
            node = node.parent

    # --- Public API ---

    def insert(self, start: T, end: T, data: Any) -> IntervalNode[T]:
        node = IntervalNode(start, end, data, self._next_seq)
        self._next_seq += 1
        self._size += 1

        if not self.root:
            self.root = node
            return node

        parent = None
        curr = self.root
        while curr:
            parent = curr
            curr = curr.left if node.key() < curr.key() else curr.right

        node.parent = parent
        if node.key() < parent.key():
            parent.left = node
        else:
            parent.right = node

        self._rebalance(parent)
        return node

    def remove(self, node: IntervalNode[T]):
        """Unlink a node previously returned by insert()."""
        if node.left and node.right:
            # Splice out the in-order successor and move it into node's place
            succ = node.right
            while succ.left:
                succ = succ.left
            rebalance_from = succ.parent if succ.parent is not node else succ
            self._replace_child(succ.parent, succ, succ.right)
            succ.left, succ.right = node.left, node.right
            if succ.left:
                succ.left.parent = succ
            if succ.right:
                succ.right.parent = succ
            self._replace_child(node.parent, node, succ)
        else:
            rebalance_from = node.parent
            self._replace_child(node.parent, node, node.left or node.right)

        node.left = node.right = node.parent = None
        self._size -= 1
        self._rebalance(rebalance_from)

    # --- Queries ---

    def overlapping(self, start: T, end: T) -> list[IntervalNode[T]]:
        """Nodes whose [start, end] shares at least one point with [start, end]."""
        found = []

        def _search(node):
            if not node or start > node.max_end:
                return
            _search(node.left)
            if node.start <= end and node.end >= start:
                found.append(node)
            if node.start <= end:
                _search(node.right)

        _search(self.root)
        return found

    # --- Debug Tool ---

    def check_invariants(self):
        """Raises RuntimeError if ordering, AVL height or max_end is violated."""
        def _walk(node, low, high):
            if not node:
                return 0, None
            if (low is not None and node.key() < low) or (high is not None and node.key() > high):
                raise RuntimeError(f"Ordering violation at {node.start}")

            left_h, left_max = _walk(node.left, low, node.key())
            right_h, right_max = _walk(node.right, node.key(), high)

            if abs(left_h - right_h) > 1:
                raise RuntimeError(f"AVL violation at {node.start}")

            expected_max = max(m for m in (node.end, left_max, right_max) if m is not None)
            if node.max_end != expected_max:
                raise RuntimeError(f"max_end violation at {node.start}")
            if node.height != 1 + max(left_h, right_h):
                raise RuntimeError(f"Height violation at {node.start}")

            return 1 + max(left_h, right_h), expected_max

        _walk(self.root, None, None)
