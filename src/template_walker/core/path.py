"""
Traversal Paths and Mutation Slots.

A ``TemplatePath`` is the handle a structural handler receives. It binds a node
to its parent chain and to two capabilities, ``replace`` and ``prune``, scoped
to the slot the node occupies:

- ``CollectionSlot``: an index inside a list field (``children``,
  ``attributes``, ``value``...). Pruning is deferred: the node is recorded in a
  removal set shared by all siblings and the list is rewritten once the whole
  collection has been visited.
- ``FieldSlot``: a single optional node field (``else_``, an await block's
  ``then``...). Pruning clears the field at once.
- No slot: the synthetic root. Both capabilities raise ``UnsupportedRootOperation``.

Paths only exist while the engine is positioned on their node. Once released,
their capabilities raise ``StalePathOperation``.
"""

from typing import Dict, List, Optional

from template_walker.core.tracer import TraceLogger
from template_walker.exceptions import StalePathOperation, UnsupportedRootOperation
from template_walker.nodes import TemplateNode


class CollectionSlot:
  """
  A position inside an ordered list of nodes.

  Attributes:
      collection (List[TemplateNode]): The list owning the position.
      index (int): Position of the node in ``collection``.
      removals (Dict[int, TemplateNode]): Removal set shared by every slot of the
          same collection, keyed by object identity.
      current (TemplateNode): The node presently occupying the slot.
  """

  def __init__(self, collection: List[TemplateNode], index: int, removals: Dict[int, TemplateNode]):
    self.collection = collection
    self.index = index
    self.removals = removals
    self.current = collection[index]

  def replace(self, node: TemplateNode) -> None:
    self.collection[self.index] = node
    self.current = node

  def prune(self) -> None:
    # Holding the node keeps its id from being reused before the rewrite.
    self.removals[id(self.current)] = self.current


class FieldSlot:
  """
  A single optional node-valued attribute on its owner (``else_``, ``then``...).
  """

  def __init__(self, owner: TemplateNode, field_name: str):
    self.owner = owner
    self.field_name = field_name

  def replace(self, node: TemplateNode) -> None:
    setattr(self.owner, self.field_name, node)

  def prune(self) -> None:
    setattr(self.owner, self.field_name, None)


class TemplatePath:
  """
  Transient handle pairing a structural node with its parent chain.

  ``parent`` and ``parent_path`` name the same value: the path of the node
  that owns the slot this node sits in (``None`` at the root).
  """

  def __init__(
    self,
    node: TemplateNode,
    parent: Optional["TemplatePath"] = None,
    slot: Optional[object] = None,
    tracer: Optional[TraceLogger] = None,
  ):
    """
    Initializes the path.

    Args:
        node: The node this path points at. Never copied.
        parent: The owning path, or None for the root.
        slot: The CollectionSlot / FieldSlot the node occupies, or None for the root.
        tracer: Optional trace recorder for mutation events.
    """
    self.node = node
    self.parent = parent
    self._slot = slot
    self._tracer = tracer
    self._released = False

  @classmethod
  def root(cls, node: TemplateNode, tracer: Optional[TraceLogger] = None) -> "TemplatePath":
    """Builds the synthetic root path for the markup region."""
    return cls(node, parent=None, slot=None, tracer=tracer)

  @property
  def parent_path(self) -> Optional["TemplatePath"]:
    """Alias of ``parent``."""
    return self.parent

  @property
  def is_root(self) -> bool:
    return self._slot is None

  @property
  def depth(self) -> int:
    depth = 0
    current = self.parent
    while current is not None:
      depth += 1
      current = current.parent
    return depth

  def replace(self, node: TemplateNode) -> None:
    """
    Overwrites the reference held in this path's slot with ``node``.

    ``self.node`` keeps pointing at the old node, so a following
    ``traverse(path)`` still descends into the old subtree. The new node is not
    visited by the current pass.

    Args:
        node: The replacement node.

    Raises:
        UnsupportedRootOperation: On the root path.
        StalePathOperation: If the engine already left this node.
    """
    self._check("replace")
    old_kind = self._slot_kind()
    self._slot.replace(node)
    if self._tracer:
      self._tracer.log_replace(old_kind, getattr(node, "type", type(node).__name__))

  def prune(self) -> None:
    """
    Marks the node for removal.

    Inside a collection the removal is deferred until every sibling has been
    visited; the node's own descent still runs to completion. In the ``else_``
    slot the field is cleared immediately.

    Raises:
        UnsupportedRootOperation: On the root path.
        StalePathOperation: If the engine already left this node.
    """
    self._check("prune")
    kind = self._slot_kind()
    self._slot.prune()
    if self._tracer:
      self._tracer.log_prune(kind)

  def release(self) -> None:
    """Revokes the capabilities once the engine leaves the node."""
    self._released = True

  def _check(self, operation: str) -> None:
    if self._slot is None:
      raise UnsupportedRootOperation(operation)
    if self._released:
      raise StalePathOperation(operation, getattr(self.node, "type", None))

  def _slot_kind(self) -> str:
    current = getattr(self._slot, "current", self.node)
    return getattr(current, "type", type(current).__name__)

  def __repr__(self) -> str:
    return f"TemplatePath({getattr(self.node, 'type', type(self.node).__name__)}, depth={self.depth})"
