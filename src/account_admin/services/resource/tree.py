# src/account_admin/services/resource/tree.py

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Protocol

class ResourceRecord(Protocol):
    """The attributes the tree builder reads; satisfied by the `Resource` ORM model."""
    id: int
    pid: Optional[int]
    full_name: str
    is_directory: bool

@dataclass
class ResourceNode:
    record: Any
    children: List["ResourceNode"] = field(default_factory=list)

    @property
    def id(self) -> int:
        return self.record.id

    @property
    def full_name(self) -> str:
        return self.record.full_name

    @property
    def is_directory(self) -> bool:
        return bool(self.record.is_directory)

    def walk(self) -> Iterator["ResourceNode"]:
        """Depth-first, pre-order: the node itself, then each child subtree in order."""
        yield self
        for child in self.children:
            yield from child.walk()

def build_resource_forest(records: Iterable[ResourceRecord]) -> List[ResourceNode]:
    """
    Reconstructs the resource forest of one owner and one category from flat records.

    A record whose `pid` does not match any record in the input becomes a root.
    Children keep the relative order they had in the input, and so do roots.

    Precondition: ids are unique within `records`. A repeated id is a caller
    error and raises `ValueError`.
    """
    nodes: List[ResourceNode] = []
    by_id: Dict[int, ResourceNode] = {}
    for record in records:
        if record.id in by_id:
            raise ValueError(f"Duplicate resource id {record.id} in tree input.")
        node = ResourceNode(record=record)
        by_id[record.id] = node
        nodes.append(node)

    roots: List[ResourceNode] = []
    for node in nodes:
        parent = by_id.get(node.record.pid) if node.record.pid is not None else None
        if parent is None or parent is node:
            roots.append(node)
        else:
            parent.children.append(node)
    return roots

def iter_forest(forest: Iterable[ResourceNode]) -> Iterator[ResourceNode]:
    for root in forest:
        yield from root.walk()
