from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional


class EvictionPolicy(ABC):
    """Chooses which occupied slot gives way when a miss finds no empty slot."""

    @abstractmethod
    def select_victim(self, slots: list) -> Optional[int]:
        pass

    def use(self, slot: int):
        pass


class NoEvictionPolicy(EvictionPolicy):
    """A full cache refuses new lines."""

    def select_victim(self, slots: list) -> Optional[int]:
        return None


@dataclass
class DLLNode:
    slot: Optional[int]
    prev: "DLLNode" = field(default=None, repr=False, compare=False)
    next: "DLLNode" = field(default=None, repr=False, compare=False)

    def remove(self):
        self.prev.next = self.next
        self.next.prev = self.prev
        self.next = None
        self.prev = None


@dataclass
class DLL:
    head: DLLNode
    tail: DLLNode

    def __init__(self):
        self.head = DLLNode(None)
        self.tail = DLLNode(None)
        self.head.next = self.tail
        self.tail.prev = self.head

    def push_front(self, node: DLLNode):
        curr_next = self.head.next
        self.head.next = node
        node.prev = self.head
        curr_next.prev = node
        node.next = curr_next

    def back(self) -> Optional[DLLNode]:
        if self.tail.prev is self.head:
            return None
        return self.tail.prev

    def __str__(self):
        s = []
        itr = self.head.next
        while itr is not self.tail:
            s.append(str(itr.slot))
            itr = itr.next
        return ",".join(s)


@dataclass
class LRUEvictionPolicy(EvictionPolicy):
    """Evicts the least recently used slot. Most recent use sits at the front of the list."""
    slot_to_node: dict[int, DLLNode] = field(default_factory=dict)
    dll: DLL = field(default_factory=DLL)

    def use(self, slot: int):
        if slot in self.slot_to_node:
            node = self.slot_to_node[slot]
            node.remove()
            self.dll.push_front(node)
        else:
            node = DLLNode(slot)
            self.dll.push_front(node)
            self.slot_to_node[slot] = node

    def select_victim(self, slots: list) -> Optional[int]:
        last = self.dll.back()
        if last is None:
            return None
        # the cache refills the victim slot and calls use() on it
        return last.slot


EVICTION_POLICIES = {
    "none": NoEvictionPolicy,
    "lru": LRUEvictionPolicy,
}


def make_eviction_policy(name: str) -> EvictionPolicy:
    try:
        return EVICTION_POLICIES[name]()
    except KeyError:
        raise ValueError(f"Unknown eviction policy: {name}") from None
