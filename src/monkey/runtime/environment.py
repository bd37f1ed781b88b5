"""
Lexical environments for the Monkey interpreter.

An Environment maps names to values and may chain to an outer one. Outer
environments are shared by reference: every call frame and every closure
created inside a scope points at the same parent object, and Python's
reference counting keeps that parent alive as long as any child does.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from .values import Value


@dataclass(eq=False)
class Environment:
    """
    A single scope of name bindings.

    Lookups walk outward through ``outer``; writes only ever touch the
    local mapping, so a nested ``let`` shadows rather than rebinds.
    """
    store: Dict[str, Value] = field(default_factory=dict)
    outer: Optional["Environment"] = None
    name: str = "global"  # For debugging

    def get(self, name: str) -> Optional[Value]:
        """Look up a binding here or in an outer scope; None when unbound."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def contains(self, name: str) -> bool:
        """Check whether a binding exists, even one bound to null."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.store:
                return True
            env = env.outer
        return False

    def __contains__(self, name: str) -> bool:
        return self.contains(name)

    def set(self, name: str, value: Value) -> Value:
        """Bind a name in this scope only."""
        self.store[name] = value
        return value

    def local_names(self) -> Iterator[str]:
        return iter(self.store)

    def depth(self) -> int:
        """Number of scopes between this one and the outermost."""
        count = 0
        env = self.outer
        while env is not None:
            count += 1
            env = env.outer
        return count


def new_enclosed_environment(outer: Environment, name: str = "call") -> Environment:
    """Create a child scope chained to ``outer``."""
    return Environment(outer=outer, name=name)
