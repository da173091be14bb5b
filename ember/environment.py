from typing import Dict, Iterator, Optional

from ember.errors import UnboundIdentifier
from ember.types import Object


class Environment:
    """A scope mapping identifiers to runtime values, chained to its parent.

    Lookups walk from this scope towards the root and return the first
    binding found. A child never owns its parent: closures, bound methods
    and classes simply keep a reference to the environment they captured.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Object] = {}

    def __repr__(self) -> str:
        return f"<Environment {sorted(self.values)}>"

    def chain(self) -> Iterator['Environment']:
        env: Optional[Environment] = self
        while env is not None:
            yield env
            env = env.parent

    def child(self) -> 'Environment':
        return Environment(parent=self)

    def lookup(self, name: str) -> Optional[Object]:
        for env in self.chain():
            if name in env.values:
                return env.values[name]
        return None

    def get(self, name: str) -> Object:
        value = self.lookup(name)
        if value is None:
            raise UnboundIdentifier(f'identifier not found: {name}')
        return value

    def define(self, name: str, value: Object) -> Object:
        self.values[name] = value
        return value

    def assign(self, name: str, value: Object) -> Object:
        # Write to the closest scope already holding the name, otherwise
        # bind it here.
        for env in self.chain():
            if name in env.values:
                env.values[name] = value
                return value
        self.values[name] = value
        return value
