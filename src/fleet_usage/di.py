import functools
import inspect
from typing import Any, Callable, Dict, Type, get_type_hints


def _type_name(interface_type: Any) -> str:
    return getattr(interface_type, "__name__", repr(interface_type))


class Container:
    """A dependency injection container keyed by interface type."""

    def __init__(self):
        self._services: Dict[Type, Any] = {}
        self._factories: Dict[Type, Callable[[], Any]] = {}

    def register(self, interface_type: Type, implementation_instance: Any):
        """Register a service instance."""
        self._services[interface_type] = implementation_instance

    def register_factory(self, interface_type: Type, factory: Callable[[], Any]):
        """Register a factory; the first resolve caches the instance it builds."""
        self._factories[interface_type] = factory

    def resolve(self, interface_type: Type) -> Any:
        """Resolve a service by its interface type."""
        if interface_type in self._services:
            return self._services[interface_type]

        if interface_type in self._factories:
            instance = self._factories[interface_type]()
            self._services[interface_type] = instance
            return instance

        raise KeyError(f"No registration found for {_type_name(interface_type)}")

    def inject(self, func: Callable) -> Callable:
        """Decorator to inject dependencies based on type hints.

        Works on functions and on classes, whose ``__init__`` hints are used.
        """
        sig = inspect.signature(func)
        type_hints = get_type_hints(func.__init__ if inspect.isclass(func) else func)

        @functools.wraps(func, updated=())
        def wrapper(*args, **kwargs):
            bound = sig.bind_partial(*args, **kwargs)
            injected_kwargs = {}

            for param_name in sig.parameters:
                if param_name in bound.arguments:
                    continue  # Skip explicitly provided arguments

                if param_name in type_hints:
                    try:
                        injected_kwargs[param_name] = self.resolve(type_hints[param_name])
                    except KeyError:
                        pass  # Let Python report the missing argument

            return func(*args, **{**injected_kwargs, **kwargs})

        return wrapper
