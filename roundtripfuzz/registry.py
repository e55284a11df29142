"""Customizer registry: per-type overrides of structural generation."""

import importlib.util
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .errors import RegistryFrozenError


# Type alias for customizer functions
# Signature: (zero_value, generator) -> filled value
CustomizerFunc = Callable[[Any, Any], Any]


class CustomizerRegistry:
    """Registry mapping a type to the function that generates its values.

    Customizers encode domain constraints that structural randomness cannot
    express. A registry is populated once at setup and frozen before the
    first fuzz iteration; after that it is shared read-only.
    """

    def __init__(self, customizers: Optional[Mapping[Any, CustomizerFunc]] = None):
        self._customizers: Dict[Any, CustomizerFunc] = {}
        self._frozen = False
        if customizers:
            self.update(customizers)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, tp: Any, func: CustomizerFunc) -> None:
        """Register a customizer for a type, replacing any previous one."""
        if self._frozen:
            raise RegistryFrozenError(f"cannot register {tp!r}: registry is frozen")
        self._customizers[tp] = func

    def update(self, other: Union['CustomizerRegistry', Mapping[Any, CustomizerFunc]]) -> None:
        """Register every customizer from another registry or mapping."""
        items = other._customizers if isinstance(other, CustomizerRegistry) else other
        for tp, func in items.items():
            self.register(tp, func)

    def get(self, tp: Any) -> Optional[CustomizerFunc]:
        """Get the customizer for a type."""
        return self._customizers.get(tp)

    def list_types(self) -> List[Any]:
        """List all types with a registered customizer."""
        return list(self._customizers.keys())

    def freeze(self) -> 'CustomizerRegistry':
        self._frozen = True
        return self

    def customizer(self, tp: Any):
        """Decorator to register a customizer function.

        Usage:
            @registry.customizer(Quantity)
            def fuzz_quantity(q: Quantity, gen: Generator) -> Quantity:
                return Quantity(gen.get_int() % 1000)
        """
        def decorator(func: CustomizerFunc) -> CustomizerFunc:
            self.register(tp, func)
            return func
        return decorator

    def load_from_file(self, filepath: Path) -> int:
        """Load extra customizers from a Python file.

        The module sees this registry as ``registry`` and its decorator as
        ``register_customizer``.

        Returns: Number of customizers added.
        """
        if not filepath.exists():
            return 0

        spec = importlib.util.spec_from_file_location("custom_customizers", filepath)
        if spec is None or spec.loader is None:
            return 0

        module = importlib.util.module_from_spec(spec)
        module.registry = self
        module.register_customizer = self.customizer

        before = len(self._customizers)
        spec.loader.exec_module(module)
        return len(self._customizers) - before
