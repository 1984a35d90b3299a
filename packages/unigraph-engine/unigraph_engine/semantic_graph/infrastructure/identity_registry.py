"""
Symbol Identity Registry

Deterministic ids for resolved symbols.

ID format: {containing_assembly}::{display_name}
- "Shop.Core::Shop.Core.Orders.OrderService"
- "Unknown::Global.Helper"   (no containing assembly)

The id depends only on the symbol, never on discovery order, so two runs
over the same input produce the same id set.
"""

from ..ports import SymbolHandle

UNKNOWN_ASSEMBLY = "Unknown"


def generate_symbol_id(symbol: SymbolHandle) -> str:
    return f"{symbol.containing_assembly or UNKNOWN_ASSEMBLY}::{symbol.display_name}"


class SymbolIdentityRegistry:
    """
    Symbol → id map shared by all discovery workers of one analysis.

    ``dict.setdefault`` is the only write, so concurrent callers registering
    the same symbol all observe the id stored by the first one.
    """

    def __init__(self):
        self._ids: dict[SymbolHandle, str] = {}
        self._symbols: dict[str, SymbolHandle] = {}

    def get_or_assign_id(self, symbol: SymbolHandle) -> str:
        symbol_id = self._ids.setdefault(symbol, generate_symbol_id(symbol))
        self._symbols.setdefault(symbol_id, symbol)
        return symbol_id

    def resolve(self, symbol: SymbolHandle | None) -> str | None:
        """Id of an already registered symbol, None otherwise."""
        if symbol is None:
            return None
        return self._ids.get(symbol)

    def symbol_for(self, symbol_id: str) -> SymbolHandle | None:
        return self._symbols.get(symbol_id)

    def __len__(self) -> int:
        return len(self._ids)
