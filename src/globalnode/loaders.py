import inspect
from collections.abc import Callable
from typing import Any

from strawberry.dataloader import DataLoader

BatchLookup = Callable[[list[str]], Any]


def make_batch_loader(type_name: str, batch_lookup: BatchLookup) -> Callable[[list[str]], Any]:
    """Wrap a sync or async batch lookup into a DataLoader load function."""

    async def load(keys: list[str]) -> list[Any]:
        result = batch_lookup(keys)
        if inspect.isawaitable(result):
            result = await result
        objects = list(result)
        if len(objects) != len(keys):
            raise ValueError(
                f"Batch lookup for '{type_name}' returned {len(objects)} results "
                f"for {len(keys)} keys"
            )
        return objects

    return load


class NodeLoaders:
    """Per-request DataLoaders, one per type registered with a batch lookup.

    Create a fresh instance for every request; DataLoader caches are not
    meant to outlive one.
    """

    def __init__(self, batch_lookups: dict[str, BatchLookup]):
        self._loaders: dict[str, DataLoader[str, Any]] = {
            type_name: DataLoader(load_fn=make_batch_loader(type_name, batch_lookup))
            for type_name, batch_lookup in batch_lookups.items()
        }

    def load(self, type_name: str, local_id: str) -> Any:
        """Schedule a load and return its future."""
        return self._loaders[type_name].load(local_id)

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._loaders

    def __len__(self) -> int:
        return len(self._loaders)
