"""
Node registry: maps type names to lookups and resolves global IDs to objects.
"""

import asyncio
import inspect
import threading
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .codecs.base import GlobalIdCodec, ParsedGlobalId
from .codecs.factory import get_default_codec
from .context import ResolveContext
from .errors import (
    Cancelled,
    DuplicateTypeError,
    MalformedIdError,
    ObjectNotFoundError,
    RegistrationError,
    RegistrySealedError,
    UnknownTypeError,
    UnresolvedTypeError,
)
from .loaders import NodeLoaders
from .logging import get_logger

logger = get_logger(__name__)

Lookup = Callable[..., Any]
BatchLookup = Callable[[list[str]], Any]
LocalIdAccessor = Callable[[Any], Any]
TypeNameAccessor = Callable[[Any], str]

DUPLICATE_POLICIES = ("error", "replace")


def default_local_id_for(obj: Any) -> Any:
    """Read the local id from ``obj.id`` (or ``obj["id"]`` for mappings)."""
    if isinstance(obj, Mapping):
        return obj["id"]
    local_id = obj.id
    # A method named id (e.g. the Node interface resolver) is not a local id
    if callable(local_id):
        raise TypeError(
            f"{type(obj).__name__}.id is callable; register the type with local_id_for"
        )
    return local_id


@dataclass(frozen=True)
class NodeResolverEntry:
    """A registered node type and the functions used to fetch and identify it."""

    type_name: str
    lookup: Lookup
    model: type | None = None
    local_id_for: LocalIdAccessor | None = None
    batch_lookup: BatchLookup | None = None
    pass_context: bool = False

    def call(self, local_id: str, context: ResolveContext) -> Any:
        if self.pass_context:
            return self.lookup(local_id, context)
        return self.lookup(local_id)


class NodeRegistry:
    """
    Registry of node types for global object identification.

    Types are registered during startup while the registry is open. ``seal()``
    freezes the table; afterwards registration is rejected and resolution is a
    lock-free read, safe to share across threads and requests.

    Resolution is also permitted while open, so types can be exercised as soon
    as they are registered.
    """

    def __init__(
        self,
        codec: GlobalIdCodec | None = None,
        *,
        type_name_for: TypeNameAccessor | None = None,
        local_id_for: LocalIdAccessor | None = None,
        duplicate_policy: str | None = None,
        lookup_timeout: float | None = None,
    ):
        from .config import settings

        self.codec = codec or get_default_codec()
        self.duplicate_policy = duplicate_policy or settings.duplicate_policy
        if self.duplicate_policy not in DUPLICATE_POLICIES:
            raise ValueError(
                f"Unknown duplicate policy: {self.duplicate_policy}. "
                f"Expected one of: {', '.join(DUPLICATE_POLICIES)}"
            )
        self.lookup_timeout = (
            lookup_timeout if lookup_timeout is not None else settings.lookup_timeout
        )

        self._type_name_for = type_name_for
        self._local_id_for = local_id_for or default_local_id_for
        self._entries: Mapping[str, NodeResolverEntry] = {}
        self._models: Mapping[type, str] = {}
        self._lock = threading.Lock()
        self._sealed = False

    # Registration

    def register(
        self,
        type_name: str,
        lookup: Lookup,
        *,
        model: type | None = None,
        local_id_for: LocalIdAccessor | None = None,
        batch_lookup: BatchLookup | None = None,
        pass_context: bool = False,
    ) -> NodeResolverEntry:
        """
        Register a lookup for a node type.

        Args:
            type_name: Name encoded into global IDs for this type
            lookup: ``lookup(local_id)`` returning the object or None. May be async.
            model: Domain class whose instances belong to this type, used by type_name_for()
            local_id_for: Accessor for the local id, overriding the registry default
            batch_lookup: ``batch_lookup(local_ids)`` returning objects in key order,
                used by per-request loaders
            pass_context: Call ``lookup(local_id, context)`` with the ResolveContext

        Returns:
            The registered entry

        Raises:
            RegistrySealedError: If the registry has been sealed
            DuplicateTypeError: If the type (or model) is already registered and the
                duplicate policy is 'error'
            RegistrationError: If the type name cannot be encoded by the codec, or the
                model's id is a method and no local_id_for is given
        """
        if not isinstance(type_name, str) or not type_name:
            raise RegistrationError("Type name must be a non-empty string", type_name=type_name)
        if not callable(lookup):
            raise RegistrationError(
                f"Lookup for type '{type_name}' is not callable", type_name=type_name
            )
        try:
            self.codec.encode(type_name, "0")
        except ValueError as e:
            raise RegistrationError(
                f"Type name '{type_name}' cannot be encoded: {e}", type_name=type_name
            ) from e
        if (
            model is not None
            and local_id_for is None
            and self._local_id_for is default_local_id_for
            and callable(getattr(model, "id", None))
        ):
            raise RegistrationError(
                f"Model {model.__name__} defines id as a method; "
                f"pass local_id_for when registering type '{type_name}'",
                type_name=type_name,
            )

        entry = NodeResolverEntry(
            type_name=type_name,
            lookup=lookup,
            model=model,
            local_id_for=local_id_for,
            batch_lookup=batch_lookup,
            pass_context=pass_context,
        )

        with self._lock:
            if self._sealed:
                raise RegistrySealedError(
                    f"Cannot register type '{type_name}': registry is sealed",
                    type_name=type_name,
                )

            entries = dict(self._entries)
            models = dict(self._models)

            previous = entries.get(type_name)
            if previous is not None:
                if self.duplicate_policy == "error":
                    raise DuplicateTypeError(
                        f"Type '{type_name}' is already registered", type_name=type_name
                    )
                logger.warning("Replacing registered node type", type_name=type_name)
                if previous.model is not None:
                    models.pop(previous.model, None)

            if model is not None:
                owner = models.get(model)
                if owner is not None and owner != type_name:
                    if self.duplicate_policy == "error":
                        raise DuplicateTypeError(
                            f"Model {model.__name__} is already registered as '{owner}'",
                            type_name=type_name,
                        )
                    logger.warning(
                        "Reassigning model to another node type",
                        model=model.__name__,
                        previous_type=owner,
                        type_name=type_name,
                    )
                    entries.pop(owner, None)
                models[model] = type_name

            entries[type_name] = entry

            # Swap both tables at once so readers never see a half-applied registration
            self._entries = entries
            self._models = models

        logger.info(
            "Registered node type",
            type_name=type_name,
            model=model.__name__ if model is not None else None,
            batched=batch_lookup is not None,
        )
        return entry

    def node(self, type_name: str, **options: Any) -> Callable[[Lookup], Lookup]:
        """Decorator form of register().

        Example:
            @registry.node("Post", model=Post)
            async def load_post(local_id: str) -> Post | None:
                ...
        """

        def decorator(lookup: Lookup) -> Lookup:
            self.register(type_name, lookup, **options)
            return lookup

        return decorator

    def seal(self) -> None:
        """Freeze the registry. Idempotent; a sealed registry never reopens."""
        with self._lock:
            if self._sealed:
                return
            self._entries = MappingProxyType(dict(self._entries))
            self._models = MappingProxyType(dict(self._models))
            self._sealed = True
        logger.info("Node registry sealed", type_names=list(self._entries))

    @property
    def sealed(self) -> bool:
        return self._sealed

    # Introspection

    def get(self, type_name: str) -> NodeResolverEntry | None:
        return self._entries.get(type_name)

    def list_type_names(self) -> list[str]:
        return list(self._entries.keys())

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    # Encoding

    def type_name_for(self, obj: Any) -> str:
        """
        Determine the registered type name of a domain object.

        Uses the supplied type_name_for function when one was given, otherwise
        the model table built from register(model=...), checking the object's
        class and then its bases.

        Raises:
            UnresolvedTypeError: If no type name can be determined
        """
        if self._type_name_for is not None:
            try:
                type_name = self._type_name_for(obj)
            except UnresolvedTypeError:
                raise
            except Exception as e:
                raise UnresolvedTypeError(
                    f"Could not determine type name for {type(obj).__name__}: {e}", obj=obj
                ) from e
            if not type_name:
                raise UnresolvedTypeError(
                    f"No type name for object of type {type(obj).__name__}", obj=obj
                )
            return type_name

        models = self._models
        for cls in type(obj).__mro__:
            type_name = models.get(cls)
            if type_name is not None:
                return type_name

        raise UnresolvedTypeError(
            f"No node type registered for model {type(obj).__name__}", obj=obj
        )

    def id_for(self, obj: Any, type_name: str) -> str:
        """
        Produce the global ID of an object under the given type name.

        The type does not have to be registered. Errors raised by the local id
        accessor propagate unchanged.
        """
        entry = self._entries.get(type_name)
        accessor = (
            entry.local_id_for
            if entry is not None and entry.local_id_for is not None
            else self._local_id_for
        )
        return self.codec.encode(type_name, accessor(obj))

    def global_id(self, obj: Any) -> str:
        """Produce the global ID of an object, discovering its type name."""
        return self.id_for(obj, self.type_name_for(obj))

    # Decoding and resolution

    def decode(self, token: str) -> ParsedGlobalId:
        """Decode a token without checking that its type is registered."""
        return self.codec.decode(token)

    def parse(self, token: str, expected_type: str | None = None) -> ParsedGlobalId:
        """
        Decode a token and check its type is registered, without fetching the object.

        Args:
            token: Global ID
            expected_type: When given, the decoded type must equal it

        Raises:
            MalformedIdError: If the token cannot be decoded
            UnknownTypeError: If the type is not registered or not the expected one
        """
        parsed = self.codec.decode(token)
        if parsed.type_name not in self._entries:
            raise UnknownTypeError(
                f"Unknown node type '{parsed.type_name}'",
                token=token,
                type_name=parsed.type_name,
                local_id=parsed.local_id,
            )
        if expected_type is not None and parsed.type_name != expected_type:
            raise UnknownTypeError(
                f"Expected a '{expected_type}' ID, got '{parsed.type_name}'",
                token=token,
                type_name=parsed.type_name,
                local_id=parsed.local_id,
            )
        return parsed

    def create_loaders(self) -> NodeLoaders:
        """Create per-request DataLoaders for every type with a batch lookup."""
        return NodeLoaders(
            {
                type_name: entry.batch_lookup
                for type_name, entry in self._entries.items()
                if entry.batch_lookup is not None
            }
        )

    async def resolve(
        self,
        token: str,
        context: ResolveContext | None = None,
        *,
        loaders: NodeLoaders | None = None,
    ) -> Any:
        """
        Resolve a global ID to its object.

        Raises:
            MalformedIdError: If the token cannot be decoded
            UnknownTypeError: If the decoded type is not registered
            ObjectNotFoundError: If the lookup returns None
            Cancelled: If the context is cancelled or the lookup times out
        """
        try:
            parsed = self.parse(token)
        except (MalformedIdError, UnknownTypeError) as e:
            logger.info("Global ID rejected", error=str(e), **e.log_fields())
            raise

        type_name, local_id = parsed
        entry = self._entries[type_name]
        context = context or ResolveContext()
        fields = {"token": token, "type_name": type_name, "local_id": local_id}

        try:
            if context.cancelled:
                raise Cancelled("Resolution cancelled before lookup", **fields)

            if loaders is not None and type_name in loaders:
                # Shield the shared DataLoader future so a timeout here does not
                # cancel the same key for other callers in this request
                obj = await self._await_with_context(
                    asyncio.shield(loaders.load(type_name, local_id)), context, fields
                )
            else:
                obj = entry.call(local_id, context)
                if inspect.isawaitable(obj):
                    obj = await self._await_with_context(obj, context, fields)
        except asyncio.CancelledError as e:
            logger.warning("Node lookup cancelled", **fields)
            raise Cancelled("Node lookup was cancelled", **fields) from e
        except Cancelled as e:
            logger.warning("Node lookup cancelled", reason=str(e), **fields)
            raise

        if obj is None:
            logger.info("Node not found", **fields)
            raise ObjectNotFoundError(f"{type_name} '{local_id}' not found", **fields)

        return obj

    async def resolve_many(
        self,
        tokens: Iterable[str],
        context: ResolveContext | None = None,
        *,
        loaders: NodeLoaders | None = None,
    ) -> list[Any]:
        """
        Resolve several global IDs concurrently.

        Returns:
            One slot per input token, in input order. Each slot holds either the
            resolved object or the exception raised while resolving that token;
            a failure never aborts the other tokens.
        """
        tokens = list(tokens)

        async def resolve_one(token: str) -> Any:
            try:
                return await self.resolve(token, context, loaders=loaders)
            except Exception as e:
                return e

        results = list(await asyncio.gather(*(resolve_one(token) for token in tokens)))

        failed = sum(1 for result in results if isinstance(result, Exception))
        logger.debug("Resolved node batch", requested=len(tokens), failed=failed)
        return results

    async def _await_with_context(
        self,
        awaitable: Awaitable[Any],
        context: ResolveContext,
        fields: dict[str, Any],
    ) -> Any:
        """Await a lookup, racing it against the context's timeout and cancel event."""
        timeout = context.timeout if context.timeout is not None else self.lookup_timeout
        if timeout is None and context.cancel_event is None:
            return await awaitable

        task = asyncio.ensure_future(awaitable)
        waiters: set[asyncio.Future[Any]] = {task}
        cancel_waiter: asyncio.Future[Any] | None = None
        if context.cancel_event is not None:
            cancel_waiter = asyncio.ensure_future(context.cancel_event.wait())
            waiters.add(cancel_waiter)

        try:
            done, _ = await asyncio.wait(
                waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            if cancel_waiter is not None:
                cancel_waiter.cancel()

        if task in done:
            return task.result()

        task.cancel()
        if cancel_waiter is not None and cancel_waiter in done:
            raise Cancelled("Node lookup cancelled by the surrounding request", **fields)
        raise Cancelled(f"Node lookup timed out after {timeout}s", **fields)
