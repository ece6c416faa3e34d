"""Unified, immutable lookup of every rule and processor by name.

Keys are fully qualified names (``integer::between``, ``case::lower``,
``preTrim``) plus every alias. Registering any key twice is a configuration
error raised while the registry is built.
"""

import functools
import logging
import types
import typing

from . import errors as _errors
from . import processors as _processors
from . import rules as _rules

logger = logging.getLogger(__name__)

Family = _rules.BaseRule | _processors.Processor
"""Anything that can be registered: a rule family or a processor."""

Kind = typing.Literal["rule", "preprocessor", "postprocessor", "unknown"]


class RegistryEntry(typing.NamedTuple):
    """Metadata for one registered function.

    Attributes:
        key: Fully qualified name of the function
        type: Family or processor tag (``string``, ``case``)
        function_name: Canonical function name (``minLength``, ``default``)
        function: The RuleFunction or ProcessorFunc
        param_type: Parameter shape
        argument_type: Parameter coercion type
        owner: Family or processor that owns the function
        kind: Which variant the owner is
    """

    key: str
    type: str
    function_name: str
    function: _rules.RuleFunction | _processors.ProcessorFunc | None
    param_type: str
    argument_type: str
    owner: Family | None
    kind: Kind

    @property
    def is_rule(self) -> bool:
        return self.kind == "rule"

    @property
    def is_processor(self) -> bool:
        return self.kind in ("preprocessor", "postprocessor")

    @property
    def is_type_check(self) -> bool:
        """Whether this is the basic type check of its rule family."""
        return (
            self.is_rule
            and isinstance(self.owner, _rules.BaseRule)
            and self.owner.type_checker is self.function
        )


UNKNOWN = RegistryEntry("unknown", "string", "unknown", None, "none", "string", None, "unknown")
"""Placeholder returned by ``Registry.resolve`` for unregistered names."""


class Registry:
    """Read-only registry built once from a sequence of families.

    Args:
        families: Rule families and processors, registered in order

    Raises:
        DuplicateEntryError: If a name or alias is registered twice
    """

    def __init__(self, families: typing.Iterable[Family]) -> None:
        self.families: tuple[Family, ...] = tuple(families)
        entries: dict[str, RegistryEntry] = {}
        for family in self.families:
            for key, entry in _family_entries(family):
                if key in entries:
                    raise _errors.DuplicateEntryError(key, entry.key)
                entries[key] = entry
        self._entries = types.MappingProxyType(entries)
        logger.debug(
            "Built registry with %d families and %d keys", len(self.families), len(entries)
        )

    def __repr__(self) -> str:
        return f"Registry(families={len(self.families)}, keys={len(self._entries)})"

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> typing.Mapping[str, RegistryEntry]:
        return self._entries

    def resolve(self, name: str) -> RegistryEntry:
        """Find an entry by key or alias, or return the UNKNOWN placeholder."""
        return self._entries.get(name.strip(), UNKNOWN)

    def lookup(self, name: str) -> RegistryEntry:
        """Find an entry by key or alias.

        Raises:
            UnknownFunctionError: If nothing is registered under ``name``
        """
        entry = self.resolve(name)
        if entry is UNKNOWN:
            raise _errors.UnknownFunctionError(name, "registry")
        return entry

    def resolve_in_context(self, name: str, type: str | None) -> RegistryEntry:
        """Resolve ``name`` preferring the rule family ``type``.

        An unqualified name such as ``between`` after an ``integer`` type check
        resolves to ``integer::between`` before any global alias is tried.
        """
        if type is not None and "::" not in name:
            entry = self._entries.get(f"{type}::{name}")
            if entry is not None:
                return entry
        return self.resolve(name)

    def rule_family(self, type: str) -> _rules.BaseRule | None:
        for family in self.families:
            if isinstance(family, _rules.BaseRule) and family.type == type:
                return family
        return None

    def signatures(self) -> list[_rules.SignatureRecord]:
        """Documentation signatures of every family, in registration order."""
        return [family.generate_signatures() for family in self.families]


def _family_entries(family: Family) -> typing.Iterator[tuple[str, RegistryEntry]]:
    if family.kind == "rule":
        for function in family.functions.values():
            key = f"{family.type}::{function.name}"
            entry = RegistryEntry(
                key,
                family.type,
                function.name,
                function,
                function.param_type,
                function.argument_type,
                family,
                "rule",
            )
            yield key, entry
            for alias in function.aliases:
                yield alias, entry
    else:
        for function in family.functions.values():
            key = family.key(function.name)
            entry = RegistryEntry(
                key,
                family.type,
                function.name,
                function,
                function.param_type,
                function.argument_type,
                family,
                family.kind,
            )
            yield key, entry
            for alias in function.aliases:
                yield family.alias_key(alias), entry


def build_registry(extra_families: typing.Iterable[Family] = ()) -> Registry:
    """Build a registry of the built-in families plus ``extra_families``.

    Args:
        extra_families: Additional rule families or processors

    Returns:
        A new immutable Registry

    Raises:
        DuplicateEntryError: If an extra family reuses a registered name
    """
    return Registry(
        [*_rules.default_rules(), *_processors.default_processors(), *extra_families]
    )


@functools.lru_cache(maxsize=None)
def default_registry() -> Registry:
    """The built-in registry, built on first use and shared afterwards."""
    return build_registry()
