# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Rule providers and the plugin registry that assembles them.

Providers contribute a family of rules. The :class:`PluginRegistry` keeps
providers in registration order, rejects colliding identifiers, and builds
rule registries and engines from them. Third-party providers are discovered
through the ``mdqa.rule_providers`` entry-point group.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from importlib import metadata
from importlib.metadata import EntryPoint, EntryPoints
from typing import TYPE_CHECKING, TypeAlias, cast

from .config import Config
from .errors import DuplicateRuleIdError, PluginError
from .rules import RuleRegistry

if TYPE_CHECKING:
    from .engine import LintEngine

LOGGER = logging.getLogger(__name__)

RULE_PROVIDER_GROUP = "mdqa.rule_providers"


class RuleProvider(ABC):
    """Family of rules registered together."""

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Return the unique identifier of the provider."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Return a one-line description of the provider."""

    @property
    def version(self) -> str:
        return "0.1.0"

    @abstractmethod
    def register_rules(self, registry: RuleRegistry, config: Config | None = None) -> None:
        """Register every rule of the provider into ``registry``.

        Args:
            registry: Registry receiving the rules.
            config: Configuration whose per-rule tables parameterise the rules.
        """

    def rule_ids(self) -> tuple[str, ...]:
        """Return the ids of the rules this provider registers.

        Returns:
            tuple[str, ...]: Rule identifiers in registration order.
        """

        registry = RuleRegistry()
        self.register_rules(registry)
        return registry.rule_ids()

    def initialize(self) -> None:
        """Hook run once when the provider is registered."""


@dataclass(frozen=True, slots=True)
class ProviderInfo:
    """Summary of a registered provider for listings."""

    provider_id: str
    description: str
    version: str
    rule_ids: tuple[str, ...]


class PluginRegistry:
    """Ordered set of rule providers with collision checks."""

    def __init__(self) -> None:
        self._providers: dict[str, RuleProvider] = {}
        self._rule_owners: dict[str, str] = {}

    @classmethod
    def with_default_providers(cls, *, include_plugins: bool = False) -> PluginRegistry:
        """Return a registry holding the built-in providers.

        Args:
            include_plugins: Also register providers discovered via entry points.

        Returns:
            PluginRegistry: Populated registry.
        """

        from .rulesets import builtin_providers

        registry = cls()
        for provider in builtin_providers():
            registry.register_provider(provider)
        if include_plugins:
            for provider in load_provider_plugins():
                registry.register_provider(provider)
        return registry

    def register_provider(self, provider: RuleProvider) -> None:
        """Register ``provider`` after checking its identifiers.

        Args:
            provider: Provider to add.

        Raises:
            PluginError: If a provider with the same id is registered.
            DuplicateRuleIdError: If one of its rules collides with a registered rule.
        """

        if provider.provider_id in self._providers:
            raise PluginError(f"Provider '{provider.provider_id}' is already registered")
        trial = RuleRegistry()
        try:
            provider.register_rules(trial)
        except DuplicateRuleIdError as exc:
            raise DuplicateRuleIdError(exc.rule_id, provider_id=provider.provider_id) from exc
        for rule_id in trial.rule_ids():
            if rule_id in self._rule_owners:
                raise DuplicateRuleIdError(rule_id, provider_id=provider.provider_id)
        provider.initialize()
        self._providers[provider.provider_id] = provider
        for rule_id in trial.rule_ids():
            self._rule_owners[rule_id] = provider.provider_id
        LOGGER.debug("registered provider %s with %d rules", provider.provider_id, len(trial))

    def providers(self) -> tuple[RuleProvider, ...]:
        return tuple(self._providers.values())

    def get_provider(self, provider_id: str) -> RuleProvider | None:
        return self._providers.get(provider_id)

    def available_rule_ids(self) -> tuple[str, ...]:
        """Return every rule id contributed by registered providers.

        Returns:
            tuple[str, ...]: Rule identifiers in registration order.
        """

        return tuple(self._rule_owners)

    def provider_for_rule(self, rule_id: str) -> str | None:
        return self._rule_owners.get(rule_id)

    def provider_info(self) -> tuple[ProviderInfo, ...]:
        """Describe each registered provider.

        Returns:
            tuple[ProviderInfo, ...]: Provider summaries in registration order.
        """

        return tuple(
            ProviderInfo(
                provider_id=provider.provider_id,
                description=provider.description,
                version=provider.version,
                rule_ids=tuple(rule_id for rule_id, owner in self._rule_owners.items() if owner == provider.provider_id),
            )
            for provider in self._providers.values()
        )

    def create_rule_registry(self, config: Config | None = None) -> RuleRegistry:
        """Build a rule registry with every provider's rules.

        Args:
            config: Configuration used to parameterise rules.

        Returns:
            RuleRegistry: Merged registry.
        """

        registry = RuleRegistry()
        for provider in self._providers.values():
            provider.register_rules(registry, config)
        return registry

    def create_engine(self, config: Config | None = None) -> LintEngine:
        """Snapshot the registered rules and ``config`` into an engine.

        Args:
            config: Engine configuration; defaults apply when ``None``.

        Returns:
            LintEngine: Engine over the merged registry.
        """

        from .engine import LintEngine

        active = config or Config()
        return LintEngine(self.create_rule_registry(active), active)


_EntryPointSource: TypeAlias = EntryPoints | Mapping[str, Sequence[EntryPoint]]


def _select_entry_points(entries: _EntryPointSource, group: str) -> Iterable[EntryPoint]:
    """Return entry points exposed under ``group`` from ``entries``.

    Args:
        entries: Raw entry-point container returned by :func:`metadata.entry_points`.
        group: Name of the entry-point group to extract.

    Returns:
        Iterable[EntryPoint]: Entry points belonging to ``group``.
    """

    if isinstance(entries, Mapping):
        return entries.get(group, ())
    if hasattr(entries, "select"):
        return entries.select(group=group)
    return ()


def _load_provider(entry: EntryPoint) -> RuleProvider:
    target = entry.load()
    provider = target() if callable(target) else target
    if not isinstance(provider, RuleProvider):
        raise PluginError(f"Entry point '{entry.name}' did not produce a RuleProvider")
    return provider


def load_provider_plugins() -> tuple[RuleProvider, ...]:
    """Return rule providers discovered via the ``mdqa.rule_providers`` group.

    Entries may reference a provider class, a zero-argument factory, or a
    provider instance. Entries that fail to import are skipped with a warning.

    Returns:
        tuple[RuleProvider, ...]: Providers in discovery order.
    """

    entries = cast(_EntryPointSource, metadata.entry_points())
    providers: list[RuleProvider] = []
    for entry in _select_entry_points(entries, RULE_PROVIDER_GROUP):
        try:
            providers.append(_load_provider(entry))
        except (AttributeError, ImportError, ValueError, PluginError) as exc:
            LOGGER.warning("skipping rule provider plugin %s: %s", entry.name, exc)
    return tuple(providers)


__all__ = [
    "PluginRegistry",
    "ProviderInfo",
    "RULE_PROVIDER_GROUP",
    "RuleProvider",
    "load_provider_plugins",
]
