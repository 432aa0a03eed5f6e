# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rule registry keyed by rule identifier."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from ..errors import DuplicateRuleIdError
from .base import CollectionRule, LineRule, Rule, TreeRule


class RuleRegistry(Mapping[str, Rule]):
    """Keyed collection of rule instances.

    ``RuleRegistry`` behaves like a read-only mapping from rule id to
    :class:`Rule`, iterating in registration order, which is also the order in
    which the engine dispatches rules.
    """

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        """Initialise the registry, registering ``rules`` in order.

        Args:
            rules: Optional rules to register immediately.
        """

        self._rules: dict[str, Rule] = {}
        for rule in rules:
            self.register(rule)

    def register(self, rule: Rule) -> None:
        """Register ``rule`` enforcing uniqueness by id.

        Args:
            rule: Rule instance to insert.

        Raises:
            DuplicateRuleIdError: If a rule with the same id is already registered.
        """

        if rule.rule_id in self._rules:
            raise DuplicateRuleIdError(rule.rule_id)
        self._rules[rule.rule_id] = rule

    def get_rule(self, rule_id: str) -> Rule | None:
        """Return the rule registered as ``rule_id`` when present.

        Args:
            rule_id: Identifier to look up.

        Returns:
            Rule | None: Registered rule or ``None``.
        """

        return self._rules.get(rule_id)

    def rule_ids(self) -> tuple[str, ...]:
        return tuple(self._rules)

    def rules(self) -> tuple[Rule, ...]:
        return tuple(self._rules.values())

    def line_rules(self) -> tuple[LineRule, ...]:
        return tuple(rule for rule in self._rules.values() if isinstance(rule, LineRule))

    def tree_rules(self) -> tuple[TreeRule, ...]:
        return tuple(rule for rule in self._rules.values() if isinstance(rule, TreeRule))

    def document_rules(self) -> tuple[LineRule | TreeRule, ...]:
        """Return line and tree rules in registration order.

        Returns:
            tuple[LineRule | TreeRule, ...]: Rules run once per document.
        """

        return tuple(rule for rule in self._rules.values() if isinstance(rule, (LineRule, TreeRule)))

    def collection_rules(self) -> tuple[CollectionRule, ...]:
        return tuple(rule for rule in self._rules.values() if isinstance(rule, CollectionRule))

    def copy(self) -> RuleRegistry:
        """Return a shallow copy sharing the same rule instances.

        Returns:
            RuleRegistry: Independent registry with identical contents.
        """

        return RuleRegistry(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __getitem__(self, rule_id: str) -> Rule:
        """Return the rule identified by ``rule_id``.

        Args:
            rule_id: Rule identifier.

        Returns:
            Rule: Registered rule.

        Raises:
            KeyError: If ``rule_id`` is not registered.
        """

        return self._rules[rule_id]


__all__ = ["RuleRegistry"]
