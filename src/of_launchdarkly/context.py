"""Conversion of OpenFeature evaluation contexts into LaunchDarkly contexts."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ldclient.context import Context, ContextBuilder
from openfeature.evaluation_context import EvaluationContext

from of_launchdarkly import values
from of_launchdarkly.errors import ValueConversionError

KIND_ATTRIBUTE = "kind"
KEY_ATTRIBUTE = "key"
TARGETING_KEY_ATTRIBUTE = "targetingKey"
NAME_ATTRIBUTE = "name"
ANONYMOUS_ATTRIBUTE = "anonymous"
PRIVATE_ATTRIBUTES_ATTRIBUTE = "privateAttributes"

_KEY_ATTRIBUTES = frozenset({KIND_ATTRIBUTE, KEY_ATTRIBUTE, TARGETING_KEY_ATTRIBUTE})

MISSING_KEY_MESSAGE = (
    "The EvaluationContext must contain either a 'targetingKey' or a 'key' and the type "
    "must be a string."
)
DUPLICATE_KEY_MESSAGE = (
    "The EvaluationContext contained both a 'targetingKey' and a 'key' attribute. The 'key' "
    "attribute will be discarded."
)
INVALID_KIND_MESSAGE = (
    "The EvaluationContext contained an invalid 'kind' attribute; the type must be a string. "
    "The context will be treated as a 'user' context."
)


def invalid_type_message(attribute: str, type_name: str) -> str:
    return f"The attribute '{attribute}' must be of type {type_name}"


class ContextConverter:
    """Builds :class:`ldclient.Context` objects from OpenFeature evaluation contexts.

    Malformed input never raises. Each problem is logged and the conversion
    carries on with whatever can still be used, so one bad attribute does not
    abort an evaluation. A context without a usable key is built with an
    empty key; LaunchDarkly rejects it at evaluation time and the resolution
    reports ``TARGETING_KEY_MISSING``.
    """

    def __init__(self, logger: Any) -> None:
        self._log = logger

    def to_ld_context(self, evaluation_context: EvaluationContext | None) -> Context:
        if evaluation_context is None:
            evaluation_context = EvaluationContext()
        attributes: Mapping[str, Any] = evaluation_context.attributes or {}

        kind = attributes.get(KIND_ATTRIBUTE)
        if kind is not None and not isinstance(kind, str):
            self._log.warning(INVALID_KIND_MESSAGE)
            kind = None
        if kind == Context.MULTI_KIND:
            return self._build_multi_context(attributes)

        targeting_key = evaluation_context.targeting_key
        if targeting_key is None:
            targeting_key = attributes.get(TARGETING_KEY_ATTRIBUTE)
        return self._build_single_context(attributes, kind or Context.DEFAULT_KIND, targeting_key)

    # ------------------------------------------------------------------
    # Single and multi-kind builders
    # ------------------------------------------------------------------

    def _build_multi_context(self, attributes: Mapping[str, Any]) -> Context:
        builder = Context.multi_builder()
        count = 0
        for kind, value in attributes.items():
            if kind == KIND_ATTRIBUTE:
                continue
            if not isinstance(value, Mapping):
                self._log.warning(
                    "Top level attributes in a multi-kind context should be Structure types.",
                    attribute=kind,
                )
                continue
            builder.add(
                self._build_single_context(value, kind, value.get(TARGETING_KEY_ATTRIBUTE))
            )
            count += 1

        if count == 0:
            self._log.error("A multi-kind context must contain at least one valid single-kind context.")
        return builder.build()

    def _build_single_context(
        self,
        attributes: Mapping[str, Any],
        kind: str,
        targeting_key: Any,
    ) -> Context:
        key = self._resolve_key(targeting_key, attributes.get(KEY_ATTRIBUTE))
        builder = Context.builder(key if key is not None else "").kind(kind)

        for name, value in attributes.items():
            if name in _KEY_ATTRIBUTES:
                continue
            if name == NAME_ATTRIBUTE:
                self._set_name(builder, value)
            elif name == ANONYMOUS_ATTRIBUTE:
                self._set_anonymous(builder, value)
            elif name == PRIVATE_ATTRIBUTES_ATTRIBUTE:
                self._set_private(builder, value)
            else:
                self._set_custom(builder, name, value)

        return builder.build()

    def _resolve_key(self, targeting_key: Any, key: Any) -> str | None:
        if targeting_key is not None and key is not None:
            self._log.warning(DUPLICATE_KEY_MESSAGE)
        final_key = targeting_key if targeting_key is not None else key
        if not isinstance(final_key, str):
            self._log.error(MISSING_KEY_MESSAGE)
            return None
        return final_key

    # ------------------------------------------------------------------
    # Attribute setters
    # ------------------------------------------------------------------

    def _set_name(self, builder: ContextBuilder, value: Any) -> None:
        if value is None:
            return
        if isinstance(value, str):
            builder.name(value)
            return
        self._log.error(invalid_type_message(NAME_ATTRIBUTE, "string"))

    def _set_anonymous(self, builder: ContextBuilder, value: Any) -> None:
        if value is None:
            return
        if isinstance(value, bool):
            builder.anonymous(value)
            return
        self._log.error(invalid_type_message(ANONYMOUS_ATTRIBUTE, "bool"))

    def _set_private(self, builder: ContextBuilder, value: Any) -> None:
        if value is None:
            return
        if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
            builder.private(*value)
            return
        self._log.error(invalid_type_message(PRIVATE_ATTRIBUTES_ATTRIBUTE, "list of strings"))

    def _set_custom(self, builder: ContextBuilder, name: str, value: Any) -> None:
        try:
            converted = values.to_backend(value)
        except ValueConversionError as exc:
            self._log.error(
                "The attribute could not be converted and will be ignored.",
                attribute=name,
                value_type=exc.value_type,
            )
            return
        builder.set(name, converted)


__all__ = [
    "ContextConverter",
    "DUPLICATE_KEY_MESSAGE",
    "INVALID_KIND_MESSAGE",
    "MISSING_KEY_MESSAGE",
    "invalid_type_message",
]
