"""Resolution mapping – LaunchDarkly evaluation details to OpenFeature results."""
from __future__ import annotations

from typing import Any

from ldclient.evaluation import EvaluationDetail
from openfeature.exception import ErrorCode
from openfeature.flag_evaluation import FlagResolutionDetails

from of_launchdarkly import values

ERROR_KIND = "ERROR"

_REASON_KINDS = frozenset(
    {"OFF", "FALLTHROUGH", "TARGET_MATCH", "RULE_MATCH", "PREREQUISITE_FAILED", ERROR_KIND}
)

_ERROR_CODE_FOR_KIND: dict[str | None, ErrorCode] = {
    "CLIENT_NOT_READY": ErrorCode.PROVIDER_NOT_READY,
    "WRONG_TYPE": ErrorCode.TYPE_MISMATCH,
    "MALFORMED_FLAG": ErrorCode.PARSE_ERROR,
    "FLAG_NOT_FOUND": ErrorCode.FLAG_NOT_FOUND,
    "USER_NOT_SPECIFIED": ErrorCode.TARGETING_KEY_MISSING,
    "EXCEPTION": ErrorCode.GENERAL,
    None: ErrorCode.GENERAL,
}


def _reason_kind(detail: EvaluationDetail) -> str:
    reason = detail.reason or {}
    kind = reason.get("kind")
    if kind not in _REASON_KINDS:
        raise ValueError(f"Unknown evaluation reason kind: {kind!r}")
    return kind


def to_resolution_details(detail: EvaluationDetail, flag_key: str) -> FlagResolutionDetails:
    """Build the OpenFeature resolution for *detail*.

    The value is passed through untouched; callers convert structured
    values first with :func:`to_value_detail`.

    Raises:
        ValueError: the reason kind or error kind is outside the set
            LaunchDarkly documents.
    """
    kind = _reason_kind(detail)
    variant = str(detail.variation_index) if detail.variation_index is not None else None

    if kind != ERROR_KIND:
        return FlagResolutionDetails(value=detail.value, reason=kind, variant=variant)

    error_kind = detail.reason.get("errorKind")
    if error_kind not in _ERROR_CODE_FOR_KIND:
        raise ValueError(f"Unknown evaluation error kind: {error_kind!r}")
    return FlagResolutionDetails(
        value=detail.value,
        reason=kind,
        variant=variant,
        error_code=_ERROR_CODE_FOR_KIND[error_kind],
        error_message=f"Evaluation of flag '{flag_key}' failed: {error_kind or 'EXCEPTION'}",
    )


def to_value_detail(detail: EvaluationDetail, default_value: Any) -> EvaluationDetail:
    """Return *detail* with its value in OpenFeature form.

    When LaunchDarkly fell back to the default, *default_value* is used as is
    instead of converting the backend's copy of it.
    """
    if detail.is_default_value():
        return EvaluationDetail(default_value, detail.variation_index, detail.reason)
    return EvaluationDetail(values.to_generic(detail.value), detail.variation_index, detail.reason)


def type_mismatch_detail(default_value: Any) -> EvaluationDetail:
    """Evaluation detail for a flag whose value is not of the requested type."""
    return EvaluationDetail(default_value, None, {"kind": ERROR_KIND, "errorKind": "WRONG_TYPE"})


__all__ = ["to_resolution_details", "to_value_detail", "type_mismatch_detail"]
