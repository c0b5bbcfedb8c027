"""
Product API Backend: Field Validators
======================================

What:  Reusable rule chains bound to named request fields (path parameters or
       body fields), composed declaratively per route.
Why:   Keeps handlers free of input-shape concerns; the same `id` rule is
       shared by four routes.
How:   A FieldValidator holds an ordered tuple of (predicate, message) rules.
       run_validators() applies every validator of a route in declared order
       and returns the accumulated error collection plus the coerced values.

Evaluation Model:
    Per field:   rules run in order; the first failing rule's message is
                 recorded and the remaining rules for that field are skipped.
    Per request: every validator runs, so all failing fields are reported
                 together before the dispatcher decides to reject.

    run_validators is pure: no I/O, no shared state, safe to call from any
    number of concurrent requests.

Example:
    ID_PARAM = path_param("id", target="product_id").rule(is_integer, "invalid id").to(int)
    outcome = run_validators([ID_PARAM], {"id": "abc"}, {})
    outcome.errors  # {"id": ["invalid id"]}
"""

import math
import re
from dataclasses import dataclass, field as dataclass_field, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

Predicate = Callable[[Any], bool]

PATH = "path"
BODY = "body"

_INTEGER_RE = re.compile(r"^[-+]?[0-9]+$")
_NUMERIC_RE = re.compile(r"^[-+]?([0-9]*\.)?[0-9]+$")


# ══════════════════════════════════════════════════════════════════════════
# Predicates
# ══════════════════════════════════════════════════════════════════════════


def _is_number(value: Any) -> bool:
    # bool is a subclass of int; `true` is not a price
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_present(value: Any) -> bool:
    """Value was sent and is not null or an empty string."""
    return value is not None and value != ""


def is_integer(value: Any) -> bool:
    """Integer literal: optional sign then digits. Path params arrive as strings."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and bool(_INTEGER_RE.match(value))


def is_non_blank(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def is_numeric(value: Any) -> bool:
    """Finite JSON number, or a string holding a plain decimal number."""
    if not (_is_number(value) or (isinstance(value, str) and _NUMERIC_RE.match(value))):
        return False
    try:
        # Stored as a float column: reject what would overflow to inf
        return math.isfinite(float(value))
    except OverflowError:
        return False


def is_positive(value: Any) -> bool:
    """Expects a value that already passed is_numeric."""
    try:
        return float(value) > 0
    except (TypeError, ValueError, OverflowError):
        return False


def is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


# ══════════════════════════════════════════════════════════════════════════
# Field Validator
# ══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Rule:
    """A single predicate and the message recorded when it fails."""
    check: Predicate
    message: str


@dataclass(frozen=True)
class FieldValidator:
    """
    Ordered rule chain for one request field.

    Attributes:
        field:   Name of the field in its source, also the key in error output
        source:  PATH or BODY
        rules:   Rules evaluated in order, short-circuiting on first failure
        coerce:  Applied to the raw value once every rule has passed
        target:  Keyword the coerced value is bound to (defaults to `field`)

    Instances are immutable; rule() and to() return new validators, so a
    shared validator such as the `id` rule can be reused across routes.
    """
    field: str
    source: str
    rules: Tuple[Rule, ...] = ()
    coerce: Optional[Callable[[Any], Any]] = None
    target: Optional[str] = None

    def rule(self, check: Predicate, message: str) -> "FieldValidator":
        return replace(self, rules=self.rules + (Rule(check, message),))

    def to(self, coerce: Callable[[Any], Any]) -> "FieldValidator":
        return replace(self, coerce=coerce)

    @property
    def binds_to(self) -> str:
        return self.target or self.field

    def first_failure(self, value: Any) -> Optional[str]:
        """Message of the first failing rule, or None when every rule passes."""
        for rule in self.rules:
            if not rule.check(value):
                return rule.message
        return None

    def clean(self, value: Any) -> Any:
        return self.coerce(value) if self.coerce is not None else value


def path_param(name: str, target: Optional[str] = None) -> FieldValidator:
    return FieldValidator(field=name, source=PATH, target=target)


def body_field(name: str, target: Optional[str] = None) -> FieldValidator:
    return FieldValidator(field=name, source=BODY, target=target)


# ══════════════════════════════════════════════════════════════════════════
# Pipeline
# ══════════════════════════════════════════════════════════════════════════


@dataclass
class ValidationOutcome:
    """
    Result of running a route's validators against one request.

    errors:  field name → messages, in the order fields were validated.
             Created fresh per request.
    path:    coerced path values keyed by handler keyword
    body:    coerced body values keyed by handler keyword
    """
    errors: Dict[str, List[str]] = dataclass_field(default_factory=dict)
    path: Dict[str, Any] = dataclass_field(default_factory=dict)
    body: Dict[str, Any] = dataclass_field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def run_validators(
    validators: Sequence[FieldValidator],
    path_params: Mapping[str, Any],
    body: Mapping[str, Any],
) -> ValidationOutcome:
    """
    Apply validators in declared order and collect every field error.

    Args:
        validators:  The route's validators, in declaration order
        path_params: Raw path parameters (strings, as extracted by the router)
        body:        Deserialized JSON body; an empty mapping when absent

    Returns:
        ValidationOutcome. Coerced values are only filled for fields that
        passed; callers must check `ok` before using them.
    """
    outcome = ValidationOutcome()
    for validator in validators:
        source = path_params if validator.source == PATH else body
        value = source.get(validator.field)

        message = validator.first_failure(value)
        if message is not None:
            outcome.errors.setdefault(validator.field, []).append(message)
            continue

        cleaned = outcome.path if validator.source == PATH else outcome.body
        cleaned[validator.binds_to] = validator.clean(value)
    return outcome


# ══════════════════════════════════════════════════════════════════════════
# Product Field Rules
# ══════════════════════════════════════════════════════════════════════════

PRODUCT_ID = (
    path_param("id", target="product_id")
    .rule(is_integer, "invalid id")
    .to(int)
)

PRODUCT_NAME = (
    body_field("name")
    .rule(is_non_blank, "name is required")
    .to(str.strip)
)

PRODUCT_PRICE = (
    body_field("price")
    .rule(is_present, "price is required")
    .rule(is_numeric, "not a number")
    .rule(is_positive, "price must be a positive value")
    .to(float)
)

PRODUCT_AVAILABILITY = (
    body_field("availability")
    .rule(is_boolean, "invalid availability value")
)
