"""Rules: predicates with failure messages, and the built-in rules.

A rule wraps a predicate and a message. The predicate returns:
- True: the value passes
- False: the value fails, the rule message is used
- Failure(message): the value fails with that explicit message

The message may be a string, a ``(template, bindings)`` pair, a function of
the value, or a function of the value and the path. A predicate may also be
used on its own as a check, in which case a generic message is used.

Exceptions raised while evaluating a rule never escape: they are turned
into a single generic error so that one bad rule cannot abort a run.
"""

import inspect
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable

from validata.errors import Message, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE = "The predicate failed."
EXCEPTION_MESSAGE = (
    "An exception was raised while evaluating a rule on that element, "
    "so it is likely incorrect."
)

ErrorFunction = Message | Callable[..., Message] | None


@dataclass(frozen=True)
class Failure:
    """Predicate outcome carrying its own failure message."""

    message: Message


@dataclass(frozen=True, eq=False)
class Rule:
    """A reusable check: predicate plus failure message.

    Built-in rules carry a ``key`` (rule name and arguments) and compare by
    it, so two nodes built from the same options are equal. Other rules
    compare by predicate and message.
    """

    predicate: Callable[[Any], Any]
    message: ErrorFunction = None
    key: tuple | None = None

    def _identity(self) -> tuple:
        if self.key is not None:
            return ("built-in", self.key)
        return ("custom", self.predicate, self.message)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rule):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())


class MalformedOutcomeError(TypeError):
    """Raised when a predicate returns something other than a bool or Failure."""


def rule(predicate: Callable[[Any], Any], message: ErrorFunction = None) -> Rule:
    return Rule(predicate=predicate, message=message)


# =============================================================================
# Evaluation
# =============================================================================


def predicate_result(predicate: Callable[[Any], Any], data: Any) -> Failure | bool:
    """Run a predicate and normalize its outcome.

    Returns True on success, False on failure without message, or the
    Failure returned by the predicate.
    """
    outcome = predicate(data)
    if isinstance(outcome, Failure):
        return outcome
    if isinstance(outcome, bool):
        return outcome
    raise MalformedOutcomeError(
        f"Predicate must return a bool or a Failure, got {outcome!r}"
    )


def _takes_path(func: Callable[..., Any]) -> bool:
    """Whether a message function accepts (value, path)."""
    try:
        inspect.signature(func).bind(None, None)
    except TypeError:
        return False
    except ValueError:
        # No signature available (some builtins)
        return False
    return True


def evaluate_error_message(message: ErrorFunction, data: Any, path: tuple) -> Message:
    if message is None:
        return DEFAULT_MESSAGE
    if isinstance(message, (str, tuple)):
        return message
    if _takes_path(message):
        return message(data, path)
    return message(data)


def evaluate(check: Rule | Callable[[Any], Any], data: Any, path: Any = ()) -> list[ValidationError]:
    """Evaluate a rule (or a bare predicate) against a value.

    Args:
        check: A Rule, or a predicate used with the generic message
        data: The value to check
        path: Path of the value (sequence or Context)

    Returns:
        An empty list on success, otherwise a list with one error.
    """
    path = tuple(getattr(path, "path", path))
    if isinstance(check, Rule):
        predicate, error_message = check.predicate, check.message
    else:
        predicate, error_message = check, None

    try:
        outcome = predicate_result(predicate, data)
        if outcome is True:
            return []
        if isinstance(outcome, Failure):
            return [ValidationError(outcome.message, path)]
        return [ValidationError(evaluate_error_message(error_message, data, path), path)]
    except Exception:
        logger.debug("Rule raised while evaluating %r at %r", data, path, exc_info=True)
        return [ValidationError(EXCEPTION_MESSAGE, path)]


# =============================================================================
# Built-in rules
# =============================================================================


def built_in(key: tuple, predicate: Callable[[Any], Any], message: ErrorFunction) -> Rule:
    """A rule identified by its name and arguments, e.g. ``("min_length", 3)``."""
    return Rule(predicate=predicate, message=message, key=key)


def one_of(options: list) -> Rule:
    options = list(options)
    return built_in(
        # Typed so that 1 and True stay distinct options.
        ("one_of", tuple((type(option), option) for option in options)),
        lambda value: value in options,
        lambda value: (
            "Invalid value: %{value}. Valid options: %{options}",
            {"value": repr(value), "options": repr(options)},
        ),
    )


def _value_length(value: Any) -> int | None:
    if isinstance(value, (str, bytes, bytearray, list, tuple)):
        return len(value)
    return None


def _length_rule(key: tuple, accept: Callable[[int], bool], message: ErrorFunction) -> Rule:
    def predicate(value: Any) -> bool:
        actual_length = _value_length(value)
        return actual_length is None or accept(actual_length)

    return built_in(key, predicate, message)


def min_length(length: int) -> Rule:
    return _length_rule(
        ("min_length", length),
        lambda actual: actual >= length,
        lambda value: (
            "Minimum length of %{min_length} required (current: %{actual_length}).",
            {"min_length": length, "actual_length": _value_length(value)},
        ),
    )


def max_length(length: int) -> Rule:
    return _length_rule(
        ("max_length", length),
        lambda actual: actual <= length,
        lambda value: (
            "Maximum length of %{max_length} required (current: %{actual_length}).",
            {"max_length": length, "actual_length": _value_length(value)},
        ),
    )


def exact_length(length: int) -> Rule:
    return _length_rule(
        ("exact_length", length),
        lambda actual: actual == length,
        lambda value: (
            "Expected length of %{expected_length} (current: %{actual_length}).",
            {"expected_length": length, "actual_length": _value_length(value)},
        ),
    )


def non_empty() -> Rule:
    return _length_rule(("non_empty",), lambda actual: actual > 0, "Value cannot be empty.")


def _duplicates(items: list) -> list:
    seen: list = []
    duplicates: list = []
    for item in items:
        if item in seen:
            if item not in duplicates:
                duplicates.append(item)
        else:
            seen.append(item)
    return duplicates


def no_duplicate() -> Rule:
    return built_in(
        ("no_duplicate",),
        lambda value: _duplicates(value) == [],
        lambda value: (
            "The list should not contain duplicates (duplicates found: %{duplicates}).",
            {"duplicates": repr(_duplicates(value))},
        ),
    )


def match(regex: str | re.Pattern) -> Rule:
    pattern = re.compile(regex) if isinstance(regex, str) else regex
    return built_in(
        ("match", pattern.pattern, pattern.flags),
        lambda value: pattern.search(value) is not None,
        lambda value: (
            "Value %{value} does not match regex %{regex}.",
            {"value": repr(value), "regex": repr(pattern.pattern)},
        ),
    )


def min_value(minimum: Any) -> Rule:
    return built_in(
        ("min_value", minimum),
        lambda value: value >= minimum,
        ("Must be greater than or equal to %{min_value}.", {"min_value": minimum}),
    )


def max_value(maximum: Any) -> Rule:
    return built_in(
        ("max_value", maximum),
        lambda value: value <= maximum,
        ("Must be less than or equal to %{max_value}.", {"max_value": maximum}),
    )


def between(minimum: Any, maximum: Any) -> Rule:
    return built_in(
        ("between", minimum, maximum),
        lambda value: minimum <= value <= maximum,
        (
            "Must be between %{min_value} and %{max_value}.",
            {"min_value": minimum, "max_value": maximum},
        ),
    )


def not_both(field1: Any, field2: Any) -> Rule:
    return built_in(
        ("not_both", field1, field2),
        lambda mapping: not (field1 in mapping and field2 in mapping),
        (
            "Fields %{field1} and %{field2} cannot both be defined.",
            {"field1": field1, "field2": field2},
        ),
    )


def get_arity(func: Callable[..., Any]) -> int:
    """Number of required positional parameters of a callable."""
    positional = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    return len(
        [
            p
            for p in inspect.signature(func).parameters.values()
            if p.kind in positional and p.default is inspect.Parameter.empty
        ]
    )


def arity(expected: int) -> Rule:
    return built_in(
        ("arity", expected),
        lambda func: get_arity(func) == expected,
        lambda func: (
            "Expected arity of %{expected_arity}, found: %{actual_arity}.",
            {"expected_arity": expected, "actual_arity": get_arity(func)},
        ),
    )
