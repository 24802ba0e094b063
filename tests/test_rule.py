"""Tests for rule evaluation and the built-in rules."""

import pytest

from validata.errors import ValidationError, render_message
from validata.rule import (
    DEFAULT_MESSAGE,
    EXCEPTION_MESSAGE,
    Failure,
    arity,
    between,
    evaluate,
    exact_length,
    get_arity,
    match,
    max_length,
    max_value,
    min_length,
    min_value,
    no_duplicate,
    non_empty,
    not_both,
    one_of,
    rule,
)


def messages(errors):
    return [render_message(e.message) for e in errors]


# =============================================================================
# Evaluation Tests
# =============================================================================


class TestEvaluate:
    def test_true_passes(self):
        assert evaluate(rule(lambda v: v > 0, "Must be positive."), 3) == []

    def test_false_uses_rule_message(self):
        errors = evaluate(rule(lambda v: v > 0, "Must be positive."), -1, ["a", 0])
        assert errors == [ValidationError("Must be positive.", ("a", 0))]

    def test_explicit_failure_message_wins(self):
        check = rule(lambda v: Failure("Too big."), "Unused.")
        assert messages(evaluate(check, 10)) == ["Too big."]

    def test_bare_predicate_uses_default_message(self):
        assert messages(evaluate(lambda v: False, 1)) == [DEFAULT_MESSAGE]

    def test_rule_without_message_uses_default(self):
        assert messages(evaluate(rule(lambda v: False), 1)) == ["The predicate failed."]

    def test_message_function_of_value(self):
        check = rule(lambda v: False, lambda v: f"Bad value: {v}")
        assert messages(evaluate(check, 7)) == ["Bad value: 7"]

    def test_message_function_of_value_and_path(self):
        check = rule(lambda v: False, lambda v, path: f"{v} at {list(path)}")
        assert messages(evaluate(check, 7, ["x", 1])) == ["7 at ['x', 1]"]

    def test_template_message(self):
        check = rule(lambda v: False, ("Expected %{n} items.", {"n": 3}))
        assert messages(evaluate(check, [])) == ["Expected 3 items."]

    def test_exception_is_contained(self):
        errors = evaluate(rule(lambda v: v["missing"], "Unused."), {}, ["field"])
        assert errors == [ValidationError(EXCEPTION_MESSAGE, ("field",))]

    def test_type_error_in_predicate_is_contained(self):
        assert messages(evaluate(min_value(3), "abc")) == [EXCEPTION_MESSAGE]

    def test_malformed_outcome_is_contained(self):
        assert messages(evaluate(rule(lambda v: "yes"), 1)) == [EXCEPTION_MESSAGE]

    def test_exception_in_message_function_is_contained(self):
        check = rule(lambda v: False, lambda v: 1 / 0)
        assert messages(evaluate(check, 1)) == [EXCEPTION_MESSAGE]

    def test_accepts_context_as_path(self):
        from validata.context import Context

        errors = evaluate(rule(lambda v: False), 1, Context(path=("a",)))
        assert errors[0].path == ("a",)


# =============================================================================
# Built-in Rule Tests
# =============================================================================


class TestBuiltInRules:
    def test_one_of(self):
        assert evaluate(one_of(["a", "b"]), "a") == []
        assert messages(evaluate(one_of(["a", "b"]), "c")) == [
            "Invalid value: 'c'. Valid options: ['a', 'b']"
        ]

    def test_min_length(self):
        assert evaluate(min_length(2), "ab") == []
        assert messages(evaluate(min_length(2), "a")) == [
            "Minimum length of 2 required (current: 1)."
        ]

    def test_max_length(self):
        assert evaluate(max_length(2), [1, 2]) == []
        assert messages(evaluate(max_length(2), [1, 2, 3])) == [
            "Maximum length of 2 required (current: 3)."
        ]

    def test_exact_length(self):
        assert messages(evaluate(exact_length(2), "abc")) == [
            "Expected length of 2 (current: 3)."
        ]

    def test_length_rules_ignore_values_without_length(self):
        assert evaluate(min_length(2), 5) == []

    def test_non_empty(self):
        assert evaluate(non_empty(), [0]) == []
        assert messages(evaluate(non_empty(), "")) == ["Value cannot be empty."]

    def test_no_duplicate(self):
        assert evaluate(no_duplicate(), [1, 2, 3]) == []
        assert messages(evaluate(no_duplicate(), [1, 2, 1, 3, 2, 1])) == [
            "The list should not contain duplicates (duplicates found: [1, 2])."
        ]

    def test_match_searches_anywhere(self):
        assert evaluate(match(r"\d+"), "abc123") == []
        assert messages(evaluate(match(r"^\d+$"), "abc")) == [
            "Value 'abc' does not match regex '^\\\\d+$'."
        ]

    def test_min_and_max_value(self):
        assert evaluate(min_value(0), 0) == []
        assert messages(evaluate(min_value(0), -1)) == ["Must be greater than or equal to 0."]
        assert messages(evaluate(max_value(10), 11)) == ["Must be less than or equal to 10."]

    def test_between(self):
        assert evaluate(between(1, 5), 5) == []
        assert messages(evaluate(between(1, 5), 6)) == ["Must be between 1 and 5."]

    def test_not_both(self):
        assert evaluate(not_both("a", "b"), {"a": 1}) == []
        assert messages(evaluate(not_both("a", "b"), {"a": 1, "b": 2})) == [
            "Fields a and b cannot both be defined."
        ]


class TestArity:
    def test_get_arity_counts_required_positional_parameters(self):
        assert get_arity(lambda: None) == 0
        assert get_arity(lambda a, b=1: None) == 1
        assert get_arity(lambda a, b, *args, c=1: None) == 2

    @pytest.mark.parametrize("func,expected_ok", [(lambda x: x, True), (lambda x, y: x, False)])
    def test_arity_rule(self, func, expected_ok):
        assert (evaluate(arity(1), func) == []) is expected_ok

    def test_arity_message(self):
        assert messages(evaluate(arity(0), lambda x: x)) == ["Expected arity of 0, found: 1."]


# =============================================================================
# Rule Equality Tests
# =============================================================================


class TestRuleEquality:
    def test_built_in_rules_compare_by_arguments(self):
        assert min_length(3) == min_length(3)
        assert match(r"\d+") == match(r"\d+")
        assert one_of(["a", "b"]) == one_of(["a", "b"])

    def test_built_in_rules_with_other_arguments_differ(self):
        assert min_length(3) != min_length(4)
        assert min_length(3) != max_length(3)
        assert between(1, 5) != between(1, 6)

    def test_one_of_keeps_bool_and_int_apart(self):
        assert one_of([1]) != one_of([True])

    def test_custom_rules_compare_by_predicate(self):
        predicate = lambda value: value > 0  # noqa: E731
        assert rule(predicate, "Positive.") == rule(predicate, "Positive.")
        assert rule(predicate, "Positive.") != rule(lambda value: value > 0, "Positive.")

    def test_built_in_rules_are_hashable(self):
        assert len({min_length(3), min_length(3), non_empty()}) == 2
