"""Tests for action helpers."""

from collections import namedtuple

import reactivex as rx

from epicx import action_type, is_action, of_type

Typed = namedtuple("Typed", "type payload")


class TestActionType:
    def test_mapping(self):
        assert action_type({"type": "foo", "payload": 1}) == "foo"

    def test_object_attribute(self):
        assert action_type(Typed("foo", 1)) == "foo"

    def test_missing(self):
        assert action_type({"payload": 1}) is None
        assert action_type(None) is None
        assert action_type(42) is None


class TestIsAction:
    def test_string_type_is_action(self):
        assert is_action({"type": "foo"})
        assert is_action(Typed("foo", None))

    def test_non_string_type_is_not_action(self):
        assert not is_action({"type": 3})
        assert not is_action({"type": None})

    def test_non_actions(self):
        assert not is_action(None)
        assert not is_action("foo")
        assert not is_action({})


class TestOfType:
    def test_keeps_matching_types(self):
        received = []
        rx.of(
            {"type": "a"}, {"type": "b"}, {"type": "c"}, {"type": "a", "n": 2}
        ).pipe(of_type("a", "c")).subscribe(received.append)
        assert received == [{"type": "a"}, {"type": "c"}, {"type": "a", "n": 2}]

    def test_drops_non_actions(self):
        received = []
        rx.of(None, {"type": ["a"]}, {"type": "a"}).pipe(of_type("a")).subscribe(
            received.append
        )
        assert received == [{"type": "a"}]
