"""Tests for waypoint.dispatch.dispatcher — registration and dispatch strategies."""

import pytest

from waypoint.dispatch import (
    ALL,
    AUTO,
    Computed,
    DefaultPolicy,
    DispatchHandle,
    Dispatcher,
    first_successful,
)
from waypoint.errors import UndispatchableError


def _double(x: int) -> int:
    return x * 2


def _inc(x: int) -> int:
    return x + 1


class TestRegistration:
    def test_register_returns_key(self) -> None:
        d = Dispatcher()
        assert d.register("a", _inc) == "a"
        assert d.keys() == ["a"]

    def test_anonymous_slots_start_at_zero(self) -> None:
        d = Dispatcher()
        assert d.register(_inc) == 0
        assert d.register(None, _double) == 1
        assert d.register(AUTO, _inc) == 2

    def test_anonymous_slot_follows_max_int_key(self) -> None:
        d = Dispatcher()
        d.register(5, _inc)
        d.register("x", _inc)
        assert d.register(_double) == 6

    def test_bool_keys_are_not_slots(self) -> None:
        d = Dispatcher()
        d.register(True, _inc)
        assert d.register(_double) == 0

    def test_re_register_replaces_but_keeps_position(self) -> None:
        d = Dispatcher()
        d.register("a", _inc)
        d.register("b", _inc)
        d.register("a", _double)
        assert d.keys() == ["a", "b"]
        assert d.dispatch_to_key("a", [3]) == 6

    def test_initial_mapping_keeps_order(self) -> None:
        d = Dispatcher({"b": _inc, "a": _double})
        assert d.keys() == ["b", "a"]
        assert len(d) == 2
        assert "a" in d
        assert "z" not in d

    def test_is_empty(self) -> None:
        d = Dispatcher()
        assert d.is_empty
        d.register("a", _inc)
        assert not d.is_empty

    def test_none_never_contained(self) -> None:
        assert None not in Dispatcher({"a": _inc})

    def test_unhashable_never_contained(self) -> None:
        assert ["a"] not in Dispatcher({"a": _inc})


class TestDefaultPolicy:
    def test_none_has_no_default(self) -> None:
        d = Dispatcher({"a": _inc})
        assert d.default_key is None

    def test_fixed_default_need_not_be_registered_yet(self) -> None:
        d = Dispatcher(default=DefaultPolicy.fixed("fallback"))
        assert d.default_key == "fallback"
        with pytest.raises(UndispatchableError):
            d.dispatch_to_key("missing", [1])
        d.register("fallback", _double)
        assert d.dispatch_to_key("missing", [1]) == 2

    def test_auto_first_binds_to_first_registration(self) -> None:
        d = Dispatcher(default=DefaultPolicy.auto_first())
        assert d.default_key is None
        d.register("first", _inc)
        d.register("second", _double)
        assert d.default_key == "first"

    def test_auto_first_survives_re_registration(self) -> None:
        d = Dispatcher(default=DefaultPolicy.auto_first())
        d.register("first", _inc)
        d.register("second", _double)
        d.register("first", _double)

        assert d.default_key == "first"
        assert d.keys() == ["first", "second"]
        assert d.dispatch_to_key("missing", [5]) == 10
        assert d.dispatch_to_first(["missing"], [7]) == 14

    def test_fixed_default_re_registered(self) -> None:
        d = Dispatcher({"fallback": _inc, "other": _inc}, DefaultPolicy.fixed("fallback"))
        d.register("fallback", _double)
        assert d.keys() == ["fallback", "other"]
        assert d.dispatch_to_key("missing", [5]) == 10

    def test_auto_first_with_initial_mapping(self) -> None:
        d = Dispatcher({"x": _inc, "y": _double}, DefaultPolicy.auto_first())
        assert d.default_key == "x"

    def test_auto_first_anonymous_slot(self) -> None:
        d = Dispatcher(default=DefaultPolicy.auto_first())
        d.register(_inc)
        assert d.default_key == 0


class TestIntrospection:
    def test_values_for_keys_ignores_unregistered(self) -> None:
        d = Dispatcher({"a": _inc, "b": _double})
        assert d.values(["b", "zzz"]) == [_double]
        assert d.values() == [_inc, _double]

    def test_mapping_is_a_copy(self) -> None:
        d = Dispatcher({"a": _inc})
        m = d.mapping()
        m["b"] = _double
        assert d.keys() == ["a"]

    def test_mapping_for_keys(self) -> None:
        d = Dispatcher({"a": _inc, "b": _double})
        assert d.mapping(["a", "missing"]) == {"a": _inc}


class TestDispatchToKey:
    def test_registered_key(self) -> None:
        d = Dispatcher({"a": _inc})
        assert d.dispatch_to_key("a", [1]) == 2

    def test_explicit_default_wins_over_global(self) -> None:
        d = Dispatcher({"local": _inc, "global": _double}, DefaultPolicy.fixed("global"))
        assert d.dispatch_to_key("missing", [10], default_key="local") == 11

    def test_global_default_when_explicit_missing(self) -> None:
        d = Dispatcher({"global": _double}, DefaultPolicy.fixed("global"))
        assert d.dispatch_to_key("missing", [10], default_key="also-missing") == 20

    def test_undispatchable(self) -> None:
        d = Dispatcher({"a": _inc})
        with pytest.raises(UndispatchableError):
            d.dispatch_to_key("b", [1])

    def test_none_key_uses_defaults(self) -> None:
        d = Dispatcher({"a": _inc}, DefaultPolicy.fixed("a"))
        assert d.dispatch_to_key(None, [1]) == 2

    def test_computed_key(self) -> None:
        d = Dispatcher({"GET": lambda req: "got", "POST": lambda req: "posted"})
        key = Computed(lambda req: req["method"])
        assert d.dispatch_to_key(key, [{"method": "POST"}]) == "posted"

    def test_computed_key_returning_none_falls_back(self) -> None:
        d = Dispatcher({"a": _inc})
        assert d.dispatch_to_key(Computed(lambda x: None), [1], default_key="a") == 2

    def test_computed_default_key(self) -> None:
        d = Dispatcher({"even": lambda x: "even", "odd": lambda x: "odd"})
        default = Computed(lambda x: "even" if x % 2 == 0 else "odd")
        assert d.dispatch_to_key("missing", [3], default_key=default) == "odd"

    def test_handler_errors_propagate(self) -> None:
        def boom(x: int) -> int:
            raise RuntimeError("boom")

        d = Dispatcher({"a": boom})
        with pytest.raises(RuntimeError, match="boom"):
            d.dispatch_to_key("a", [1])

    def test_is_dispatchable(self) -> None:
        d = Dispatcher({"a": _inc})
        assert d.is_dispatchable("a")
        assert not d.is_dispatchable("b")
        assert not d.is_dispatchable(None)
        assert d.is_dispatchable(Computed(lambda x: "a"), [1])

    def test_lookup_does_not_call(self) -> None:
        calls: list[int] = []
        record = calls.append
        d = Dispatcher({"a": record})
        assert d.lookup("a") is record
        assert calls == []


class TestDispatchToFirst:
    def test_first_registered_of_keys(self) -> None:
        d = Dispatcher({"a": _inc, "b": _double})
        assert d.dispatch_to_first(["zzz", "b", "a"], [5]) == 10

    def test_skips_computed_none(self) -> None:
        d = Dispatcher({"a": _inc})
        assert d.dispatch_to_first([Computed(lambda x: None), "a"], [5]) == 6

    def test_defaults_to_all_registered(self) -> None:
        d = Dispatcher({"a": _inc, "b": _double})
        assert d.dispatch_to_first(args=[5]) == 6

    def test_falls_back_to_default(self) -> None:
        d = Dispatcher({"a": _inc, "b": _double})
        assert d.dispatch_to_first(["x", "y"], [5], default_key="b") == 10

    def test_empty_keys_without_default_raises(self) -> None:
        d = Dispatcher({"a": _inc})
        with pytest.raises(UndispatchableError):
            d.dispatch_to_first([], [5])

    def test_empty_dispatcher_raises(self) -> None:
        with pytest.raises(UndispatchableError):
            Dispatcher().dispatch_to_first(args=[5])


class TestDispatchToAll:
    def test_full_map(self) -> None:
        d = Dispatcher({"a": _inc, "b": _double})
        assert d.dispatch_to_all(args=[5]) == {"a": 6, "b": 10}

    def test_return_keys_list_narrows(self) -> None:
        d = Dispatcher({"a": _inc, "b": _double})
        assert d.dispatch_to_all(args=[5], return_keys=["b"]) == {"b": 10}

    def test_return_single_key(self) -> None:
        d = Dispatcher({"a": _inc, "b": _double})
        assert d.dispatch_to_all(args=[5], return_keys="a") == 6

    def test_return_single_key_not_dispatched(self) -> None:
        d = Dispatcher({"a": _inc})
        assert d.dispatch_to_all(args=[5], return_keys="zzz") is None

    def test_missing_key_uses_default(self) -> None:
        d = Dispatcher({"a": _inc, "b": _double}, DefaultPolicy.fixed("b"))
        assert d.dispatch_to_all(["a", "missing"], [5]) == {"a": 6, "missing": 10}

    def test_missing_key_without_default_raises(self) -> None:
        d = Dispatcher({"a": _inc})
        with pytest.raises(UndispatchableError):
            d.dispatch_to_all(["a", "missing"], [5])

    def test_all_sentinel_is_default(self) -> None:
        d = Dispatcher({"a": _inc})
        assert d.dispatch_to_all(args=[1], return_keys=ALL) == {"a": 2}


class TestDispatchToPipe:
    def test_feeds_result_forward(self) -> None:
        d = Dispatcher({"inc": _inc, "double": _double})
        assert d.dispatch_to_pipe(["inc", "double"], [3]) == 8
        assert d.dispatch_to_pipe(["double", "inc"], [3]) == 7

    def test_list_result_is_spread(self) -> None:
        d = Dispatcher({"split": lambda s: [s, len(s)], "join": lambda s, n: f"{s}:{n}"})
        assert d.dispatch_to_pipe(["split", "join"], ["abc"]) == "abc:3"

    def test_tuple_result_is_single_argument(self) -> None:
        d = Dispatcher({"pair": lambda x: (x, x), "count": lambda t: len(t)})
        assert d.dispatch_to_pipe(["pair", "count"], [1]) == 2

    def test_no_keys_returns_none(self) -> None:
        assert Dispatcher({"a": _inc}).dispatch_to_pipe([], [1]) is None

    def test_default_order_is_registration_order(self) -> None:
        d = Dispatcher({"inc": _inc, "double": _double})
        assert d.dispatch_to_pipe(args=[1]) == 4


class TestHandles:
    def test_handler_for_key(self) -> None:
        d = Dispatcher({"a": _inc})
        handle = d.handler_for_key("a")
        assert isinstance(handle, DispatchHandle)
        assert handle(1) == 2
        assert handle.invoke(2) == 3
        assert handle.delegate is None

    def test_handle_sees_later_registrations(self) -> None:
        d = Dispatcher()
        handle = d.handler_for_key("a")
        d.register("a", _double)
        assert handle(4) == 8

    def test_delegate(self) -> None:
        d = Dispatcher({"a": _inc, "b": _double})
        handle = d.handler_for_first(["a"], delegate_key="b")
        assert handle.delegate is _double
        assert handle(1) == 2

    def test_missing_delegate_raises(self) -> None:
        d = Dispatcher({"a": _inc})
        with pytest.raises(UndispatchableError, match="delegate"):
            d.handler_for_key("a", delegate_key="nope")

    def test_handler_for_all(self) -> None:
        d = Dispatcher({"a": _inc, "b": _double})
        assert d.handler_for_all(return_keys="b")(3) == 6

    def test_handler_for_pipe(self) -> None:
        d = Dispatcher({"a": _inc, "b": _double})
        assert d.handler_for_pipe(["a", "b"])(3) == 8


class TestFirstSuccessful:
    def test_returns_first_success(self) -> None:
        def fail(x: int) -> int:
            raise ValueError("nope")

        assert first_successful(fail, _inc, _double)(1) == 2

    def test_all_fail(self) -> None:
        def fail(x: int) -> int:
            raise ValueError("nope")

        with pytest.raises(UndispatchableError) as exc_info:
            first_successful(fail, fail)(1)
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_composes_with_dispatcher(self) -> None:
        d = Dispatcher({"a": _inc})
        combined = first_successful(d.handler_for_key("missing"), d.handler_for_key("a"))
        assert combined(1) == 2
