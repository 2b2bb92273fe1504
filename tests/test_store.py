"""Tests for Store."""

import pytest

from epicx import INIT, MiddlewareAPI, Store


def counter(state, action):
    if state is None:
        state = 0
    if action["type"] == "inc":
        return state + 1
    return state


class TestStore:
    def test_init_action_runs_reducer(self):
        seen = []
        Store(lambda state, action: seen.append(action) or state)
        assert seen == [{"type": INIT}]

    def test_initial_state(self):
        s = Store(counter, state=10)
        assert s.get_state() == 10

    def test_dispatch_reduces(self):
        s = Store(counter)
        s.dispatch({"type": "inc"})
        s.dispatch({"type": "inc"})
        assert s.get_state() == 2

    def test_dispatch_returns_action(self):
        s = Store(counter)
        action = {"type": "inc"}
        assert s.dispatch(action) is action

    def test_subscribe_notifies_after_reduce(self):
        s = Store(counter)
        log = []
        s.subscribe(lambda: log.append(s.get_state()))
        s.dispatch({"type": "inc"})
        assert log == [1]

    def test_unsubscribe(self):
        s = Store(counter)
        log = []
        unsub = s.subscribe(lambda: log.append(s.get_state()))
        s.dispatch({"type": "inc"})
        unsub()
        s.dispatch({"type": "inc"})
        assert log == [1]

    def test_unsubscribe_idempotent(self):
        s = Store(counter)
        unsub = s.subscribe(lambda: None)
        unsub()
        unsub()  # should not raise

    def test_reducer_may_not_dispatch(self):
        holder = []

        def reducer(state, action):
            if action["type"] == "nested":
                holder[0].dispatch({"type": "inc"})
            return state

        s = Store(reducer)
        holder.append(s)
        with pytest.raises(RuntimeError, match="may not dispatch"):
            s.dispatch({"type": "nested"})


class TestMiddleware:
    def test_receives_api(self):
        apis = []

        def middleware(api):
            apis.append(api)
            return lambda next_dispatch: next_dispatch

        s = Store(counter, middleware=[middleware])
        assert isinstance(apis[0], MiddlewareAPI)
        s.dispatch({"type": "inc"})
        assert apis[0].get_state() == 1

    def test_chain_order(self):
        log = []

        def tagging(tag):
            def middleware(api):
                def wrap(next_dispatch):
                    def dispatch(action):
                        log.append(tag)
                        return next_dispatch(action)

                    return dispatch

                return wrap

            return middleware

        s = Store(counter, middleware=[tagging("outer"), tagging("inner")])
        s.dispatch({"type": "inc"})
        assert log == ["outer", "inner"]
        assert s.get_state() == 1

    def test_api_dispatch_goes_through_chain(self):
        log = []

        def logging_middleware(api):
            def wrap(next_dispatch):
                def dispatch(action):
                    log.append(action["type"])
                    return next_dispatch(action)

                return dispatch

            return wrap

        def forwarding(api):
            def wrap(next_dispatch):
                def dispatch(action):
                    result = next_dispatch(action)
                    if action["type"] == "ping":
                        api.dispatch({"type": "inc"})
                    return result

                return dispatch

            return wrap

        s = Store(counter, middleware=[logging_middleware, forwarding])
        s.dispatch({"type": "ping"})
        assert log == ["ping", "inc"]
        assert s.get_state() == 1

    def test_dispatch_during_setup_skips_middleware(self):
        log = []

        def eager(api):
            api.dispatch({"type": "inc"})

            def wrap(next_dispatch):
                def dispatch(action):
                    log.append(action["type"])
                    return next_dispatch(action)

                return dispatch

            return wrap

        s = Store(counter, middleware=[eager])
        assert s.get_state() == 1
        assert log == []
