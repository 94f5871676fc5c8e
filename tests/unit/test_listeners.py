"""Testes para application/state/listeners.py."""

from __future__ import annotations

from zweihander.application.state.listeners import ListenerRegistry


class TestListenerRegistry:
    """Registro, remoção e notificação."""

    def test_notifies_in_registration_order(self) -> None:
        registry = ListenerRegistry()
        calls: list[str] = []
        registry.add("k", lambda new, old: calls.append(f"a:{new}:{old}"))
        registry.add("k", lambda new, old: calls.append(f"b:{new}:{old}"))

        registry.notify("k", 2, 1)

        assert calls == ["a:2:1", "b:2:1"]

    def test_only_listeners_of_key_are_called(self) -> None:
        registry = ListenerRegistry()
        calls: list[str] = []
        registry.add("outra", lambda new, old: calls.append("outra"))

        registry.notify("k", 1, 0)

        assert calls == []

    def test_same_callback_twice_is_notified_twice(self) -> None:
        registry = ListenerRegistry()
        calls: list[int] = []

        def callback(new: int, old: int) -> None:
            calls.append(new)

        registry.add("k", callback)
        registry.add("k", callback)
        registry.notify("k", 5, 0)

        assert calls == [5, 5]

    def test_remove_drops_first_registration_only(self) -> None:
        registry = ListenerRegistry()

        def callback(new: int, old: int) -> None:
            pass

        registry.add("k", callback)
        registry.add("k", callback)
        registry.remove("k", callback)

        assert registry.count("k") == 1

    def test_remove_bound_method_from_fresh_access(self) -> None:
        class Panel:
            def __init__(self) -> None:
                self.calls: list[int] = []

            def on_change(self, new: int, old: int) -> None:
                self.calls.append(new)

        registry = ListenerRegistry()
        panel, other = Panel(), Panel()
        registry.add("k", panel.on_change)
        registry.add("k", other.on_change)

        registry.remove("k", panel.on_change)
        registry.notify("k", 1, 0)

        assert panel.calls == []
        assert other.calls == [1]

    def test_equal_but_distinct_lambdas_are_not_removed(self) -> None:
        registry = ListenerRegistry()
        registry.add("k", lambda new, old: None)

        registry.remove("k", lambda new, old: None)

        assert registry.count("k") == 1

    def test_remove_unknown_is_noop(self) -> None:
        registry = ListenerRegistry()
        registry.remove("k", lambda new, old: None)
        assert registry.count("k") == 0

    def test_failing_listener_does_not_block_others(self) -> None:
        """Exceção em um listener é logada; os seguintes são chamados."""
        registry = ListenerRegistry()
        calls: list[str] = []

        def broken(new: int, old: int) -> None:
            raise RuntimeError("boom")

        registry.add("k", broken)
        registry.add("k", lambda new, old: calls.append("ok"))

        registry.notify("k", 1, 0)

        assert calls == ["ok"]

    def test_listener_removing_itself_during_notify(self) -> None:
        registry = ListenerRegistry()
        calls: list[str] = []
        subscription = None

        def once(new: int, old: int) -> None:
            calls.append("once")
            subscription.dispose()

        subscription = registry.add("k", once)
        registry.add("k", lambda new, old: calls.append("other"))

        registry.notify("k", 1, 0)
        registry.notify("k", 2, 1)

        assert calls == ["once", "other", "other"]


class TestSubscription:
    """Handle de remoção."""

    def test_dispose_removes_exact_registration(self) -> None:
        registry = ListenerRegistry()
        calls: list[str] = []

        def callback(new: int, old: int) -> None:
            calls.append("x")

        first = registry.add("k", callback)
        registry.add("k", callback)
        first.dispose()
        registry.notify("k", 1, 0)

        assert calls == ["x"]
        assert first.active is False

    def test_dispose_is_idempotent(self) -> None:
        registry = ListenerRegistry()
        callback = lambda new, old: None  # noqa: E731
        first = registry.add("k", callback)
        registry.add("k", callback)

        first.dispose()
        first.dispose()

        assert registry.count("k") == 1

    def test_context_manager_disposes(self) -> None:
        registry = ListenerRegistry()
        with registry.add("k", lambda new, old: None) as subscription:
            assert registry.count("k") == 1
            assert subscription.key == "k"
        assert registry.count("k") == 0
