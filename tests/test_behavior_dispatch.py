#!/usr/bin/env python3
"""
Tests for forwarding model and entity calls to bound behaviors.
"""

import pytest

from behaviorkit.behaviors import (
    Behavior,
    dispatch_instance,
    dispatch_static,
    entity_method,
    model_method,
)
from behaviorkit.errors import DispatchMiss


class TestFlyExample:
    def test_call_static(self, posts):
        posts.bind_behavior("MockFly", {})

        assert posts.fly("New York") == "New York reached in 1h54."

    def test_call_instance_after_rebind(self, posts):
        posts.bind_behavior("MockFly", {})
        posts.bind_behavior("MockFly", {"speed_label": "1h24"})

        entity = posts.create()
        assert entity.fly("Las Vegas") == "Las Vegas reached in 1h24."

    def test_declared_behavior_answers_without_explicit_bind(self, make_model):
        model = make_model(["MockFly"])

        assert model.fly("Paris") == "Paris reached in 1h54."


class TestDispatchOrder:
    def test_first_bound_behavior_answers(self, posts):
        posts.bind_behavior("MockFly")
        posts.bind_behavior("MockJet")

        assert posts.fly("Rome") == "Rome reached in 1h54."

    def test_order_follows_binding_not_name(self, posts):
        posts.bind_behavior("MockJet")
        posts.bind_behavior("MockFly")

        assert posts.fly("Rome") == "Rome by jet."

    def test_rebind_does_not_change_order(self, posts):
        posts.bind_behavior("MockFly")
        posts.bind_behavior("MockJet")
        posts.bind_behavior("MockJet", {"label": "plane"})
        posts.bind_behavior("MockFly", {"speed_label": "2h"})

        assert posts.fly("Oslo") == "Oslo reached in 2h."

    def test_later_behavior_answers_after_unbind(self, posts):
        posts.bind_behavior("MockFly")
        posts.bind_behavior("MockJet")
        posts.unbind_behavior("MockFly")

        assert posts.fly("Rome") == "Rome by jet."

    def test_capability_only_in_later_behavior(self, posts):
        posts.bind_behavior("MockFly")
        posts.bind_behavior("MockJet")

        assert posts.refuel() == "refueled"

    def test_only_first_match_invoked(self, posts):
        calls = []

        class First(Behavior):
            @model_method
            def ping(self, model):
                calls.append("first")
                return "first"

        class Second(Behavior):
            @model_method
            def ping(self, model):
                calls.append("second")
                return "second"

        posts.bind_behavior(First)
        posts.bind_behavior(Second)

        assert posts.ping() == "first"
        assert calls == ["first"]


class TestInvocationShape:
    def test_static_receives_model_then_args(self, posts):
        seen = {}

        class Recorder(Behavior):
            @model_method
            def record(self, model, *args, **kwargs):
                seen.update(behavior=self, model=model, args=args, kwargs=kwargs)
                return "ok"

        instance = posts.bind_behavior(Recorder)
        assert posts.record(1, 2, key="v") == "ok"
        assert seen == {"behavior": instance, "model": posts, "args": (1, 2), "kwargs": {"key": "v"}}

    def test_instance_receives_model_entity_then_args(self, posts):
        seen = {}

        class Recorder(Behavior):
            @entity_method
            def record(self, model, entity, *args):
                seen.update(model=model, entity=entity, args=args)
                return entity.get("title")

        posts.bind_behavior(Recorder)
        entity = posts.create(title="Hello")
        assert entity.record("x") == "Hello"
        assert seen == {"model": posts, "entity": entity, "args": ("x",)}

    def test_entity_fields_take_precedence(self, posts):
        posts.bind_behavior("MockFly")
        entity = posts.create({"fly": "field value"})

        assert entity.fly == "field value"


class TestDispatchMiss:
    def test_static_miss_becomes_attribute_error(self, posts):
        posts.bind_behavior("MockFly")

        with pytest.raises(AttributeError) as exc_info:
            posts.swim("Lake")
        assert isinstance(exc_info.value.__cause__, DispatchMiss)

    def test_instance_miss_becomes_attribute_error(self, posts):
        posts.bind_behavior("MockJet")
        entity = posts.create()

        # MockJet only has model-level fly
        with pytest.raises(AttributeError):
            entity.fly("Rome")

    def test_hasattr_reflects_bindings(self, posts):
        assert not hasattr(posts, "fly")
        posts.bind_behavior("MockFly")
        assert hasattr(posts, "fly")
        posts.unbind_behavior("MockFly")
        assert not hasattr(posts, "fly")

    def test_private_names_not_forwarded(self, posts):
        posts.bind_behavior("MockFly")
        with pytest.raises(AttributeError):
            posts._fly

    def test_dispatch_functions_raise_miss(self, posts):
        table = posts.behavior_table()
        with pytest.raises(DispatchMiss) as exc_info:
            dispatch_static(table, "fly", "Rome")
        assert exc_info.value.method == "fly"
        assert exc_info.value.scope == "model"

        with pytest.raises(DispatchMiss) as exc_info:
            dispatch_instance(table, posts.create(), "fly", "Rome")
        assert exc_info.value.scope == "entity"

    def test_dispatch_functions_call_through(self, posts):
        posts.bind_behavior("MockFly")
        table = posts.behavior_table()

        assert dispatch_static(table, "fly", "Rome") == "Rome reached in 1h54."
        assert dispatch_instance(table, posts.create(), "fly", "Rome") == "Rome reached in 1h54."
