"""
Pytest configuration and shared fixtures for behaviorkit tests.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from behaviorkit.behaviors import Behavior, BehaviorLocator, entity_method, model_method
from behaviorkit.behaviors.locator import reset_default_locator
from behaviorkit.config import reset_settings
from behaviorkit.models import Model


# ============================================================================
# Mock behaviors
# ============================================================================

class MockFly(Behavior):
    defaults = {"speed_label": "1h54", "foo": "bar", "baz": ["qux"]}

    @model_method(name="fly")
    def static_fly(self, model, target):
        return f"{target} reached in {self.config_value('speed_label')}."

    @entity_method(name="fly")
    def instance_fly(self, model, entity, target):
        return f"{target} reached in {self.config_value('speed_label')}."


class MockJet(Behavior):
    defaults = {"label": "jet"}

    @model_method
    def fly(self, model, target):
        return f"{target} by {self.config_value('label')}."

    @model_method
    def refuel(self, model):
        return "refueled"


class MockGreeter(Behavior):
    defaults = {"greeting": "Hello"}

    def entity_members(self):
        greeting = self.config_value("greeting")

        def greet(entity, who="world"):
            return f"{greeting}, {who} from {entity.get('title')}"

        return {"greet": greet}


class MockWaver(Behavior):
    def entity_members(self):
        return {"greet": lambda entity: "wave"}


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def _clean_state(monkeypatch):
    """Fresh settings and default locator for every test."""
    for var in ("BEHAVIORKIT_AUTO_INIT", "BEHAVIORKIT_COLLISION_POLICY", "BEHAVIORKIT_SEARCH_PATHS"):
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    reset_default_locator()
    yield
    reset_settings()
    reset_default_locator()


@pytest.fixture
def locator():
    """Locator with built-ins plus the mock behaviors."""
    loc = BehaviorLocator(search_paths=[])
    loc.register("MockFly", MockFly)
    loc.register("MockJet", MockJet)
    loc.register("MockGreeter", MockGreeter)
    loc.register("MockWaver", MockWaver)
    return loc


@pytest.fixture
def posts(locator):
    """A fresh model class with no declared behaviors."""

    class MockPosts(Model):
        acts_as = []
        behavior_locator = locator

    yield MockPosts
    MockPosts.reset()


@pytest.fixture
def make_model(locator):
    """Factory for model classes with the given ``acts_as``."""
    created = []

    def _make(acts_as=None, name="MockModel", **attrs):
        namespace = {"acts_as": acts_as or [], "behavior_locator": locator}
        namespace.update(attrs)
        model = type(name, (Model,), namespace)
        created.append(model)
        return model

    yield _make
    for model in created:
        model.reset()
