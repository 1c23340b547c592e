import pytest

from planetsim.layers import Layer, LayerStack


class RecordingLayer(Layer):
    def __init__(self, name, log):
        super().__init__(name)
        self.log = log

    def on_detach(self):
        self.log.append(("detach", self.name))


@pytest.fixture
def log():
    return []


def make(log, *names):
    return [RecordingLayer(n, log) for n in names]


def test_default_name():
    assert Layer().name == "Layer"
    assert Layer("Custom").name == "Custom"


def test_overlays_stay_above_layers(log):
    a, b, c, o = make(log, "a", "b", "c", "o")
    stack = LayerStack()
    stack.push_layer(a)
    stack.push_layer(b)
    stack.push_overlay(o)
    stack.push_layer(c)
    assert list(stack) == [a, b, c, o]
    assert list(reversed(stack)) == [o, c, b, a]
    assert len(stack) == 4


def test_pop_layer_detaches_and_removes(log):
    a, b, o = make(log, "a", "b", "o")
    stack = LayerStack()
    stack.push_layer(a)
    stack.push_layer(b)
    stack.push_overlay(o)
    assert stack.pop_layer(a) is True
    assert list(stack) == [b, o]
    assert log == [("detach", "a")]
    new = RecordingLayer("n", log)
    stack.push_layer(new)
    assert list(stack) == [b, new, o]


def test_pop_layer_ignores_overlays(log):
    a, o = make(log, "a", "o")
    stack = LayerStack()
    stack.push_layer(a)
    stack.push_overlay(o)
    assert stack.pop_layer(o) is False
    assert list(stack) == [a, o]
    assert log == []


def test_pop_overlay(log):
    a, o1, o2 = make(log, "a", "o1", "o2")
    stack = LayerStack()
    stack.push_layer(a)
    stack.push_overlay(o1)
    stack.push_overlay(o2)
    assert stack.pop_overlay(a) is False
    assert stack.pop_overlay(o1) is True
    assert list(stack) == [a, o2]
    assert log == [("detach", "o1")]


def test_pop_missing_returns_false(log):
    (a,) = make(log, "a")
    stack = LayerStack()
    assert stack.pop_layer(a) is False
    assert stack.pop_overlay(a) is False
    assert len(stack) == 0


def test_clear_detaches_all_in_order(log):
    a, b, o = make(log, "a", "b", "o")
    stack = LayerStack()
    stack.push_overlay(o)
    stack.push_layer(a)
    stack.push_layer(b)
    stack.clear()
    assert log == [("detach", "a"), ("detach", "b"), ("detach", "o")]
    assert len(stack) == 0
    stack.push_layer(a)
    assert list(stack) == [a]


def test_iteration_is_safe_while_modifying(log):
    a, b = make(log, "a", "b")
    stack = LayerStack()
    stack.push_layer(a)
    stack.push_layer(b)
    seen = []
    for layer in stack:
        seen.append(layer)
        stack.pop_layer(layer)
    assert seen == [a, b]
    assert len(stack) == 0