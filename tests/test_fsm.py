import dataclasses
import enum

import pytest
from structlog.testing import capture_logs

from argtok.fsm import InvalidTransition, StateMachine, StateTransition


class Light(enum.Enum):
    OFF = 0
    ON = 1
    BROKEN = 2


def _record(context, payload):
    context.append(payload)


def _make_switch() -> StateMachine:
    sm = StateMachine(Light.OFF)
    sm.add_transition(StateTransition(Light.OFF, Light.ON, "toggle", _record))
    sm.add_transition(StateTransition(Light.ON, Light.OFF, "toggle"))
    sm.add_transition(StateTransition(Light.ON, Light.BROKEN, "hit", _record))
    return sm


def test_start():
    sm = _make_switch()
    context = []
    instance = sm.start(context)

    assert instance.state == Light.OFF
    assert instance.context is context
    assert sm.initial_state == Light.OFF


def test_submit():
    sm = _make_switch()
    context = []
    instance = sm.start(context)

    instance.submit("toggle", 1)
    assert instance.state == Light.ON
    assert context == [1]

    # Transition without action
    instance.submit("toggle", 2)
    assert instance.state == Light.OFF
    assert context == [1]

    instance.submit("toggle")
    instance.submit("hit", "boom")
    assert instance.state == Light.BROKEN
    assert context == [1, None, "boom"]


def test_first_match_wins():
    sm = StateMachine("a")
    sm.add_transition(StateTransition("a", "b", "go", lambda c, p: c.append("first")))
    sm.add_transition(StateTransition("a", "c", "go", lambda c, p: c.append("second")))

    context = []
    instance = sm.start(context)
    instance.submit("go")

    assert instance.state == "b"
    assert context == ["first"]

    # Both are still part of the definition
    assert [t.to_state for t in sm.transitions] == ["b", "c"]


def test_state_updated_before_action():
    sm = StateMachine("a")
    seen = []
    sm.add_transition(
        StateTransition("a", "b", "go", lambda c, p: seen.append(c["instance"].state))
    )

    context = {}
    context["instance"] = sm.start(context)
    context["instance"].submit("go")

    assert seen == ["b"]


def test_invalid_transition():
    sm = _make_switch()
    instance = sm.start([])

    with pytest.raises(InvalidTransition) as excinfo:
        instance.submit("hit", 42)

    assert excinfo.value.state == Light.OFF
    assert excinfo.value.event == "hit"
    assert excinfo.value.payload == 42
    assert "42" in str(excinfo.value)

    # The instance stays where it was
    assert instance.state == Light.OFF


def test_action_error_propagates():
    def fail(context, payload):
        raise ValueError(payload)

    sm = StateMachine(0)
    sm.add_transition(StateTransition(0, 1, "x", fail))

    with pytest.raises(ValueError, match="bad"):
        sm.start(None).submit("x", "bad")


def test_instances_are_independent():
    sm = _make_switch()
    a = sm.start([])
    b = sm.start([])

    a.submit("toggle")
    assert a.state == Light.ON
    assert b.state == Light.OFF


def test_frozen_after_start():
    sm = _make_switch()
    sm.start([])

    with pytest.raises(RuntimeError):
        sm.add_transition(StateTransition(Light.BROKEN, Light.OFF, "repair"))

    assert len(sm.transitions) == 3


def test_transition_defaults():
    transition = StateTransition("a", "b", "go")
    assert transition.action is None
    assert transition == StateTransition("a", "b", "go", None)

    with pytest.raises(dataclasses.FrozenInstanceError):
        transition.to_state = "c"  # type: ignore


def test_invalid_transition_is_logged():
    sm = _make_switch()
    instance = sm.start([])

    with capture_logs() as cap_logs:
        with pytest.raises(InvalidTransition):
            instance.submit("hit", "x")

    assert cap_logs == [
        {
            "event": "invalid_transition",
            "log_level": "debug",
            "logger_name": "argtok.fsm",
            "state": str(Light.OFF),
            "trigger": "hit",
            "payload": "'x'",
        }
    ]
