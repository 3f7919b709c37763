from dataclasses import dataclass
from typing import (
    Callable,
    Dict,
    Generic,
    List,
    Optional,
    Tuple,
    TypeVar,
)

from .logging import get_logger

S = TypeVar("S")
E = TypeVar("E")
C = TypeVar("C")
T = TypeVar("T")

logger = get_logger("argtok.fsm")


class InvalidTransition(Exception):
    """Exception raised when no transition matches the current state and event."""

    def __init__(self, state, event, payload=None) -> None:
        self.state = state
        self.event = event
        self.payload = payload
        super().__init__(
            f"Unable to transition from state {state} on event {event} with payload {payload!r}"
        )


@dataclass(frozen=True)
class StateTransition(Generic[S, E, C, T]):
    """
    A rule mapping `(from_state, event)` to `to_state`.

    Args:
        from_state: State the transition starts from.
        to_state: State the machine progresses to.
        event: Event the transition reacts to.
        action (callable, optional): Invoked as `action(context, payload)` after
            the state has changed. `None` means the transition has no side effect.
    """

    from_state: S
    to_state: S
    event: E
    action: Optional[Callable[[C, T], None]] = None


class StateMachine(Generic[S, E, C, T]):
    """
    A table-driven state machine definition.

    Transitions are kept in registration order. If several transitions share
    the same `(from_state, event)` pair, only the first one registered ever fires.
    The definition is frozen once the first instance is started.
    """

    def __init__(self, initial_state: S) -> None:
        self._initial_state = initial_state
        self._transitions: List[StateTransition[S, E, C, T]] = []
        self._index: Dict[Tuple[S, E], StateTransition[S, E, C, T]] = {}
        self._frozen = False

    @property
    def initial_state(self) -> S:
        return self._initial_state

    @property
    def transitions(self) -> Tuple[StateTransition[S, E, C, T], ...]:
        """Return all transitions in registration order."""
        return tuple(self._transitions)

    def add_transition(self, transition: StateTransition[S, E, C, T]) -> None:
        """Append a transition. No validation of duplicates or reachability is performed."""
        if self._frozen:
            raise RuntimeError("Cannot add transitions to a started state machine")

        self._transitions.append(transition)
        # First registered wins
        self._index.setdefault((transition.from_state, transition.event), transition)

    def find_transition(self, state: S, event: E) -> Optional[StateTransition[S, E, C, T]]:
        """Return the transition selected for `(state, event)`, or None."""
        return self._index.get((state, event))

    def start(self, context: C) -> "StateMachineInstance[S, E, C, T]":
        """
        Start a new instance of the state machine.

        Args:
            context: Passed to every action invoked by the instance.

        Returns:
            StateMachineInstance: A fresh instance in the initial state.
        """
        self._frozen = True
        return StateMachineInstance(self, context)

    def __repr__(self) -> str:
        return f"<StateMachine initial={self._initial_state} transitions={len(self._transitions)}>"


class StateMachineInstance(Generic[S, E, C, T]):
    """The running state of one `StateMachine` for one context."""

    def __init__(self, state_machine: StateMachine[S, E, C, T], context: C) -> None:
        self._state_machine = state_machine
        self._context = context
        self._state: S = state_machine.initial_state

    @property
    def state(self) -> S:
        return self._state

    @property
    def context(self) -> C:
        return self._context

    def submit(self, event: E, payload: Optional[T] = None) -> None:
        """
        Trigger a transition for `event`.

        The current state is updated before the action of the selected
        transition is invoked with `(context, payload)`.

        Raises:
            InvalidTransition: If no transition exists for the current state and `event`.
        """
        transition = self._state_machine.find_transition(self._state, event)

        if transition is None:
            logger.debug(
                "invalid_transition",
                state=str(self._state),
                trigger=str(event),
                payload=repr(payload),
            )
            raise InvalidTransition(self._state, event, payload)

        self._state = transition.to_state

        if transition.action is not None:
            transition.action(self._context, payload)
