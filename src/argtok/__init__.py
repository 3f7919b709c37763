from .fsm import InvalidTransition, StateMachine, StateMachineInstance, StateTransition
from .parser import (
    ArgumentTokenizer,
    Event,
    InvalidEscapeCharacter,
    State,
    join,
    quote,
    tokenize,
)

__version__ = "0.1.0"

__all__ = [
    "ArgumentTokenizer",
    "Event",
    "InvalidEscapeCharacter",
    "InvalidTransition",
    "State",
    "StateMachine",
    "StateMachineInstance",
    "StateTransition",
    "join",
    "quote",
    "tokenize",
]
