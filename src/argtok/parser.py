import enum
import re
from typing import Iterable, List, Mapping, Optional, Sequence

from .fsm import StateMachine, StateTransition
from .logging import get_logger

logger = get_logger("argtok.parser")

# Special characters that support escaping
ESCAPE_CHARACTERS: Mapping[str, str] = {
    "n": "\n",
    "r": "\r",
    "'": "'",
    '"': '"',
    "t": "\t",
}

# Characters that separate unquoted tokens
WHITESPACE_CHARACTERS: Sequence[str] = (" ", "\t")


class State(enum.Enum):
    WHITESPACE = "whitespace"
    TOKEN = "token"
    TOKEN_ESCAPE = "token_escape"
    SINGLE_QUOTED_TOKEN = "single_quoted_token"
    DOUBLE_QUOTED_TOKEN = "double_quoted_token"
    DOUBLE_QUOTED_TOKEN_ESCAPE = "double_quoted_token_escape"
    END = "end"

    def __str__(self) -> str:
        return self.name


class Event(enum.Enum):
    NON_WHITESPACE = "non_whitespace"
    WHITESPACE = "whitespace"
    BACKSLASH = "backslash"
    DOUBLE_QUOTE = "double_quote"
    SINGLE_QUOTE = "single_quote"
    END = "end"

    def __str__(self) -> str:
        return self.name


class InvalidEscapeCharacter(ValueError):
    """Exception raised when an escape sequence names an unsupported character."""

    def __init__(self, char: str) -> None:
        self.char = char
        super().__init__(f"{char!r} is not a valid escape character")


class TokenizerContext:
    """Collects characters of the current token and the completed tokens."""

    def __init__(self, escape_characters: Mapping[str, str] = ESCAPE_CHARACTERS) -> None:
        self.escape_characters = escape_characters
        self._tokens: List[str] = []
        self._current: List[str] = []

    def append(self, c: str) -> None:
        self._current.append(c)

    def append_escaped(self, c: str) -> None:
        """Translate `c` through the escape table and append the result."""
        try:
            self._current.append(self.escape_characters[c])
        except KeyError:
            raise InvalidEscapeCharacter(c) from None

    def end_token(self) -> None:
        """Complete the current token. Empty tokens are dropped."""
        if self._current:
            self._tokens.append("".join(self._current))
        self._current.clear()

    @property
    def tokens(self) -> List[str]:
        return list(self._tokens)


def _append(context: TokenizerContext, c: str):
    context.append(c)


def _append_escaped(context: TokenizerContext, c: str):
    context.append_escaped(c)


def _end_token(context: TokenizerContext, c: Optional[str]):
    context.end_token()


def build_state_machine() -> StateMachine[State, Event, TokenizerContext, str]:
    """Build the state machine that drives argument tokenization."""

    sm: StateMachine[State, Event, TokenizerContext, str] = StateMachine(
        State.WHITESPACE
    )

    def add(from_state, to_state, event, action=None):
        sm.add_transition(StateTransition(from_state, to_state, event, action))

    # Whitespace
    add(State.WHITESPACE, State.WHITESPACE, Event.WHITESPACE)
    add(State.WHITESPACE, State.END, Event.END)

    # Non-quoted tokens
    add(State.WHITESPACE, State.TOKEN_ESCAPE, Event.BACKSLASH)
    add(State.WHITESPACE, State.TOKEN, Event.NON_WHITESPACE, _append)
    add(State.TOKEN, State.TOKEN_ESCAPE, Event.BACKSLASH)
    add(State.TOKEN, State.TOKEN, Event.NON_WHITESPACE, _append)
    add(State.TOKEN_ESCAPE, State.TOKEN, Event.SINGLE_QUOTE, _append)
    add(State.TOKEN_ESCAPE, State.TOKEN, Event.DOUBLE_QUOTE, _append)
    add(State.TOKEN_ESCAPE, State.TOKEN, Event.NON_WHITESPACE, _append_escaped)
    add(State.TOKEN_ESCAPE, State.TOKEN, Event.BACKSLASH, _append)
    add(State.TOKEN, State.END, Event.END, _end_token)
    add(State.TOKEN, State.WHITESPACE, Event.WHITESPACE, _end_token)

    # Double-quoted tokens
    add(State.WHITESPACE, State.DOUBLE_QUOTED_TOKEN, Event.DOUBLE_QUOTE)
    add(State.DOUBLE_QUOTED_TOKEN, State.DOUBLE_QUOTED_TOKEN, Event.NON_WHITESPACE, _append)
    add(State.DOUBLE_QUOTED_TOKEN, State.DOUBLE_QUOTED_TOKEN, Event.WHITESPACE, _append)
    add(State.DOUBLE_QUOTED_TOKEN, State.DOUBLE_QUOTED_TOKEN, Event.SINGLE_QUOTE, _append)
    add(State.DOUBLE_QUOTED_TOKEN, State.DOUBLE_QUOTED_TOKEN_ESCAPE, Event.BACKSLASH)
    add(State.DOUBLE_QUOTED_TOKEN_ESCAPE, State.DOUBLE_QUOTED_TOKEN, Event.BACKSLASH, _append)
    add(State.DOUBLE_QUOTED_TOKEN_ESCAPE, State.DOUBLE_QUOTED_TOKEN, Event.DOUBLE_QUOTE, _append)
    add(State.DOUBLE_QUOTED_TOKEN_ESCAPE, State.DOUBLE_QUOTED_TOKEN, Event.SINGLE_QUOTE, _append)
    add(
        State.DOUBLE_QUOTED_TOKEN_ESCAPE,
        State.DOUBLE_QUOTED_TOKEN,
        Event.NON_WHITESPACE,
        _append_escaped,
    )
    add(State.DOUBLE_QUOTED_TOKEN, State.WHITESPACE, Event.DOUBLE_QUOTE, _end_token)

    # Single-quoted tokens: no escape processing at all
    add(State.WHITESPACE, State.SINGLE_QUOTED_TOKEN, Event.SINGLE_QUOTE)
    add(State.SINGLE_QUOTED_TOKEN, State.SINGLE_QUOTED_TOKEN, Event.NON_WHITESPACE, _append)
    add(State.SINGLE_QUOTED_TOKEN, State.SINGLE_QUOTED_TOKEN, Event.WHITESPACE, _append)
    add(State.SINGLE_QUOTED_TOKEN, State.SINGLE_QUOTED_TOKEN, Event.DOUBLE_QUOTE, _append)
    add(State.SINGLE_QUOTED_TOKEN, State.SINGLE_QUOTED_TOKEN, Event.BACKSLASH, _append)
    add(State.SINGLE_QUOTED_TOKEN, State.WHITESPACE, Event.SINGLE_QUOTE, _end_token)

    return sm


_state_machine = build_state_machine()


class ArgumentTokenizer:
    """
    Split an argument string into tokens.

    Unquoted tokens are separated by unescaped whitespace. Tokens wrapped in
    double or single quotes may contain whitespace. A quoted token must begin
    and end with the same quotation character and may not start in the middle
    of another token: `"foo bar" "baz"` is valid, `fo"o bar` is not.

    Supported escapes in unquoted and double-quoted tokens:

        \\n  newline
        \\r  carriage return
        \\t  tab
        \\\\  backslash
        \\"  double quotation mark
        \\'  single quotation mark

    Single-quoted tokens are literals: `"foo\\tbar"` contains a tab, while
    `'foo\\tbar'` is kept as `foo\\tbar`.

    Args:
        whitespace (sequence of str, optional): Characters separating tokens.
            Defaults to space and tab.
        escape_characters (mapping, optional): Translation of `\\x` escape sequences.
    """

    def __init__(
        self,
        whitespace: Iterable[str] = WHITESPACE_CHARACTERS,
        escape_characters: Mapping[str, str] = ESCAPE_CHARACTERS,
    ) -> None:
        self.whitespace = frozenset(whitespace)
        self.escape_characters = dict(escape_characters)

    def _classify(self, c: str) -> Event:
        if c in self.whitespace:
            return Event.WHITESPACE
        if c == "\\":
            return Event.BACKSLASH
        if c == "'":
            return Event.SINGLE_QUOTE
        if c == '"':
            return Event.DOUBLE_QUOTE
        return Event.NON_WHITESPACE

    def tokenize(self, raw: str) -> List[str]:
        """
        Tokenize `raw` into a list of argument tokens.

        Raises:
            InvalidTransition: On malformed quoting, e.g. an unterminated quote,
                a quote starting mid-token or a trailing backslash.
            InvalidEscapeCharacter: On an unsupported escape sequence.
        """
        context = TokenizerContext(self.escape_characters)
        instance = _state_machine.start(context)

        try:
            for c in raw:
                instance.submit(self._classify(c), c)

            instance.submit(Event.END, None)
        except Exception as e:
            logger.debug("tokenize_failed", length=len(raw), error=type(e).__name__)
            raise

        tokens = context.tokens
        logger.debug("tokenized", length=len(raw), tokens=len(tokens))
        return tokens


_default_tokenizer = ArgumentTokenizer()


def tokenize(raw: str) -> List[str]:
    """Tokenize `raw` with the default whitespace and escape characters."""
    return _default_tokenizer.tokenize(raw)


_find_unsafe = re.compile(r"[^\w@%+=:,./-]", re.ASCII).search


def quote(s: str) -> str:
    """Return a representation of `s` that `tokenize` reads back as a single token."""
    if s == "":
        raise ValueError("The empty string can not be represented as a token")

    if _find_unsafe(s) is None:
        return s

    if "'" not in s:
        return "'" + s + "'"

    return '"' + s.replace("\\", "\\\\").replace('"', '\\"') + '"'


def join(seq_of_str: Iterable[str]) -> str:
    return " ".join(quote(arg) for arg in seq_of_str)
