"""
GCLI tokenizer: typed text to a list of Arguments.

Scope
- tokenize(typed) splits a command line into Arguments, keeping every
  character: whitespace and quotes live in each argument's prefix/suffix, so
  joining str(arg) for all arguments rebuilds the input (for input without
  escapes).

Rules
- Empty input yields one empty Argument, never an empty list.
- Input without spaces, quotes or backslashes is returned as one Argument.
- Escapes are resolved up-front in one pass: \\\\ \\b \\f \\n \\r \\t \\v map
  to their characters; \\<space> \\' \\" map to private-use placeholders that
  are turned back into the literal character once a token is cut, so they
  never act as separators or quotes.
- Only ' ' separates arguments; tabs and other whitespace are text.
- Trailing whitespace goes to the last argument's suffix (or to the prefix of
  a new empty argument when the input is all whitespace).
- A quote left open at the end of the input still produces an argument, with
  unclosed=True so that the requisition can report it as incomplete.
"""
import logging as logmod
import re
from enum import Enum

from .argument import Argument

logging = logmod.getLogger(__name__)

_ESCAPES = {
    "\\": "\\",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    " ": "\uF000",
    "'": "\uF001",
    '"': "\uF002",
}

_PLACEHOLDERS = str.maketrans({"\uF000": " ", "\uF001": "'", "\uF002": '"'})


class _State(Enum):
    WHITESPACE = "whitespace"
    SIMPLE = "simple"
    SINGLE_QUOTE = "single-quote"
    DOUBLE_QUOTE = "double-quote"


def is_simple(typed, /):
    """True when typed has no space, quote or backslash (one plain token)."""
    return not any(char in typed for char in " '\"\\")


def escape(typed, /):
    """Resolve backslash escapes, leaving placeholders for space and quotes."""
    return re.sub(r"\\(.)", lambda match: _ESCAPES.get(match[1], match[0]), typed, flags=re.DOTALL)


def unescape(text, /):
    """Turn placeholders left by escape() back into their literal characters."""
    return text.translate(_PLACEHOLDERS)


def tokenize(typed, /):
    """
    split typed text into Arguments.

    returns
    - list[Argument], at least one element.

    examples
    - tokenize("a   b")   -> [Argument('a', '', ''), Argument('b', '   ', '')]
    - tokenize("'a b' c") -> [Argument('a b', "'", "'"), Argument('c', ' ', '')]
    - tokenize(" ")       -> [Argument('', ' ', '')]
    """
    if not isinstance(typed, str):
        raise TypeError("tokenize() argument must be a string")
    if not typed:
        return [Argument("", "", "")]
    if is_simple(typed):
        return [Argument(typed, "", "")]

    typed = escape(typed)
    state = _State.WHITESPACE
    start = 0
    prefix = ""
    args = []

    for index, char in enumerate(typed):
        match state:
            case _State.WHITESPACE:
                if char == "'":
                    prefix = typed[start:index + 1]
                    state = _State.SINGLE_QUOTE
                    start = index + 1
                elif char == '"':
                    prefix = typed[start:index + 1]
                    state = _State.DOUBLE_QUOTE
                    start = index + 1
                elif char != " ":
                    prefix = typed[start:index]
                    state = _State.SIMPLE
                    start = index
            case _State.SIMPLE:
                if char == " ":
                    args.append(Argument(unescape(typed[start:index]), prefix, ""))
                    state = _State.WHITESPACE
                    start = index
                    prefix = ""
            case _State.SINGLE_QUOTE | _State.DOUBLE_QUOTE:
                if char == ("'" if state is _State.SINGLE_QUOTE else '"'):
                    args.append(Argument(unescape(typed[start:index]), prefix, char))
                    state = _State.WHITESPACE
                    start = index + 1
                    prefix = ""

    match state:
        case _State.WHITESPACE:
            if start != len(typed):
                extra = typed[start:]
                if args:
                    last = args.pop()
                    args.append(Argument(last.text, last.prefix, last.suffix + extra))
                else:
                    args.append(Argument("", extra, ""))
        case _State.SIMPLE:
            args.append(Argument(unescape(typed[start:]), prefix, ""))
        case _State.SINGLE_QUOTE | _State.DOUBLE_QUOTE:
            logging.debug("unterminated quote in %r", typed)
            args.append(Argument(unescape(typed[start:]), prefix, "", unclosed=True))

    logging.debug("tokenized %r into %d argument(s)", typed, len(args))
    return args


__all__ = (
    "tokenize",
    "is_simple",
    "escape",
    "unescape",
)
