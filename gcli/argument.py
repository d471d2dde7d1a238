"""
GCLI arguments: the lexical units produced by the tokenizer.

Scope
- Argument keeps the text of one token together with the whitespace and
  quotes that surrounded it, so that str(argument) rebuilds the exact slice of
  the typed input it came from.
- The variants form a tagged union on ArgumentKind. Behaviour that differs per
  variant (get_args, assign, equals, unclosed) is written once, as an
  exhaustive match on the kind.

Variants
- SIMPLE       plain token.
- MERGED       contiguous run of tokens joined with merge() (multi-word
               command names, the single-string-parameter case).
- NAMED        '--name value' pair; prefix is the name token plus the value's
               own prefix.
- TRUE_NAMED   boolean flag that was typed.
- FALSE_NAMED  boolean flag that was not typed (no characters at all).
- ARRAY        all the tokens collected for one array parameter.

Notes
- Arguments are value objects: they are created by the tokenizer or derived
  with beget(), never edited in place. The only exception is the weak
  back-reference set by assign(), which ties an argument to the assignment
  that consumed it.
- Equality (== / equals) compares kind and characters; the requisition
  locates arguments by identity.
"""
import weakref
from enum import Enum

from .utils import Unset, coalesce


class ArgumentKind(Enum):
    SIMPLE = "simple"
    MERGED = "merged"
    NAMED = "named"
    TRUE_NAMED = "true-named"
    FALSE_NAMED = "false-named"
    ARRAY = "array"


class Argument:
    """
    A single token: text plus the prefix/suffix characters around it.

    Parameters
    - text: str, the token's content with quotes and escapes resolved.
    - prefix: str, whitespace and an opening quote before the text.
    - suffix: str, a closing quote and trailing whitespace after the text.
    - unclosed: bool (keyword-only), the token ended inside an open quote.
    """
    kind = ArgumentKind.SIMPLE

    def __init__(self, text="", prefix="", suffix="", /, *, unclosed=False):
        for name, value in (("text", text), ("prefix", prefix), ("suffix", suffix)):
            if not isinstance(value, str):
                raise TypeError(f"{type(self).__name__} {name!r} must be a string")
        self.text = text
        self.prefix = prefix
        self.suffix = suffix
        self._unclosed = bool(unclosed)
        self._assignment = None

    @property
    def assignment(self):
        """The assignment this argument was bound to, or None."""
        return self._assignment() if self._assignment is not None else None

    @property
    def unclosed(self):
        match self.kind:
            case ArgumentKind.SIMPLE:
                return self._unclosed
            case ArgumentKind.MERGED | ArgumentKind.ARRAY:
                return any(arg.unclosed for arg in self.args)
            case ArgumentKind.NAMED:
                return self.value_arg.unclosed
            case ArgumentKind.TRUE_NAMED:
                return self.arg is not Unset and self.arg.unclosed
            case ArgumentKind.FALSE_NAMED:
                return False

    def merge(self, following, /):
        """
        Join this argument with the one that follows it in the input.

        The result spans both: the inner suffix/prefix become part of the text.
        """
        return Argument(self.text + self.suffix + following.prefix + following.text,
                        self.prefix, following.suffix, unclosed=following.unclosed)

    def get_args(self):
        """
        The tokenizer-level arguments this argument stands for.

        The requisition uses this to remove consumed tokens from its working
        list, so a TRUE_NAMED flag built from a typed token yields both.
        """
        match self.kind:
            case ArgumentKind.SIMPLE:
                return [self]
            case ArgumentKind.MERGED | ArgumentKind.ARRAY:
                return list(self.args)
            case ArgumentKind.NAMED:
                return [self.name_arg, self.value_arg]
            case ArgumentKind.TRUE_NAMED:
                return [self] if self.arg is Unset else [self, self.arg]
            case ArgumentKind.FALSE_NAMED:
                return []

    def assign(self, assignment, /):
        """Record the owning assignment (weakly) here and on every component."""
        reference = weakref.ref(assignment) if assignment is not None else None
        match self.kind:
            case ArgumentKind.SIMPLE | ArgumentKind.FALSE_NAMED:
                pass
            case ArgumentKind.MERGED | ArgumentKind.ARRAY:
                for arg in self.args:
                    arg.assign(assignment)
            case ArgumentKind.NAMED:
                self.name_arg.assign(assignment)
                self.value_arg.assign(assignment)
            case ArgumentKind.TRUE_NAMED:
                if self.arg is not Unset:
                    self.arg.assign(assignment)
        self._assignment = reference

    def is_blank(self):
        return self.text == "" and self.prefix.strip() == "" and self.suffix.strip() == ""

    def equals(self, other, /):
        if self is other:
            return True
        if not isinstance(other, Argument) or other.kind is not self.kind:
            return False
        match self.kind:
            case ArgumentKind.ARRAY:
                return len(self.args) == len(other.args) and all(
                    mine.equals(theirs) for mine, theirs in zip(self.args, other.args)
                )
            case _:
                return (self.text, self.prefix, self.suffix) == (other.text, other.prefix, other.suffix)

    def __eq__(self, other):
        if not isinstance(other, Argument):
            return NotImplemented
        return self.equals(other)

    def __hash__(self):
        return hash((self.kind, self.prefix, self.text, self.suffix))

    def __str__(self):
        return self.prefix + self.text + self.suffix

    def __repr__(self):
        return f"{type(self).__name__}({self.text!r}, {self.prefix!r}, {self.suffix!r})"

    def beget(self, *, text=Unset, prefix_space=False, suffix_space=False, prefix_post_space=False, dont_quote=False):
        """
        Derive a replacement argument for programmatic edits (completion,
        increment/decrement, UI fields).

        Parameters
        - text: replacement text; quoted with "'" when it contains a space or
          is empty, unless dont_quote is set or the prefix already ends in a quote.
        - prefix_space: make sure the argument starts with a space.
        - suffix_space: make sure the argument ends with a space.
        - prefix_post_space: make sure there is a space between a parameter
          name and its value (the value's prefix for NAMED arguments, the end
          of the prefix otherwise).

        Returns
        - self when nothing would change, a fresh argument otherwise.
        """
        match self.kind:
            case ArgumentKind.NAMED:
                name_arg = self.name_arg.beget(prefix_space=prefix_space)
                value_arg = self.value_arg.beget(
                    text=text, suffix_space=suffix_space, prefix_space=prefix_post_space, dont_quote=dont_quote
                )
                if name_arg is self.name_arg and value_arg is self.value_arg:
                    return self
                return NamedArgument(name_arg, value_arg)
            case ArgumentKind.ARRAY | ArgumentKind.FALSE_NAMED if text is Unset:
                return self

        value = coalesce(text, self.text)
        prefix = self.prefix
        suffix = self.suffix

        if text is not Unset and not dont_quote and (" " in value or value == ""):
            if not prefix.endswith(("'", '"')):
                prefix += "'"
                suffix = "'" + suffix
        if prefix_space and not prefix.startswith(" "):
            prefix = " " + prefix
        if prefix_post_space and not prefix.endswith(" "):
            prefix += " "
        if suffix_space and not suffix.endswith(" "):
            suffix += " "

        if (value, prefix, suffix) == (self.text, self.prefix, self.suffix):
            return self
        return Argument(value, prefix, suffix)


def merge_arguments(args, start=0, end=Unset, /):
    """Fold args[start:end] into a single argument with Argument.merge()."""
    joined = None
    for arg in args[start:coalesce(end, len(args))]:
        joined = arg if joined is None else joined.merge(arg)
    return joined


class MergedArgument(Argument):
    """
    Several contiguous arguments treated as one (e.g. 'tsn deep down').

    The components are kept so the requisition can remove them from its list.
    """
    kind = ArgumentKind.MERGED

    def __init__(self, args, start=0, end=Unset, /):
        if not isinstance(args, list) or not all(isinstance(arg, Argument) for arg in args):
            raise TypeError("MergedArgument 'args' must be a list of arguments")
        self.args = args[start:coalesce(end, len(args))]
        joined = merge_arguments(self.args) or Argument()
        super().__init__(joined.text, joined.prefix, joined.suffix)


class NamedArgument(Argument):
    """
    A '--name value' pair. A missing value is an empty synthetic argument, so
    the name alone still reconstructs the typed characters.
    """
    kind = ArgumentKind.NAMED

    def __init__(self, name_arg, value_arg=Unset, /):
        if value_arg is Unset:
            value_arg = Argument("", "", "")
        self.name_arg = name_arg
        self.value_arg = value_arg
        super().__init__(value_arg.text, str(name_arg) + value_arg.prefix, value_arg.suffix)


class TrueNamedArgument(Argument):
    """
    A boolean flag that is present. Built from the typed '--flag' token, or
    synthetically (from a UI) with just the parameter name.
    """
    kind = ArgumentKind.TRUE_NAMED

    def __init__(self, name, arg=Unset, /):
        self.name = name
        self.arg = arg
        if arg is Unset:
            super().__init__("--" + name, " ", "")
        else:
            super().__init__(arg.text, arg.prefix, arg.suffix)


class FalseNamedArgument(Argument):
    """A boolean flag that is absent: no characters at all."""
    kind = ArgumentKind.FALSE_NAMED

    def __init__(self):
        super().__init__("", "", "")


class ArrayArgument(Argument):
    """All the arguments collected for one array parameter."""
    kind = ArgumentKind.ARRAY

    def __init__(self, args=(), /):
        super().__init__("", "", "")
        self.args = list(args)

    def add_argument(self, arg, /):
        self.args.append(arg)

    def add_arguments(self, args, /):
        self.args.extend(args)

    def get_arguments(self):
        return list(self.args)

    def is_blank(self):
        return not self.args

    __hash__ = None

    def __str__(self):
        return "{" + ",".join(str(arg) for arg in self.args) + "}"

    def __repr__(self):
        return f"ArrayArgument({self.args!r})"


__all__ = (
    "ArgumentKind",
    "Argument",
    "MergedArgument",
    "NamedArgument",
    "TrueNamedArgument",
    "FalseNamedArgument",
    "ArrayArgument",
    "merge_arguments",
)
