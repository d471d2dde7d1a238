"""
GCLI type system: the Type protocol and the registry that builds types.

Scope
- Type: a named strategy that turns an Argument into a Conversion and a value
  back into text. Concrete types live in gcli.basic and gcli.selection.
- TypeRegistry: maps type names to Type classes (built per lookup, with
  options) or to shared Type instances. Owned by a System and injected into
  everything that resolves types; there is no process-wide registry.

Type contract
- parse(arg, context=Unset) -> Conversion, never raises for bad input.
- parse_async(arg, context=Unset): awaitable parse; types with asynchronous
  lookups override it, the default runs parse().
- stringify(value, context=Unset) -> str, the inverse of parse for good values.
- increment/decrement(value, context=Unset): the next/previous value, or
  Unset when stepping makes no sense for the type.
- get_blank(context=Unset): the conversion used when nothing was typed.
- get_default(context=Unset): a suggested value, Unset by default.

Specs
- A type is named by a string ("number") or by a mapping spec carrying
  constructor options ({"name": "number", "min": 0, "max": 10}). The registry
  passes itself as types= so composite types resolve their own sub-types.
"""
import builtins
import logging as logmod
from collections.abc import Mapping

from . import faults
from .argument import Argument
from .conversion import MAX_PREDICTIONS, Conversion, Status
from .faults import FaultCode, TypeSpecError, UnknownTypeError, getdoc
from .spell import suggest
from .utils import Unset, coalesce

logging = logmod.getLogger(__name__)


class Type:
    """
    Base class for every gcli type.

    Parameters
    - types: TypeRegistry | Unset (keyword-only), the registry this type was
      built by; composite types use it to resolve sub-types, and faults raised
      by the type go through its trigger.
    """
    name = Unset

    def __init__(self, *, types=Unset):
        self.types = types

    @property
    def max_predictions(self):
        if self.types is Unset:
            return MAX_PREDICTIONS
        return self.types.max_predictions

    def parse(self, arg, context=Unset, /):
        raise NotImplementedError(f"{type(self).__name__}.parse() is not implemented")

    async def parse_async(self, arg, context=Unset, /):
        return self.parse(arg, context)

    def parse_string(self, text, context=Unset, /):
        return self.parse(Argument(text), context)

    def stringify(self, value, context=Unset, /):
        raise NotImplementedError(f"{type(self).__name__}.stringify() is not implemented")

    def increment(self, value, context=Unset, /):
        return Unset

    def decrement(self, value, context=Unset, /):
        return Unset

    def get_blank(self, context=Unset, /):
        return Conversion(Unset, Argument(), Status.INCOMPLETE)

    def get_default(self, context=Unset, /):
        return Unset

    def resolve_type(self, spec, /):
        """A sub-type from a name, a spec or an instance, through self.types."""
        if isinstance(spec, Type):
            return spec
        if self.types is Unset:
            raise TypeError(f"{type(self).__name__} needs a type registry to resolve {spec!r}")
        return self.types.get_type(spec)

    def _trigger(self, fault, /, **options):
        if self.types is Unset:
            return faults.trigger(fault, **options)
        return self.types.trigger(fault, **options)

    def __repr__(self):
        return f"{type(self).__name__}(name={self.name!r})"


class TypeRegistry:
    """
    Name to type mapping used to resolve parameter types.

    Parameters
    - trigger: callable(fault, **options) used to surface faults; defaults to
      gcli.faults.trigger (System passes its own, which adds shell/fancy).
    - max_predictions: cap on the predictions any type built here returns.

    Registration
    - register(TypeClass, **defaults): built on every get_type() with the
      defaults merged under the type spec's options.
    - register(instance): shared instance returned as-is; cannot take options.
    - register() returns its argument, so it works as a class decorator.
    """

    def __init__(self, *, trigger=Unset, max_predictions=MAX_PREDICTIONS):
        if not isinstance(max_predictions, int) or max_predictions < 1:
            raise ValueError("TypeRegistry 'max_predictions' must be a positive integer")
        self._types = {}
        self._trigger = coalesce(trigger, faults.trigger)
        self.max_predictions = max_predictions

    def trigger(self, fault, /, **options):
        return self._trigger(fault, **options)

    def register(self, type, /, **defaults):
        if isinstance(type, builtins.type) and issubclass(type, Type):
            entry = (type, defaults)
        elif isinstance(type, Type):
            if defaults:
                raise TypeError("register() can't take defaults for a type instance")
            entry = (type, None)
        else:
            raise TypeError("register() argument must be a type class or a type instance")
        if not isinstance(type.name, str) or not type.name:
            raise ValueError("register() all registered types must have a name")
        if type.name in self._types:
            logging.debug("replacing registered type %r", type.name)
        self._types[type.name] = entry
        return type

    def deregister(self, type, /):
        name = type if isinstance(type, str) else type.name
        self._types.pop(name, None)

    def get_type_names(self):
        return list(self._types)

    def __contains__(self, name):
        return name in self._types

    def get_type(self, spec, /):
        """
        Resolve a type name, a mapping spec or a Type instance to a Type.

        Faults
        - UnknownTypeError: the name is not registered.
        - TypeSpecError: the type spec is not a string/mapping/Type, has no name,
          or its options are rejected by the type's constructor.
        """
        if isinstance(spec, Type):
            return spec

        if isinstance(spec, str):
            name, options = spec, {}
        elif isinstance(spec, Mapping):
            options = dict(spec)
            name = options.pop("name", Unset)
            if not isinstance(name, str) or not name:
                return self.trigger(TypeSpecError(
                    "type spec %r has no 'name'" % (spec,),
                    title="malformed type spec",
                    code=FaultCode.MALFORMED_TYPE_SPEC,
                    hint="give the type spec a 'name' key naming a registered type",
                    docs=getdoc(FaultCode.MALFORMED_TYPE_SPEC)
                ))
        else:
            return self.trigger(TypeSpecError(
                "can't extract a type from %r" % (spec,),
                title="malformed type spec",
                code=FaultCode.MALFORMED_TYPE_SPEC,
                hint="use a type name, a mapping with a 'name' key or a type instance",
                docs=getdoc(FaultCode.MALFORMED_TYPE_SPEC)
            ))

        try:
            factory, defaults = self._types[name]
        except KeyError:
            suggestions = suggest(name, self._types)
            try:
                hint = "did you mean %r?" % suggestions[0]
            except IndexError:
                hint = "known types are %s" % ", ".join(sorted(self._types)) if self._types else "no types are registered"
            return self.trigger(UnknownTypeError(
                "unknown type %r" % name,
                title="unknown type",
                code=FaultCode.UNKNOWN_TYPE,
                hint=hint,
                suggestions=suggestions,
                docs=getdoc(FaultCode.UNKNOWN_TYPE)
            ))

        if defaults is None:
            if options:
                return self.trigger(TypeSpecError(
                    "type %r can not be customized" % name,
                    title="malformed type spec",
                    code=FaultCode.MALFORMED_TYPE_SPEC,
                    hint="drop the options %s" % ", ".join(map(repr, options)),
                    docs=getdoc(FaultCode.MALFORMED_TYPE_SPEC)
                ))
            return factory

        try:
            return factory(**(defaults | options), types=self)
        except (TypeError, ValueError) as error:
            return self.trigger(TypeSpecError(
                "bad options for type %r: %s" % (name, error),
                title="malformed type spec",
                code=FaultCode.MALFORMED_TYPE_SPEC,
                hint="check the options accepted by %s" % factory.__name__,
                docs=getdoc(FaultCode.MALFORMED_TYPE_SPEC)
            ))


__all__ = (
    "Type",
    "TypeRegistry",
)
