import importlib
from typing import Any

from .errors import ConfigurationError


# Keys that identify the type of the configured object, rather than
# parameters of it.
TYPE_KEYS = frozenset(['__module__', '__class__'])


def is_simple_literal(value) -> bool:
    return value is None or isinstance(value, (bool, int, float, str))


def get_type(module_name: str, class_name: str) -> type:
    module = importlib.import_module(module_name)
    result = getattr(module, class_name, None)
    if not isinstance(result, type):
        raise ConfigurationError("%s.%s is not a type" % (module_name, class_name))
    return result


def python_type_from_config(config: dict[str, Any]) -> type:
    if isinstance(config, type):
        return config
    assert config['__module__'] == type.__module__
    assert config['__class__'] == type.__name__
    return get_type(config['module'], config['name'])


def python_type_to_config(type_obj: type) -> dict[str, Any]:
    assert isinstance(type_obj, type)
    return dict(
        __module__=type.__module__,
        __class__=type.__name__,
        module=type_obj.__module__,
        name=type_obj.__name__
    )


class Configurable:
    """Mixin for objects whose public parameters can be exported to, and
    restored from, a plain dictionary. Every public attribute holding a
    simple literal (None, bool, number, or string), a type, or another
    Configurable is a parameter. The dictionary also records the module and
    class of the object so that Configurable.build() can recreate the
    right type.

    Usage:
        config = algorithm.get_configuration()
        config['learning_rate'] = .2
        algorithm_copy = Configurable.build(config)
    """

    @classmethod
    def build(cls, config: dict[str, Any]) -> 'Configurable':
        """Create a new, validated instance from a configuration
        dictionary. The type recorded in the dictionary must be cls or
        one of its subclasses."""
        if not TYPE_KEYS <= config.keys():
            raise ConfigurationError("Configuration does not name a type.")
        subclass = get_type(config['__module__'], config['__class__'])
        if subclass is not cls:
            if not issubclass(subclass, cls):
                raise ConfigurationError("%s is not a subclass of %s" %
                                         (subclass.__name__, cls.__name__))
            return subclass.build(config)
        instance = cls()
        instance.configure(config)
        instance.validate()
        return instance

    def _iter_parameters(self):
        for name in dir(self):
            if name.startswith('_'):
                continue
            value = getattr(self, name)
            if (is_simple_literal(value) or isinstance(value, Configurable) or
                    isinstance(value, type)):
                yield name, value

    def get_configuration(self) -> dict[str, Any]:
        config = dict(__module__=type(self).__module__, __class__=type(self).__name__)
        for name, value in self._iter_parameters():
            if isinstance(value, Configurable):
                config[name] = value.get_configuration()
            elif isinstance(value, type):
                config[name] = python_type_to_config(value)
            else:
                config[name] = value
        return config

    def configure(self, config: dict[str, Any]) -> None:
        """Apply the parameter values in config to this instance. Names
        that are not parameters of this object raise a ConfigurationError,
        so that misspelled options do not pass silently."""
        if config.get('__class__', type(self).__name__) != type(self).__name__:
            raise ConfigurationError("Configuration is for %s, not %s" %
                                     (config['__class__'], type(self).__name__))

        parameters = dict(self._iter_parameters())
        unknown = sorted(config.keys() - parameters.keys() - TYPE_KEYS)
        if unknown:
            raise ConfigurationError("Unrecognized options for %s: %s" %
                                     (type(self).__name__, ', '.join(unknown)))

        for name, default in parameters.items():
            if name not in config:
                continue
            override = config[name]
            if isinstance(default, Configurable):
                default.configure(override)
                continue
            if isinstance(default, type) and isinstance(override, dict):
                override = python_type_from_config(override)
            elif not is_simple_literal(override):
                raise ConfigurationError("Invalid value for %s: %r" % (name, override))
            try:
                setattr(self, name, override)
            except AttributeError:
                # Read-only properties are exported, but not restored.
                pass

    def validate(self) -> None:
        """Raise a ConfigurationError if the current parameter values are
        unusable. The default implementation accepts anything."""
