from __future__ import annotations
from modelviewport.model.formats import ModelFormat
from modelviewport.parsers.readers.base import BaseParser

_REGISTRY: dict[ModelFormat, type[BaseParser]] = {}

def register_parser(cls: type[BaseParser]) -> type[BaseParser]:
    """Class decorator to register a reader for each of its FORMATS."""
    formats = getattr(cls, "FORMATS", None)
    if not formats:
        raise ValueError(f"{cls.__name__} must define FORMATS")
    for fmt in formats:
        _REGISTRY[ModelFormat(fmt)] = cls
    return cls

def parser_class_for(fmt: ModelFormat) -> type[BaseParser]:
    cls = _REGISTRY.get(fmt)
    if not cls:
        raise KeyError(f"No parser registered for format '{fmt}'")
    return cls

def registered_formats() -> list[ModelFormat]:
    return list(_REGISTRY.keys())

def registered_classes() -> list[type[BaseParser]]:
    # one entry per class, registration order
    return list(dict.fromkeys(_REGISTRY.values()))
