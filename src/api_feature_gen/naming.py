"""Casing helpers for turning API names into Dart identifiers and paths.

Examples:
  "Pet Store"   -> to_snake: pet_store,  to_pascal: PetStore
  "pet-orders"  -> to_camel: petOrders
  "HTTPStatus"  -> to_snake: http_status
  GET /pets/{petId}/photos -> method_name_from_path: getPetsByPetIdPhotos
"""

import re

_ACRONYM_BOUNDARY_RE = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_BOUNDARY_RE = re.compile(r"([a-z\d])([A-Z])")
_SEPARATOR_RE = re.compile(r"[^0-9a-zA-Z]+")
_PATH_PARAM_RE = re.compile(r"^\{(?P<name>[^{}]+)\}$")

# Dart reserved words; these cannot name a field or parameter.
DART_RESERVED = frozenset({
    "assert", "await", "break", "case", "catch", "class", "const", "continue",
    "default", "do", "else", "enum", "extends", "false", "final", "finally",
    "for", "if", "in", "is", "new", "null", "rethrow", "return", "super",
    "switch", "this", "throw", "true", "try", "var", "void", "while", "with",
    "yield",
})


def split_words(name: str) -> list[str]:
    """Split camelCase, PascalCase, snake_case, kebab or spaced text into lower-case words."""
    text = _ACRONYM_BOUNDARY_RE.sub(r"\1_\2", name)
    text = _CAMEL_BOUNDARY_RE.sub(r"\1_\2", text)
    return [w.lower() for w in _SEPARATOR_RE.split(text) if w]


def to_snake(name: str) -> str:
    return "_".join(split_words(name))


def to_camel(name: str) -> str:
    words = split_words(name)
    if not words:
        return ""
    return words[0] + "".join(w.capitalize() for w in words[1:])


def to_pascal(name: str) -> str:
    return "".join(w.capitalize() for w in split_words(name))


def dart_identifier(name: str) -> str:
    """Return a camelCase name that is legal as a Dart field or parameter."""
    ident = to_camel(name) or "value"
    if ident[0].isdigit():
        ident = f"value{ident}"
    if ident in DART_RESERVED:
        ident = f"{ident}Value"
    return ident


def method_name_from_path(method: str, path: str) -> str:
    """Build a method name for an operation that has no operationId."""
    words = [method.lower()]
    for segment in path.split("/"):
        if not segment:
            continue
        match = _PATH_PARAM_RE.match(segment)
        if match:
            words.append("by")
            words.extend(split_words(match.group("name")))
        else:
            words.extend(split_words(segment))
    if len(words) == 1:
        words.append("root")
    return to_camel("_".join(words))


def unique_name(base: str, taken: set[str]) -> str:
    """Return base, or base with the smallest numeric suffix (from 2) not in taken; records the result."""
    name = base
    n = 1
    while name in taken:
        n += 1
        name = f"{base}{n}"
    taken.add(name)
    return name
