"""In-memory Dart source structure and its renderer.

Emitters describe each artifact as a DartFile of classes, fields and
methods; `render_file` is the only place that turns them into text, so the
same structure always renders to the same bytes.
"""

from dataclasses import dataclass, field

INDENT = "  "


@dataclass
class DartParam:
    name: str
    type: str = ""
    required: bool = False
    field_init: bool = False  # `this.name`

    def render(self) -> str:
        prefix = "required " if self.required else ""
        if self.field_init:
            return f"{prefix}this.{self.name}"
        return f"{prefix}{self.type} {self.name}"


@dataclass
class DartField:
    type: str
    name: str
    modifiers: str = "final"
    initializer: str | None = None
    annotations: list[str] = field(default_factory=list)
    doc: str = ""


@dataclass
class DartMethod:
    """A method, getter-less function member, or constructor.

    Constructors leave `return_type` empty and use the class name (or
    `Class.named`) as `name`. With neither `body` nor `arrow` the member is
    abstract.
    """

    name: str
    return_type: str = ""
    params: list[DartParam] = field(default_factory=list)
    named: bool = True
    prefix: str = ""  # "const", "factory", "static"
    is_async: bool = False
    body: list[str] | None = None
    arrow: str | None = None
    annotations: list[str] = field(default_factory=list)
    doc: str = ""


@dataclass
class DartClass:
    name: str
    fields: list[DartField] = field(default_factory=list)
    members: list[DartMethod] = field(default_factory=list)
    annotations: list[str] = field(default_factory=list)
    implements: list[str] = field(default_factory=list)
    abstract: bool = False
    doc: str = ""


@dataclass
class DartFile:
    imports: list[str] = field(default_factory=list)
    parts: list[str] = field(default_factory=list)
    classes: list[DartClass] = field(default_factory=list)


def _doc_lines(doc: str, indent: str) -> list[str]:
    return [f"{indent}/// {line}".rstrip() for line in doc.strip().splitlines()]


def _import_group(uri: str) -> int:
    if uri.startswith("dart:"):
        return 0
    if uri.startswith("package:"):
        return 1
    return 2


def render_imports(imports: list[str]) -> list[str]:
    """Dart SDK, then packages, then relative imports; blank line between groups."""
    lines: list[str] = []
    previous = None
    for uri in sorted(set(imports), key=lambda u: (_import_group(u), u)):
        group = _import_group(uri)
        if previous is not None and group != previous:
            lines.append("")
        lines.append(f"import '{uri}';")
        previous = group
    return lines


def render_params(params: list[DartParam], named: bool, indent: str) -> str:
    if not params:
        return "()"
    if not named:
        return "(" + ", ".join(p.render() for p in params) + ")"
    inner = "".join(f"{indent}{INDENT}{p.render()},\n" for p in params)
    return "({\n" + inner + f"{indent}}})"


def render_field(f: DartField, indent: str) -> list[str]:
    lines = _doc_lines(f.doc, indent) if f.doc else []
    lines.extend(f"{indent}{a}" for a in f.annotations)
    decl = f"{indent}{f.modifiers} {f.type} {f.name}"
    if f.initializer is not None:
        decl += f" = {f.initializer}"
    lines.append(decl + ";")
    return lines


def render_method(m: DartMethod, indent: str) -> list[str]:
    lines = _doc_lines(m.doc, indent) if m.doc else []
    lines.extend(f"{indent}{a}" for a in m.annotations)

    head = " ".join(part for part in (m.prefix, m.return_type, m.name) if part)
    signature = f"{indent}{head}{render_params(m.params, m.named, indent)}"
    if m.is_async:
        signature += " async"

    if m.arrow is not None:
        lines.append(f"{signature} => {m.arrow};")
    elif m.body is None:
        lines.append(f"{signature};")
    else:
        lines.append(f"{signature} {{")
        lines.extend(f"{indent}{INDENT}{line}" if line else "" for line in m.body)
        lines.append(f"{indent}}}")
    return lines


def render_class(c: DartClass) -> list[str]:
    lines = _doc_lines(c.doc, "") if c.doc else []
    lines.extend(c.annotations)
    head = f"{'abstract ' if c.abstract else ''}class {c.name}"
    if c.implements:
        head += " implements " + ", ".join(c.implements)
    lines.append(head + " {")

    sections: list[list[str]] = []
    if c.fields:
        sections.append([line for f in c.fields for line in render_field(f, INDENT)])
    for m in c.members:
        sections.append(render_method(m, INDENT))
    # abstract contracts read better without blank lines between signatures
    separator = [] if c.abstract and not c.fields else [""]
    for i, section in enumerate(sections):
        if i:
            lines.extend(separator)
        lines.extend(section)

    lines.append("}")
    return lines


def render_file(dart_file: DartFile) -> str:
    """Render a DartFile to source text ending in a single newline."""
    blocks: list[list[str]] = []
    if dart_file.imports:
        blocks.append(render_imports(dart_file.imports))
    if dart_file.parts:
        blocks.append([f"part '{p}';" for p in dart_file.parts])
    blocks.extend(render_class(c) for c in dart_file.classes)

    lines: list[str] = []
    for i, block in enumerate(blocks):
        if i:
            lines.append("")
        lines.extend(block)
    return "\n".join(lines) + "\n"


def dart_string(text: str) -> str:
    """Quote text as a single-quoted Dart literal with no interpolation."""
    escaped = text.replace("\\", "\\\\").replace("'", "\\'").replace("$", "\\$")
    return f"'{escaped}'"
