from pathlib import Path
from typing import List

from weakwrap.model import (
    ForwardingBody,
    GeneratedWrapperSpec,
    MethodSignature,
    ordered_modifiers,
)

DEFAULT_INDENT = "  "


# ---------------- Signatures ----------------

def _render_parameters(sig: MethodSignature) -> str:
    rendered: List[str] = []
    last = len(sig.parameters) - 1
    for i, p in enumerate(sig.parameters):
        type_text = p.type.text
        if sig.varargs and i == last and type_text.endswith("[]"):
            type_text = type_text[:-2] + "..."
        mods = " ".join(ordered_modifiers(p.modifiers))
        rendered.append(f"{mods} {type_text} {p.name}" if mods else f"{type_text} {p.name}")
    return ", ".join(rendered)


def render_signature(sig: MethodSignature) -> str:
    """
    public <T extends Comparable<T>> void genericMethod(T[] anArray, T elem) throws IOException
    """
    head: List[str] = list(sig.modifiers)
    if sig.type_parameters:
        head.append("<" + ", ".join(tp.render() for tp in sig.type_parameters) + ">")
    head.append(sig.return_type.text)

    text = f"{' '.join(head)} {sig.name}({_render_parameters(sig)})"
    if sig.thrown_types:
        text += " throws " + ", ".join(t.text for t in sig.thrown_types)
    return text


def render_body(body: ForwardingBody, indent: str = DEFAULT_INDENT) -> List[str]:
    call = f"{body.local_name}.{body.method_name}({', '.join(body.arguments)})"
    lines = [
        f"{body.local_type.text} {body.local_name} = {body.field_name}.get();",
        f"if ({body.local_name} != null) {{",
        f"{indent}{'return ' if body.returns_result else ''}{call};",
        "}",
    ]
    if body.fallback is not None:
        lines.append(f"return {body.fallback};")
    return lines


# ---------------- Compilation unit ----------------

def render_java(spec: GeneratedWrapperSpec, indent: str = DEFAULT_INDENT) -> str:
    """
    GeneratedWrapperSpec -> Java compilation unit text.
    Deterministic: the same spec always renders to the same text.
    """
    lines: List[str] = []

    if spec.package_name:
        lines.append(f"package {spec.package_name};")
        lines.append("")

    for imp in spec.imports:
        lines.append(f"import {imp};")
    if spec.imports:
        lines.append("")

    header = f"{' '.join(spec.modifiers)} class {spec.wrap_class_name}"
    if spec.supertype_relation != "none":
        header += f" {spec.supertype_relation} {spec.original.text}"
    lines.append(header + " {")

    # field
    f = spec.reference_field
    lines.append(f"{indent}{' '.join(f.modifiers)} {f.type.text} {f.name};")
    lines.append("")

    # constructor
    ctor = spec.constructor
    param = ctor.parameter
    target = ctor.field_name
    if param.name == target:
        target = f"this.{target}"
    lines.append(
        f"{indent}{' '.join(ctor.modifiers)} {spec.wrap_class_name}({param.type.text} {param.name}) {{"
    )
    lines.append(f"{indent * 2}{target} = new WeakReference<>({param.name});")
    lines.append(f"{indent}}}")

    # forwarding methods
    for method in spec.forwarding_methods:
        lines.append("")
        lines.append(f"{indent}{render_signature(method.signature)} {{")
        for body_line in render_body(method.body, indent):
            lines.append(f"{indent * 2}{body_line}")
        lines.append(f"{indent}}}")

    # clear method
    clear = spec.clear_method
    lines.append("")
    lines.append(f"{indent}{' '.join(clear.modifiers)} void {clear.name}() {{")
    lines.append(f"{indent * 2}{clear.field_name}.clear();")
    lines.append(f"{indent}}}")

    lines.append("}")
    return "\n".join(lines) + "\n"


# ---------------- Persistence ----------------

def relative_path(spec: GeneratedWrapperSpec) -> Path:
    """test.sub -> test/sub/WeakWrapX.java"""
    parts = spec.package_name.split(".") if spec.package_name else []
    return Path(*parts, f"{spec.wrap_class_name}.java")


def write_wrapper(spec: GeneratedWrapperSpec, out_dir: Path, indent: str = DEFAULT_INDENT) -> Path:
    path = Path(out_dir) / relative_path(spec)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_java(spec, indent), encoding="utf-8")
    return path
