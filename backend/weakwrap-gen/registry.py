from pathlib import Path
from typing import Any, Dict, List

import config
from adapters.java_adapter import DiscoveryResult, JavaAdapter
from weakwrap.pipeline import build_wrapper_spec
from weakwrap.validator import TypeNotProxyable
from weakwrap.writer import relative_path, render_java, write_wrapper

java_adapter = JavaAdapter(annotation=config.ANNOTATION_NAME)


def _log(msg: str) -> None:
    if config.VERBOSE:
        print(f"[WEAKWRAP] {msg}")


def _generate(
    discovered: DiscoveryResult,
    write: bool = False,
    out_dir: Path | None = None,
) -> Dict[str, Any]:
    """
    Run the wrapper pipeline once per discovered type.
    A rejected type is recorded in "errors" and the others still get generated.
    """
    wrappers: List[Dict[str, Any]] = []
    errors: List[Dict[str, str]] = list(discovered.errors)
    target_dir = Path(out_dir) if out_dir is not None else config.OUTPUT_DIR

    for w in discovered.warnings:
        _log(f"WARNING: {w}")
    for e in discovered.errors:
        _log(f"ERROR: {e['type']}: {e['error']}")

    for td in discovered.descriptors:
        try:
            spec = build_wrapper_spec(td)
        except TypeNotProxyable as e:
            _log(f"ERROR: {td.qualified_name}: {e.message}")
            errors.append({"type": td.qualified_name, "error": e.message})
            continue

        entry: Dict[str, Any] = {
            "qualified_name": td.qualified_name,
            "wrap_class_name": spec.wrap_class_name,
            "package": spec.package_name,
            "path": relative_path(spec).as_posix(),
            "source": render_java(spec, config.INDENT),
        }
        _log(f"{td.qualified_name} -> {spec.qualified_name} ({len(spec.forwarding_methods)} methods)")

        if write:
            path = write_wrapper(spec, target_dir, config.INDENT)
            entry["written_to"] = str(path)
            _log(f"  wrote {path}")

        wrappers.append(entry)

    return {
        "wrappers": wrappers,
        "errors": errors,
        "parse_errors": list(discovered.parse_errors),
        "warnings": list(discovered.warnings),
    }


def generate_for_code(
    code: str,
    filename: str | None = None,
    write: bool = False,
    out_dir: Path | None = None,
) -> Dict[str, Any]:
    """Single compilation unit. Raises ValueError on a Java syntax error."""
    _log(f"===== {filename or '<code>'} =====")
    discovered = java_adapter.build_descriptors_for_code(code, filename)
    return _generate(discovered, write=write, out_dir=out_dir)


def generate_for_files(
    files: Dict[str, str],
    write: bool = False,
    out_dir: Path | None = None,
) -> Dict[str, Any]:
    """filename -> code. Unparseable files end up in "parse_errors"."""
    _log(f"===== PROJECT ({len(files)} files) =====")
    discovered = java_adapter.build_descriptors_for_sources(files)
    for pe in discovered.parse_errors:
        _log(f"SKIPPED {pe['file']}: {pe['error']}")
    return _generate(discovered, write=write, out_dir=out_dir)
