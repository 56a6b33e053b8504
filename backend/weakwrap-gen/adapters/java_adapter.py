import javalang  # type: ignore
from dataclasses import dataclass, field
from typing import Any, Dict, List, Set, Tuple

from weakwrap.graph import OBJECT, TypeGraph, TypeInfo, referenced_names
from weakwrap.model import (
    VOID,
    MemberDescriptor,
    ParameterDescriptor,
    TypeDescriptor,
    TypeParameter,
    TypeRef,
)


@dataclass
class DiscoveryResult:
    descriptors: List[TypeDescriptor] = field(default_factory=list)
    errors: List[Dict[str, str]] = field(default_factory=list)        # annotation misuse
    parse_errors: List[Dict[str, str]] = field(default_factory=list)  # skipped files
    warnings: List[str] = field(default_factory=list)


class JavaAdapter:
    """
    Java → TypeDescriptor builder.
    Parses one or more Java compilation units, registers every type
    (top-level and nested) in a TypeGraph with its declared methods and
    supertypes, then builds one TypeDescriptor per annotated type with
    the complete (declared + inherited) member set.

    Includes:
      - Multi-file (project-level) support, invalid files are skipped
      - Implicit modifiers (interface methods public/abstract,
        nested interfaces and enums static)
      - Generics, wildcards, arrays and varargs rendered as written;
        supertype type arguments bound into inherited signatures
      - Supertype resolution: enclosing scopes, same package, imports,
        unique short names
      - Annotation misuse on methods / fields / enums reported per element
    """

    language = "java"

    TYPE_DECLARATIONS = (
        javalang.tree.ClassDeclaration,
        javalang.tree.InterfaceDeclaration,
        javalang.tree.EnumDeclaration,
        javalang.tree.AnnotationDeclaration,
    )

    def __init__(self, annotation: str = "WeakWrap") -> None:
        self.annotation = annotation

    # ---------------- Helpers ----------------

    def _kind_of(self, t) -> str:
        if isinstance(t, javalang.tree.InterfaceDeclaration):
            return "interface"
        if isinstance(t, javalang.tree.EnumDeclaration):
            return "enum"
        if isinstance(t, javalang.tree.AnnotationDeclaration):
            return "annotation"
        return "class"

    def _is_annotated(self, node) -> bool:
        for a in getattr(node, "annotations", None) or []:
            name = a.name or ""
            if name == self.annotation or name.endswith("." + self.annotation):
                return True
        return False

    def _render_type_argument(self, a) -> str:
        pattern = getattr(a, "pattern_type", None)
        inner = getattr(a, "type", None)
        if pattern == "?" or (pattern and inner is None):
            return "?"
        if pattern in ("extends", "super"):
            return f"? {pattern} {self._render_type(inner)}"
        return self._render_type(inner)

    def _render_type(self, t) -> str:
        """
        From a javalang Type node, rebuild the type as written:
          int, long[], List<Long>, Map.Entry<K, V>, Collection<? extends Number>
        """
        if t is None:
            return "void"

        parts: List[str] = []
        node = t
        while node is not None:
            text = node.name
            args = getattr(node, "arguments", None)
            if args:
                text += "<" + ", ".join(self._render_type_argument(a) for a in args) + ">"
            parts.append(text)
            node = getattr(node, "sub_type", None)

        dims = getattr(t, "dimensions", None) or []
        return ".".join(parts) + "[]" * len(dims)

    def _reference_name(self, t) -> str:
        """Supertype name without type arguments (Map.Entry, com.test.Base)."""
        parts: List[str] = []
        node = t
        while node is not None:
            parts.append(node.name)
            node = getattr(node, "sub_type", None)
        return ".".join(parts)

    def _clause_arguments(self, t) -> Tuple[str, ...]:
        """Type arguments of a supertype clause: Base<String, List<T>> -> ("String", "List<T>")."""
        node = t
        while getattr(node, "sub_type", None) is not None:
            node = node.sub_type
        return tuple(self._render_type_argument(a) for a in (getattr(node, "arguments", None) or []))

    def _type_parameters(self, nodes) -> Tuple[TypeParameter, ...]:
        return tuple(
            TypeParameter(
                name=tp.name,
                bounds=tuple(TypeRef.of(self._render_type(b)) for b in (tp.extends or [])),
            )
            for tp in (nodes or [])
        )

    def _body_declarations(self, t) -> List[Any]:
        # enum bodies wrap their declarations after the constants
        body = t.body
        if isinstance(body, javalang.tree.EnumBody):
            return list(body.declarations or [])
        return list(body or [])

    def _render_import(self, imp) -> str:
        path = imp.path
        if imp.wildcard:
            path += ".*"
        return f"static {path}" if imp.static else path

    def _is_annotation_import(self, imp) -> bool:
        return not imp.static and not imp.wildcard and imp.path.split(".")[-1] == self.annotation

    # ---------------- Members ----------------

    def _member_from_method(self, m, owner: TypeInfo) -> MemberDescriptor:
        mods = set(m.modifiers or ())

        if owner.kind == "interface":
            is_default = "default" in mods
            mods.discard("default")
            if "private" not in mods:
                mods.add("public")
            if m.body is None and not is_default and not ({"static", "private"} & mods):
                mods.add("abstract")

        type_params = self._type_parameters(m.type_parameters)

        params: List[ParameterDescriptor] = []
        varargs = False
        for p in m.parameters or []:
            text = self._render_type(p.type)
            if p.varargs:
                text += "[]"
                varargs = True
            params.append(
                ParameterDescriptor(
                    type=TypeRef.of(text),
                    name=p.name,
                    modifiers=frozenset(x for x in (p.modifiers or ()) if x == "final"),
                )
            )

        return_type = VOID if m.return_type is None else TypeRef.of(self._render_type(m.return_type))

        return MemberDescriptor(
            name=m.name,
            modifiers=frozenset(mods),
            declaring_package=owner.package_name,
            declaring_type=owner.qualified_name,
            type_parameters=type_params,
            parameters=tuple(params),
            thrown_types=tuple(TypeRef.of(x) for x in (m.throws or [])),
            return_type=return_type,
            varargs=varargs,
        )

    # ---------------- Parsing entry points ----------------

    def parse_to_ast(self, code: str):
        try:
            return javalang.parse.parse(code)
        except javalang.parser.JavaSyntaxError as e:
            raise ValueError(f"Java syntax error: {getattr(e, 'description', None) or e}")
        except Exception as e:
            raise ValueError(f"Failed to parse Java code: {e}")

    def build_descriptors_for_code(self, code: str, filename: str | None = None) -> DiscoveryResult:
        """
        Single-compilation-unit helper (for /wrap).
        Raises ValueError on a syntax error.
        """
        graph = TypeGraph()
        result = DiscoveryResult()
        pending: List[Dict[str, Any]] = []

        self._process_compilation_unit(code, graph, pending, result, source_file=filename)
        self._add_supertype_edges(graph, pending, result)
        self._build_descriptors(graph, result)
        return result

    def build_descriptors_for_sources(self, sources: Dict[str, str]) -> DiscoveryResult:
        """
        Multi-file/project-level builder: filename -> code.
        Skips invalid Java files but continues with the rest, so that
        supertypes declared in other files contribute their members.
        """
        graph = TypeGraph()
        result = DiscoveryResult()
        pending: List[Dict[str, Any]] = []

        for filename, code in sources.items():
            try:
                self._process_compilation_unit(code, graph, pending, result, source_file=filename)
            except ValueError as e:
                result.parse_errors.append({"file": filename, "error": str(e)})
                continue

        self._add_supertype_edges(graph, pending, result)
        self._build_descriptors(graph, result)
        return result

    def build_descriptors_for_files(self, files: List[str]) -> DiscoveryResult:
        sources: Dict[str, str] = {}
        for path in files:
            with open(path, "r", encoding="utf-8") as f:
                sources[path] = f.read()
        return self.build_descriptors_for_sources(sources)

    # ---------------- Core processing ----------------

    def _process_compilation_unit(
        self,
        code: str,
        graph: TypeGraph,
        pending: List[Dict[str, Any]],
        result: DiscoveryResult,
        source_file: str | None = None,
    ) -> None:
        tree = self.parse_to_ast(code)
        package_name = getattr(getattr(tree, "package", None), "name", None) or ""
        imports = tuple(
            self._render_import(i) for i in (tree.imports or []) if not self._is_annotation_import(i)
        )

        for t in tree.types:
            self._collect_type(t, package_name, imports, graph, pending, result, source_file)

    def _collect_type(
        self,
        t,
        package_name: str,
        imports: Tuple[str, ...],
        graph: TypeGraph,
        pending: List[Dict[str, Any]],
        result: DiscoveryResult,
        source_file: str | None,
        outer: TypeInfo | None = None,
    ) -> None:
        simple_name = f"{outer.simple_name}.{t.name}" if outer else t.name
        full_name = f"{package_name}.{simple_name}" if package_name else simple_name
        kind = self._kind_of(t)
        annotated = self._is_annotated(t)
        wrappable = kind in ("class", "interface")

        if annotated and not wrappable:
            result.errors.append({
                "type": full_name,
                "error": f"@{self.annotation} can only be applied to classes and interfaces",
            })

        mods = set(t.modifiers or ())
        if outer is None:
            nesting_kind = "top_level"
        else:
            # member interfaces and anything nested in an interface are implicitly static
            if kind == "interface" or outer.kind in ("interface", "annotation"):
                mods.add("static")
            nesting_kind = "static_member" if "static" in mods else "instance_member"

        info = TypeInfo(
            qualified_name=full_name,
            simple_name=simple_name,
            package_name=package_name,
            kind=kind,
            nesting_kind=nesting_kind,
            modifiers=frozenset(mods),
            type_parameters=self._type_parameters(getattr(t, "type_parameters", None)),
            imports=imports,
            annotated=annotated and wrappable,
            source_file=source_file,
        )

        # ---------- annotation misuse ----------
        declarations = self._body_declarations(t)
        callables = (javalang.tree.MethodDeclaration, javalang.tree.ConstructorDeclaration)
        for m in declarations:
            if isinstance(m, callables) and self._is_annotated(m):
                result.errors.append({
                    "type": f"{full_name}.{m.name}",
                    "error": f"@{self.annotation} can only be applied to classes and interfaces",
                })
        for fdecl in declarations:
            if isinstance(fdecl, javalang.tree.FieldDeclaration) and self._is_annotated(fdecl):
                names = ", ".join(d.name for d in fdecl.declarators)
                result.errors.append({
                    "type": f"{full_name}.{names}",
                    "error": f"@{self.annotation} can only be applied to classes and interfaces",
                })

        # enums and annotation types only scope their nested types
        if wrappable:
            info.declared = tuple(self._member_from_method(m, info) for m in t.methods)
            graph.add_type(info)

            # ---------- supertypes (resolved once every unit is read) ----------
            if kind == "class":
                extends = [t.extends] if t.extends is not None else []
                implements = list(t.implements or [])
            else:
                extends = list(t.extends or [])
                implements = []

            pending.append({
                "id": full_name,
                "extends": [(self._reference_name(e), self._clause_arguments(e)) for e in extends],
                "implements": [(self._reference_name(i), self._clause_arguments(i)) for i in implements],
            })

        # ---------- nested types ----------
        for decl in declarations:
            if isinstance(decl, self.TYPE_DECLARATIONS):
                self._collect_type(
                    decl, package_name, imports, graph, pending, result, source_file, outer=info
                )

    def _resolve_type_name(self, graph: TypeGraph, tname: str, src: TypeInfo) -> str | None:
        if graph.has_type(tname):
            return tname

        pkg_prefix = f"{src.package_name}." if src.package_name else ""

        # enclosing scopes, innermost first: Outer.Inner.X, Outer.X
        scopes = src.simple_name.split(".")
        for i in range(len(scopes), 0, -1):
            candidate = pkg_prefix + ".".join(scopes[:i]) + "." + tname
            if graph.has_type(candidate):
                return candidate

        # same package
        if graph.has_type(pkg_prefix + tname):
            return pkg_prefix + tname

        head, _, rest = tname.partition(".")
        for imp in src.imports:
            if imp.startswith("static "):
                continue
            if imp.endswith(".*"):
                candidate = f"{imp[:-2]}.{tname}"
            elif imp.split(".")[-1] == head:
                candidate = f"{imp}.{rest}" if rest else imp
            else:
                continue
            if graph.has_type(candidate):
                return candidate

        # unique short name across the batch
        candidates = [
            info.qualified_name
            for info in graph.types()
            if info.simple_name == tname or info.simple_name.endswith("." + tname)
        ]
        if len(candidates) == 1:
            return candidates[0]
        return None

    def _add_supertype_edges(
        self,
        graph: TypeGraph,
        pending: List[Dict[str, Any]],
        result: DiscoveryResult,
    ) -> None:
        for p in pending:
            src_id = p["id"]
            src = graph.info(src_id)

            # ---------- INHERITS / IMPLEMENTS ----------
            for etype, clauses in (("INHERITS", p["extends"]), ("IMPLEMENTS", p["implements"])):
                for base, type_arguments in clauses:
                    target = self._resolve_type_name(graph, base, src)
                    if target is None:
                        result.warnings.append(
                            f"{src_id}: supertype {base} is outside the sources, its methods are not wrapped"
                        )
                        continue
                    graph.add_edge(src_id, target, etype, type_arguments)

            # every type reaches java.lang.Object last
            graph.add_edge(src_id, OBJECT, "ROOT")

    def _supertype_package_imports(
        self,
        graph: TypeGraph,
        info: TypeInfo,
        members: Tuple[MemberDescriptor, ...],
    ) -> Set[str]:
        """
        Inherited signatures may name types that sit next to a supertype in
        another package without being imported by any unit (lib.Base
        returning lib.Foo). Import those batch types explicitly.
        """
        packages: List[str] = []
        for type_name in graph.linearize(info.qualified_name):
            pkg = graph.info(type_name).package_name
            if pkg and pkg not in (info.package_name, "java.lang") and pkg not in packages:
                packages.append(pkg)

        own_prefix = f"{info.package_name}." if info.package_name else ""
        imports: Set[str] = set()
        for m in members:
            if m.declaring_type == info.qualified_name:
                continue
            method_vars = {tp.name for tp in m.type_parameters}
            texts = [m.return_type.text]
            texts += [p.type.text for p in m.parameters]
            texts += [t.text for t in m.thrown_types]
            texts += [b.text for tp in m.type_parameters for b in tp.bounds]
            for text in texts:
                for name in referenced_names(text):
                    # same-package types and type variables need no import
                    if name in method_vars or graph.has_type(own_prefix + name):
                        continue
                    for pkg in packages:
                        candidate = f"{pkg}.{name}"
                        if graph.has_type(candidate) and graph.info(candidate).nesting_kind == "top_level":
                            imports.add(candidate)
                            break
        return imports

    def _build_descriptors(self, graph: TypeGraph, result: DiscoveryResult) -> None:
        for info in graph.types():
            if not info.annotated:
                continue

            members = graph.complete_members(info.qualified_name)
            imports = set()
            for type_name in graph.linearize(info.qualified_name):
                imports.update(graph.info(type_name).imports)
            imports.update(self._supertype_package_imports(graph, info, members))

            result.descriptors.append(
                TypeDescriptor(
                    qualified_name=info.qualified_name,
                    simple_name=info.simple_name,
                    package_name=info.package_name,
                    nesting_kind=info.nesting_kind,
                    kind=info.kind,
                    modifiers=info.modifiers,
                    members=members,
                    imports=tuple(sorted(imports)),
                )
            )
