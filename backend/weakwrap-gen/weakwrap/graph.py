import re
from dataclasses import dataclass, replace
from typing import Dict, FrozenSet, List, Literal, Tuple

import networkx as nx # type: ignore

from weakwrap.model import (
    MemberDescriptor,
    NestingKind,
    ParameterDescriptor,
    TypeParameter,
    TypeRef,
)

OBJECT = "java.lang.Object"

# simple or leading type names; the tail of a qualified name is skipped
_TYPE_NAME = re.compile(r"(?<![\w$.])[A-Za-z_$][\w$]*")
_KEYWORDS = {"extends", "super"}


def referenced_names(text: str) -> List[str]:
    """Leading identifiers of every type mentioned in text (Map.Entry<K, Foo> -> Map, K, Foo)."""
    return [n for n in _TYPE_NAME.findall(text) if n not in _KEYWORDS]


def substitute(text: str, bindings: Dict[str, str]) -> str:
    """Replace type variables by their bound arguments: List<T> with {T: String} -> List<String>."""
    if not bindings:
        return text
    return _TYPE_NAME.sub(lambda m: bindings.get(m.group(0), m.group(0)), text)


def bind_member(member: MemberDescriptor, bindings: Dict[str, str]) -> MemberDescriptor:
    """Member as seen from a subtype. Method type parameters shadow the class ones."""
    own = {tp.name for tp in member.type_parameters}
    scope = {k: v for k, v in bindings.items() if k not in own}
    if not scope:
        return member

    def bound(ref: TypeRef) -> TypeRef:
        return TypeRef.of(substitute(ref.text, scope))

    return replace(
        member,
        type_parameters=tuple(
            replace(tp, bounds=tuple(bound(b) for b in tp.bounds)) for tp in member.type_parameters
        ),
        parameters=tuple(replace(p, type=bound(p.type)) for p in member.parameters),
        thrown_types=tuple(bound(t) for t in member.thrown_types),
        return_type=bound(member.return_type),
    )


@dataclass
class TypeInfo:
    qualified_name: str
    simple_name: str                       # package-relative (Outer.Inner)
    package_name: str = ""
    kind: Literal["class", "interface", "enum", "annotation"] = "class"
    nesting_kind: NestingKind = "top_level"
    modifiers: FrozenSet[str] = frozenset()
    type_parameters: Tuple[TypeParameter, ...] = ()
    declared: Tuple[MemberDescriptor, ...] = ()
    imports: Tuple[str, ...] = ()
    annotated: bool = False
    source_file: str | None = None


def _object_member(name, mods, ret="void", params=(), throws=()) -> MemberDescriptor:
    return MemberDescriptor(
        name=name,
        modifiers=frozenset(mods),
        declaring_package="java.lang",
        declaring_type=OBJECT,
        parameters=tuple(ParameterDescriptor(type=TypeRef.of(t), name=n) for t, n in params),
        thrown_types=tuple(TypeRef.of(t) for t in throws),
        return_type=TypeRef.of(ret),
    )


# java.lang.Object methods, in declaration order
OBJECT_MEMBERS: Tuple[MemberDescriptor, ...] = (
    _object_member("getClass", ("public", "final", "native"), "Class<?>"),
    _object_member("hashCode", ("public", "native"), "int"),
    _object_member("equals", ("public",), "boolean", params=(("Object", "arg0"),)),
    _object_member("clone", ("protected", "native"), "Object", throws=("CloneNotSupportedException",)),
    _object_member("toString", ("public",), "String"),
    _object_member("notify", ("public", "final", "native")),
    _object_member("notifyAll", ("public", "final", "native")),
    _object_member("wait", ("public", "final", "native"), params=(("long", "arg0"),),
                   throws=("InterruptedException",)),
    _object_member("wait", ("public", "final"), params=(("long", "arg0"), ("int", "arg1")),
                   throws=("InterruptedException",)),
    _object_member("wait", ("public", "final"), throws=("InterruptedException",)),
    _object_member("finalize", ("protected",), throws=("Throwable",)),
)


class TypeGraph:
    """
    Inheritance graph of every type seen in one generation batch.
    Nodes: qualified type names, payload = TypeInfo
    Edges (subtype -> supertype): INHERITS, IMPLEMENTS, ROOT
    INHERITS / IMPLEMENTS edges carry the clause's type arguments
    (extends Base<String> -> ("String",)).
    Successor order follows insertion order: superclass first, then
    interfaces, so a post-order walk visits java.lang.Object first.
    """

    def __init__(self) -> None:
        self.g = nx.DiGraph()
        self.add_type(
            TypeInfo(
                qualified_name=OBJECT,
                simple_name="Object",
                package_name="java.lang",
                modifiers=frozenset({"public"}),
                declared=OBJECT_MEMBERS,
            )
        )

    def add_type(self, info: TypeInfo) -> None:
        self.g.add_node(info.qualified_name, payload=info)

    def add_edge(self, src: str, dst: str, etype: str, type_arguments: Tuple[str, ...] = ()) -> None:
        if src == dst or self.g.has_edge(src, dst):
            return
        self.g.add_edge(src, dst, etype=etype, type_arguments=tuple(type_arguments))

    def has_type(self, qualified_name: str) -> bool:
        return qualified_name in self.g

    def info(self, qualified_name: str) -> TypeInfo:
        return self.g.nodes[qualified_name]["payload"]

    def types(self) -> List[TypeInfo]:
        return [data["payload"] for _, data in self.g.nodes(data=True)]

    def linearize(self, qualified_name: str) -> List[str]:
        """Supertypes before subtypes, the type itself last."""
        return list(nx.dfs_postorder_nodes(self.g, source=qualified_name))

    def type_bindings(self, qualified_name: str) -> Dict[str, Dict[str, str]]:
        """
        For every supertype, its type variables mapped to arguments written
        in terms of qualified_name. A raw supertype binds each variable to
        the erasure of its first bound (or Object).
        """
        bindings: Dict[str, Dict[str, str]] = {qualified_name: {}}
        for src, dst in nx.bfs_edges(self.g, qualified_name):
            params = self.info(dst).type_parameters
            args = self.g.edges[src, dst].get("type_arguments", ())
            if len(args) == len(params):
                values = [substitute(a, bindings[src]) for a in args]
            else:
                values = [p.bounds[0].erased() if p.bounds else "Object" for p in params]
            bindings[dst] = {p.name: v for p, v in zip(params, values)}
        return bindings

    # ---------------- Member set ----------------

    def _is_inherited(self, member: MemberDescriptor, owner: TypeInfo, target: TypeInfo) -> bool:
        mods = member.modifiers
        if "private" in mods:
            return False
        if owner.kind == "interface" and "static" in mods:
            return False
        package_private = not ({"public", "protected"} & mods)
        if package_private and owner.package_name != target.package_name:
            return False
        return True

    def complete_members(self, qualified_name: str) -> Tuple[MemberDescriptor, ...]:
        """
        Declared + inherited methods, one entry per (name, erased params).
        Inherited signatures are rewritten with the supertype clauses' type
        arguments first, so put(T) from Base<T> and put(String) in a
        Child extends Base<String> share an identity.
        An overriding member replaces the overridden one and takes its own
        declaring type's position; interface methods never replace a
        class method.
        """
        target = self.info(qualified_name)
        bindings = self.type_bindings(qualified_name)
        collected: Dict[Tuple[str, Tuple[str, ...]], MemberDescriptor] = {}

        for type_name in self.linearize(qualified_name):
            owner = self.info(type_name)
            for member in owner.declared:
                if type_name != qualified_name:
                    if not self._is_inherited(member, owner, target):
                        continue
                    member = bind_member(member, bindings.get(type_name, {}))
                key = member.identity()
                existing = collected.get(key)
                if existing is not None:
                    existing_owner = self.info(existing.declaring_type)
                    if existing_owner.kind != "interface" and owner.kind == "interface":
                        continue
                    del collected[key]
                collected[key] = member

        return tuple(collected.values())
