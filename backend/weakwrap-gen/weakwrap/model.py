import re
from dataclasses import dataclass
from typing import FrozenSet, Literal, Tuple

NestingKind = Literal["top_level", "static_member", "instance_member"]
TypeKind = Literal["class", "interface"]
TypeCategory = Literal["void", "boolean", "primitive", "reference"]
SupertypeRelation = Literal["extends", "implements", "none"]

# Canonical Java modifier order (JLS 8.1.1 / 8.3.1 / 8.4.3)
MODIFIER_ORDER: Tuple[str, ...] = (
    "public",
    "protected",
    "private",
    "abstract",
    "static",
    "final",
    "transient",
    "volatile",
    "synchronized",
    "native",
    "strictfp",
)

PRIMITIVE_TYPES = {"byte", "short", "int", "long", "float", "double", "char", "boolean"}


def ordered_modifiers(mods) -> Tuple[str, ...]:
    """
    Sort modifier keywords in canonical Java order.
    Unknown keywords follow the known ones, alphabetically.
    """
    known = [m for m in MODIFIER_ORDER if m in mods]
    extra = sorted(m for m in mods if m not in MODIFIER_ORDER)
    return tuple(known + extra)


def category_of(text: str) -> TypeCategory:
    t = text.strip()
    if t == "void":
        return "void"
    if t == "boolean":
        return "boolean"
    if t in PRIMITIVE_TYPES:
        return "primitive"
    # arrays (int[]), boxed types (Long), generics (List<T>), type variables (T)
    return "reference"


def erase(text: str) -> str:
    """
    Erasure used for member identity: drop generic arguments and whitespace.
    List<Long> -> List, Map.Entry<K, V>[] -> Map.Entry[]
    """
    t = text
    while "<" in t:
        t = re.sub(r"<[^<>]*>", "", t)
    return re.sub(r"\s+", "", t)


# ---------------- Input descriptors ----------------

@dataclass(frozen=True)
class TypeRef:
    text: str                 # type as written in source (e.g. List<Long>, T[], int)
    category: TypeCategory = "reference"

    @classmethod
    def of(cls, text: str) -> "TypeRef":
        return cls(text=text, category=category_of(text))

    def erased(self) -> str:
        return erase(self.text)


VOID = TypeRef(text="void", category="void")


@dataclass(frozen=True)
class TypeParameter:
    name: str
    bounds: Tuple[TypeRef, ...] = ()

    def render(self) -> str:
        if not self.bounds:
            return self.name
        return f"{self.name} extends " + " & ".join(b.text for b in self.bounds)


@dataclass(frozen=True)
class ParameterDescriptor:
    type: TypeRef
    name: str
    modifiers: FrozenSet[str] = frozenset()   # e.g. final


@dataclass(frozen=True)
class MemberDescriptor:
    name: str
    modifiers: FrozenSet[str] = frozenset()
    declaring_package: str = ""
    declaring_type: str = ""
    type_parameters: Tuple[TypeParameter, ...] = ()
    parameters: Tuple[ParameterDescriptor, ...] = ()
    thrown_types: Tuple[TypeRef, ...] = ()
    return_type: TypeRef = VOID
    varargs: bool = False     # last parameter is variadic; its type is the array type

    def identity(self) -> Tuple[str, Tuple[str, ...]]:
        """(name, erased parameter types): overriding members share it."""
        return self.name, tuple(p.type.erased() for p in self.parameters)


@dataclass(frozen=True)
class TypeDescriptor:
    qualified_name: str
    simple_name: str          # package-relative name, Outer.Inner for nested types
    package_name: str = ""
    nesting_kind: NestingKind = "top_level"
    kind: TypeKind = "class"
    modifiers: FrozenSet[str] = frozenset()
    members: Tuple[MemberDescriptor, ...] = ()
    imports: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        expected = f"{self.package_name}.{self.simple_name}" if self.package_name else self.simple_name
        if self.qualified_name != expected:
            raise ValueError(
                f"Qualified name {self.qualified_name!r} does not match "
                f"package {self.package_name!r} and name {self.simple_name!r}"
            )


# ---------------- Generated wrapper ----------------

@dataclass(frozen=True)
class FieldSpec:
    name: str
    type: TypeRef
    modifiers: Tuple[str, ...] = ("private", "final")


@dataclass(frozen=True)
class ConstructorSpec:
    parameter: ParameterDescriptor
    field_name: str
    modifiers: Tuple[str, ...] = ("public",)


@dataclass(frozen=True)
class MethodSignature:
    name: str
    modifiers: Tuple[str, ...] = ()
    type_parameters: Tuple[TypeParameter, ...] = ()
    parameters: Tuple[ParameterDescriptor, ...] = ()
    thrown_types: Tuple[TypeRef, ...] = ()
    return_type: TypeRef = VOID
    varargs: bool = False


@dataclass(frozen=True)
class ForwardingBody:
    local_type: TypeRef
    local_name: str
    field_name: str
    method_name: str
    arguments: Tuple[str, ...] = ()
    returns_result: bool = False
    fallback: str | None = None    # literal returned when the reference is gone


@dataclass(frozen=True)
class ForwardingMethod:
    signature: MethodSignature
    body: ForwardingBody


@dataclass(frozen=True)
class ClearMethod:
    name: str
    field_name: str
    modifiers: Tuple[str, ...] = ("public",)


@dataclass(frozen=True)
class GeneratedWrapperSpec:
    wrap_class_name: str
    package_name: str
    original: TypeRef
    reference_field: FieldSpec
    local_var_name: str
    constructor: ConstructorSpec
    clear_method: ClearMethod
    supertype_relation: SupertypeRelation
    forwarding_methods: Tuple[ForwardingMethod, ...] = ()
    modifiers: Tuple[str, ...] = ("public",)
    imports: Tuple[str, ...] = ()

    @property
    def qualified_name(self) -> str:
        if self.package_name:
            return f"{self.package_name}.{self.wrap_class_name}"
        return self.wrap_class_name
