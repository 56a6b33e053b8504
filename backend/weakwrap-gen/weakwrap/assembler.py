from typing import Iterable

from weakwrap.body import LOCAL_VAR_NAME, REFERENCE_FIELD_NAME, synthesize_body
from weakwrap.model import (
    ClearMethod,
    ConstructorSpec,
    FieldSpec,
    ForwardingMethod,
    GeneratedWrapperSpec,
    MemberDescriptor,
    ParameterDescriptor,
    SupertypeRelation,
    TypeDescriptor,
    TypeRef,
)
from weakwrap.signature import copy_signature

CLASS_NAME_PREFIX = "WeakWrap"
CLEAR_METHOD_NAME = "clearWeakWrapRef"
WEAK_REFERENCE_IMPORT = "java.lang.ref.WeakReference"


# ---------------- Naming ----------------

def wrap_class_name(td: TypeDescriptor) -> str:
    return CLASS_NAME_PREFIX + td.simple_name.replace(".", "")


def constructor_param_name(simple_name: str) -> str:
    """SomeInterface.View -> someInterfaceView"""
    flat = simple_name.replace(".", "")
    return flat[:1].lower() + flat[1:]


def supertype_relation(td: TypeDescriptor) -> SupertypeRelation:
    if td.kind == "interface":
        return "implements"
    # a final class cannot be subclassed, the wrapper only forwards
    if "final" in td.modifiers:
        return "none"
    return "extends"


# ---------------- Assembly ----------------

def assemble(td: TypeDescriptor, members: Iterable[MemberDescriptor]) -> GeneratedWrapperSpec:
    # same package as the original, so the package-relative name resolves
    original = TypeRef(text=td.simple_name, category="reference")

    reference_field = FieldSpec(
        name=REFERENCE_FIELD_NAME,
        type=TypeRef(text=f"WeakReference<{original.text}>", category="reference"),
    )
    constructor = ConstructorSpec(
        parameter=ParameterDescriptor(type=original, name=constructor_param_name(td.simple_name)),
        field_name=REFERENCE_FIELD_NAME,
    )
    forwarding = tuple(
        ForwardingMethod(signature=copy_signature(m), body=synthesize_body(m, original))
        for m in members
    )

    imports = set(td.imports)
    imports.add(WEAK_REFERENCE_IMPORT)

    return GeneratedWrapperSpec(
        wrap_class_name=wrap_class_name(td),
        package_name=td.package_name,
        original=original,
        reference_field=reference_field,
        local_var_name=LOCAL_VAR_NAME,
        constructor=constructor,
        clear_method=ClearMethod(name=CLEAR_METHOD_NAME, field_name=REFERENCE_FIELD_NAME),
        supertype_relation=supertype_relation(td),
        forwarding_methods=forwarding,
        imports=tuple(sorted(imports)),
    )
