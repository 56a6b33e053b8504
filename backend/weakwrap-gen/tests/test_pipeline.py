import pytest

from weakwrap.assembler import constructor_param_name, wrap_class_name
from weakwrap.graph import OBJECT_MEMBERS
from weakwrap.model import MemberDescriptor, ParameterDescriptor, TypeDescriptor, TypeRef
from weakwrap.pipeline import build_wrapper_spec
from weakwrap.validator import TYPE_VALIDATION_MSG, TypeNotProxyable


def make_type(name, members=(), kind="class", package="test", nesting_kind="top_level", modifiers=("public",)):
    return TypeDescriptor(
        qualified_name=f"{package}.{name}" if package else name,
        simple_name=name,
        package_name=package,
        nesting_kind=nesting_kind,
        kind=kind,
        modifiers=frozenset(modifiers),
        members=tuple(members),
    )


def declared(name, *mods, ret="void", params=(), throws=(), package="test"):
    return MemberDescriptor(
        name=name,
        modifiers=frozenset(mods),
        declaring_package=package,
        parameters=tuple(ParameterDescriptor(type=TypeRef.of(t), name=n) for t, n in params),
        thrown_types=tuple(TypeRef.of(t) for t in throws),
        return_type=TypeRef.of(ret),
    )


# ---------------- Naming ----------------

def test_naming_surface():
    td = make_type("SomeInterface.View", kind="interface", nesting_kind="static_member",
                   modifiers=("public", "static"))
    assert wrap_class_name(td) == "WeakWrapSomeInterfaceView"
    assert constructor_param_name("SomeInterface.View") == "someInterfaceView"

    spec = build_wrapper_spec(td)
    assert spec.reference_field.name == "weakWrap"
    assert spec.reference_field.type.text == "WeakReference<SomeInterface.View>"
    assert spec.reference_field.modifiers == ("private", "final")
    assert spec.local_var_name == "original"
    assert spec.clear_method.name == "clearWeakWrapRef"
    assert spec.package_name == "test"
    assert spec.qualified_name == "test.WeakWrapSomeInterfaceView"


# ---------------- Scenarios ----------------

def test_scenario_a_empty_class():
    td = make_type("EmptyClass", members=OBJECT_MEMBERS, package="")
    spec = build_wrapper_spec(td)

    assert spec.wrap_class_name == "WeakWrapEmptyClass"
    assert spec.supertype_relation == "extends"
    assert spec.constructor.parameter.type.text == "EmptyClass"
    assert spec.constructor.parameter.name == "emptyClass"
    assert spec.constructor.field_name == "weakWrap"
    assert [m.signature.name for m in spec.forwarding_methods] == ["hashCode", "equals", "toString"]
    assert "java.lang.ref.WeakReference" in spec.imports


def test_scenario_b_interface_with_void_method():
    td = make_type("SimpleInterface", members=[declared("m", "public", "abstract")], kind="interface")
    spec = build_wrapper_spec(td)

    assert spec.supertype_relation == "implements"
    assert len(spec.forwarding_methods) == 1
    method = spec.forwarding_methods[0]
    assert method.signature.modifiers == ("public",)
    assert method.body.method_name == "m"
    assert method.body.returns_result is False
    assert method.body.fallback is None


def test_scenario_c_declared_exceptions_copied_unchanged():
    member = declared("throwMethod", "public", throws=("IOException", "InterruptedException"))
    spec = build_wrapper_spec(make_type("ClassWithMethodsThatThrowExceptions", members=[member]))

    method = spec.forwarding_methods[0]
    assert [t.text for t in method.signature.thrown_types] == ["IOException", "InterruptedException"]
    assert method.body.fallback is None


def test_scenario_d_instance_nested_type_produces_no_spec():
    td = make_type("AnnotationOnNonStaticInnerClass.NonStaticInner", nesting_kind="instance_member")
    with pytest.raises(TypeNotProxyable) as exc:
        build_wrapper_spec(td)
    assert exc.value.message == TYPE_VALIDATION_MSG


def test_scenario_e_boolean_versus_object_fallback():
    members = [declared("flag", "public", ret="boolean"), declared("value", "public", ret="Object")]
    spec = build_wrapper_spec(make_type("SimplePrimitiveClass", members=members))
    assert [m.body.fallback for m in spec.forwarding_methods] == ["false", "null"]


# ---------------- Properties ----------------

def test_generation_is_idempotent():
    members = list(OBJECT_MEMBERS) + [
        declared("simpleParam", "public", params=(("int", "par"),)),
        declared("get", "public", ret="List<String>"),
    ]
    first = build_wrapper_spec(make_type("SimpleClass", members=members))
    second = build_wrapper_spec(make_type("SimpleClass", members=list(members)))
    assert first == second
    assert hash(first) == hash(second)


def test_forwarding_order_mirrors_selection_order():
    members = [
        declared("b", "public"),
        declared("hidden", "private"),
        declared("a", "public"),
        declared("c"),
    ]
    spec = build_wrapper_spec(make_type("Ordered", members=members))
    assert [m.signature.name for m in spec.forwarding_methods] == ["b", "a", "c"]


def test_final_class_is_wrapped_without_supertype():
    spec = build_wrapper_spec(make_type("Sealed", modifiers=("public", "final")))
    assert spec.supertype_relation == "none"


def test_descriptor_imports_are_carried_to_spec():
    td = TypeDescriptor(
        qualified_name="test.Gen",
        simple_name="Gen",
        package_name="test",
        imports=("java.util.List", "java.io.IOException"),
    )
    spec = build_wrapper_spec(td)
    assert spec.imports == ("java.io.IOException", "java.lang.ref.WeakReference", "java.util.List")
