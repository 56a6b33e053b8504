from weakwrap.graph import OBJECT, TypeGraph, TypeInfo, substitute
from weakwrap.model import MemberDescriptor, ParameterDescriptor, TypeParameter, TypeRef


def member(owner: TypeInfo, name, *mods, params=(), returns="void", type_parameters=()):
    return MemberDescriptor(
        name=name,
        modifiers=frozenset(mods),
        declaring_package=owner.package_name,
        declaring_type=owner.qualified_name,
        type_parameters=type_parameters,
        parameters=tuple(ParameterDescriptor(type=TypeRef.of(t), name=n) for t, n in params),
        return_type=TypeRef.of(returns),
    )


def add(graph: TypeGraph, qualified_name, kind="class", methods=()):
    package, _, simple = qualified_name.rpartition(".")
    info = TypeInfo(qualified_name=qualified_name, simple_name=simple, package_name=package, kind=kind)
    info.declared = tuple(member(info, *m) if isinstance(m, tuple) else member(info, m) for m in methods)
    graph.add_type(info)
    return info


def names(members):
    return [(m.declaring_type, m.name) for m in members]


def test_object_members_come_first():
    g = TypeGraph()
    add(g, "test.Simple", methods=[("run", "public")])
    g.add_edge("test.Simple", OBJECT, "ROOT")

    members = g.complete_members("test.Simple")
    assert members[0].name == "getClass"
    assert members[-1].declaring_type == "test.Simple"
    assert g.linearize("test.Simple") == [OBJECT, "test.Simple"]


def test_overriding_member_takes_derived_position():
    g = TypeGraph()
    add(g, "EmptyClass", methods=[("clone", "protected")])
    g.add_edge("EmptyClass", OBJECT, "ROOT")

    members = g.complete_members("EmptyClass")
    clones = [m for m in members if m.name == "clone"]
    assert len(clones) == 1
    assert clones[0].declaring_type == "EmptyClass"
    assert members[-1] is clones[0]


def test_interface_method_never_replaces_class_method():
    g = TypeGraph()
    add(g, "test.Base", methods=[("run", "public", "final")])
    add(g, "test.Runner", kind="interface", methods=[("run", "public", "abstract")])
    add(g, "test.Impl")
    g.add_edge("test.Impl", "test.Base", "INHERITS")
    g.add_edge("test.Impl", "test.Runner", "IMPLEMENTS")
    for t in ("test.Base", "test.Runner", "test.Impl"):
        g.add_edge(t, OBJECT, "ROOT")

    runs = [m for m in g.complete_members("test.Impl") if m.name == "run"]
    assert [m.declaring_type for m in runs] == ["test.Base"]


def test_overloads_are_kept_apart():
    g = TypeGraph()
    info = add(g, "test.Over")
    info.declared = (
        member(info, "put", "public", params=(("int", "a"),)),
        member(info, "put", "public", params=(("List<String>", "a"),)),
        member(info, "put", "public", params=(("List<Long>", "b"),)),
    )
    g.add_edge("test.Over", OBJECT, "ROOT")

    puts = [m for m in g.complete_members("test.Over") if m.name == "put"]
    # List<String> and List<Long> erase to the same signature
    assert [p.parameters[0].type.text for p in puts] == ["int", "List<Long>"]


def test_private_and_foreign_package_private_members_are_not_inherited():
    g = TypeGraph()
    add(g, "lib.Base", methods=[
        ("secret", "private"),
        "packageOnly",
        ("shared", "protected"),
        ("open", "public"),
    ])
    add(g, "app.Child")
    g.add_edge("app.Child", "lib.Base", "INHERITS")
    g.add_edge("lib.Base", OBJECT, "ROOT")
    g.add_edge("app.Child", OBJECT, "ROOT")

    own = [m.name for m in g.complete_members("app.Child") if m.declaring_type == "lib.Base"]
    assert own == ["shared", "open"]


def test_same_package_package_private_members_are_inherited():
    g = TypeGraph()
    add(g, "lib.Base", methods=["packageOnly"])
    add(g, "lib.Child")
    g.add_edge("lib.Child", "lib.Base", "INHERITS")
    g.add_edge("lib.Base", OBJECT, "ROOT")

    assert ("lib.Base", "packageOnly") in names(g.complete_members("lib.Child"))


def test_static_interface_methods_are_not_inherited():
    g = TypeGraph()
    add(g, "lib.Api", kind="interface", methods=[("create", "public", "static")])
    add(g, "lib.Impl")
    g.add_edge("lib.Impl", "lib.Api", "IMPLEMENTS")
    g.add_edge("lib.Api", OBJECT, "ROOT")

    assert "create" not in [m.name for m in g.complete_members("lib.Impl")]


def test_substitute_skips_qualified_tails():
    assert substitute("Map.Entry<K, T>[]", {"T": "String", "Entry": "X"}) == "Map.Entry<K, String>[]"
    assert substitute("List<? extends T>", {"T": "Number"}) == "List<? extends Number>"


def test_inherited_signatures_use_clause_type_arguments():
    g = TypeGraph()
    base = TypeInfo(
        qualified_name="test.Base",
        simple_name="Base",
        package_name="test",
        type_parameters=(TypeParameter(name="T"),),
    )
    base.declared = (
        member(base, "get", "public", returns="T"),
        member(base, "put", "public", params=(("T", "x"),)),
        member(base, "all", "public", params=(("List<T>", "xs"),), returns="T[]"),
    )
    g.add_type(base)
    child = add(g, "test.Child")
    child.declared = (member(child, "put", "public", params=(("String", "x"),)),)
    g.add_edge("test.Child", "test.Base", "INHERITS", ("String",))
    g.add_edge("test.Base", OBJECT, "ROOT")
    g.add_edge("test.Child", OBJECT, "ROOT")

    inherited = {m.name: m for m in g.complete_members("test.Child") if m.declaring_type != OBJECT}
    assert list(inherited) == ["get", "all", "put"]
    assert inherited["get"].return_type.text == "String"
    assert inherited["all"].parameters[0].type.text == "List<String>"
    assert inherited["all"].return_type.text == "String[]"
    assert inherited["put"].declaring_type == "test.Child"


def test_type_arguments_flow_through_intermediate_supertypes():
    g = TypeGraph()
    base = TypeInfo(
        qualified_name="test.Base",
        simple_name="Base",
        package_name="test",
        type_parameters=(TypeParameter(name="T"),),
    )
    base.declared = (member(base, "get", "public", returns="T"),)
    g.add_type(base)
    middle = TypeInfo(
        qualified_name="test.Middle",
        simple_name="Middle",
        package_name="test",
        type_parameters=(TypeParameter(name="E"),),
    )
    g.add_type(middle)
    add(g, "test.Leaf")
    g.add_edge("test.Leaf", "test.Middle", "INHERITS", ("Long",))
    g.add_edge("test.Middle", "test.Base", "INHERITS", ("List<E>",))

    assert g.type_bindings("test.Leaf")["test.Base"] == {"T": "List<Long>"}
    get = [m for m in g.complete_members("test.Leaf") if m.name == "get"][0]
    assert get.return_type.text == "List<Long>"


def test_raw_supertype_binds_erased_bounds():
    g = TypeGraph()
    base = TypeInfo(
        qualified_name="test.Sorted",
        simple_name="Sorted",
        package_name="test",
        type_parameters=(
            TypeParameter(name="T", bounds=(TypeRef.of("Comparable<T>"),)),
            TypeParameter(name="V"),
        ),
    )
    base.declared = (member(base, "first", "public", params=(("V", "v"),), returns="T"),)
    g.add_type(base)
    add(g, "test.Raw")
    g.add_edge("test.Raw", "test.Sorted", "INHERITS")

    first = [m for m in g.complete_members("test.Raw") if m.name == "first"][0]
    assert first.return_type.text == "Comparable"
    assert first.parameters[0].type.text == "Object"


def test_method_type_parameters_shadow_class_ones():
    g = TypeGraph()
    base = TypeInfo(
        qualified_name="test.Box",
        simple_name="Box",
        package_name="test",
        type_parameters=(TypeParameter(name="T"),),
    )
    base.declared = (
        member(base, "map", "public", params=(("T", "t"),), returns="T",
               type_parameters=(TypeParameter(name="T"),)),
    )
    g.add_type(base)
    add(g, "test.IntBox")
    g.add_edge("test.IntBox", "test.Box", "INHERITS", ("Integer",))

    mapped = [m for m in g.complete_members("test.IntBox") if m.name == "map"][0]
    assert mapped.return_type.text == "T"
    assert mapped.parameters[0].type.text == "T"
