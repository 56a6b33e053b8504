from weakwrap.model import MemberDescriptor, MethodSignature, ordered_modifiers

# the forwarding method always has a concrete, non-native body
STRIPPED_MODIFIERS = frozenset({"abstract", "native"})


def copy_modifiers(member: MemberDescriptor):
    return ordered_modifiers(member.modifiers - STRIPPED_MODIFIERS)


def copy_signature(member: MemberDescriptor) -> MethodSignature:
    return MethodSignature(
        name=member.name,
        modifiers=copy_modifiers(member),
        type_parameters=tuple(member.type_parameters),
        parameters=tuple(member.parameters),
        thrown_types=tuple(member.thrown_types),
        return_type=member.return_type,
        varargs=member.varargs,
    )
