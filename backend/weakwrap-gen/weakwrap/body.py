from typing import Dict

from weakwrap.model import ForwardingBody, MemberDescriptor, TypeCategory, TypeRef

REFERENCE_FIELD_NAME = "weakWrap"
LOCAL_VAR_NAME = "original"

# returned when the weak reference has been cleared
DEFAULT_VALUES: Dict[TypeCategory, str | None] = {
    "void": None,
    "boolean": "false",
    "primitive": "0",
    "reference": "null",
}


def default_value(return_type: TypeRef) -> str | None:
    return DEFAULT_VALUES[return_type.category]


def synthesize_body(member: MemberDescriptor, original: TypeRef) -> ForwardingBody:
    """
    Null-safe forward-or-default body:

        Original original = weakWrap.get();
        if (original != null) {
          [return] original.member(p1, p2, ...);
        }
        [return <default>;]

    Exceptions thrown by the forwarded call propagate unchanged.
    """
    returns_result = member.return_type.category != "void"
    return ForwardingBody(
        local_type=original,
        local_name=LOCAL_VAR_NAME,
        field_name=REFERENCE_FIELD_NAME,
        method_name=member.name,
        arguments=tuple(p.name for p in member.parameters),
        returns_result=returns_result,
        fallback=default_value(member.return_type),
    )
