from weakwrap.model import TypeDescriptor

TYPE_VALIDATION_MSG = "Only Top level and static inner classes are supported"


class TypeNotProxyable(ValueError):
    """
    Raised for types whose instances carry an implicit enclosing-instance
    reference (non-static inner classes). No wrapper is produced for them.
    """

    def __init__(self, qualified_name: str, message: str = TYPE_VALIDATION_MSG) -> None:
        super().__init__(message)
        self.qualified_name = qualified_name
        self.message = message


def is_proxyable(td: TypeDescriptor) -> bool:
    if td.nesting_kind == "top_level":
        return True
    return td.nesting_kind == "static_member" and "static" in td.modifiers


def validate(td: TypeDescriptor) -> None:
    if not is_proxyable(td):
        raise TypeNotProxyable(td.qualified_name)
