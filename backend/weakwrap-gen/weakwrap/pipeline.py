from weakwrap.assembler import assemble
from weakwrap.model import GeneratedWrapperSpec, TypeDescriptor
from weakwrap.selector import select_members
from weakwrap.validator import validate


def build_wrapper_spec(td: TypeDescriptor) -> GeneratedWrapperSpec:
    """
    Main pipeline: validate -> select members -> assemble wrapper.
    Raises TypeNotProxyable before anything is built for a rejected type.
    """
    validate(td)
    members = select_members(td)
    return assemble(td, members)
