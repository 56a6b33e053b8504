from typing import Tuple

from weakwrap.model import MemberDescriptor, TypeDescriptor

# never part of the overridable, polymorphic surface
_EXCLUDED_MODIFIERS = ("private", "static", "final")


def is_eligible(member: MemberDescriptor, package_name: str) -> bool:
    """
    Eligibility of one member for forwarding, checked in order:
      1. private / static / final members are rejected
      2. protected members only when declared in the target's package
      3. everything else (public, package-private, abstract, Object methods)
    """
    mods = member.modifiers
    if any(m in mods for m in _EXCLUDED_MODIFIERS):
        return False
    if "protected" in mods:
        return member.declaring_package == package_name
    return True


def select_members(td: TypeDescriptor) -> Tuple[MemberDescriptor, ...]:
    return tuple(m for m in td.members if is_eligible(m, td.package_name))
