"""Name transformation utilities for converting spec names to Python names."""

import keyword


def title(s: str) -> str:
    """Capitalize each space-delimited word and lowercase the rest.

    Examples:
        family id -> Family Id
        getFAMILY -> Getfamily
    """
    return " ".join(w[:1].upper() + w[1:].lower() for w in s.split(" "))


def camel_case(s: str) -> str:
    """Convert a kebab-case or space-delimited name to an identifier.

    Examples:
        family-id -> FamilyId
        getfamily -> Getfamily
        newmcast-grp -> NewmcastGrp
    """
    return title(s.replace("-", " ")).replace(" ", "")


def snake_case(s: str) -> str:
    """Convert a kebab-case or space-delimited name to a Python attribute name.

    Keywords get a trailing underscore so they remain valid identifiers.

    Examples:
        family-id -> family_id
        op-policy -> op_policy
        global -> global_
    """
    name = s.replace("-", "_").replace(" ", "_").lower()
    if keyword.iskeyword(name):
        name += "_"
    return name


def constant_name(prefix: str, name: str) -> str:
    """Build a protocol constant name from a prefix and a kebab-case name.

    Examples:
        ctrl-attr-, family-id -> CTRL_ATTR_FAMILY_ID
        ctrl-cmd-, getpolicy -> CTRL_CMD_GETPOLICY
    """
    return (prefix + name).replace("-", "_").upper()


def constant_ref(prefix: str, name: str, namespace: str = "uapi") -> str:
    """Reference a protocol constant inside the generated module's catalog.

    ctrl-attr-, family-id -> uapi.CTRL_ATTR_FAMILY_ID
    """
    return f"{namespace}.{constant_name(prefix, name)}"
