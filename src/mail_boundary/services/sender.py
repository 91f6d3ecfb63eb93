import re
from typing import Optional, Tuple

ADDRESS_RE = re.compile(r"^[^@\s<>\[\]()\"]+@[^@\s<>\[\]()\"]+$")

# "Name <addr>" and "Name [mailto:addr]"; the name may carry parentheses, as in "Jane (Sales) <addr>"
_NAME_AND_ADDRESS_RE = re.compile(
    r"^\s*\"?(?P<name>[^\"<>\[\]]*?)\"? ?[<\[] ?(?:mailto:)?(?P<address>[^<>\[\]()\s]*) ?[>\]]\s*$",
    re.IGNORECASE,
)
# "Name (addr)"
_NAME_AND_PAREN_ADDRESS_RE = re.compile(
    r"^\s*\"?(?P<name>[^\"<>\[\]()]*?)\"? ?\( ?(?:mailto:)?(?P<address>[^<>\[\]()\s]*) ?\)\s*$",
    re.IGNORECASE,
)


def clean_name(value: Optional[str]) -> str:
    name = (value or "").strip()
    if len(name) >= 2 and name[0] == name[-1] and name[0] in "\"'":
        name = name[1:-1].strip()
    for left, right in (("«", "»"), ("„", "”"), ("“", "”")):
        if name.startswith(left) and name.endswith(right):
            name = name[len(left) : -len(right)].strip()
    return name


def clean_address(value: Optional[str]) -> str:
    address = (value or "").strip().strip("<>[]()").strip()
    if address.lower().startswith("mailto:"):
        address = address[len("mailto:") :]
    return address.strip()


def is_bare_address(value: str) -> bool:
    return bool(ADDRESS_RE.match(value.strip()))


def resolve_sender(name: Optional[str], address: Optional[str]) -> Tuple[str, str]:
    resolved_name = clean_name(name)
    resolved_address = clean_address(address)
    if not resolved_address and is_bare_address(resolved_name):
        return "", resolved_name
    return resolved_name, resolved_address


def split_sender(raw: Optional[str]) -> Tuple[str, str]:
    value = (raw or "").strip()
    if not value:
        return "", ""

    match = _NAME_AND_ADDRESS_RE.match(value) or _NAME_AND_PAREN_ADDRESS_RE.match(value)
    if match:
        return resolve_sender(match.group("name"), match.group("address"))
    return resolve_sender(value, "")
