from typing import Optional

OWNER = "OWNER"
ADMIN = "ADMIN"
MEMBER = "MEMBER"
VIEWER = "VIEWER"

# Higher rank grants everything a lower rank can do
ROLE_RANKS: dict[str, int] = {
    VIEWER: 1,
    MEMBER: 2,
    ADMIN: 3,
    OWNER: 4,
}

def normalize_role(role: Optional[str]) -> Optional[str]:
    if not role:
        return None
    role = role.strip().upper()
    return role if role in ROLE_RANKS else None

def role_at_least(role: Optional[str], minimum: str) -> bool:
    """
    True when `role` is known and ranks at or above `minimum`.
    Unknown or missing roles never satisfy a requirement.
    """
    role = normalize_role(role)
    if role is None:
        return False
    return ROLE_RANKS[role] >= ROLE_RANKS[minimum]
