"""
Identifier helpers
"""

import re
import secrets
import time
import uuid

VERSION_ID_PATTERN = re.compile(r"^[a-f0-9-]{36}$", re.IGNORECASE)

def uid(prefix: str = "id") -> str:
    """Locally unique id such as ``t_3f9a1c2b7d4e_18c2f0a1b2c``"""
    return f"{prefix}_{secrets.token_hex(6)}_{int(time.time() * 1000):x}"

def new_version_id() -> str:
    return str(uuid.uuid4())

def is_valid_version_id(version_id: str) -> bool:
    return isinstance(version_id, str) and VERSION_ID_PATTERN.fullmatch(version_id) is not None
