"""Local OS user lookup."""

from __future__ import annotations

import os
import pwd
from dataclasses import dataclass

from almond_cmdline.errors import IdentityLookupError


@dataclass(frozen=True)
class LocalUser:
    """Identity of the person running the shell."""

    id: int
    account: str
    name: str


def resolve_local_user(uid: int | None = None) -> LocalUser:
    """Resolve ``uid`` (default: the current process user) into a LocalUser."""

    if uid is None:
        uid = os.getuid()
    try:
        entry = pwd.getpwuid(uid)
    except KeyError as exc:
        raise IdentityLookupError(uid) from exc

    full_name = entry.pw_gecos.split(",", 1)[0].strip()
    return LocalUser(id=uid, account=entry.pw_name, name=full_name or entry.pw_name)
