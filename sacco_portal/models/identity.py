"""Identity models for member sessions."""

import random
from dataclasses import dataclass
from datetime import datetime


@dataclass
class Identity:
    """Authenticated member's profile record."""

    id: str
    email: str
    first_name: str
    last_name: str
    phone: str | None = None
    national_id: str | None = None
    occupation: str | None = None
    member_id: str | None = None  # KS-<year>-<nnn>


@dataclass
class ProfileFields:
    """Profile bag supplied at sign-up."""

    first_name: str
    last_name: str
    phone: str = ""
    national_id: str = ""
    occupation: str = ""


@dataclass
class CredentialEntry:
    """Fallback-mode credential, keyed by email."""

    email: str
    password_hash: str
    identity: Identity


def generate_member_id(now: datetime | None = None, rng: random.Random | None = None) -> str:
    """Synthesize a membership number of the form ``KS-<year>-<nnn>``."""
    now = now or datetime.now()
    number = (rng or random).randrange(1000)
    return f"KS-{now.year}-{number:03d}"
