from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ClientProfile:
    name: str = ""
    name_project: str = ""
    location: str = ""
    identification: str = ""
    phone: str = ""
    email: str = ""
    description: str = ""
    status: str = "pendiente"
