from __future__ import annotations

from dataclasses import dataclass

from core.domain.identifiers import generate_id


@dataclass
class Project:
    id: str
    name: str
    description: str = ""
    version: int = 1

    @staticmethod
    def create(name: str, description: str = "") -> "Project":
        return Project(id=generate_id(), name=name, description=description)


__all__ = ["Project"]
