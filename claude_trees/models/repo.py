"""Registered repository model."""

import os
import uuid
from dataclasses import dataclass, field


@dataclass
class Repo:
    """A git repository the user registered."""

    path: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    name: str = ""

    def __post_init__(self):
        if not self.name:
            self.name = os.path.basename(self.path.rstrip(os.sep)) or self.path

    def to_dict(self) -> dict:
        return {"id": self.id, "path": self.path, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict) -> "Repo":
        return cls(path=data["path"], id=data["id"], name=data.get("name", ""))
