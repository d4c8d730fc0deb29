from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import uuid


@dataclass(frozen=True)
class Workspace:
    root: Path
    job_id: str

    @classmethod
    def create(cls, workdir: str, job_id: str | None = None) -> "Workspace":
        jid = job_id or uuid.uuid4().hex[:12]
        root = Path(workdir).expanduser().resolve() / jid
        root.mkdir(parents=True, exist_ok=True)
        return cls(root=root, job_id=jid)

    def path(self, name: str) -> Path:
        p = self.root / name
        p.parent.mkdir(parents=True, exist_ok=True)
        return p

    @property
    def original_vtt(self) -> Path:
        return self.path("original.vtt")

    def translated_vtt(self, language: str) -> Path:
        return self.path(f"translated.{language}.vtt")

    @property
    def job_manifest(self) -> Path:
        return self.path("job.json")
