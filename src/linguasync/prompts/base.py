from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PromptSpec:
    system: str
    example: str = ""

    def render(self, **kwargs: object) -> str:
        text = self.system.format(**kwargs)
        if self.example:
            text = f"{text}\n\n{self.example}"
        return text
