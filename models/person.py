"""Datenmodell für eine Person (Basis für Studierende und Dozenten, Pydantic v2)."""

from pydantic import BaseModel, Field, field_validator


def _require_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Name und Kennung dürfen nicht leer sein.")
    return value


class Person(BaseModel):
    """Gemeinsame Identität von Studierenden und Dozenten."""

    name: str
    id: str = Field(frozen=True)   # Matrikel-/Personalnummer, nach Anlage unveränderlich

    @field_validator("name", "id")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        return _require_text(v)

    def rename(self, name: str) -> None:
        """Ändert den Namen (die Kennung bleibt unverändert)."""
        self.name = _require_text(name)
