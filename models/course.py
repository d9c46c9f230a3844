"""Datenmodell für ein Fach (Disziplin) des Lehrangebots (Pydantic v2)."""

from pydantic import BaseModel, Field


class Course(BaseModel):
    """Ein Fach im Katalog: Stunden, Voraussetzungen, angebotene Kurse.

    Voraussetzungen und Kurse werden über ihre Codes referenziert.
    Zyklen im Voraussetzungsgraphen werden nicht geprüft.
    """

    name: str
    code: str                               # Identität, z.B. "CALC1"
    credit_hours: int = Field(ge=0)         # Gesamtstunden, z.B. 60
    prerequisites: list[str] = []           # Fach-Codes
    class_codes: list[str] = []             # Kurse dieses Fachs

    def add_prerequisite(self, code: str) -> bool:
        """Nimmt ein Fach als Voraussetzung auf (keine Selbstreferenz, keine Duplikate)."""
        if code == self.code or code in self.prerequisites:
            return False
        self.prerequisites.append(code)
        return True

    def remove_prerequisite(self, code: str) -> bool:
        if code not in self.prerequisites:
            return False
        self.prerequisites.remove(code)
        return True

    def add_class(self, class_code: str) -> None:
        if class_code not in self.class_codes:
            self.class_codes.append(class_code)

    def remove_class(self, class_code: str) -> None:
        if class_code in self.class_codes:
            self.class_codes.remove(class_code)

    def __str__(self) -> str:
        return f"{self.name} ({self.code}) - {self.credit_hours}h"
