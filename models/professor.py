"""Datenmodell für eine Lehrperson (Pydantic v2)."""

from models.person import Person


class Professor(Person):
    """Dozent/in eines Fachbereichs mit den gehaltenen Kursen."""

    department: str = ""
    class_codes: list[str] = []

    def add_class(self, class_code: str) -> None:
        if class_code not in self.class_codes:
            self.class_codes.append(class_code)

    def remove_class(self, class_code: str) -> None:
        if class_code in self.class_codes:
            self.class_codes.remove(class_code)

    def __str__(self) -> str:
        return f"Prof. {self.name} ({self.id}) - {self.department}"
