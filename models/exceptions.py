"""Fehlerklassen des Belegungs- und Bewertungsmoduls."""


class AcademicError(Exception):
    """Basisklasse für fachliche Fehler."""


class ScoreValidationError(AcademicError, ValueError):
    """Eine Teilnote liegt außerhalb von [0, 10]."""


class AttendanceValidationError(AcademicError, ValueError):
    """Ungültige Anzahl gehaltener oder besuchter Termine."""


class RosterStateError(AcademicError, RuntimeError):
    """Der Studierende steht nicht auf der Teilnehmerliste des Kurses.

    Signalisiert eine falsche Aufrufreihenfolge: die Mitgliedschaft muss
    vorher geprüft worden sein.
    """
