"""Custom exceptions for carefold."""


class CarefoldError(Exception):
    """Base exception for all carefold errors."""

    exit_code: int = 1


class InputError(CarefoldError):
    """Invalid arguments, missing files or unknown patients."""

    exit_code: int = 2


class ExportFormatError(CarefoldError):
    """The data export is not readable JSON of the expected shape."""

    exit_code: int = 3

    def __init__(self, message: str, filename: str | None = None):
        self.filename = filename
        super().__init__(f"{filename}: {message}" if filename else message)


class RecordError(CarefoldError):
    """A record field in the export could not be parsed."""

    exit_code: int = 4

    def __init__(self, message: str, collection: str | None = None):
        self.collection = collection
        super().__init__(f"[{collection}] {message}" if collection else message)


class MissingLMPError(CarefoldError):
    """Gestational progress was requested for a patient with no LMP date."""

    exit_code: int = 5

    def __init__(self, patient_id: int | None = None):
        self.patient_id = patient_id
        if patient_id is None:
            super().__init__("LMP date not recorded")
        else:
            super().__init__(f"LMP date not recorded for patient {patient_id}")
