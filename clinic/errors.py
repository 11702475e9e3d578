# clinic/errors.py


class ClinicError(Exception):
    """Base class for errors raised by the clinic services."""


class PatientNotFound(ClinicError):
    def __init__(self, patient_id):
        super().__init__(f"Patient {patient_id} not found")
        self.patient_id = patient_id


class QuestionnaireNotFound(ClinicError):
    def __init__(self, questionnaire_id):
        super().__init__(f"Questionnaire {questionnaire_id} not found")
        self.questionnaire_id = questionnaire_id


class DentistNotFound(ClinicError):
    def __init__(self, dentist_id):
        super().__init__(f"Dentist {dentist_id} not found")
        self.dentist_id = dentist_id


class DuplicatePatient(ClinicError):
    """A patient with the same CNP or email already exists."""
