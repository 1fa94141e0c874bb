from .application_model import ScholarshipApplication, StoredDocument
