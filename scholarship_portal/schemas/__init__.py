from .application_schema import (
    Application,
    ApplicantDetails,
    ApplicationStatusEnum,
    DocumentRef,
    IncomingFile,
    StatusUpdateRequest,
    StatusUpdateResponse,
    SubmitResponse,
)
