from scholarship_portal.schemas.application_schema import ApplicantDetails, StatusUpdateRequest


def test_applicant_details_exposes_well_known_fields_and_extras():
    details = ApplicantDetails(entries={
        "applicant_name": "Asha Kumar",
        "email_id": "asha@example.com",
        "contact_number": "",
        "fee_breakup": "1000",
        "referral": "",
    })

    assert details.applicant_name == "Asha Kumar"
    assert details.email_id == "asha@example.com"
    assert details.contact_number is None
    assert details.request_category is None
    assert list(details.extra.items()) == [("fee_breakup", "1000"), ("referral", "")]


def test_status_update_request_accepts_camel_case_aliases():
    update = StatusUpdateRequest(**{"status": "eligible", "bankDetails": {"ifsc": "SBIN0000001"}, "reviewedBy": "trustee-1"})

    assert update.bank_details == {"ifsc": "SBIN0000001"}
    assert update.reviewed_by == "trustee-1"
