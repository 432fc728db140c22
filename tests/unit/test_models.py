from types import MappingProxyType

import pydantic
import pytest

from intake.models import FILE_FIELDS, NOT_PROVIDED, ApplicationSubmission, uploads_in_slot_order


def test_detail_rows_follow_display_order(submission):
    labels = [label for label, _ in submission.detail_rows()]

    assert labels == [
        "First Name", "Last Name", "Applying Position", "Email", "Date of Birth",
        "Phone Number", "Mobile Number", "Address Line 1", "City", "Zip Code", "Country",
    ]


def test_absent_and_empty_optional_fields_show_not_provided(form_fields):
    form_fields.update({"mobileNumber": "", "zipCode": "1000-001"})
    rows = dict(ApplicationSubmission.model_validate(form_fields).detail_rows())

    assert rows["Mobile Number"] == NOT_PROVIDED
    assert rows["Address Line 1"] == NOT_PROVIDED
    assert rows["Zip Code"] == "1000-001"


def test_pdf_filename_uses_names_verbatim(form_fields):
    form_fields.update({"firstName": "Ana Maria", "lastName": "O'Neil"})

    submission = ApplicationSubmission.model_validate(form_fields)

    assert submission.pdf_filename == "Application_Ana Maria_O'Neil.pdf"


def test_presence_only_validation_accepts_any_email_text(form_fields):
    form_fields["email"] = "not-an-email"

    assert ApplicationSubmission.model_validate(form_fields).email == "not-an-email"


def test_required_field_cannot_be_empty(form_fields):
    form_fields["dateOfBirth"] = ""

    with pytest.raises(pydantic.ValidationError):
        ApplicationSubmission.model_validate(form_fields)


def test_slot_order_reads_any_mapping(uploads):
    shuffled = dict(reversed(list(uploads.items())))
    ordered = uploads_in_slot_order(MappingProxyType(shuffled))

    assert [upload.field_name for upload in ordered] == list(FILE_FIELDS)
