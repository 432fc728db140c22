import asyncio
import io

import pytest
from starlette.datastructures import FormData, Headers, UploadFile

from intake.errors import UploadError, ValidationError
from intake.models import FILE_FIELDS
from intake.validation import (
    MISSING_FIELDS_MESSAGE,
    TYPE_REJECTED_MESSAGE,
    build_submission,
    check_file_type,
    collect_uploads,
    parse_submission,
)

LIMIT = 2 * 1024 * 1024


def _upload(filename, data=b"img", content_type="image/jpeg"):
    return UploadFile(
        file=io.BytesIO(data),
        size=len(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.mark.parametrize(
    "filename, content_type",
    [
        ("a.jpg", "image/jpeg"),
        ("a.JPEG", "image/jpeg"),
        ("a.png", "image/png"),
        ("a.jpg", "image/jpg"),
        ("photo.final.PNG", "image/png; charset=binary"),
    ],
)
def test_jpeg_and_png_are_accepted(filename, content_type):
    check_file_type(filename, content_type)


@pytest.mark.parametrize(
    "filename, content_type",
    [
        ("id.pdf", "image/jpeg"),
        ("id.gif", "image/gif"),
        ("id.png", "application/pdf"),
        ("id", "image/png"),
        ("id.jpg", ""),
    ],
)
def test_other_types_are_rejected(filename, content_type):
    with pytest.raises(UploadError, match="Only JPEG/PNG images are allowed!"):
        check_file_type(filename, content_type)


def test_collect_uploads_skips_empty_file_inputs():
    form = FormData([("idFileFront", _upload("")), ("selfie1", _upload("s1.jpg"))])

    uploads = asyncio.run(collect_uploads(form, LIMIT))

    assert list(uploads) == ["selfie1"]
    assert uploads["selfie1"].filename == "s1.jpg"
    assert uploads["selfie1"].caption == "Selfie 1"


def test_collect_uploads_checks_type_before_size():
    form = FormData([("selfie1", _upload("s1.pdf", data=b"x" * (LIMIT + 10)))])

    with pytest.raises(UploadError) as exc:
        asyncio.run(collect_uploads(form, LIMIT))
    assert str(exc.value) == TYPE_REJECTED_MESSAGE


def test_collect_uploads_reports_size_limit_in_megabytes():
    form = FormData([("idFileBack", _upload("b.png", data=b"x" * (LIMIT + 1), content_type="image/png"))])

    with pytest.raises(UploadError) as exc:
        asyncio.run(collect_uploads(form, LIMIT))
    assert str(exc.value) == "File too large: idFileBack exceeds the 2 MB limit"


def test_build_submission_lists_everything_missing_in_one_pass(form_fields):
    del form_fields["email"]

    with pytest.raises(ValidationError) as exc:
        build_submission(form_fields, {})

    assert str(exc.value) == MISSING_FIELDS_MESSAGE
    assert set(exc.value.missing) == set(FILE_FIELDS) | {"email"}


def test_parse_submission_returns_submission_and_all_slots(form_fields):
    items = list(form_fields.items()) + [(name, _upload(f"{name}.jpg")) for name in FILE_FIELDS]

    submission, uploads = asyncio.run(parse_submission(FormData(items), LIMIT))

    assert submission.full_name == "Jane Doe"
    assert list(uploads) == list(FILE_FIELDS)


def test_file_posted_under_a_text_field_name_is_unexpected(form_fields):
    del form_fields["lastName"]
    items = list(form_fields.items()) + [("lastName", _upload("doe.jpg"))]
    items += [(name, _upload(f"{name}.jpg")) for name in FILE_FIELDS]

    with pytest.raises(UploadError, match="Unexpected field: lastName"):
        asyncio.run(parse_submission(FormData(items), LIMIT))
