import pytest

from app.errors import ValidationError
from app.models.order import IncomingFile
from app.services.validation import is_allowed_file_type, validate_submission

PDF = IncomingFile("file.pdf", "application/pdf", b"%PDF")


class TestValidateSubmission:
    def test_normalizes_fields(self):
        sub = validate_submission(
            {"nome": "  Ana Silva ", "email": "ana@example.com", "telefone": "", "comentarios": " néon "},
            [PDF],
        )
        assert sub.name == "Ana Silva"
        assert sub.email == "ana@example.com"
        assert sub.phone is None
        assert sub.description == "néon"
        assert sub.files == [PDF]

    @pytest.mark.parametrize("fields", [
        {"nome": None, "email": "ana@example.com"},
        {"nome": "Ana", "email": ""},
        {},
    ])
    def test_missing_required(self, fields):
        with pytest.raises(ValidationError) as exc_info:
            validate_submission(fields, [PDF])
        assert exc_info.value.code == "MISSING_REQUIRED_FIELDS"
        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize("email", ["not-an-email", "ana@example", "ana @example.com", "@example.com"])
    def test_invalid_email(self, email):
        with pytest.raises(ValidationError) as exc_info:
            validate_submission({"nome": "Ana", "email": email}, [PDF])
        assert exc_info.value.code == "INVALID_EMAIL"

    def test_missing_fields_reported_before_missing_files(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_submission({"email": "ana@example.com"}, [])
        assert exc_info.value.code == "MISSING_REQUIRED_FIELDS"

    def test_no_files(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_submission({"nome": "Ana", "email": "ana@example.com"}, [])
        assert exc_info.value.code == "NO_FILES"


class TestAllowedFileTypes:
    @pytest.mark.parametrize("filename, content_type", [
        ("logo.png", "image/png"),
        ("photo.JPG", None),
        ("brief.txt", "text/plain; charset=utf-8"),
        ("vector.ai", "application/octet-stream"),
        ("vector.eps", "application/postscript"),
        ("noext", "image/webp"),
    ])
    def test_allowed(self, filename, content_type):
        assert is_allowed_file_type(filename, content_type)

    @pytest.mark.parametrize("filename, content_type", [
        ("setup.exe", "application/x-msdownload"),
        ("archive.zip", "application/zip"),
        ("notes.docx", None),
    ])
    def test_rejected(self, filename, content_type):
        assert not is_allowed_file_type(filename, content_type)
