"""Image validator: type, emptiness and size ceiling."""

import pytest

from templecloud.services.image_validation import file_extension, validate_image

MB = 1024 * 1024


@pytest.mark.parametrize("content_type", ["image/jpeg", "image/jpg", "image/png", "image/webp", "IMAGE/PNG"])
def test_allowed_types_pass(content_type):
    result = validate_image("photo.bin", content_type, 1024)
    assert result.valid
    assert result.error is None


@pytest.mark.parametrize(
    "filename, content_type",
    [("anim.gif", "image/gif"), ("doc.pdf", "application/pdf"), ("x.svg", "image/svg+xml")],
)
def test_disallowed_types_fail(filename, content_type):
    result = validate_image(filename, content_type, 1024)
    assert not result.valid
    assert result.error == "upload.invalid_format"


def test_declared_type_wins_over_extension():
    assert not validate_image("photo.png", "image/gif", 1024).valid
    assert validate_image("photo.gif", "image/png", 1024).valid


@pytest.mark.parametrize("content_type", [None, "", "application/octet-stream"])
def test_extension_is_used_when_type_is_undeclared(content_type):
    assert validate_image("Photo.JPEG", content_type, 1024).valid
    assert validate_image("photo.webp", content_type, 1024).valid
    assert not validate_image("photo.gif", content_type, 1024).valid
    assert not validate_image("noextension", content_type, 1024).valid


def test_size_ceiling_is_exclusive():
    assert validate_image("a.png", "image/png", 5 * MB - 1).valid

    at_ceiling = validate_image("a.png", "image/png", 5 * MB)
    assert not at_ceiling.valid
    assert at_ceiling.error == "upload.file_too_large"
    assert at_ceiling.params == {"max_mb": "5"}


def test_custom_ceiling():
    result = validate_image("a.png", "image/png", 2 * MB, max_size=2 * MB)
    assert result.error == "upload.file_too_large"
    assert result.params == {"max_mb": "2"}


def test_empty_file_fails():
    result = validate_image("a.png", "image/png", 0)
    assert not result.valid
    assert result.error == "upload.empty_file"


def test_type_is_checked_before_size():
    assert validate_image("a.gif", "image/gif", 50 * MB).error == "upload.invalid_format"


@pytest.mark.parametrize(
    "filename, expected",
    [("a.PNG", "png"), ("archive.tar.gz", "gz"), ("noext", ""), (None, ""), ("", "")],
)
def test_file_extension(filename, expected):
    assert file_extension(filename) == expected
