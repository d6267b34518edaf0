import pytest

from moisture_api.services import ModelUploadService
from moisture_api.utils.errors import describe_validation_errors
from moisture_api.utils.validation import clamp_limit, is_model_file, is_number, sanitize_filename


@pytest.mark.parametrize("value, expected", [
    (None, 50),
    (0, 50),
    ("", 50),
    ("abc", 50),
    ("nan", 50),
    (1, 1),
    ("10", 10),
    (10.9, 10),
    (500, 500),
    (1000, 500),
    (-5, 1),
])
def test_clamp_limit(value, expected):
    assert clamp_limit(value) == expected


@pytest.mark.parametrize("value, expected", [
    (1, True),
    (0, True),
    (-2.5, True),
    (True, False),
    ("1", False),
    (None, False),
    (float("nan"), False),
    (float("inf"), False),
    (10 ** 400, False),
])
def test_is_number(value, expected):
    assert is_number(value) is expected


def test_sanitize_filename():
    assert sanitize_filename("Tractor v2.glb") == "Tractor_v2.glb"
    assert sanitize_filename("../../etc/passwd.glb") == ".._.._etc_passwd.glb"
    assert sanitize_filename("ok-name_1.gltf") == "ok-name_1.gltf"
    assert sanitize_filename("café.glb") == "caf_.glb"


def test_is_model_file():
    assert is_model_file("a.glb")
    assert is_model_file("A.GlTf")
    assert not is_model_file("a.glb.txt")
    assert not is_model_file("glb")
    assert not is_model_file("")


def test_storage_and_display_names():
    stored = ModelUploadService.storage_name("Tractor v2.glb", now_ms=1714550400000)

    assert stored == "1714550400000_Tractor_v2.glb"
    assert ModelUploadService.display_name(stored) == "Tractor_v2.glb"
    assert ModelUploadService.display_name("no-prefix.glb") == "no-prefix.glb"
    assert ModelUploadService.display_name("12_") == "12_"


def test_describe_validation_errors():
    errors = [
        {"loc": ("body", "value"), "msg": "Field required"},
        {"loc": ("body",), "msg": "Invalid JSON"},
    ]

    assert describe_validation_errors(errors) == "value: Field required; body: Invalid JSON"
    assert describe_validation_errors([]) == "Invalid request"
