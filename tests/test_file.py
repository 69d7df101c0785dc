import pytest

from envspec.file import FileName, file
from envspec.spec import Registry, SpecError, UndefinedError

NAME = "FERRITE_FILE"


@pytest.fixture
def registry(monkeypatch):
    monkeypatch.delenv(NAME, raising=False)
    return Registry()


@pytest.fixture
def hello(tmp_path):
    path = tmp_path / "hello.txt"
    path.write_bytes(b"Hello, world!\n")
    return FileName(str(path))


def test_empty_name_is_rejected(registry):
    with pytest.raises(SpecError) as exc:
        file("", "<desc>").optional(registry)
    assert str(exc.value) == "invalid specification: variable name must not be empty"


def test_empty_description_is_rejected(registry):
    with pytest.raises(SpecError) as exc:
        file(NAME, "").optional(registry)
    assert str(exc.value) == (
        "specification for FERRITE_FILE is invalid: variable description must not be empty"
    )


def test_required_returns_value(registry, monkeypatch):
    monkeypatch.setenv(NAME, "/path/to/file")
    v = file(NAME, "<desc>").required(registry).value()
    assert v == FileName("/path/to/file")
    assert isinstance(v, FileName)


def test_required_returns_default(registry):
    v = file(NAME, "<desc>").with_default("/path/to/file").required(registry)
    assert v.value() == "/path/to/file"


def test_required_undefined_raises(registry):
    with pytest.raises(UndefinedError) as exc:
        file(NAME, "<desc>").required(registry).value()
    assert str(exc.value) == "FERRITE_FILE is undefined and does not have a default value"


def test_optional_returns_value(registry, monkeypatch):
    monkeypatch.setenv(NAME, "/path/to/file")
    assert file(NAME, "<desc>").optional(registry).value() == "/path/to/file"


def test_optional_returns_default(registry):
    v = file(NAME, "<desc>").with_default("/path/to/file").optional(registry)
    assert v.value() == "/path/to/file"


def test_optional_undefined_is_none(registry):
    assert file(NAME, "<desc>").optional(registry).value() is None


def test_deprecated_returns_value(registry, monkeypatch):
    monkeypatch.setenv(NAME, "testdata/hello.txt")
    assert file(NAME, "<desc>").deprecated(registry).deprecated_value() == "testdata/hello.txt"


def test_reader(hello):
    with hello.reader() as stream:
        assert stream.read() == b"Hello, world!\n"


def test_read_bytes(hello):
    assert hello.read_bytes() == b"Hello, world!\n"


def test_read_string(hello):
    assert hello.read_string() == "Hello, world!\n"


def test_value_reads_file(hello, registry, monkeypatch):
    monkeypatch.setenv(NAME, hello)
    assert file(NAME, "<desc>").required(registry).value().read_string() == "Hello, world!\n"


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        FileName(str(tmp_path / "missing.txt")).read_bytes()