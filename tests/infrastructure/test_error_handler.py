import pytest

from dulwich.client import HTTPUnauthorized
from dulwich.errors import GitProtocolError, HangupException, NotGitRepository

from terrafile.infrastructure.error_handler import (
    CloneError,
    ConfigurationError,
    DirectoryNotFoundError,
    LinkError,
    MaterializeError,
    ReferenceNotFoundError,
    TerrafileError,
    handle_git_error,
)


# ---- Helpers ---------------------------------------------------------------

def raise_exc(exc: Exception):
    def _fn(*args, **kwargs):
        raise exc
    return _fn


# ---- Exception classes -----------------------------------------------------

def test_terrafile_error_message_and_original():
    original = ValueError("boom")
    err = TerrafileError("failed", original)
    assert err.message == "failed"
    assert err.original_error is original
    assert "failed" in str(err)
    assert "Original: boom" in str(err)


@pytest.mark.parametrize("exc_cls", [ConfigurationError, CloneError, MaterializeError, LinkError])
def test_specific_errors_store_message(exc_cls):
    err = exc_cls("msg")
    assert err.message == "msg"
    assert str(err) == "msg"
    assert isinstance(err, TerrafileError)


def test_reference_not_found_fields():
    err = ReferenceNotFoundError("v1", "https://example/repo.git")
    assert err.version == "v1"
    assert err.source == "https://example/repo.git"
    assert str(err) == "unable to resolve version v1 in https://example/repo.git"


def test_directory_not_found_fields():
    err = DirectoryNotFoundError("modules/vpc", "main")
    assert err.directory == "modules/vpc"
    assert str(err) == "unable to find modules/vpc for version main"


def test_add_context_keeps_first_value_and_skips_none():
    err = TerrafileError("failed")
    err.add_context(source="a", directory=None)
    err.add_context(source="b", version="main")

    assert err.context == {"source": "a", "version": "main"}
    assert str(err) == "failed (source='a', version='main')"


# ---- handle_git_error decorator --------------------------------------------

@pytest.mark.parametrize("exc", [
    HangupException(),
    GitProtocolError("bad pkt-line"),
    NotGitRepository("nope"),
    HTTPUnauthorized("Basic", "https://example/repo.git"),
    ConnectionRefusedError("refused"),
])
def test_handle_git_error_translates(exc):
    fn = handle_git_error(raise_exc(exc))

    with pytest.raises(CloneError) as excinfo:
        fn()

    assert excinfo.value.original_error is exc


def test_handle_git_error_passes_terrafile_errors():
    original = ReferenceNotFoundError("v1")
    fn = handle_git_error(raise_exc(original))

    with pytest.raises(ReferenceNotFoundError) as excinfo:
        fn()

    assert excinfo.value is original


def test_handle_git_error_does_not_touch_unrelated():
    fn = handle_git_error(raise_exc(ValueError("no translate")))

    with pytest.raises(ValueError):
        fn()


def test_handle_git_error_returns_value():
    @handle_git_error
    def fn(x):
        return x * 2

    assert fn(21) == 42
    assert fn.__name__ == "fn"
