import pytest

from patchfmt.errors import InvalidArgument, InvalidInput, PatchfmtConfigError, PatchfmtError


def test_all_errors_are_subclasses_of_patchfmt_error() -> None:
    assert issubclass(InvalidArgument, PatchfmtError)
    assert issubclass(InvalidInput, PatchfmtError)
    assert issubclass(PatchfmtConfigError, PatchfmtError)


def test_error_message_is_preserved() -> None:
    msg = "boom"
    err = InvalidInput(msg)
    assert str(err) == msg


def test_can_catch_any_patchfmt_error() -> None:
    def raise_one() -> None:
        raise InvalidArgument("nope")

    with pytest.raises(PatchfmtError):
        raise_one()
