import pytest

from release_changelog.utils.token_file import TokenFileError, load_token


def test_token_is_stripped(tmp_path):
    path = tmp_path / "token"
    path.write_text("  ghp_secret\n")
    assert load_token(str(path)) == "ghp_secret"


def test_missing_file(tmp_path):
    with pytest.raises(TokenFileError) as exc:
        load_token(str(tmp_path / "nope"))
    assert exc.value.code == "TOKEN_FILE"


def test_empty_file(tmp_path):
    path = tmp_path / "token"
    path.write_text("\n")
    with pytest.raises(TokenFileError):
        load_token(str(path))


def test_undecodable_file(tmp_path):
    path = tmp_path / "token"
    path.write_bytes(b"\xff\xfeghp")
    with pytest.raises(TokenFileError) as exc:
        load_token(str(path))
    assert exc.value.code == "TOKEN_FILE"
