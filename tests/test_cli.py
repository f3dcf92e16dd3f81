"""
Tests for the command line interface.
"""

from unittest.mock import patch

from app import cli
from app.client import ClientError, DownloadedImage, ImageStudioClient


def test_token_round_trip(tmp_path):
    session_file = tmp_path / "nested" / "session.json"
    assert cli.load_token(session_file) is None

    cli.save_token(session_file, "token-123")
    assert cli.load_token(session_file) == "token-123"

    cli.save_token(session_file, None)
    assert not session_file.exists()


def test_unreadable_session_file_is_ignored(tmp_path):
    session_file = tmp_path / "session.json"
    session_file.write_text("{broken")
    assert cli.load_token(session_file) is None


def test_generate_arguments():
    args = cli.build_parser().parse_args(["generate", "make it blue", "--edit", "img-1"])
    assert args.command == "generate"
    assert args.prompt == "make it blue"
    assert args.edit == "img-1"


def test_client_errors_are_printed_as_notifications(tmp_path, capsys):
    async def failing_run(args):
        raise ClientError("Please sign in first")

    with patch.object(cli, "run", failing_run):
        exit_code = cli.main(["--session-file", str(tmp_path / "s.json"), "list"])

    assert exit_code == 1
    assert "Error: Please sign in first" in capsys.readouterr().err


def test_download_uses_suggested_filename(tmp_path, monkeypatch, capsys):
    session_file = tmp_path / "s.json"
    cli.save_token(session_file, "token-123")
    monkeypatch.chdir(tmp_path)

    async def fake_download(self, image_id):
        return DownloadedImage(content=b"\xff\xd8", content_type="image/jpeg", filename=f"ai-image-{image_id}.jpg")

    with patch.object(ImageStudioClient, "download_image", fake_download):
        exit_code = cli.main(["--session-file", str(session_file), "download", "img-1"])

    assert exit_code == 0
    assert (tmp_path / "ai-image-img-1.jpg").read_bytes() == b"\xff\xd8"
    assert "ai-image-img-1.jpg" in capsys.readouterr().out
