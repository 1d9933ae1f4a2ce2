from src import app
from src.errors import NO_RESPONSE_MESSAGE, PARSE_FAILURE_MESSAGE
from src.llm_client import StubLLMClient


def test_main_with_saved_reply(tmp_path, reply_text, capsys):
    reply = tmp_path / "reply.json"
    reply.write_text(reply_text)

    code = app.main(["--reply", str(reply), "--date", "2025-01-28", "--output-dir", str(tmp_path / "ics")])

    assert code == 0
    out = capsys.readouterr().out
    assert "**Acm Club Meeting**" in out
    assert "Monday, February 3, 2025" in out
    assert len(list((tmp_path / "ics").glob("*.ics"))) == 1


def test_main_parse_failure(tmp_path, capsys):
    reply = tmp_path / "reply.txt"
    reply.write_text("failed")

    code = app.main(["--reply", str(reply), "--output-dir", str(tmp_path)])

    assert code == 1
    assert PARSE_FAILURE_MESSAGE in capsys.readouterr().err
    assert not list(tmp_path.glob("*.ics"))


def test_main_uses_client(monkeypatch, tmp_path, capsys):
    client = StubLLMClient(reply=None)
    monkeypatch.setattr(app, "get_llm_client", lambda: client)

    code = app.main(["lunch tomorrow", "--date", "2025-01-28", "--output-dir", str(tmp_path)])

    assert code == 1
    assert NO_RESPONSE_MESSAGE in capsys.readouterr().err
    assert client.prompts[0].endswith("lunch tomorrow")


def test_main_missing_reply_file(tmp_path, capsys):
    code = app.main(["--reply", str(tmp_path / "missing.json"), "--output-dir", str(tmp_path)])

    assert code == 1
    assert "Could not read" in capsys.readouterr().err


def test_main_unwritable_output_dir(tmp_path, reply_text, capsys):
    reply = tmp_path / "reply.json"
    reply.write_text(reply_text)
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")

    code = app.main(["--reply", str(reply), "--date", "2025-01-28", "--output-dir", str(blocker)])

    assert code == 1
    assert "Could not write the .ics file" in capsys.readouterr().err
