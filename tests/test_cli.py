import pytest

from filemerger import __version__
from filemerger.cli import main


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "proj"
    (root / "src").mkdir(parents=True)
    (root / "src" / "main.py").write_bytes(b"print('hi')\n")
    (root / "README.md").write_bytes(b"# readme")
    (root / "debug.log").write_bytes(b"noise")
    (root / ".ignore").write_text("*.log\n.ignore\n")
    return root


def feed(monkeypatch, *answers):
    answers = list(answers)

    def fake_input(_msg=""):
        if not answers:
            raise EOFError
        return answers.pop(0)

    monkeypatch.setattr("builtins.input", fake_input)


def test_non_interactive_merge(project, tmp_path, capsys):
    out = tmp_path / "data.txt"
    main(["--root", str(project), "--out", str(out), "--select", "*"])

    assert out.read_bytes() == (
        b"// README.md\n# readme\n\n" b"// src/main.py\nprint('hi')\n\n\n"
    )
    assert f"Data written to {out}" in capsys.readouterr().out


def test_interactive_flow(project, tmp_path, monkeypatch, capsys):
    out = tmp_path / "data.txt"
    feed(monkeypatch, str(project), "1")
    main(["--out", str(out)])

    captured = capsys.readouterr().out
    assert "[0] README.md" in captured
    assert "[1] src/main.py" in captured
    assert "debug.log" not in captured
    assert out.read_bytes() == b"// src/main.py\nprint('hi')\n\n\n"


def test_default_output_lands_in_cwd(project, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    main(["--root", str(project), "--select", "0"])
    assert (tmp_path / "data.txt").read_bytes() == b"// README.md\n# readme\n\n"


def test_invalid_directory(tmp_path, monkeypatch, capsys):
    main(["--root", str(tmp_path / "nope")])
    assert "Invalid directory path." in capsys.readouterr().err

    feed(monkeypatch)
    main([])
    assert "Invalid directory path." in capsys.readouterr().err


def test_empty_directory(tmp_path, capsys):
    main(["--root", str(tmp_path), "--out", str(tmp_path / "data.txt")])
    assert "No files found in the given directory." in capsys.readouterr().out
    assert not (tmp_path / "data.txt").exists()


def test_nothing_selected(project, tmp_path, capsys):
    out = tmp_path / "data.txt"
    main(["--root", str(project), "--out", str(out), "--select", "7, x"])
    assert "No files selected." in capsys.readouterr().out
    assert not out.exists()


def test_selection_input_closed(project, tmp_path, monkeypatch, capsys):
    feed(monkeypatch)
    main(["--root", str(project), "--out", str(tmp_path / "data.txt")])
    assert "Error choosing files" in capsys.readouterr().err


def test_bad_ignore_file(tmp_path, capsys):
    (tmp_path / "skip").mkdir()
    main(["--root", str(tmp_path), "--ignore-file", "skip"])
    assert "Error loading skip:" in capsys.readouterr().err


def test_output_error(project, tmp_path, capsys):
    (tmp_path / "taken").mkdir()
    main(["--root", str(project), "--out", str(tmp_path / "taken"), "--select", "*"])
    assert "Error writing" in capsys.readouterr().err


def test_version(capsys):
    with pytest.raises(SystemExit):
        main(["--version"])
    assert __version__ in capsys.readouterr().out


def test_overlong_root_is_invalid_directory(tmp_path, capsys):
    main(["--root", str(tmp_path / ("a" * 300))])
    err = capsys.readouterr().err
    assert "Invalid directory path." in err
    assert "Unexpected error" not in err


def test_negative_max_bytes_rejected(project, tmp_path, capsys):
    out = tmp_path / "data.txt"
    with pytest.raises(SystemExit):
        main(["--root", str(project), "--out", str(out), "--select", "*", "--max-bytes", "-1"])
    assert "non-negative" in capsys.readouterr().err
    assert not out.exists()


def test_max_bytes_option(project, tmp_path):
    out = tmp_path / "data.txt"
    main(["--root", str(project), "--out", str(out), "--select", "0", "--max-bytes", "3"])
    assert out.read_bytes() == b"// README.md\n# r\n[truncated]\n\n"
