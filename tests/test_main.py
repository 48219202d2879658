from pathlib import Path

import pytest

from icsfix.main import main

INPUT_TEXT = "".join(
    line + "\r\n"
    for line in [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//Registrar//EN",
        "BEGIN:VEVENT",
        "UID:lec-101@registrar.example.edu",
        "SUMMARY:CS 101 Lecture",
        "DTSTAMP:20240315T120000Z",
        "DTSTART:20241115T180000Z",
        "DESCRIPTION:Intro to programming",
        "LOCATION:Hall 12",
        "RRULE:FREQ=WEEKLY;UNTIL=20241115T200000Z;BYDAY=MO,WE",
        "DURATION:PT1H15M",
        "END:VEVENT",
        "BEGIN:VEVENT",
        "UID:lab-7@registrar.example.edu",
        "SUMMARY:CS 101 Lab",
        "DTSTAMP:20240820T093000Z",
        "DTSTART:20240905T020000Z",
        "DESCRIPTION:Bring a laptop",
        "LOCATION:Lab B",
        "RRULE:FREQ=WEEKLY;UNTIL=20241205T030000Z;BYDAY=TH",
        "DURATION:PT2H",
        "END:VEVENT",
        "END:VCALENDAR",
    ]
)


@pytest.fixture(autouse=True)
def _no_env_config(monkeypatch):
    monkeypatch.delenv("ICSFIX_CONFIG", raising=False)
    monkeypatch.setattr("icsfix.main.load_dotenv", lambda *_args, **_kwargs: False)


def _input(tmp_path: Path) -> Path:
    path = tmp_path / "export.ics"
    path.write_bytes(INPUT_TEXT.encode("utf-8"))
    return path


def test_converts_calendar_end_to_end(tmp_path: Path, capsys):
    src = _input(tmp_path)
    dst = tmp_path / "fixed.ics"

    assert main([str(src), str(dst)]) == 0

    out = dst.read_bytes().decode("utf-8")
    assert out.startswith("BEGIN:VCALENDAR\r\nVERSION:2.0\r\nPRODID:-//Registrar//EN\r\nBEGIN:VTIMEZONE\r\n")
    assert "DTSTART;TZID=America/New_York:20241115T130000\r\n" in out
    assert "RRULE:FREQ=WEEKLY;UNTIL=20241115T160000Z;BYDAY=MO,WE\r\n" in out
    # August stamp: daylight offset, and the hour wraps without touching the date.
    assert "DTSTART;TZID=America/New_York:20240905T220000\r\n" in out
    assert "RRULE:FREQ=WEEKLY;UNTIL=20241205T230000Z;BYDAY=TH\r\n" in out
    assert out.count("BEGIN:VEVENT\r\n") == out.count("END:VEVENT\r\n") == 2
    assert out.endswith("END:VEVENT\r\nEND:VCALENDAR\r\n")
    assert f'Converted 2 events; wrote "{dst}".' in capsys.readouterr().out


def test_opaque_lines_survive_byte_for_byte(tmp_path: Path):
    src = _input(tmp_path)
    dst = tmp_path / "fixed.ics"

    main([str(src), str(dst)])

    out = dst.read_bytes()
    for line in (b"UID:lab-7@registrar.example.edu\r\n", b"DESCRIPTION:Bring a laptop\r\n", b"DURATION:PT2H\r\n"):
        assert line in out


def test_wrong_argument_count_prints_usage(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["only-one.ics"])

    assert exc.value.code == 2
    assert "usage:" in capsys.readouterr().err


def test_output_must_have_ics_extension(tmp_path: Path, capsys):
    src = _input(tmp_path)

    assert main([str(src), str(tmp_path / "fixed.txt")]) == 3
    assert 'Error: output file must end in ".ics".' in capsys.readouterr().err
    assert not (tmp_path / "fixed.txt").exists()


def test_missing_input_reports_not_found(tmp_path: Path, capsys):
    missing = tmp_path / "nope.ics"

    assert main([str(missing), str(tmp_path / "fixed.ics")]) == 4
    assert f'Error: "{missing}" does not exist.' in capsys.readouterr().err


def test_unwritable_output_is_reported(tmp_path: Path, capsys):
    src = _input(tmp_path)
    dst = tmp_path / "no-such-dir" / "fixed.ics"

    assert main([str(src), str(dst)]) == 5
    assert f'Error: "{dst}" is an invalid file/filetype.' in capsys.readouterr().err


def test_malformed_input_writes_nothing(tmp_path: Path, capsys):
    src = tmp_path / "export.ics"
    src.write_bytes(INPUT_TEXT.split("LOCATION:Hall 12")[0].encode("utf-8"))
    dst = tmp_path / "fixed.ics"

    assert main([str(src), str(dst)]) == 6
    assert "input ended before its location line" in capsys.readouterr().err
    assert not dst.exists()


def test_config_path_from_environment(tmp_path: Path, monkeypatch):
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text("offsets:\n  until_hours: 5\n", encoding="utf-8")
    monkeypatch.setenv("ICSFIX_CONFIG", str(cfg_path))
    src = _input(tmp_path)
    dst = tmp_path / "fixed.ics"

    assert main([str(src), str(dst)]) == 0
    assert "UNTIL=20241115T150000Z" in dst.read_bytes().decode("utf-8")


def test_bad_config_exits_with_config_error(tmp_path: Path, capsys):
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text("timezone: Europe/Paris\n", encoding="utf-8")
    src = _input(tmp_path)

    assert main([str(src), str(tmp_path / "fixed.ics"), "--config", str(cfg_path)]) == 7
    assert "unsupported timezone" in capsys.readouterr().err


def test_non_utf8_bytes_pass_through_unchanged(tmp_path: Path):
    src = tmp_path / "export.ics"
    data = INPUT_TEXT.encode("utf-8")
    data = data.replace(b"PRODID:-//Registrar//EN", b"X-NAME:\xff\xfe")
    data = data.replace(b"LOCATION:Hall 12", b"LOCATION:Caf\xe9 Ren\xe9")
    src.write_bytes(data)
    dst = tmp_path / "fixed.ics"

    assert main([str(src), str(dst)]) == 0

    out = dst.read_bytes()
    assert out.startswith(b"BEGIN:VCALENDAR\r\nVERSION:2.0\r\nX-NAME:\xff\xfe\r\n")
    assert b"\r\nLOCATION:Caf\xe9 Ren\xe9\r\n" in out
    assert b"DTSTART;TZID=America/New_York:20241115T130000\r\n" in out
