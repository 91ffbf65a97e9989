import os

import pytest

import campusmap
from campusmap_lib.campus import Campus

DATA_DIR = os.path.join(os.path.dirname(__file__), "..", "data")
TOPOLOGY = os.path.join(DATA_DIR, "buildingData.txt")
MAP = os.path.join(DATA_DIR, "campusMap.txt")


@pytest.fixture
def cli_args(tmp_path):
    return ["-t", TOPOLOGY, "-m", MAP, "--config", str(tmp_path / "cm.cfg"), "--no-color"]


def test_path_query(cli_args, capsys):
    assert campusmap.main(cli_args + ["--path", "2", "6"]) == 0
    out = capsys.readouterr().out
    assert "  02 - Gym\n  05 - Lot\n  04 - Union\n  07 - Dorms\n  06 - Science" in out
    assert "Total cost: 13" in out
    assert "\033[" not in out


def test_service_query(cli_args, capsys):
    assert campusmap.main(cli_args + ["--service", "library"]) == 0
    out = capsys.readouterr().out
    assert "  01 - Library\n  06 - Science" in out
    assert "[00 Main Hall]" in out


def test_list_and_locate(cli_args, capsys):
    assert campusmap.main(cli_args + ["--list", "--locate", "4", "5"]) == 0
    out = capsys.readouterr().out
    assert "00 - Main Hall" in out
    assert "03 - Fine Arts" in out


def test_locate_empty_cell(cli_args, capsys):
    assert campusmap.main(cli_args + ["--locate", "0", "0"]) == 0
    assert "No building at row 0, column 0." in capsys.readouterr().out


def test_default_overview(cli_args, capsys):
    assert campusmap.main(cli_args) == 0
    out = capsys.readouterr().out
    assert "04 - Union" in out
    with open(MAP, encoding="utf-8") as f:
        assert f.read() in out


def test_colored_output_uses_config_styles(tmp_path, capsys):
    cfg = tmp_path / "cm.cfg"
    cfg.write_text("[Styles]\npath = 38;5;160\n", encoding="utf-8")
    args = ["-t", TOPOLOGY, "-m", MAP, "--config", str(cfg), "--path", "1", "6"]
    assert campusmap.main(args) == 0
    assert "\033[38;5;160m[01" in capsys.readouterr().out


def test_missing_input_file(tmp_path, cli_args):
    args = cli_args + ["-m", str(tmp_path / "missing.txt")]
    assert campusmap.main(args) == 1


def test_malformed_input_file(tmp_path, cli_args):
    bad = tmp_path / "bad.txt"
    bad.write_text("0 Hall 1 0 0\n", encoding="utf-8")
    assert campusmap.main(cli_args + ["-t", str(bad)]) == 1


def test_failed_query_exit_code(cli_args):
    assert campusmap.main(cli_args + ["--path", "0", "42"]) == 2


def test_interactive_session():
    campus = Campus.from_files(
        TOPOLOGY, MAP, path_style="", service_style="", reset=""
    )
    commands = iter(["d", "", "2 6", "9 9", "abc def", "what", "x", "m"])
    outputs = []
    campusmap.run_interactive(campus, read=lambda _: next(commands), out=outputs.append)
    text = "\n".join(outputs)

    assert outputs[0].startswith("00 - Main Hall")
    assert "  00 - Main Hall\n  03 - Fine Arts\n  04 - Union\n  07 - Dorms" in text
    assert "Total cost: 13" in text
    assert "Error: Unknown building id: 9" in text
    assert "Error: invalid literal" in text
    assert "Unknown command: what" in text
    assert next(commands) == "m"


def test_interactive_stops_at_end_of_input():
    campus = Campus.from_files(TOPOLOGY, MAP)

    def read(_):
        raise EOFError

    outputs = []
    campusmap.run_interactive(campus, read=read, out=outputs.append)
    assert len(outputs) == 2
