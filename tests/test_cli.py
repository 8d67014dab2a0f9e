import json

import pytest

from lsmem.__main__ import main


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("LSMEM_CONFIG", str(tmp_path / "absent.toml"))
    monkeypatch.delenv("LSMEM_SYSROOT", raising=False)


@pytest.fixture
def sysroot(make_sysfs):
    states = ["online", "online", "offline", "online", "online"]
    return make_sysfs([{"index": i, "state": s} for i, s in enumerate(states)])


def test_default_output(sysroot, capsys):
    assert main(["--sysroot", str(sysroot)]) == 0
    out = capsys.readouterr().out
    lines = out.splitlines()
    assert lines[0].split() == ["RANGE", "SIZE", "STATE", "REMOVABLE", "BLOCK"]
    assert lines[1].split() == ["0x0000000000000000-0x000000000fffffff", "256M", "online", "no", "0-1"]
    assert lines[2].split() == ["0x0000000010000000-0x0000000017ffffff", "128M", "offline", "2"]
    assert lines[3].split() == ["0x0000000018000000-0x0000000027ffffff", "256M", "online", "no", "3-4"]
    assert "Total online memory :     512M" in out
    assert "Total offline memory:     128M" in out


def test_json_output(sysroot, capsys):
    assert main(["-s", str(sysroot), "--json", "-o", "block,state"]) == 0
    doc = json.loads(capsys.readouterr().out)
    assert doc["memory"] == [
        {"block": "0-1", "state": "online"},
        {"block": "2", "state": "offline"},
        {"block": "3-4", "state": "online"},
    ]


def test_all_and_bytes(sysroot, capsys):
    assert main(["-s", str(sysroot), "-a", "-b", "-r", "-n", "-o", "size,block"]) == 0
    assert capsys.readouterr().out.splitlines() == [f"{128 << 20} {i}" for i in range(5)]


def test_summary_only(sysroot, capsys):
    assert main(["-s", str(sysroot), "--summary"]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "Memory block size   :     128M",
        "Total online memory :     512M",
        "Total offline memory:     128M",
    ]


def test_sysroot_from_environment(sysroot, capsys, monkeypatch):
    monkeypatch.setenv("LSMEM_SYSROOT", str(sysroot))
    assert main(["-r", "-n", "-o", "block,state"]) == 0
    assert capsys.readouterr().out.splitlines() == ["0-1 online", "2 offline", "3-4 online"]


def test_block_column_alone_merges_everything(sysroot, capsys):
    assert main(["-s", str(sysroot), "-r", "-n", "-o", "block"]) == 0
    assert capsys.readouterr().out.splitlines() == ["0-4"]


def test_config_file_settings(sysroot, tmp_path, capsys, monkeypatch):
    config_file = tmp_path / "config.toml"
    config_file.write_text(f'[lsmem]\nsysroot = "{sysroot}"\noutput = "size"\nbytes = true\n')
    monkeypatch.setenv("LSMEM_CONFIG", str(config_file))
    assert main(["-r", "-n"]) == 0
    assert capsys.readouterr().out.splitlines() == [str(640 << 20)]


def test_unsupported_system(make_sysfs, capsys):
    root = make_sysfs([{"index": 0}], write_block_size=False)
    assert main(["-s", str(root)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "does not support memory blocks" in captured.err


def test_unknown_column(sysroot, capsys):
    assert main(["-s", str(sysroot), "-o", "bogus"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "unknown column: bogus" in captured.err


def test_exclusive_formats(sysroot):
    with pytest.raises(SystemExit) as excinfo:
        main(["-s", str(sysroot), "--json", "--raw"])
    assert excinfo.value.code == 2


def test_list_columns(capsys):
    assert main(["--list-columns"]) == 0
    assert "REMOVABLE" in capsys.readouterr().out


def test_empty_column_list(sysroot, capsys):
    assert main(["-s", str(sysroot), "-o", ""]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "empty column list" in captured.err


def test_bad_config_values_are_ignored(sysroot, tmp_path, capsys, caplog, monkeypatch):
    config_file = tmp_path / "config.toml"
    config_file.write_text(f'[lsmem]\nsysroot = "{sysroot}"\noutput = ["size"]\nbytes = "false"\n'
                           f'log_file = "{tmp_path}/missing/dir/lsmem.log"\n')
    monkeypatch.setenv("LSMEM_CONFIG", str(config_file))
    assert main(["-r", "-n", "-o", "size"]) == 0
    captured = capsys.readouterr()
    assert captured.out.splitlines() == ["640M"]
    assert "Ignoring setting 'output'" in caplog.text
    assert "Ignoring setting 'bytes'" in caplog.text
    assert "Could not open log file" in captured.err


def test_bad_utf8_state_is_reported(sysroot, capsys):
    (sysroot / "sys/devices/system/memory/memory0/state").write_bytes(b"\xff\xfe\n")
    assert main(["-s", str(sysroot)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("lsmem: Failed to read")
    assert "memory0/state" in captured.err
