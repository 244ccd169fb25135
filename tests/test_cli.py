import json

import pytest
import yaml

from dspsim.adau146x import ADAU1467
from dspsim.cli import ReplaySession, main

SCRIPT = """
- write_memory: {address: 0x0010, words: [0x2A, 0x2B]}
- read_memory: {address: 0x0010, count: 2}
- write_control: {address: 0xF899, values: [1]}
- read_control: {address: 0xF899}
- write_memory: {address: 0x0010, words: 0x77}
- write_control: {address: 0xF899, values: 0}
- raw: "01 00 10 00 00 00 00"
"""


@pytest.fixture
def script_file(tmp_path):
    path = tmp_path / "script.yaml"
    path.write_text(SCRIPT, encoding="utf-8")
    return path


class TestReplaySession:
    def test_run_collects_read_output(self):
        session = ReplaySession(ADAU1467())
        lines = session.run(yaml.safe_load(SCRIPT))
        assert lines == [
            "mem 0x0010: 0x0000002A 0x0000002B",
            "ctl 0xF899: 0x0001",
            "raw: 00 00 00 00 00 00 2a",
        ]

    def test_safeload_and_reset_steps(self):
        dsp = ADAU1467()
        session = ReplaySession(dsp)
        session.run([
            {"write_control": {"address": 0xF000, "values": [5]}},
            {"safeload": {"address": 0x0100, "words": [1, 2]}},
            "reset",
        ])
        assert dsp.read_memory(0x0100) == 1
        assert dsp.read_memory(0x0101) == 2
        assert dsp.read_control(0xF000) == 0x0060

    @pytest.mark.parametrize("step", [
        {"explode": {}},
        {"read_memory": {}},
        {"a": 1, "b": 2},
        42,
    ])
    def test_bad_steps(self, step):
        with pytest.raises(ValueError):
            ReplaySession(ADAU1467()).handle_step(step, 3)


class TestMain:
    def test_list(self, capsys):
        assert main(["list"]) == 0
        out = capsys.readouterr().out.split()
        assert {"adau1467", "adau1463", "stm32h7_pwr"} <= set(out)

    def test_info(self, capsys):
        assert main(["info", "--device", "adau1463"]) == 0
        info = yaml.safe_load(capsys.readouterr().out)
        assert info["device"] == "ADAU1463"
        assert [r["name"] for r in info["regions"]] == ["DM0", "DM1", "PROGRAM"]
        assert info["page"] == "A"

    def test_replay_with_dumps(self, capsys, script_file, tmp_path):
        regs = tmp_path / "regs.json"
        mem = tmp_path / "mem.bin"
        rc = main([
            "replay", "--device", "adau1467", str(script_file),
            "--dump-registers", str(regs),
            "--dump-memory", str(mem), "--address", "0x10", "--words", "1", "--upper",
        ])

        assert rc == 0
        assert "mem 0x0010: 0x0000002A 0x0000002B" in capsys.readouterr().out
        assert mem.read_bytes() == bytes.fromhex("00000077")
        entries = json.loads(regs.read_text(encoding="utf-8"))
        assert {"address": 0xF899, "name": "SECONDPAGE_ENABLE", "value": 0} in entries

    def test_unknown_device(self, capsys):
        assert main(["info", "--device", "adau9999"]) == 1
        assert capsys.readouterr().err.startswith("error:")

    def test_non_dsp_device(self, capsys, script_file):
        assert main(["replay", "--device", "stm32h7_pwr", str(script_file)]) == 1
        assert "not an SPI DSP" in capsys.readouterr().err

    def test_missing_script(self, capsys, tmp_path):
        assert main(["replay", "--device", "adau1467", str(tmp_path / "none.yaml")]) == 1
        assert "error:" in capsys.readouterr().err

    def test_script_must_be_list(self, capsys, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("write_memory: {}\n", encoding="utf-8")
        assert main(["replay", "--device", "adau1467", str(path)]) == 1
