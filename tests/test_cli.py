import gzip
import io
import sys

from folded2pprof import profile_pb
from folded2pprof.cli import main


def fake_stdin(monkeypatch, data):
    monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(data)))


def load(path):
    return profile_pb.Profile.FromString(path.read_bytes())


def test_reads_stdin_and_writes_default_output(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    fake_stdin(monkeypatch, b"main; foo; bar 5\nmain; foo 2\n")
    assert main([]) == 0
    profile = load(tmp_path / "output.pprof")
    assert len(profile.function) == 3
    assert len(profile.sample) == 2
    assert "✓ Wrote output.pprof" in capsys.readouterr().out


def test_file_input_frequency_and_gzip(tmp_path):
    trace = tmp_path / "callstack_folded_cycle.txt"
    trace.write_text("main; foo 7\n", encoding="utf-8")
    out = tmp_path / "cycle.pb.gz"
    assert main([str(trace), "-o", str(out), "-f", "100000000", "-z"]) == 0
    profile = profile_pb.Profile.FromString(gzip.decompress(out.read_bytes()))
    assert list(profile.sample[0].value) == [7, 70]
    assert profile.period == 10


def test_parse_error_writes_nothing(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    fake_stdin(monkeypatch, b"main 1\nonlyaframe\n")
    assert main([]) == 1
    assert not (tmp_path / "output.pprof").exists()
    assert "no cycles available" in capsys.readouterr().err


def test_skip_invalid(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    fake_stdin(monkeypatch, b"main 1\nonlyaframe\nfoo 2\n")
    assert main(["--skip-invalid"]) == 0
    assert len(load(tmp_path / "output.pprof").sample) == 2
    assert "Warning: skipping line 2" in capsys.readouterr().err


def test_missing_input_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.txt")]) == 2
    assert "Input file not found" in capsys.readouterr().err


def test_bad_frequency(tmp_path, capsys):
    assert main(["-f", "0", "-o", str(tmp_path / "x.pprof")]) == 1
    assert "frequency" in capsys.readouterr().err


def test_unwritable_output(tmp_path, monkeypatch, capsys):
    fake_stdin(monkeypatch, b"main 1\n")
    assert main(["-o", str(tmp_path / "missing" / "out.pprof")]) == 1
    assert "Error:" in capsys.readouterr().err


def test_summary(tmp_path, monkeypatch, capsys):
    fake_stdin(monkeypatch, b"main; a 3\nmain; b 1\n")
    assert main(["-o", str(tmp_path / "out.pprof"), "--summary", "-p", "1"]) == 0
    out = capsys.readouterr().out
    assert "total_cycles: 4" in out
    assert " a\n" in out
    assert " b\n" not in out


def test_stdin_is_read_as_utf8(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    fake_stdin(monkeypatch, "main; caf\u00e9 1\n".encode("utf-8"))
    assert main([]) == 0
    profile = load(tmp_path / "output.pprof")
    assert "caf\u00e9" in profile.string_table


def test_invalid_utf8_input(tmp_path, capsys):
    trace = tmp_path / "trace.txt"
    trace.write_bytes(b"ma\xffin 1\n")
    out = tmp_path / "out.pprof"
    assert main([str(trace), "-o", str(out)]) == 1
    assert not out.exists()
    assert "Error:" in capsys.readouterr().err


def test_invalid_utf8_stdin(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    fake_stdin(monkeypatch, b"main 1\nma\xffin 1\n")
    assert main([]) == 1
    assert not (tmp_path / "output.pprof").exists()
    assert "Error:" in capsys.readouterr().err


def test_blank_line_aborts(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    fake_stdin(monkeypatch, b"main 1\n\nfoo 2\n")
    assert main([]) == 1
    assert not (tmp_path / "output.pprof").exists()
    assert "line 2: no cycles available" in capsys.readouterr().err


def test_summary_of_zero_cycles_is_a_warning(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    fake_stdin(monkeypatch, b"main 0\n")
    assert main(["--summary"]) == 0
    assert (tmp_path / "output.pprof").exists()
    captured = capsys.readouterr()
    assert "\u2713 Wrote output.pprof" in captured.out
    assert "Warning: no summary: no samples" in captured.err


def test_summary_without_pandas(tmp_path, monkeypatch, capsys):
    monkeypatch.setitem(sys.modules, "pandas", None)
    monkeypatch.delitem(sys.modules, "folded2pprof.summary", raising=False)
    fake_stdin(monkeypatch, b"main 1\n")
    assert main(["-o", str(tmp_path / "out.pprof"), "--summary"]) == 1
    assert "pandas not available" in capsys.readouterr().err
