import json
import threading

from phoenixengine.instrumentor import (
    InstrumentationTimer,
    Instrumentor,
    ProfileResult,
    cleanup_output_string,
)


def _load(path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_empty_session_is_valid_json(tmp_path):
    path = tmp_path / "trace.json"
    inst = Instrumentor()
    inst.begin_session("Startup", str(path))
    assert inst.session_name == "Startup"
    inst.end_session()
    assert inst.session_name is None
    data = _load(path)
    assert data["otherData"] == {}
    assert data["traceEvents"] == [{}]


def test_written_profile_fields(tmp_path):
    path = tmp_path / "trace.json"
    inst = Instrumentor()
    inst.begin_session("Run", str(path))
    inst.write_profile(ProfileResult("draw", 12.5, 40, 7))
    inst.end_session()
    event = _load(path)["traceEvents"][1]
    assert event["name"] == "draw"
    assert event["dur"] == 40
    assert event["tid"] == 7
    assert event["ts"] == 12.5
    assert event["ph"] == "X"
    assert event["cat"] == "function"
    assert event["pid"] == 0


def test_start_written_with_three_decimals(tmp_path):
    path = tmp_path / "trace.json"
    inst = Instrumentor()
    inst.begin_session("Run", str(path))
    inst.write_profile(ProfileResult("x", 1.0, 1, 1))
    inst.end_session()
    assert '"ts":1.000}' in path.read_text(encoding="utf-8")


def test_write_without_session_is_ignored(tmp_path):
    path = tmp_path / "trace.json"
    inst = Instrumentor()
    inst.write_profile(ProfileResult("lost", 0.0, 0, 0))
    inst.begin_session("Later", str(path))
    inst.end_session()
    assert _load(path)["traceEvents"] == [{}]


def test_new_session_closes_previous(tmp_path):
    first = tmp_path / "first.json"
    second = tmp_path / "second.json"
    inst = Instrumentor()
    inst.begin_session("A", str(first))
    inst.write_profile(ProfileResult("a", 0.0, 1, 1))
    inst.begin_session("B", str(second))
    inst.write_profile(ProfileResult("b", 0.0, 1, 1))
    inst.end_session()
    assert [e.get("name") for e in _load(first)["traceEvents"]] == [None, "a"]
    assert [e.get("name") for e in _load(second)["traceEvents"]] == [None, "b"]


def test_unopenable_file_leaves_no_session(tmp_path):
    inst = Instrumentor()
    inst.begin_session("Bad", str(tmp_path / "missing" / "trace.json"))
    assert inst.session_name is None


def test_end_session_twice_is_harmless(tmp_path):
    path = tmp_path / "trace.json"
    inst = Instrumentor()
    inst.begin_session("S", str(path))
    inst.end_session()
    inst.end_session()
    assert _load(path)["traceEvents"] == [{}]


def test_get_returns_shared_instance(tmp_path):
    path = tmp_path / "shared.json"
    Instrumentor.get().begin_session("Shared", str(path))
    try:
        assert Instrumentor.get().session_name == "Shared"
    finally:
        Instrumentor.get().end_session()
    assert Instrumentor.get().session_name is None
    assert _load(path)["traceEvents"] == [{}]


def test_timer_context_manager_writes_event(tmp_path):
    path = tmp_path / "trace.json"
    inst = Instrumentor()
    inst.begin_session("S", str(path))
    with InstrumentationTimer("scope", inst) as timer:
        pass
    assert timer.stopped is True
    inst.end_session()
    events = _load(path)["traceEvents"]
    assert len(events) == 2
    assert events[1]["name"] == "scope"
    assert events[1]["dur"] >= 0
    assert events[1]["tid"] == threading.get_ident()


def test_timer_stop_returns_result(tmp_path):
    inst = Instrumentor()
    timer = InstrumentationTimer("work", inst)
    result = timer.stop()
    assert result.name == "work"
    assert result.elapsed_time >= 0
    assert result.start > 0


def test_cleanup_removes_calling_convention():
    assert cleanup_output_string('void __cdecl f("x")', "__cdecl ") == "void f('x')"


def test_cleanup_without_match_only_swaps_quotes():
    assert cleanup_output_string('say "hi"', "zzz") == "say 'hi'"


def test_cleanup_empty_remove_keeps_text():
    assert cleanup_output_string("abc", "") == "abc"


def test_cleanup_back_to_back_occurrence_kept():
    assert cleanup_output_string("ABAB", "AB") == "AB"