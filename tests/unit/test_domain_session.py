from __future__ import annotations

from speech_summary_agent.domain.enums import SummaryType
from speech_summary_agent.domain.session import SessionRecord, append_fragment


def test_append_fragment_space_joined() -> None:
    text = ""
    for part in ["t1", "t2", "t3"]:
        text = append_fragment(text, part)
    assert text == "t1 t2 t3"
    assert append_fragment("t1", "") == "t1"


def test_with_chunk_counts_bytes_always() -> None:
    rec = SessionRecord(session_id="s1")
    rec = rec.with_chunk(fragment="hello", size_bytes=100)
    rec = rec.with_chunk(fragment=None, size_bytes=50)
    assert rec.transcript == "hello"
    assert rec.transcription_call_count == 1
    assert rec.accumulated_byte_size == 150


def test_record_dict_roundtrip_keeps_timestamps() -> None:
    rec = SessionRecord(session_id="s1", user_id="u").with_summary(
        summary="sum", summary_type="short", language="ja"
    )
    back = SessionRecord.from_dict(rec.to_dict() | {"unknown_field": 1})
    assert back == rec


def test_summary_type_resolve() -> None:
    assert SummaryType.resolve("short") is SummaryType.short
    assert SummaryType.resolve("DETAILED") is SummaryType.detailed
    assert SummaryType.resolve("whatever") is SummaryType.medium
    assert SummaryType.resolve(None) is SummaryType.medium
