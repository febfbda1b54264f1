"""Tests for flatten_document / reconstruct_document."""

import logging

from manga_script import (
    GENERATED_SCENE_DESCRIPTION,
    SAMPLE_SCRIPT,
    FlatDialogue,
    ParserSettings,
    Position,
    SequentialIds,
    all_dialogues,
    document_to_text,
    flatten_document,
    parse_script,
    reconstruct_document,
)
from manga_script.parser import VALIDATION_CONTENT

TWO_SLOTS = "# Ch\n\n* S: desc\n\nA: speech: {10,10} one\nB: thought: two"


def _record(text: str, character: str = "Z", record_id: str | None = None) -> FlatDialogue:
    return FlatDialogue(id=record_id, character=character, position=Position(x=50, y=60), text=text)


def _structure(document):
    """Tree shape without ids, source lines or timestamps."""
    return [
        (
            chapter.name,
            [
                (
                    scene.name,
                    scene.description,
                    [(d.character, d.kind, d.position, d.text) for d in scene.dialogues],
                )
                for scene in chapter.scenes
            ],
        )
        for chapter in document.chapters
    ]


class TestFlatten:
    def test_one_record_per_dialogue_in_order(self, ids, clock) -> None:
        doc = parse_script(SAMPLE_SCRIPT, new_id=ids, now=clock)
        flat = flatten_document(doc)
        assert [f.id for f in flat] == [d.id for d in all_dialogues(doc)]
        assert flat[0].character == "Kenji"
        assert flat[-1].kind == "whisper"

    def test_unset_position_gets_default(self, ids, clock) -> None:
        doc = parse_script(TWO_SLOTS, new_id=ids, now=clock)
        flat = flatten_document(doc)
        assert flat[0].position == Position(x=10, y=10)
        assert flat[1].position == Position(x=100, y=100)

    def test_default_position_from_settings(self, ids, clock) -> None:
        doc = parse_script(TWO_SLOTS, new_id=ids, now=clock)
        flat = flatten_document(doc, ParserSettings(default_x=7, default_y=8))
        assert flat[1].position == Position(x=7, y=8)

    def test_does_not_touch_tree(self, ids, clock) -> None:
        doc = parse_script(TWO_SLOTS, new_id=ids, now=clock)
        before = doc.model_dump()
        flatten_document(doc)
        assert doc.model_dump() == before

    def test_empty_document(self, ids, clock) -> None:
        assert flatten_document(parse_script("", new_id=ids, now=clock)) == []


class TestReconstructRoundTrip:
    def test_unedited_round_trip_is_identity(self, ids, clock) -> None:
        doc = parse_script(SAMPLE_SCRIPT, new_id=ids, now=clock)
        rebuilt = reconstruct_document(flatten_document(doc), doc, now=clock)
        assert rebuilt.model_dump() == doc.model_dump()

    def test_unset_positions_stay_unset(self, ids, clock) -> None:
        doc = parse_script(TWO_SLOTS, new_id=ids, now=clock)
        rebuilt = reconstruct_document(flatten_document(doc), doc, now=clock)
        assert all_dialogues(rebuilt)[1].position is None
        assert document_to_text(rebuilt) == document_to_text(doc)

    def test_moved_bubble_gets_position(self, ids, clock) -> None:
        doc = parse_script(TWO_SLOTS, new_id=ids, now=clock)
        flat = flatten_document(doc)
        flat[1] = flat[1].model_copy(update={"position": Position(x=300, y=400)})
        rebuilt = reconstruct_document(flat, doc, now=clock)
        assert all_dialogues(rebuilt)[1].position == Position(x=300, y=400)


class TestReconstructMerge:
    def test_surplus_record_appended_to_last_scene(self, ids, clock) -> None:
        doc = parse_script(TWO_SLOTS, new_id=ids, now=clock)
        flat = flatten_document(doc) + [_record("three")]
        rebuilt = reconstruct_document(flat, doc, new_id=SequentialIds("new"), now=clock)

        [scene] = rebuilt.chapters[0].scenes
        assert [d.text for d in scene.dialogues] == ["one", "two", "three"]
        old = all_dialogues(doc)
        assert [d.id for d in scene.dialogues[:2]] == [d.id for d in old]
        added = scene.dialogues[2]
        assert added.id == "new-1"
        assert added.scene_id == scene.id
        assert added.chapter_id == rebuilt.chapters[0].id
        assert added.source_line == old[-1].source_line + 1
        assert rebuilt.metadata.dialogue_count == 3
        assert rebuilt.metadata.scene_count == 1

    def test_edited_record_updates_slot(self, ids, clock) -> None:
        doc = parse_script(TWO_SLOTS, new_id=ids, now=clock)
        flat = flatten_document(doc)
        flat[0] = flat[0].model_copy(update={"text": "edited", "kind": "shout"})
        rebuilt = reconstruct_document(flat, doc, now=clock)
        first = all_dialogues(rebuilt)[0]
        assert (first.text, first.kind) == ("edited", "shout")
        assert first.source_line == all_dialogues(doc)[0].source_line

    def test_record_id_wins_over_slot_id(self, ids, clock) -> None:
        doc = parse_script(TWO_SLOTS, new_id=ids, now=clock)
        flat = [_record("x", record_id="canvas-1"), _record("y")]
        rebuilt = reconstruct_document(flat, doc, now=clock)
        rebuilt_ids = [d.id for d in all_dialogues(rebuilt)]
        assert rebuilt_ids == ["canvas-1", all_dialogues(doc)[1].id]

    def test_shorter_list_drops_trailing_slots(self, ids, clock, caplog) -> None:
        doc = parse_script(SAMPLE_SCRIPT, new_id=ids, now=clock)
        flat = flatten_document(doc)[:4]
        with caplog.at_level(logging.WARNING, logger="manga_script.adapters"):
            rebuilt = reconstruct_document(flat, doc, now=clock)
        assert [len(s.dialogues) for s in rebuilt.chapters[0].scenes] == [3, 1, 0]
        assert rebuilt.metadata.dialogue_count == 4
        assert "dropped 6 trailing dialogue" in caplog.text

    def test_scene_boundaries_are_positional(self, ids, clock) -> None:
        doc = parse_script(
            "# C\n* One: a\nA: speech: a1\n* Two: b\nB: speech: b1", new_id=ids, now=clock
        )
        flat = flatten_document(doc)
        flat.insert(0, _record("new first"))
        rebuilt = reconstruct_document(flat, doc, now=clock)
        scenes = rebuilt.chapters[0].scenes
        assert [d.text for d in scenes[0].dialogues] == ["new first"]
        assert [d.text for d in scenes[1].dialogues] == ["a1", "b1"]

    def test_last_chapter_without_scenes_gets_holder_scene(self, ids, clock) -> None:
        doc = parse_script("# A\n* S: d\nX: speech: x\n# B", new_id=ids, now=clock)
        flat = flatten_document(doc) + [_record("extra")]
        rebuilt = reconstruct_document(flat, doc, now=clock)
        last = rebuilt.chapters[-1]
        [holder] = last.scenes
        assert holder.description == GENERATED_SCENE_DESCRIPTION
        assert holder.chapter_id == last.id
        assert [d.text for d in holder.dialogues] == ["extra"]
        assert rebuilt.metadata.scene_count == 2

    def test_inputs_not_mutated(self, ids, clock) -> None:
        doc = parse_script(TWO_SLOTS, new_id=ids, now=clock)
        flat = flatten_document(doc) + [_record("three")]
        doc_before = doc.model_dump()
        flat_before = [f.model_dump() for f in flat]
        reconstruct_document(flat, doc, now=clock)
        assert doc.model_dump() == doc_before
        assert [f.model_dump() for f in flat] == flat_before

    def test_metadata_carries_parse_time_and_chapters(self, ids, clock) -> None:
        doc = parse_script(TWO_SLOTS, new_id=ids, now=clock)
        rebuilt = reconstruct_document(flatten_document(doc)[:1], doc)
        assert rebuilt.metadata.parsed_at == doc.metadata.parsed_at
        assert rebuilt.metadata.chapter_count == 1


class TestReconstructIssues:
    def test_parse_issues_carried_over(self, ids, clock) -> None:
        doc = parse_script("Bob: yell: Hello", new_id=ids, now=clock)
        rebuilt = reconstruct_document(flatten_document(doc), doc, now=clock)
        assert rebuilt.issues == doc.issues

    def test_out_of_canvas_record_flagged(self, ids, clock) -> None:
        doc = parse_script(TWO_SLOTS, new_id=ids, now=clock)
        flat = flatten_document(doc)
        flat[0] = flat[0].model_copy(update={"position": Position(x=5000, y=0)})
        rebuilt = reconstruct_document(flat, doc, now=clock)
        [finding] = rebuilt.warnings
        assert finding.content == VALIDATION_CONTENT
        assert rebuilt.is_valid

    def test_stale_validation_findings_replaced(self, ids, clock) -> None:
        doc = parse_script(TWO_SLOTS, new_id=ids, now=clock)
        flat = flatten_document(doc)
        flat[0] = flat[0].model_copy(update={"position": Position(x=5000, y=0)})
        bad = reconstruct_document(flat, doc, now=clock)
        fixed = reconstruct_document(flatten_document(doc), bad, now=clock)
        assert fixed.issues == []


class TestReconstructWithoutOriginal:
    def test_builds_default_tree(self, clock) -> None:
        flat = [_record("one", record_id="keep"), _record("two")]
        doc = reconstruct_document(flat, new_id=SequentialIds(), now=clock)
        [chapter] = doc.chapters
        [scene] = chapter.scenes
        assert chapter.name == "Default Chapter"
        assert scene.name == "Default Scene"
        assert scene.description == GENERATED_SCENE_DESCRIPTION
        assert [d.id for d in scene.dialogues] == ["keep", "id-3"]
        assert [d.source_line for d in scene.dialogues] == [5, 6]
        assert (chapter.source_line, scene.source_line) == (1, 3)
        assert doc.metadata.dialogue_count == 2
        assert doc.metadata.parsed_at == clock()
        assert doc.issues == []

    def test_empty_original_treated_as_absent(self, ids, clock) -> None:
        empty = parse_script("", new_id=ids, now=clock)
        doc = reconstruct_document([_record("one")], empty, now=clock)
        assert doc.chapters[0].name == "Default Chapter"

    def test_empty_list(self, clock) -> None:
        doc = reconstruct_document([], now=clock)
        assert doc.metadata.chapter_count == 1
        assert doc.metadata.dialogue_count == 0

    def test_serialises_to_parseable_script(self, clock) -> None:
        flat = [_record("hello", character="Aki")]
        doc = reconstruct_document(flat, now=clock)
        reparsed = parse_script(document_to_text(doc), now=clock)
        assert reparsed.issues == []
        assert _structure(reparsed) == _structure(doc)
