"""Tests for timestamp id assignment and collision handling."""
import datetime
import logging
import re
from pathlib import Path

from brain_graph.models.schema import collision_suffix
from brain_graph.services.identity import assign_ids
from tests.vault_factory import id_for, local_ts

SAME_SECOND = datetime.datetime(2024, 5, 6, 7, 8, 9)


class TestAssignIds:
    """Tests for assign_ids()."""

    def test_distinct_mtimes_get_bare_ids(self, vault):
        a = vault.write("A.md", "", when=datetime.datetime(2024, 5, 6, 7, 8, 9))
        b = vault.write("B.md", "", when=datetime.datetime(2024, 5, 6, 7, 8, 10))
        ids = assign_ids([a, b])
        assert ids == {a: "20240506070809", b: "20240506070810"}
        assert all(re.fullmatch(r"\d{14}", v) for v in ids.values())

    def test_first_document_keeps_bare_id_on_collision(self, vault):
        a = vault.write("A.md", "", when=SAME_SECOND)
        b = vault.write("B.md", "", when=SAME_SECOND)
        c = vault.write("sub/C.md", "", when=SAME_SECOND)
        ids = assign_ids([a, b, c])

        bare = id_for(SAME_SECOND)
        assert ids[a] == bare
        assert ids[b] == f"{bare}-{collision_suffix(b)}"
        assert ids[c] == f"{bare}-{collision_suffix(c)}"
        assert len(set(ids.values())) == 3

    def test_collision_suffix_shape(self, vault):
        a = vault.write("A.md", "", when=SAME_SECOND)
        b = vault.write("B.md", "", when=SAME_SECOND)
        ids = assign_ids([a, b])
        assert re.fullmatch(r"\d{14}-[0-9a-f]{4}", ids[b])

    def test_order_decides_who_keeps_bare_id(self, vault):
        a = vault.write("A.md", "", when=SAME_SECOND)
        b = vault.write("B.md", "", when=SAME_SECOND)
        ids = assign_ids([b, a])
        assert ids[b] == id_for(SAME_SECOND)
        assert ids[a] != id_for(SAME_SECOND)

    def test_result_preserves_input_order(self, vault):
        paths = [vault.write(f"N{i}.md", "") for i in range(5)]
        assert list(assign_ids(paths)) == paths

    def test_unstatable_path_is_left_out(self, vault):
        a = vault.write("A.md", "")
        ghost = vault.root / "Ghost.md"
        ids = assign_ids([a, ghost])
        assert ghost not in ids
        assert a in ids

    def test_injected_mtime_reader(self):
        """mtime lookup can be swapped out, no filesystem needed."""
        ts = local_ts(SAME_SECOND)
        ids = assign_ids([Path("/x/A.md")], mtime_of=lambda p: ts)
        assert ids == {Path("/x/A.md"): id_for(SAME_SECOND)}

    def test_second_order_collision_is_logged(self, caplog, monkeypatch):
        """Colliding suffixes are reported, not silently rewritten."""
        caplog.set_level(logging.WARNING, logger="brain_graph")
        monkeypatch.setattr(
            "brain_graph.services.identity.collision_suffix", lambda p: "abcd"
        )
        ts = local_ts(SAME_SECOND)
        paths = [Path("/x/A.md"), Path("/x/B.md"), Path("/x/C.md")]
        ids = assign_ids(paths, mtime_of=lambda p: ts)
        assert ids[paths[1]] == ids[paths[2]] == f"{id_for(SAME_SECOND)}-abcd"
        assert "also collides" in caplog.text
