import pytest

from coding_agent.backups import BackupManager, backup_path_for
from coding_agent.errors import BackupArtifactMissing, BackupMissing


def make_artifact(tmp_path, name, content="x"):
    p = tmp_path / name
    p.write_text(content)
    return p


class TestBackupManager:

    def test_most_recent_empty(self):
        assert BackupManager().most_recent() is None

    def test_capacity_evicts_oldest_and_deletes_artifact(self, tmp_path):
        manager = BackupManager(capacity=10)
        artifacts = [make_artifact(tmp_path, f"a{i}.bak") for i in range(11)]
        for i, artifact in enumerate(artifacts):
            manager.push(tmp_path / f"a{i}", artifact)

        assert len(manager) == 10
        assert not artifacts[0].exists()
        assert all(a.exists() for a in artifacts[1:])
        assert manager.entries[0].backup_path == artifacts[1]
        assert manager.most_recent().backup_path == artifacts[10]

    def test_remove(self, tmp_path):
        manager = BackupManager()
        entry = manager.push(tmp_path / "a", tmp_path / "a.bak")
        manager.remove(entry.backup_path)
        assert len(manager) == 0

    def test_create_backup_sits_beside_original(self, tmp_path):
        original = make_artifact(tmp_path, "app.py", "print(1)\n")
        manager = BackupManager()
        entry = manager.create_backup(original)

        assert entry.backup_path.parent == tmp_path
        assert entry.backup_path.name.startswith("app.py.backup-")
        assert entry.backup_path.read_text() == "print(1)\n"
        assert manager.most_recent() == entry

    def test_backup_names_do_not_collide(self, tmp_path):
        original = make_artifact(tmp_path, "app.py")
        first = backup_path_for(original)
        first.write_text("taken")
        assert backup_path_for(original) != first


class TestRestoreLatest:

    def test_nothing_to_restore(self):
        with pytest.raises(BackupMissing):
            BackupManager().restore_latest()

    def test_restore_is_byte_exact_and_consumes_entry(self, tmp_path):
        original = tmp_path / "data.bin"
        before = b"caf\xc3\xa9\r\nline two\x00\n"
        original.write_bytes(before)
        manager = BackupManager()
        entry = manager.create_backup(original)
        original.write_bytes(b"changed")

        manager.restore_latest()

        assert original.read_bytes() == before
        assert not entry.backup_path.exists()
        assert len(manager) == 0

    def test_missing_artifact(self, tmp_path):
        manager = BackupManager()
        older = manager.create_backup(make_artifact(tmp_path, "a.txt"))
        newer = manager.push(tmp_path / "b.txt", tmp_path / "gone.bak")

        with pytest.raises(BackupArtifactMissing):
            manager.restore_latest()
        assert manager.most_recent() == older
        assert newer not in manager.entries

    def test_repeated_restores_walk_backwards(self, tmp_path):
        a = make_artifact(tmp_path, "a.txt", "a-old")
        b = make_artifact(tmp_path, "b.txt", "b-old")
        manager = BackupManager()
        manager.create_backup(a)
        manager.create_backup(b)
        a.write_text("a-new")
        b.write_text("b-new")

        assert manager.restore_latest().original_path == b
        assert b.read_text() == "b-old" and a.read_text() == "a-new"
        assert manager.restore_latest().original_path == a
        assert a.read_text() == "a-old"
        with pytest.raises(BackupMissing):
            manager.restore_latest()
