from linguasync.domain.workspace import Workspace


def test_workspace_paths(tmp_path):
    ws = Workspace.create(str(tmp_path / ".linguasync"), job_id="abc123")
    assert ws.root.name == "abc123"
    assert ws.job_id == "abc123"
    assert ws.original_vtt.name == "original.vtt"
    assert ws.translated_vtt("vi").name == "translated.vi.vtt"
    assert ws.job_manifest.name == "job.json"


def test_workspace_generates_job_id(tmp_path):
    a = Workspace.create(str(tmp_path))
    b = Workspace.create(str(tmp_path))
    assert a.job_id != b.job_id
    assert len(a.job_id) == 12
    assert a.root.is_dir()
