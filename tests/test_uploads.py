"""
Test upload file naming and storage.
"""

import pytest

from utils.uploads import resolve_upload_path, safe_filename, save_upload


class TestSafeFilename:

    @pytest.mark.parametrize('original, expected', [
        ('plan.pdf', 'plan_1700000000000.pdf'),
        ('My Plan (v2).pdf', 'My_Plan__v2__1700000000000.pdf'),
        ('résumé.docx', 'r_sum__1700000000000.docx'),
        ('archive.tar.gz', 'archive_tar_1700000000000.gz'),
        ('README', 'README_1700000000000'),
        ('../../etc/passwd', 'passwd_1700000000000'),
    ])
    def test_safe_filename(self, original, expected):
        assert safe_filename(original, 1700000000000) == expected


class TestSaveUpload:

    def test_writes_into_project_folder(self, tmp_path):
        stored = save_upload(b'data', 'Spec Sheet.pdf', project_id='project-1', upload_root=tmp_path)

        assert stored['name'] == 'Spec Sheet.pdf'
        assert stored['url'].startswith('/uploads/project-1/Spec_Sheet_')
        assert stored['uploaded_at']

        relative = stored['url'][len('/uploads/'):]
        assert (tmp_path / relative).read_bytes() == b'data'

    def test_general_folder(self, tmp_path):
        stored = save_upload(b'x', 'notes.txt', upload_root=tmp_path)
        assert stored['url'].startswith('/uploads/general/notes_')

    def test_same_millisecond_uploads_do_not_overwrite(self, tmp_path, monkeypatch):
        monkeypatch.setattr('utils.uploads.time.time', lambda: 1700000000.0)

        first = save_upload(b'first', 'plan.pdf', project_id='p-1', upload_root=tmp_path)
        second = save_upload(b'second', 'plan.pdf', project_id='p-1', upload_root=tmp_path)

        assert first['url'] == '/uploads/p-1/plan_1700000000000.pdf'
        assert second['url'] == '/uploads/p-1/plan_1700000000001.pdf'
        assert (tmp_path / 'p-1' / 'plan_1700000000000.pdf').read_bytes() == b'first'
        assert (tmp_path / 'p-1' / 'plan_1700000000001.pdf').read_bytes() == b'second'

    def test_requires_content(self, tmp_path):
        with pytest.raises(ValueError):
            save_upload(None, 'notes.txt', upload_root=tmp_path)


class TestResolveUploadPath:

    def test_inside_root(self, tmp_path):
        assert resolve_upload_path(tmp_path, 'general/a.txt') == (tmp_path / 'general' / 'a.txt').resolve()

    def test_rejects_traversal(self, tmp_path):
        with pytest.raises(ValueError):
            resolve_upload_path(tmp_path / 'uploads', '../secret.db')
