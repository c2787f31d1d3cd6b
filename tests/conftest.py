"""
Shared fixtures for PR review agent tests.
"""

import pytest

from pr_review_agent.config import ReviewConfig
from pr_review_agent.models.pr_diff import Author, PullRequest, FileChange, Hunk, FileDiff, Diff
from pr_review_agent.models.skill import Skill, SkillPriority


SAMPLE_DIFF = """diff --git a/src/app.py b/src/app.py
index 83db48f..bf269f4 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,3 +1,4 @@ import os
 import os
+import sys

 def main():
@@ -10,2 +11,3 @@ def main():
     run()
+    cleanup()
     return 0
diff --git a/README.md b/README.md
new file mode 100644
index 0000000..e69de29
--- /dev/null
+++ b/README.md
@@ -0,0 +1,2 @@
+# Project
+Docs
"""


@pytest.fixture
def sample_diff_text():
    return SAMPLE_DIFF


@pytest.fixture
def sample_pr_data():
    return {
        'id': 1001,
        'number': 42,
        'title': 'Add cleanup step',
        'body': 'Fixes #7 and relates to PROJ-12.',
        'user': {'id': 5, 'login': 'octocat'},
        'head': {'ref': 'feature/cleanup'},
        'base': {'ref': 'main'},
        'html_url': 'https://github.com/acme/widgets/pull/42',
        'created_at': '2024-05-01T10:00:00Z',
        'updated_at': '2024-05-02T12:30:00Z',
    }


@pytest.fixture
def sample_files_data():
    return [
        {'filename': 'src/app.py', 'status': 'modified', 'additions': 2, 'deletions': 0},
        {'filename': 'README.md', 'status': 'added', 'additions': 2, 'deletions': 0},
    ]


@pytest.fixture
def sample_pr():
    return PullRequest(
        id='1001',
        number=42,
        title='Add cleanup step',
        description='Adds a cleanup call after run.',
        author=Author(id='5', username='octocat'),
        source_branch='feature/cleanup',
        target_branch='main',
    )


@pytest.fixture
def make_skill():
    def _make(name, triggers=('**/*',), priority=SkillPriority.MEDIUM, content='Guidance.'):
        return Skill(
            name=name,
            description=f'{name} checks',
            triggers=tuple(triggers),
            priority=priority,
            content=content,
        )
    return _make


@pytest.fixture
def make_diff():
    def _make(files):
        """Build a Diff from (path, [hunk contents]) pairs."""
        file_diffs = []
        for path, contents in files:
            hunks = tuple(
                Hunk(old_start=1, old_lines=1, new_start=1, new_lines=1, content=content)
                for content in contents
            )
            file_diffs.append(FileDiff(change=FileChange(path=path, status='modified'), hunks=hunks))
        return Diff(files=tuple(file_diffs))
    return _make


@pytest.fixture
def review_config():
    return ReviewConfig(max_diff_size=50000, ignore_paths=(), focus_areas=())
