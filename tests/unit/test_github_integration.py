"""
Unit tests for the GitHub integration layer: REST client and diff parser.
"""

import pytest
from unittest.mock import Mock, patch
import requests

from pr_review_agent.github.client import GitHubClient, GitHubAPIError
from pr_review_agent.github.parser import PRDiffParser
from pr_review_agent.models.pr_diff import FileChange
from pr_review_agent.models.review import InlineCommentDirective, Severity


def _response(status_code=200, json_data=None, text=''):
    response = Mock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.json.return_value = json_data if json_data is not None else {}
    response.content = b'{}' if json_data is not None else b''
    response.text = text
    return response


class TestGitHubClient:
    """Unit tests for GitHubClient class."""

    def test_client_initialization(self):
        client = GitHubClient("ghp_test_token", "acme", "widgets")

        assert client.base_url == "https://api.github.com"
        assert client.session.headers["Authorization"] == "token ghp_test_token"
        assert client.session.headers["Accept"] == "application/vnd.github.v3+json"

    def test_anonymous_client_has_no_authorization(self):
        client = GitHubClient(None, "acme", "widgets")
        assert "Authorization" not in client.session.headers

    def test_for_repository(self):
        client = GitHubClient.for_repository("acme/widgets", "token", timeout_seconds=5)

        assert client.owner == "acme"
        assert client.repo == "widgets"
        assert client.timeout_seconds == 5

    def test_for_repository_rejects_bad_name(self):
        with pytest.raises(ValueError):
            GitHubClient.for_repository("widgets", "token")

    @patch('pr_review_agent.github.client.requests.Session.request')
    def test_get_pull_request(self, mock_request):
        mock_request.return_value = _response(json_data={'number': 42, 'title': 'Test PR'})

        client = GitHubClient("token", "acme", "widgets")
        result = client.get_pull_request(42)

        assert result['number'] == 42
        method, url = mock_request.call_args[0]
        assert method == 'GET'
        assert url == "https://api.github.com/repos/acme/widgets/pulls/42"

    @patch('pr_review_agent.github.client.requests.Session.request')
    def test_get_pull_request_diff_uses_diff_media_type(self, mock_request):
        mock_request.return_value = _response(text='diff --git a/x b/x')

        client = GitHubClient("token", "acme", "widgets")
        assert client.get_pull_request_diff(42) == 'diff --git a/x b/x'
        assert mock_request.call_args[1]['headers']['Accept'] == 'application/vnd.github.v3.diff'

    @patch('pr_review_agent.github.client.requests.Session.request')
    def test_get_pull_request_files_paginates(self, mock_request):
        first_page = [{'filename': f'f{i}.py'} for i in range(100)]
        second_page = [{'filename': 'last.py'}]
        mock_request.side_effect = [_response(json_data=first_page), _response(json_data=second_page)]

        client = GitHubClient("token", "acme", "widgets")
        files = client.get_pull_request_files(42)

        assert len(files) == 101
        assert files[-1]['filename'] == 'last.py'
        assert mock_request.call_args_list[1][1]['params']['page'] == 2

    @patch('pr_review_agent.github.client.requests.Session.request')
    def test_error_response_raises(self, mock_request):
        mock_request.return_value = _response(status_code=403, json_data={'message': 'Forbidden'})

        client = GitHubClient("token", "acme", "widgets")
        with pytest.raises(GitHubAPIError) as exc_info:
            client.get_pull_request(42)

        assert exc_info.value.status_code == 403
        assert exc_info.value.response_data == {'message': 'Forbidden'}

    @patch('pr_review_agent.github.client.requests.Session.request')
    def test_transport_error_raises(self, mock_request):
        mock_request.side_effect = requests.ConnectionError("connection refused")

        client = GitHubClient("token", "acme", "widgets")
        with pytest.raises(GitHubAPIError):
            client.get_pull_request(42)

    @patch('pr_review_agent.github.client.requests.Session.request')
    def test_get_issue_not_found_returns_none(self, mock_request):
        mock_request.return_value = _response(status_code=404, json_data={'message': 'Not Found'})

        client = GitHubClient("token", "acme", "widgets")
        assert client.get_issue(7) is None

    @patch('pr_review_agent.github.client.requests.Session.request')
    def test_create_review_payload(self, mock_request):
        mock_request.return_value = _response(json_data={'id': 99})

        client = GitHubClient("token", "acme", "widgets")
        comments = [InlineCommentDirective(path='a.py', line=3, body='Fix', severity=Severity.WARNING)]
        result = client.create_review(42, 'Summary', 'REQUEST_CHANGES', comments)

        assert result == {'id': 99}
        method, url = mock_request.call_args[0]
        payload = mock_request.call_args[1]['json']
        assert method == 'POST'
        assert url.endswith('/repos/acme/widgets/pulls/42/reviews')
        assert payload['event'] == 'REQUEST_CHANGES'
        assert payload['comments'] == [{'path': 'a.py', 'line': 3, 'side': 'RIGHT', 'body': 'Fix'}]


class TestPRDiffParser:
    """Unit tests for PRDiffParser class."""

    def setup_method(self):
        self.parser = PRDiffParser()

    def test_parse_sample_diff(self, sample_diff_text):
        changes = [
            FileChange(path='src/app.py', status='modified', additions=2),
            FileChange(path='README.md', status='added', additions=2),
        ]
        file_diffs = self.parser.parse(sample_diff_text, changes)

        assert [f.path for f in file_diffs] == ['src/app.py', 'README.md']
        assert len(file_diffs[0].hunks) == 2
        assert len(file_diffs[1].hunks) == 1

        first = file_diffs[0].hunks[0]
        assert (first.old_start, first.old_lines, first.new_start, first.new_lines) == (1, 3, 1, 4)
        assert first.content.startswith(' import os\n+import sys')

        second = file_diffs[0].hunks[1]
        assert second.content == '     run()\n+    cleanup()\n     return 0'

        added = file_diffs[1].hunks[0]
        assert added.is_insertion
        assert added.content == '+# Project\n+Docs'

    def test_pairs_by_header_path_when_order_differs(self, sample_diff_text):
        changes = [
            FileChange(path='README.md', status='added'),
            FileChange(path='src/app.py', status='modified'),
        ]
        file_diffs = self.parser.parse(sample_diff_text, changes)

        assert file_diffs[0].path == 'README.md'
        assert len(file_diffs[0].hunks) == 1
        assert len(file_diffs[1].hunks) == 2

    def test_positional_pairing(self, sample_diff_text):
        parser = PRDiffParser(pair_by_path=False)
        changes = [
            FileChange(path='README.md', status='added'),
            FileChange(path='src/app.py', status='modified'),
        ]
        file_diffs = parser.parse(sample_diff_text, changes)

        # First block (src/app.py) lands on the first change
        assert file_diffs[0].path == 'README.md'
        assert len(file_diffs[0].hunks) == 2

    def test_extra_file_changes_are_dropped(self, sample_diff_text):
        changes = [
            FileChange(path='src/app.py', status='modified'),
            FileChange(path='README.md', status='added'),
            FileChange(path='image.png', status='added'),
        ]
        file_diffs = self.parser.parse(sample_diff_text, changes)
        assert [f.path for f in file_diffs] == ['src/app.py', 'README.md']

    def test_empty_diff(self):
        assert self.parser.parse('', [FileChange(path='a.py', status='modified')]) == []

    def test_block_without_hunks(self):
        raw = (
            "diff --git a/logo.png b/logo.png\n"
            "new file mode 100644\n"
            "Binary files /dev/null and b/logo.png differ\n"
        )
        file_diffs = self.parser.parse(raw, [FileChange(path='logo.png', status='added')])

        assert len(file_diffs) == 1
        assert file_diffs[0].hunks == ()

    def test_text_without_file_marker_is_one_block(self):
        raw = "--- a/x.py\n+++ b/x.py\n@@ -1 +1 @@\n-a\n+b\n"
        file_diffs = self.parser.parse(raw, [FileChange(path='x.py', status='modified')])

        hunk = file_diffs[0].hunks[0]
        assert (hunk.old_start, hunk.old_lines, hunk.new_start, hunk.new_lines) == (1, 0, 1, 0)
        assert hunk.content == '-a\n+b'

    def test_malformed_hunk_numbers_default(self):
        hunks = self.parser.parse_hunks("@@ -x,y +3,z @@\n+line\n")

        assert len(hunks) == 1
        assert hunks[0].old_start == 1
        assert hunks[0].old_lines == 0
        assert hunks[0].new_start == 3
        assert hunks[0].new_lines == 0

    def test_renamed_block_paths(self):
        raw = (
            "diff --git a/old/name.py b/new/name.py\n"
            "similarity index 90%\n"
            "rename from old/name.py\n"
            "rename to new/name.py\n"
            "--- a/old/name.py\n"
            "+++ b/new/name.py\n"
            "@@ -1,1 +1,1 @@\n"
            "-x = 1\n"
            "+x = 2\n"
        )
        block = self.parser.split_blocks(raw)[0]
        assert block.path == 'new/name.py'
        assert block.previous_path == 'old/name.py'

    def test_parse_file_changes(self):
        files_data = [
            {'filename': 'a.py', 'status': 'removed', 'additions': 0, 'deletions': 4},
            {'filename': 'b.py', 'status': 'renamed', 'previous_filename': 'c.py'},
            {'filename': 'd.py', 'status': 'copied'},
        ]
        changes = self.parser.parse_file_changes(files_data)

        assert changes[0].status == 'deleted'
        assert changes[0].deletions == 4
        assert changes[1].is_rename
        assert changes[1].previous_path == 'c.py'
        assert changes[2].status == 'modified'

    def test_parse_pull_request(self, sample_pr_data):
        pr = self.parser.parse_pull_request(sample_pr_data)

        assert pr.number == 42
        assert pr.author.username == 'octocat'
        assert pr.source_branch == 'feature/cleanup'
        assert pr.target_branch == 'main'
        assert pr.created_at is not None
        assert pr.created_at.year == 2024

    def test_parse_pull_request_without_body(self, sample_pr_data):
        sample_pr_data['body'] = None
        pr = self.parser.parse_pull_request(sample_pr_data)
        assert pr.description == ''
