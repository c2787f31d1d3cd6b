"""
Unit tests for data models and configuration.
"""

import pytest
from pydantic import ValidationError

from pr_review_agent.config import (
    AppConfig,
    ConfigError,
    ReviewConfig,
    load_config,
    DEFAULT_IGNORE_PATHS,
)
from pr_review_agent.models.pr_diff import Author, PullRequest, FileChange, Hunk, FileDiff, Diff
from pr_review_agent.models.skill import Skill, SkillPriority
from pr_review_agent.models.ticket import Ticket, TicketLookup, LookupStatus
from pr_review_agent.models.review import (
    Severity,
    Verdict,
    ReviewComment,
    CodeSuggestion,
    ReviewResult,
    ReviewCommentPayload,
)


class TestPRDiffModels:
    """Unit tests for PR diff data models."""

    def test_pull_request_requires_positive_number(self):
        with pytest.raises(ValueError):
            PullRequest(
                id='1', number=0, title='t', description='',
                author=Author(id='1', username='u'),
                source_branch='a', target_branch='b',
            )

    def test_file_change_status_validation(self):
        assert FileChange(path='a.py', status='added').status == 'added'
        with pytest.raises(ValueError):
            FileChange(path='a.py', status='copied')

    def test_file_change_rename(self):
        change = FileChange(path='new.py', status='renamed', previous_path='old.py')
        assert change.is_rename
        assert not FileChange(path='new.py', status='modified').is_rename

    def test_hunk_validation(self):
        with pytest.raises(ValueError):
            Hunk(old_start=-1, old_lines=0, new_start=1, new_lines=1, content='')
        with pytest.raises(ValueError):
            Hunk(old_start=1, old_lines=-2, new_start=1, new_lines=1, content='')

    def test_hunk_header(self):
        hunk = Hunk(old_start=3, old_lines=0, new_start=4, new_lines=2, content='+a\n+b')
        assert hunk.header == '@@ -3,0 +4,2 @@'
        assert hunk.is_insertion

    def test_diff_aggregates(self):
        diff = Diff(files=(
            FileDiff(
                change=FileChange(path='a.py', status='modified', additions=3, deletions=1),
                hunks=(Hunk(1, 1, 1, 1, 'abc'), Hunk(5, 1, 5, 1, 'de')),
            ),
            FileDiff(change=FileChange(path='b.py', status='added', additions=2)),
        ))

        assert diff.additions == 5
        assert diff.deletions == 1
        assert diff.changed_files == 2
        assert diff.paths == ('a.py', 'b.py')
        assert diff.content_length == 5


class TestSkillModels:
    """Unit tests for skill models."""

    def test_priority_parse(self):
        assert SkillPriority.parse('HIGH') is SkillPriority.HIGH
        assert SkillPriority.parse(' low ') is SkillPriority.LOW
        assert SkillPriority.parse('urgent') is SkillPriority.MEDIUM
        assert SkillPriority.parse(None) is SkillPriority.MEDIUM
        assert SkillPriority.parse('bogus', SkillPriority.LOW) is SkillPriority.LOW

    def test_priority_rank_order(self):
        assert SkillPriority.HIGH.rank > SkillPriority.MEDIUM.rank > SkillPriority.LOW.rank

    def test_skill_coerces_fields(self):
        skill = Skill(name='py', description='', triggers=['*.py'], priority='high', content='')
        assert skill.triggers == ('*.py',)
        assert skill.priority is SkillPriority.HIGH

    def test_skill_requires_name(self):
        with pytest.raises(ValueError):
            Skill(name=' ', description='', triggers=(), priority='low', content='')


class TestTicketModels:
    """Unit tests for ticket models."""

    def test_lookup_constructors(self):
        ticket = Ticket(id='1', key='#1', title='Bug')

        assert TicketLookup.found(ticket).status is LookupStatus.FOUND
        assert TicketLookup.not_found('gone').reason == 'gone'
        assert TicketLookup.unsupported('later').status is LookupStatus.UNSUPPORTED

    def test_found_requires_ticket(self):
        with pytest.raises(ValueError):
            TicketLookup(LookupStatus.FOUND)


class TestReviewModels:
    """Unit tests for review models."""

    def test_review_comment_validation(self):
        with pytest.raises(ValueError):
            ReviewComment(path='', line=1, body='x')
        with pytest.raises(ValueError):
            ReviewComment(path='a.py', line=0, body='x')
        with pytest.raises(ValueError):
            ReviewComment(path='a.py', line=1, body='   ')

    def test_review_comment_defaults(self):
        comment = ReviewComment(path='a.py', line=1, body='Looks odd')
        assert comment.severity is Severity.INFO
        assert comment.suggestion is None

    def test_code_suggestion_validation(self):
        with pytest.raises(ValueError):
            CodeSuggestion(path='a.py', line=-1, old_code='', new_code='x', description='')

    def test_review_result_helpers(self):
        result = ReviewResult(
            summary='s',
            comments=[
                ReviewComment(path='b.py', line=1, body='one', severity=Severity.ERROR),
                ReviewComment(path='a.py', line=2, body='two'),
                ReviewComment(path='b.py', line=3, body='three', severity=Severity.ERROR),
            ],
            verdict='request_changes',
        )

        assert isinstance(result.comments, tuple)
        assert result.verdict is Verdict.REQUEST_CHANGES
        assert result.files_with_comments == ['b.py', 'a.py']
        assert len(result.get_comments_by_severity(Severity.ERROR)) == 2

    def test_invalid_verdict_rejected(self):
        with pytest.raises(ValueError):
            ReviewResult(summary='s', verdict='merge')

    def test_comment_payload_validation(self):
        with pytest.raises(ValidationError):
            ReviewCommentPayload(path='a.py', line=0, body='x', severity='info')
        with pytest.raises(ValidationError):
            ReviewCommentPayload(path='a.py', line=1, body='x', severity='fatal')


class TestConfig:
    """Unit tests for configuration loading."""

    def test_defaults(self):
        config = AppConfig()

        assert config.review.max_diff_size == 50000
        assert config.review.ignore_paths == DEFAULT_IGNORE_PATHS
        assert config.extraction.max_comments == 20
        assert config.extraction.max_suggestions == 10
        assert config.tickets.trackers == ['github']
        config.validate()

    def test_review_config_coerces_lists(self):
        config = ReviewConfig(ignore_paths=['*.lock'], focus_areas=['security'])
        assert config.ignore_paths == ('*.lock',)
        assert config.focus_areas == ('security',)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv('PR_REVIEW_MAX_DIFF_SIZE', '1000')
        monkeypatch.setenv('PR_REVIEW_FOCUS_AREAS', 'security, performance')
        monkeypatch.setenv('GITHUB_TOKEN', 'env-token')

        config = AppConfig.from_env()

        assert config.review.max_diff_size == 1000
        assert config.review.focus_areas == ('security', 'performance')
        assert config.github.token == 'env-token'

    def test_load_yaml(self, tmp_path, monkeypatch):
        monkeypatch.delenv('GITHUB_TOKEN', raising=False)
        config_file = tmp_path / 'config.yaml'
        config_file.write_text(
            "review:\n"
            "  max_diff_size: 2000\n"
            "  focus_areas: [security]\n"
            "extraction:\n"
            "  max_comments: 5\n"
            "github:\n"
            "  token: file-token\n"
            "tickets:\n"
            "  trackers: [github, jira]\n",
            encoding='utf-8',
        )

        config = load_config(str(config_file))

        assert config.review.max_diff_size == 2000
        assert config.review.focus_areas == ('security',)
        assert config.extraction.max_comments == 5
        assert config.github.token == 'file-token'
        assert config.tickets.trackers == ['github', 'jira']

    def test_env_token_overrides_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv('GITHUB_TOKEN', 'env-token')
        config_file = tmp_path / 'config.yaml'
        config_file.write_text("github:\n  token: file-token\n", encoding='utf-8')

        assert load_config(str(config_file)).github.token == 'env-token'

    def test_missing_file_falls_back_to_defaults(self, tmp_path):
        config = load_config(str(tmp_path / 'absent.yaml'))
        assert config.review.max_diff_size == 50000

    def test_unparsable_file_raises(self, tmp_path):
        config_file = tmp_path / 'config.yaml'
        config_file.write_text("review: [unclosed\n", encoding='utf-8')

        with pytest.raises(ConfigError):
            load_config(str(config_file))

    def test_non_mapping_file_raises(self, tmp_path):
        config_file = tmp_path / 'config.yaml'
        config_file.write_text("- just\n- a list\n", encoding='utf-8')

        with pytest.raises(ConfigError):
            load_config(str(config_file))

    def test_unknown_key_raises(self, tmp_path):
        config_file = tmp_path / 'config.yaml'
        config_file.write_text("review:\n  max_tokens: 5\n", encoding='utf-8')

        with pytest.raises(ConfigError):
            load_config(str(config_file))

    def test_validate_collects_errors(self):
        config = AppConfig.from_dict({
            'review': {'max_diff_size': -1},
            'tickets': {'trackers': ['bugzilla']},
            'logging': {'level': 'LOUD'},
        })

        with pytest.raises(ConfigError) as exc_info:
            config.validate()

        message = str(exc_info.value)
        assert 'max_diff_size' in message
        assert 'bugzilla' in message
        assert 'LOUD' in message

    def test_to_dict_omits_token(self):
        config = AppConfig.from_dict({'github': {'token': 'secret'}})
        data = config.to_dict()

        assert 'token' not in data['github']
        assert 'secret' not in str(data)
