"""
Property-based tests for completion extraction and structured output.
"""

from hypothesis import given, strategies as st

from pr_review_agent.formatting import format_result, parse_structured
from pr_review_agent.llm.extractor import ResponseExtractor
from pr_review_agent.models.review import (
    Severity,
    Verdict,
    ReviewComment,
    CodeSuggestion,
    ReviewResult,
)


non_blank = st.text(min_size=1, max_size=60).filter(lambda s: s.strip())
paths = st.from_regex(r'[a-z]{1,8}(/[a-z]{1,8}){0,2}\.(py|ts|md)', fullmatch=True)
lines = st.integers(min_value=1, max_value=10000)

comments = st.builds(
    ReviewComment,
    path=paths,
    line=lines,
    body=non_blank,
    severity=st.sampled_from(list(Severity)),
    suggestion=st.one_of(st.none(), st.text(max_size=40)),
)

suggestions = st.builds(
    CodeSuggestion,
    path=paths,
    line=lines,
    old_code=st.text(max_size=40),
    new_code=st.text(max_size=40),
    description=st.text(max_size=40),
)

results = st.builds(
    ReviewResult,
    summary=st.text(max_size=200),
    comments=st.lists(comments, max_size=5).map(tuple),
    suggestions=st.lists(suggestions, max_size=3).map(tuple),
    verdict=st.sampled_from(list(Verdict)),
)

fragments = st.one_of(
    st.text(max_size=40),
    st.sampled_from(['SUMMARY:', 'COMMENTS:', 'SUGGESTIONS:', 'VERDICT: approve', '```suggestion\n', '```\n']),
    st.builds(
        lambda p, n: f'[File: {p}, Line: {n}]',
        st.text(alphabet='ab/. ', max_size=6),
        st.integers(min_value=-3, max_value=30),
    ),
    st.builds(
        lambda p, n: f'[Suggestion: {p}, Line: {n}]\n```new\nx\n```',
        st.text(alphabet='ab/. ', max_size=6),
        st.integers(min_value=-3, max_value=30),
    ),
)
completions = st.lists(fragments, max_size=25).map('\n'.join)


class TestStructuredOutputProperties:
    """Property tests for the JSON format."""

    @given(result=results)
    def test_json_round_trip(self, result):
        """
        Property: JSON output parses back to an equal result.

        Given: Any valid review result
        When: It is formatted as JSON and parsed back
        Then: The parsed result equals the original
        """
        assert parse_structured(format_result(result, 'json')) == result


class TestExtractionProperties:
    """Property tests for completion extraction."""

    @given(text=completions)
    def test_extracted_comments_are_valid(self, text):
        """
        Property: Extraction only emits anchorable comments.

        Given: Arbitrary completion text mixing markers, tags and noise
        When: It is extracted
        Then: Every comment has a path, a positive line and a body, and caps hold
        """
        extractor = ResponseExtractor(max_comments=5, max_suggestions=3)
        result = extractor.extract(text)

        assert len(result.comments) <= 5
        assert len(result.suggestions) <= 3
        for comment in result.comments:
            assert comment.path.strip()
            assert comment.line > 0
            assert comment.body.strip()
        for suggestion in result.suggestions:
            assert suggestion.path.strip()
            assert suggestion.line > 0
            assert suggestion.new_code.strip()
        assert result.verdict in set(Verdict)

    @given(text=st.text(max_size=300))
    def test_extraction_never_raises(self, text):
        result = ResponseExtractor().extract(text)
        assert isinstance(result, ReviewResult)
