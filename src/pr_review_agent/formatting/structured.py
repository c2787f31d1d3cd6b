"""
Structured Output

JSON rendering of review results and its inverse, backed by the
pydantic payload models.
"""

from pydantic import ValidationError

from ..models.review import ReviewResult, ReviewResultPayload


class JsonFormatter:
    """Formats review results as JSON"""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def format(self, result: ReviewResult) -> str:
        return ReviewResultPayload.from_result(result).model_dump_json(indent=self.indent)


def parse_structured(text: str) -> ReviewResult:
    """
    Parse JSON produced by JsonFormatter back into a ReviewResult.

    Args:
        text: JSON document

    Returns:
        Equivalent ReviewResult

    Raises:
        ValueError: If the document is not a valid review result
    """
    try:
        payload = ReviewResultPayload.model_validate_json(text)
    except ValidationError as e:
        raise ValueError(f"Invalid review result document: {e}") from e
    return payload.to_result()
