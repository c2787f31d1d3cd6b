"""
Model Prompting and Response Extraction

Prompt rendering for review contexts and parsing of model completions.
"""

from .prompts import PromptBuilder
from .extractor import ResponseExtractor, infer_severity, parse_verdict

__all__ = ['PromptBuilder', 'ResponseExtractor', 'infer_severity', 'parse_verdict']
