"""
PR Diff Parser

Parses unified diff text and GitHub API payloads into structured
pull request, file change and hunk models.
"""

import re
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from ..models.pr_diff import Author, PullRequest, FileChange, Hunk, FileDiff, Diff


logger = logging.getLogger(__name__)


@dataclass
class DiffBlock:
    """Raw text of one file section of a unified diff"""
    text: str
    path: Optional[str] = None
    previous_path: Optional[str] = None


class PRDiffParser:
    """
    Parser for unified diffs and GitHub PR payloads.

    Splits raw diff text into per-file blocks, extracts hunks from each
    block and pairs the blocks with the file change metadata reported
    by the VCS host.
    """

    def __init__(self, pair_by_path: bool = True):
        """
        Initialize PR diff parser.

        Args:
            pair_by_path: Pair diff blocks with file changes by the path in each
                block's header. When False, blocks are paired by position.
        """
        self.pair_by_path = pair_by_path
        self.file_boundary_pattern = re.compile(r'^diff --git ', re.MULTILINE)
        self.hunk_header_pattern = re.compile(
            r'^@@ -([^\s,]*)(?:,(\S*))? \+([^\s,]*)(?:,(\S*))? @@.*$', re.MULTILINE
        )
        self.git_header_pattern = re.compile(r'^(?:"?a/)(.+?)"? (?:"?b/)(.+?)"?$')
        self.new_path_pattern = re.compile(r'^\+\+\+ (?:b/)?(.+?)\s*$', re.MULTILINE)
        self.old_path_pattern = re.compile(r'^--- (?:a/)?(.+?)\s*$', re.MULTILINE)
        self.rename_to_pattern = re.compile(r'^rename to (.+?)\s*$', re.MULTILINE)
        self.rename_from_pattern = re.compile(r'^rename from (.+?)\s*$', re.MULTILINE)

    def parse(self, raw_diff: str, file_changes: Sequence[FileChange]) -> List[FileDiff]:
        """
        Parse raw unified diff text into file diffs.

        Args:
            raw_diff: Unified diff text for the whole pull request
            file_changes: Ordered per-file change metadata

        Returns:
            Ordered list of FileDiff objects
        """
        blocks = self.split_blocks(raw_diff)
        pairs = self._pair_blocks(blocks, list(file_changes))

        file_diffs = [
            FileDiff(change=change, hunks=self.parse_hunks(block.text))
            for change, block in pairs
        ]

        dropped = len(file_changes) - len(file_diffs)
        if dropped or len(blocks) != len(file_diffs):
            logger.warning(
                f"Diff pairing dropped entries: {len(blocks)} blocks, "
                f"{len(file_changes)} file changes, {len(file_diffs)} paired"
            )

        logger.info(
            f"Parsed diff: {len(file_diffs)} files, "
            f"{sum(len(f.hunks) for f in file_diffs)} hunks"
        )
        return file_diffs

    def parse_diff(self, raw_diff: str, file_changes: Sequence[FileChange]) -> Diff:
        """Parse raw diff text into a Diff value."""
        return Diff(files=tuple(self.parse(raw_diff, file_changes)))

    def split_blocks(self, raw_diff: str) -> List[DiffBlock]:
        """
        Split raw diff text at file boundary markers.

        Text without any ``diff --git`` marker is treated as a single block.
        """
        if not raw_diff or not raw_diff.strip():
            return []

        starts = [m.start() for m in self.file_boundary_pattern.finditer(raw_diff)]
        if not starts:
            return [self._describe_block(raw_diff)]

        ends = starts[1:] + [len(raw_diff)]
        return [self._describe_block(raw_diff[start:end]) for start, end in zip(starts, ends)]

    def parse_hunks(self, block: str) -> List[Hunk]:
        """
        Extract hunks from one file block.

        Args:
            block: Raw text of a single file section

        Returns:
            One Hunk per hunk header found in the block
        """
        headers = list(self.hunk_header_pattern.finditer(block))
        hunks = []

        for i, header in enumerate(headers):
            content_start = header.end() + 1
            content_end = headers[i + 1].start() if i + 1 < len(headers) else len(block)
            content = block[content_start:content_end].rstrip('\n')

            hunks.append(Hunk(
                old_start=self._to_int(header.group(1), 1),
                old_lines=self._to_int(header.group(2), 0),
                new_start=self._to_int(header.group(3), 1),
                new_lines=self._to_int(header.group(4), 0),
                content=content,
            ))

        if not hunks:
            logger.debug("Diff block has no hunk headers")
        return hunks

    def _to_int(self, value: Optional[str], default: int) -> int:
        """Parse a hunk header number, using default for missing or malformed values."""
        if value is None or value == '':
            return default
        try:
            number = int(value)
        except ValueError:
            logger.debug(f"Malformed hunk header number: {value!r}")
            return default
        return number if number >= 0 else default

    def _describe_block(self, text: str) -> DiffBlock:
        """Extract the file paths named in a block's headers."""
        path = None
        previous_path = None

        first_line = text.split('\n', 1)[0]
        if first_line.startswith('diff --git '):
            git_match = self.git_header_pattern.match(first_line[len('diff --git '):])
            if git_match:
                previous_path, path = git_match.group(1), git_match.group(2)

        rename_to = self.rename_to_pattern.search(text)
        if rename_to:
            path = rename_to.group(1)
            rename_from = self.rename_from_pattern.search(text)
            if rename_from:
                previous_path = rename_from.group(1)

        # Only look at file headers that precede the first hunk
        first_hunk = self.hunk_header_pattern.search(text)
        header_text = text[:first_hunk.start()] if first_hunk else text

        new_path = self.new_path_pattern.search(header_text)
        if new_path and new_path.group(1) != '/dev/null':
            path = new_path.group(1)
        elif path is None:
            old_path = self.old_path_pattern.search(header_text)
            if old_path and old_path.group(1) != '/dev/null':
                path = old_path.group(1)

        return DiffBlock(text=text, path=path, previous_path=previous_path)

    def _pair_blocks(
        self,
        blocks: List[DiffBlock],
        file_changes: List[FileChange]
    ) -> List[Tuple[FileChange, DiffBlock]]:
        """Pair file changes with diff blocks."""
        if not self.pair_by_path:
            return list(zip(file_changes, blocks))

        by_path: Dict[str, DiffBlock] = {}
        for block in blocks:
            if block.path is None or block.path in by_path:
                logger.debug("Diff block paths are ambiguous, pairing by position")
                return list(zip(file_changes, blocks))
            by_path[block.path] = block

        pairs = []
        for change in file_changes:
            block = by_path.get(change.path)
            if block is None and change.previous_path:
                block = by_path.get(change.previous_path)
            if block is None:
                logger.debug(f"No diff block for {change.path}")
                continue
            pairs.append((change, block))
        return pairs

    def parse_file_changes(self, files_data: List[Dict]) -> List[FileChange]:
        """
        Parse file change metadata from the GitHub files API.

        Args:
            files_data: List of file change data from GitHub API

        Returns:
            Ordered FileChange list
        """
        return [self._parse_file_change(file_data) for file_data in files_data]

    def _parse_file_change(self, file_data: Dict) -> FileChange:
        status = self._determine_status(file_data.get('status', 'modified'))
        return FileChange(
            path=file_data['filename'],
            status=status,
            additions=max(int(file_data.get('additions') or 0), 0),
            deletions=max(int(file_data.get('deletions') or 0), 0),
            previous_path=file_data.get('previous_filename'),
        )

    def _determine_status(self, status: str) -> str:
        """Normalize a GitHub file status."""
        status_mapping = {
            'added': 'added',
            'removed': 'deleted',
            'deleted': 'deleted',
            'renamed': 'renamed',
            'modified': 'modified',
        }
        return status_mapping.get(status, 'modified')

    def parse_pull_request(self, pr_data: Dict) -> PullRequest:
        """
        Parse pull request metadata from the GitHub pulls API.

        Args:
            pr_data: PR information from GitHub API

        Returns:
            PullRequest value
        """
        user = pr_data.get('user') or {}
        return PullRequest(
            id=str(pr_data.get('id', pr_data['number'])),
            number=pr_data['number'],
            title=pr_data.get('title') or '',
            description=pr_data.get('body') or '',
            author=Author(
                id=str(user.get('id', '')),
                username=user.get('login') or 'unknown',
                email=user.get('email'),
            ),
            source_branch=(pr_data.get('head') or {}).get('ref', ''),
            target_branch=(pr_data.get('base') or {}).get('ref', ''),
            url=pr_data.get('html_url', ''),
            created_at=self._parse_timestamp(pr_data.get('created_at')),
            updated_at=self._parse_timestamp(pr_data.get('updated_at')),
        )

    def _parse_timestamp(self, value: Optional[str]) -> Optional[datetime]:
        if not value:
            return None
        try:
            return datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            logger.debug(f"Unparsable timestamp: {value}")
            return None
