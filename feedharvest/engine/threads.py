"""
Thread reconstruction from visual adjacency.

Consecutive items by the same author that are joined by the connector
line form a thread. This only knows what the rendering shows; it has no
idea of real reply chains.
"""

import logging
from typing import Iterable, List

from .schema import CandidateRecord, RetainedItem

logger = logging.getLogger(__name__)


class ThreadReconstructor:
    """Group rendered candidates into threads and singletons."""

    def reconstruct(self, candidates: Iterable[CandidateRecord]) -> List[RetainedItem]:
        """
        Group candidates in rendered order.

        Args:
            candidates: Candidate records in rendered order

        Returns:
            RetainedItem records in the same order, thread fields filled in
            for members of groups of two or more
        """
        items: List[RetainedItem] = []
        pending: List[CandidateRecord] = []
        last_author = ""

        for candidate in candidates:
            author = candidate.author or ""
            if pending and self._continues(candidate, last_author):
                pending.append(candidate)
            else:
                items.extend(self._flush(pending))
                pending = [candidate]
            last_author = author

        items.extend(self._flush(pending))
        return items

    @staticmethod
    def _continues(candidate: CandidateRecord, last_author: str) -> bool:
        author = candidate.author or ""
        return candidate.continues_thread and bool(author) and bool(last_author) and author == last_author

    @staticmethod
    def _flush(group: List[CandidateRecord]) -> List[RetainedItem]:
        if len(group) == 1:
            return [RetainedItem.from_candidate(group[0])]
        if not group:
            return []

        thread_items = tuple(member.text for member in group)
        logger.debug(f"Thread of {len(group)} by {group[0].author}")
        return [
            RetainedItem.from_candidate(member, thread_items=thread_items, thread_position=position)
            for position, member in enumerate(group, 1)
        ]


__all__ = ["ThreadReconstructor"]
