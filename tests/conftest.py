from __future__ import annotations

from typing import List

import pytest

from docsummarizer.embedder import StaticWordEmbedding

SUBJECTS = [
    "The research team",
    "Our engineering group",
    "The finance department",
    "The marketing division",
    "A regional partner",
    "The operations staff",
    "The product council",
    "An external auditor",
]
VERBS = ["reviewed", "expanded", "documented", "challenged", "approved", "measured", "redesigned", "prioritized"]
OBJECTS = [
    "the quarterly budget",
    "the data pipeline",
    "the customer survey",
    "the hiring plan",
    "the security audit",
    "the launch schedule",
    "the supplier contracts",
    "the training program",
]


def make_sentence(i: int) -> str:
    subject = SUBJECTS[i % len(SUBJECTS)]
    verb = VERBS[(i // len(SUBJECTS)) % len(VERBS)]
    obj = OBJECTS[(i // (len(SUBJECTS) * len(VERBS))) % len(OBJECTS)]
    return f"{subject} {verb} {obj} during milestone {i}."


def make_document(paragraphs: int, sentences_per_paragraph: int = 5) -> str:
    blocks: List[str] = []
    for p in range(paragraphs):
        start = p * sentences_per_paragraph
        blocks.append(" ".join(make_sentence(i) for i in range(start, start + sentences_per_paragraph)))
    return "\n\n".join(blocks)


@pytest.fixture
def short_text() -> str:
    return "This is a very short document with just one paragraph."


@pytest.fixture
def medium_text() -> str:
    # ~6 paragraphs, well under the single-pass threshold.
    return make_document(6)


@pytest.fixture
def long_text() -> str:
    # ~35k characters, forces the chunked strategy.
    return make_document(120)


@pytest.fixture
def pet_embedding() -> StaticWordEmbedding:
    return StaticWordEmbedding(
        {
            "cat": [1.0, 0.0],
            "dog": [1.0, 0.1],
            "car": [0.0, 1.0],
        }
    )
