from __future__ import annotations

"""Document access and bag-of-words primitives for text-based metrics."""

import math
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Set

import numpy as np
from sklearn.feature_extraction import DictVectorizer
from sklearn.feature_extraction.text import CountVectorizer
from sklearn.metrics.pairwise import cosine_similarity

DEFAULT_POLARITY_LEXICON: Dict[str, float] = {
    "good": 1.0, "great": 1.0, "excellent": 1.0, "happy": 1.0, "joy": 1.0,
    "love": 1.0, "like": 0.5, "nice": 0.5, "useful": 0.5, "clear": 0.5,
    "success": 1.0, "win": 1.0, "best": 1.0, "better": 0.5, "glad": 1.0,
    "bad": -1.0, "poor": -1.0, "terrible": -1.0, "sad": -1.0, "angry": -1.0,
    "hate": -1.0, "wrong": -0.5, "broken": -0.5, "fail": -1.0,
    "failure": -1.0, "worse": -0.5, "worst": -1.0, "confusing": -0.5,
}

_SENTENCE_RE = re.compile(r"(?<=[.!?])\s+|\n+")


# Word analyzer without stop-word removal, used for sentiment tokens
_tokenize = CountVectorizer().build_analyzer()


def tokenize(text: str) -> List[str]:
    """Return lower-cased word tokens of ``text`` as CountVectorizer sees them."""
    return list(_tokenize(text))


def split_sentences(text: str) -> List[str]:
    return [s for s in (p.strip() for p in _SENTENCE_RE.split(text)) if s]


@dataclass
class Document:
    """Tokenized text attached to a node."""

    text: str
    sentences: List[List[str]] = field(default_factory=list)

    @classmethod
    def from_text(cls, text: str) -> "Document":
        return cls(text=text, sentences=[tokenize(s) for s in split_sentences(text)])

    @property
    def tokens(self) -> List[str]:
        return [t for sentence in self.sentences for t in sentence]


class DocumentProvider(Protocol):
    """Per-node documents plus the primitives text metrics rely on."""

    def get_document(self, node_id: str) -> Optional[Document]: ...

    def no_stop_bow(self, doc: Document) -> Dict[str, int]: ...

    def no_stop_set(self, doc: Document) -> Set[str]: ...

    def average_sentiment(self, doc: Document) -> float: ...


class TextDocumentProvider:
    """In-memory :class:`DocumentProvider` backed by raw node texts.

    Sentiment is the mean over sentences of the summed lexicon polarity
    divided by the number of tokens of the sentence.
    """

    def __init__(
        self,
        texts: Optional[Mapping[str, str]] = None,
        *,
        stop_words: Optional[Iterable[str]] = None,
        lexicon: Optional[Mapping[str, float]] = None,
    ) -> None:
        # "english" is scikit-learn's built-in stop-word list
        self.stop_words = sorted(stop_words) if stop_words is not None else "english"
        self._analyzer = CountVectorizer(stop_words=self.stop_words).build_analyzer()
        self.lexicon = dict(lexicon) if lexicon is not None else dict(DEFAULT_POLARITY_LEXICON)
        self.docs: Dict[str, Document] = {}
        for node_id, text in (texts or {}).items():
            self.add(node_id, text)

    @classmethod
    def from_nodes(cls, nodes: Iterable[Mapping], key: str = "text") -> "TextDocumentProvider":
        """Build a provider from node records carrying an ``id`` and a text."""
        return cls({n["id"]: n[key] for n in nodes if isinstance(n, Mapping) and n.get(key)})

    def add(self, node_id: str, text: str) -> None:
        self.docs[node_id] = Document.from_text(text)

    def get_document(self, node_id: str) -> Optional[Document]:
        return self.docs.get(node_id)

    def no_stop_bow(self, doc: Document) -> Dict[str, int]:
        return dict(Counter(self._analyzer(doc.text)))

    def no_stop_set(self, doc: Document) -> Set[str]:
        return set(self._analyzer(doc.text))

    def average_sentiment(self, doc: Document) -> float:
        scores = [
            sum(self.lexicon.get(t, 0.0) for t in sentence) / len(sentence)
            for sentence in doc.sentences
            if sentence
        ]
        if not scores:
            return 0.0
        return float(np.mean(scores))


def bow_cosine(a: Mapping[str, int], b: Mapping[str, int]) -> float:
    """Cosine similarity of two bags of words; ``0`` when either is empty."""

    if not a or not b:
        return 0.0
    vectors = DictVectorizer().fit_transform([dict(a), dict(b)])
    return float(cosine_similarity(vectors[0], vectors[1])[0, 0])


def otsuka_ochiai(a: Set[str], b: Set[str]) -> float:
    """Return ``|a & b| / sqrt(|a| * |b|)``; ``0`` when either set is empty."""

    if not a or not b:
        return 0.0
    return len(a & b) / math.sqrt(len(a) * len(b))
