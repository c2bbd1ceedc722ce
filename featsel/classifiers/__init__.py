"""Classifier backends used by the wrapper and embedded selectors."""

from .classifiers import Classifier, SklearnClassifier, make_classifier, score_classifier

__all__ = [
    'Classifier',
    'SklearnClassifier',
    'make_classifier',
    'score_classifier'
]
