"""
Classifier capability interface.

Selectors only talk to a :class:`Classifier`: ``fit``, ``predict``,
``predict_score`` (continuous score for the positive class) and
``importance`` (one non-negative score per predictor). The scikit-learn
backends below are the default implementations; any object offering the
same four methods can be substituted.
"""

import numpy as np
from sklearn.base import clone
from sklearn.ensemble import RandomForestClassifier
from sklearn.linear_model import LogisticRegression
from sklearn.metrics import accuracy_score, log_loss, roc_auc_score
from sklearn.pipeline import make_pipeline
from sklearn.preprocessing import StandardScaler
from sklearn.tree import DecisionTreeClassifier

from ..exceptions import ParameterError


class Classifier:
    """Minimal contract a selector needs from a model backend."""

    def fit(self, X, y):
        raise NotImplementedError

    def predict(self, X):
        raise NotImplementedError

    def predict_score(self, X):
        raise NotImplementedError

    def importance(self):
        raise NotImplementedError


class SklearnClassifier(Classifier):
    """
    Adapter around a scikit-learn estimator.

    Args:
        estimator: Unfitted estimator (or pipeline whose last step is the model).
        importance_from: ``"feature_importances"`` for tree models or
            ``"coefficients"`` for linear models (absolute coefficient values).
    """

    def __init__(self, estimator, importance_from="feature_importances"):
        if importance_from not in ("feature_importances", "coefficients"):
            raise ParameterError(f"Unknown importance source '{importance_from}'")
        self.estimator = estimator
        self.importance_from = importance_from
        self.model_ = None

    def fit(self, X, y):
        self.model_ = clone(self.estimator).fit(np.asarray(X, dtype=float), np.asarray(y))
        return self

    def _fitted(self):
        if self.model_ is None:
            raise RuntimeError("Classifier has not been fitted")
        return self.model_

    def predict(self, X):
        return self._fitted().predict(np.asarray(X, dtype=float))

    def predict_score(self, X):
        proba = self._fitted().predict_proba(np.asarray(X, dtype=float))
        return proba[:, -1]

    def importance(self):
        model = self._fitted()
        steps = getattr(model, "steps", None)
        final = steps[-1][1] if steps else model
        if self.importance_from == "coefficients":
            return np.abs(np.atleast_2d(final.coef_)).sum(axis=0)
        return np.asarray(final.feature_importances_, dtype=float)


def make_classifier(name, random_state=42, n_estimators=200):
    """
    Build one of the named backends.

    Args:
        name (str): ``random_forest``, ``logistic_regression`` or ``decision_tree``.
        random_state (int): Seed passed to the estimator.
        n_estimators (int): Trees for the random forest.

    Returns:
        SklearnClassifier
    """
    if name == "random_forest":
        return SklearnClassifier(
            RandomForestClassifier(n_estimators=n_estimators, random_state=random_state)
        )
    if name == "decision_tree":
        return SklearnClassifier(DecisionTreeClassifier(random_state=random_state))
    if name == "logistic_regression":
        # Standardized so that coefficient magnitudes are comparable across predictors
        return SklearnClassifier(
            make_pipeline(StandardScaler(), LogisticRegression(max_iter=1000)),
            importance_from="coefficients",
        )
    raise ParameterError(
        f"Unknown base_classifier '{name}'. "
        f"Available: random_forest, logistic_regression, decision_tree"
    )


def score_classifier(classifier, X, y, metric="accuracy"):
    """
    Score a fitted classifier on held-out rows. Higher is always better
    (log loss is returned negated).
    """
    if metric == "accuracy":
        return float(accuracy_score(y, classifier.predict(X)))
    if metric == "auc":
        return float(roc_auc_score(y, classifier.predict_score(X)))
    if metric == "log_loss":
        score = np.clip(classifier.predict_score(X), 1e-15, 1 - 1e-15)
        return -float(log_loss(y, score, labels=np.unique(y)))
    raise ParameterError(f"Unknown metric '{metric}'. Available: accuracy, auc, log_loss")
