"""
Dataset providers.

Each call returns a fresh, independently owned table together with its
schema (predictor columns, label column and the explicit positive class).
Tables come either from a local CSV or from the OpenML copy of the dataset
fetched through scikit-learn (cached under ``data_home``).

Column names follow the reference R datasets:

* ``breast_cancer`` - Wisconsin original breast-cancer diagnosis
  (``Cl.thickness`` ... ``Mitoses``; label ``Class`` benign/malignant).
* ``diabetes`` - Pima Indians diabetes (``pregnant`` ... ``age``; label
  ``diabetes`` neg/pos). Physiologically impossible zeros are marked
  missing, as in the cleaned R table.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple

import numpy as np
import pandas as pd
from sklearn.datasets import fetch_openml

from ..exceptions import DatasetError, ParameterError
from .data_preprocessing import check_columns


@dataclass(frozen=True)
class DatasetSpec:
    """Static description of a bundled dataset."""

    name: str
    openml_id: int
    columns: Dict[str, str]
    label: str
    classes: Tuple[str, str]
    label_values: Dict[str, str] = field(default_factory=dict)
    zero_as_missing: Tuple[str, ...] = ()

    @property
    def predictors(self) -> List[str]:
        return [c for c in self.columns.values() if c != self.label]

    @property
    def positive_class(self) -> str:
        return self.classes[1]


@dataclass
class Dataset:
    """A labeled table and its schema."""

    name: str
    frame: pd.DataFrame
    predictors: List[str]
    label: str
    positive_class: str

    @property
    def n_rows(self) -> int:
        return len(self.frame)


DATASETS = {
    "breast_cancer": DatasetSpec(
        name="breast_cancer",
        openml_id=15,
        columns={
            "Clump_Thickness": "Cl.thickness",
            "Cell_Size_Uniformity": "Cell.size",
            "Cell_Shape_Uniformity": "Cell.shape",
            "Marginal_Adhesion": "Marg.adhesion",
            "Single_Epi_Cell_Size": "Epith.c.size",
            "Bare_Nuclei": "Bare.nuclei",
            "Bland_Chromatin": "Bl.cromatin",
            "Normal_Nucleoli": "Normal.nucleoli",
            "Mitoses": "Mitoses",
            "Class": "Class",
        },
        label="Class",
        classes=("benign", "malignant"),
    ),
    "diabetes": DatasetSpec(
        name="diabetes",
        openml_id=37,
        columns={
            "preg": "pregnant",
            "plas": "glucose",
            "pres": "pressure",
            "skin": "triceps",
            "insu": "insulin",
            "mass": "mass",
            "pedi": "pedigree",
            "age": "age",
            "class": "diabetes",
        },
        label="diabetes",
        classes=("neg", "pos"),
        label_values={"tested_negative": "neg", "tested_positive": "pos"},
        zero_as_missing=("glucose", "pressure", "triceps", "insulin", "mass"),
    ),
}


def available_datasets() -> List[str]:
    return sorted(DATASETS)


def _standardize(frame: pd.DataFrame, spec: DatasetSpec) -> pd.DataFrame:
    frame = frame.rename(columns=spec.columns)
    check_columns(frame, spec.predictors, spec.label)
    frame = frame[spec.predictors + [spec.label]].copy()

    label = frame[spec.label].astype(str).str.strip()
    if spec.label_values:
        label = label.replace(spec.label_values)
    frame[spec.label] = label

    for col in spec.zero_as_missing:
        values = pd.to_numeric(frame[col].astype(object), errors="coerce")
        frame[col] = values.mask(values == 0, np.nan)

    return frame.reset_index(drop=True)


def load_dataset(name, csv_path=None, data_home='data', verbose=True):
    """
    Load one of the bundled datasets.

    Args:
        name (str): Provider name, see :data:`DATASETS`.
        csv_path (str, optional): Local CSV to read instead of fetching from
            OpenML. Either the R or the OpenML column names are accepted.
        data_home (str): Cache directory for OpenML downloads.
        verbose (bool): Print progress.

    Returns:
        Dataset: fresh table plus schema.
    """
    if name not in DATASETS:
        raise ParameterError(
            f"Unknown dataset '{name}'. Available: {', '.join(available_datasets())}"
        )
    spec = DATASETS[name]

    if csv_path:
        if verbose:
            print(f"\n[Loading] {csv_path}...")
        try:
            raw = pd.read_csv(csv_path)
        except OSError as exc:
            raise DatasetError(f"Cannot read {csv_path}: {exc}") from exc
    else:
        if verbose:
            print(f"\n[Loading] OpenML dataset {spec.openml_id} ({name})...")
        Path(data_home).mkdir(parents=True, exist_ok=True)
        try:
            bunch = fetch_openml(data_id=spec.openml_id, as_frame=True, data_home=str(data_home))
        except OSError as exc:
            raise DatasetError(f"Cannot fetch OpenML dataset {spec.openml_id}: {exc}") from exc
        raw = bunch.frame

    frame = _standardize(raw, spec)

    if verbose:
        counts = frame[spec.label].value_counts().to_dict()
        n_missing = int(frame[spec.predictors].isna().sum().sum())
        print(f"    Loaded: {len(frame)} rows, {len(spec.predictors)} predictors")
        print(f"    Label '{spec.label}': {counts}")
        if n_missing:
            print(f"    Missing predictor cells: {n_missing}")

    return Dataset(
        name=name,
        frame=frame,
        predictors=list(spec.predictors),
        label=spec.label,
        positive_class=spec.positive_class,
    )


def dataset_from_frame(frame, predictors, label, positive_class, name="custom"):
    """Wrap an in-memory table as a :class:`Dataset` after validating its schema."""
    check_columns(frame, predictors, label)
    return Dataset(
        name=name,
        frame=frame.copy(),
        predictors=list(predictors),
        label=label,
        positive_class=positive_class,
    )
