"""
Dataset loader for reading labeled coordinates from Excel workbooks.
"""

import logging
import math
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

import numpy as np
import pandas as pd

from .models.data_models import LabeledSample
from .exceptions import ClassifierError


logger = logging.getLogger(__name__)

DEFAULT_SHEET_NAMES = ("ESTATE", "STREET", "STREET_NUMBER")
DEFAULT_LATITUDE_COLUMN = "LATITUDE"
DEFAULT_LONGITUDE_COLUMN = "LONGITUDE"
DEFAULT_LABEL_COLUMN = "DELIVERY ZONE CODE"


class DatasetLoadingError(ClassifierError):
    """Raised when dataset loading fails."""
    pass


def normalize_header(name: Any) -> str:
    return str(name).strip().upper()


def parse_coordinate(value: Any) -> Optional[float]:
    """
    Read a numeric cell value.

    Numbers are used as-is and strings are parsed; anything else, including
    empty cells, yields None.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float, np.number)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    return number if math.isfinite(number) else None


def parse_label(value: Any) -> Optional[str]:
    """
    Read a label cell value.

    Zone codes stored as numbers by Excel are rendered as integers.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, str):
        return value.strip()

    if isinstance(value, (int, float, np.number)):
        number = float(value)
        if not math.isfinite(number):
            return None
        return str(int(number))

    return None


def is_valid_row(latitude: Optional[float], longitude: Optional[float], label: Optional[str]) -> bool:
    """A row is usable when both coordinates are present and the label looks like a zone code."""
    return latitude is not None and longitude is not None and bool(label) and "-" in label


def load_samples_from_records(
    records: Iterable[Mapping[str, Any]],
    latitude_column: str = DEFAULT_LATITUDE_COLUMN,
    longitude_column: str = DEFAULT_LONGITUDE_COLUMN,
    label_column: str = DEFAULT_LABEL_COLUMN
) -> List[LabeledSample]:
    """
    Convert parsed rows into labeled samples, skipping invalid rows.

    Args:
        records: Rows keyed by column name (matched case-insensitively)
        latitude_column: Column holding the first feature
        longitude_column: Column holding the second feature
        label_column: Column holding the category label

    Returns:
        List of LabeledSample objects with (latitude, longitude) features
    """
    lat_key = normalize_header(latitude_column)
    lng_key = normalize_header(longitude_column)
    label_key = normalize_header(label_column)

    samples = []
    for record in records:
        row = {normalize_header(key): value for key, value in record.items()}

        latitude = parse_coordinate(row.get(lat_key))
        longitude = parse_coordinate(row.get(lng_key))
        label = parse_label(row.get(label_key))

        if is_valid_row(latitude, longitude, label):
            samples.append(LabeledSample(features=(latitude, longitude), label=label))

    return samples


class ExcelPointLoader:
    """Loads labeled coordinates from the sheets of an Excel workbook."""

    def __init__(
        self,
        filepath: str,
        sheet_names: Iterable[str] = DEFAULT_SHEET_NAMES,
        latitude_column: str = DEFAULT_LATITUDE_COLUMN,
        longitude_column: str = DEFAULT_LONGITUDE_COLUMN,
        label_column: str = DEFAULT_LABEL_COLUMN
    ):
        """
        Initialize the loader.

        Args:
            filepath: Path to the .xlsx workbook
            sheet_names: Sheets to read, in order
            latitude_column: Header of the latitude column
            longitude_column: Header of the longitude column
            label_column: Header of the label column

        Raises:
            DatasetLoadingError: If filepath is empty
        """
        if not filepath or not str(filepath).strip():
            raise DatasetLoadingError("Filepath cannot be empty")

        self.filepath = filepath
        self.sheet_names = list(sheet_names)
        self.latitude_column = latitude_column
        self.longitude_column = longitude_column
        self.label_column = label_column

    @classmethod
    def from_config(cls, data_source_config=None) -> 'ExcelPointLoader':
        """Create a loader from the data source configuration."""
        if data_source_config is None:
            from .config import config
            data_source_config = config.data_source

        return cls(
            filepath=data_source_config.xlsx_file_path,
            sheet_names=data_source_config.sheet_names,
            latitude_column=data_source_config.latitude_column,
            longitude_column=data_source_config.longitude_column,
            label_column=data_source_config.label_column
        )

    def _read_workbook(self) -> Dict[str, pd.DataFrame]:
        path = Path(self.filepath)
        if not path.exists():
            raise DatasetLoadingError(f"Dataset file not found: {self.filepath}")

        if not path.is_file():
            raise DatasetLoadingError(f"Path is not a file: {self.filepath}")

        try:
            return pd.read_excel(path, sheet_name=None, dtype=object, engine="openpyxl")
        except Exception as e:
            raise DatasetLoadingError(f"Failed to read Excel file: {str(e)}")

    def _load_sheet(self, sheet_name: str, frame: pd.DataFrame) -> List[LabeledSample]:
        headers = {normalize_header(column) for column in frame.columns}
        required = {
            normalize_header(self.latitude_column),
            normalize_header(self.longitude_column),
            normalize_header(self.label_column)
        }
        if not required.issubset(headers):
            logger.info(f"Sheet {sheet_name} is missing required columns: {sorted(required - headers)}")
            return []

        # Empty cells come back as NaN; map them to None
        records = frame.astype(object).where(frame.notna(), None).to_dict(orient="records")
        samples = load_samples_from_records(
            records,
            latitude_column=self.latitude_column,
            longitude_column=self.longitude_column,
            label_column=self.label_column
        )
        logger.info(f"Read {len(samples)} data points from sheet {sheet_name}")
        return samples

    def load(self) -> List[LabeledSample]:
        """
        Read every configured sheet and collect the valid rows.

        Returns:
            List of LabeledSample objects in sheet and row order

        Raises:
            DatasetLoadingError: If the workbook cannot be read
        """
        workbook = self._read_workbook()

        samples: List[LabeledSample] = []
        for sheet_name in self.sheet_names:
            frame = workbook.get(sheet_name)
            if frame is None:
                logger.info(f"Sheet not found: {sheet_name}")
                continue
            samples.extend(self._load_sheet(sheet_name, frame))

        logger.info(f"Loaded {len(samples)} data points from {self.filepath}")
        return samples
