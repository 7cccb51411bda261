"""Local persistence (SQLite key/value storage) and the mock dataset."""

from .schema import create_tables
from .mock_dataset import MockDataset
