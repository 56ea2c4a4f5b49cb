"""
Inserts the sample Pune blood banks and inventory into empty tables.

Data lives in core/sample_data.yaml. Each table is only seeded while it is
empty, so restarts never duplicate rows or overwrite real data.
"""
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from repositories import BloodBankRepository, InventoryRepository

logger = logging.getLogger(__name__)


def _get_sample_data_path() -> Path:
    return Path(__file__).resolve().parent.parent / 'core' / 'sample_data.yaml'


def load_sample_data(path: Optional[Path] = None) -> Dict[str, Any]:
    """Read the sample data file; raises on missing file or bad YAML."""
    path = path or _get_sample_data_path()
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    return {
        'blood_banks': data.get('blood_banks', []),
        'inventory': data.get('inventory', []),
    }


class SeedService:
    """Seeds blood banks first, then inventory (which takes its area from the bank)."""

    def __init__(
        self,
        blood_bank_repository: BloodBankRepository,
        inventory_repository: InventoryRepository,
        sample_data_path: Optional[Path] = None
    ):
        self._banks = blood_bank_repository
        self._inventory = inventory_repository
        self._path = sample_data_path

    def seed(self) -> Dict[str, int]:
        """
        Returns:
            Number of rows inserted per table.
        """
        data = load_sample_data(self._path)
        inserted = {'blood_banks': 0, 'inventory': 0}

        if self._banks.count() == 0:
            inserted['blood_banks'] = self._banks.add_many(data['blood_banks'])

        if self._inventory.count() == 0 and data['inventory']:
            area_by_bank = {bank['name']: bank['area'] for bank in self._banks.find()}
            rows = []
            for item in data['inventory']:
                area = area_by_bank.get(item['blood_bank'])
                if area is None:
                    logger.warning(
                        "Skipping sample inventory for unknown blood bank",
                        extra={'blood_bank': item['blood_bank']}
                    )
                    continue
                rows.append({**item, 'area': area})
            if rows:
                inserted['inventory'] = self._inventory.add_many(rows)

        if any(inserted.values()):
            logger.info("Sample data inserted", extra=inserted)
        return inserted
