"""
Intervention Catalog

Loads the versioned protocol table from JSON once and exposes it as an
immutable, symptom-indexed lookup. The table must hold exactly one protocol
per ESAS symptom; anything else is a ConfigurationError at load time.
"""
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional, Union

from palliative_screening import config
from palliative_screening.core.scoring.base import Symptom
from palliative_screening.utils import get_logger
from palliative_screening.utils.exceptions import ConfigurationError
from .base import InterventionProtocol

logger = get_logger(__name__)

_REQUIRED_FIELDS = ("symptom", "diagnosis_label", "therapy_type", "ordered_steps", "frequency", "duration")


class InterventionCatalog:
    """
    Read-only protocol table keyed by symptom.

    Construct through ``load_catalog`` / ``default_catalog``; the protocols
    mapping is a MappingProxyType and cannot be mutated after load.
    """

    def __init__(self, version: str, protocols: List[InterventionProtocol]):
        by_symptom = {}
        for protocol in protocols:
            if protocol.symptom in by_symptom:
                raise ConfigurationError(
                    f"Duplicate protocol for symptom {int(protocol.symptom)}",
                    details={"symptom_index": int(protocol.symptom)},
                )
            by_symptom[protocol.symptom] = protocol

        missing = [int(s) for s in Symptom if s not in by_symptom]
        if missing:
            raise ConfigurationError(
                f"Intervention catalog has no protocol for symptom(s) {missing}",
                details={"missing": missing},
            )

        self.version = version
        self._protocols: Mapping[Symptom, InterventionProtocol] = MappingProxyType(by_symptom)

    def get(self, symptom: int) -> InterventionProtocol:
        """
        Protocol for a symptom index.

        Raises:
            ConfigurationError: no protocol for this index.
        """
        try:
            return self._protocols[Symptom(symptom)]
        except (KeyError, ValueError):
            logger.error(f"InterventionCatalog {self.version}: no protocol for symptom {symptom!r}")
            raise ConfigurationError(
                f"No intervention protocol for symptom {symptom!r}",
                details={"symptom_index": symptom, "catalog_version": self.version},
            ) from None

    def __getitem__(self, symptom: int) -> InterventionProtocol:
        return self.get(symptom)

    def __iter__(self) -> Iterator[InterventionProtocol]:
        return (self._protocols[s] for s in Symptom)

    def __len__(self) -> int:
        return len(self._protocols)

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "protocols": [p.to_dict() for p in self],
        }


def _parse_protocol(entry: dict, index: int) -> InterventionProtocol:
    missing = [f for f in _REQUIRED_FIELDS if f not in entry]
    if missing:
        raise ConfigurationError(
            f"Catalog entry #{index} is missing field(s) {missing}",
            details={"entry": index, "missing": missing},
        )
    try:
        symptom = Symptom(int(entry["symptom"]))
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"Catalog entry #{index} has invalid symptom {entry['symptom']!r}",
            details={"entry": index},
        ) from None

    return InterventionProtocol(
        symptom=symptom,
        diagnosis_label=entry["diagnosis_label"],
        therapy_type=entry["therapy_type"],
        ordered_steps=tuple(entry["ordered_steps"]),
        frequency=entry["frequency"],
        duration=entry["duration"],
        evaluation_criteria=tuple(entry.get("evaluation_criteria", ())),
        precautions=tuple(entry.get("precautions", ())),
        references=tuple(entry.get("references", ())),
        clinical_priority=int(entry.get("clinical_priority", 0)),
        tier_frequency=tuple(sorted(entry.get("tier_frequency", {}).items())),
    )


@lru_cache(maxsize=8)
def _load(path: Path) -> InterventionCatalog:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(
            f"Cannot read intervention catalog: {exc}",
            details={"path": str(path)},
        ) from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(
            f"Intervention catalog is not valid JSON: {exc}",
            details={"path": str(path)},
        ) from exc

    if not isinstance(raw, dict) or not isinstance(raw.get("protocols"), list):
        raise ConfigurationError(
            "Intervention catalog must be an object with a 'protocols' list",
            details={"path": str(path)},
        )

    protocols = [_parse_protocol(entry, i) for i, entry in enumerate(raw["protocols"])]
    catalog = InterventionCatalog(str(raw.get("version", "unversioned")), protocols)
    logger.info(f"Intervention catalog {catalog.version} loaded ({len(catalog)} protocols) from {path.name}")
    return catalog


def load_catalog(path: Optional[Union[str, Path]] = None) -> InterventionCatalog:
    """
    Load (once per path) and validate an intervention catalog.

    Args:
        path: JSON file; defaults to ``config.CATALOG_PATH``.
    """
    return _load(Path(path or config.CATALOG_PATH).resolve())


def default_catalog() -> InterventionCatalog:
    return load_catalog()
