"""Concrete Loader that reads argument documents from local YAML / JSON files."""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Final

from ruamel.yaml import YAML

from ..exceptions import ArgumentLoadError

logger = logging.getLogger(__name__)

_YAML_EXTS: Final[set[str]] = {".yaml", ".yml"}
_JSON_EXTS: Final[set[str]] = {".json"}

_yaml_parser = YAML(typ="safe")  # safe loader, YAML 1.2


class ArgumentFileLoader:
    """Read an argument map from disk and return a Python `dict`."""

    supported_exts: set[str] = _YAML_EXTS | _JSON_EXTS

    @staticmethod
    def load(path: str | Path, *, exact_decimals: bool = False) -> dict[str, Any]:
        """
        Load an argument document.

        Args:
            path: Location of a ``.json``, ``.yaml`` or ``.yml`` file
            exact_decimals: Decode JSON fractions as ``Decimal`` instead
                of ``float``

        Raises:
            ArgumentLoadError: If the file is missing, has an unsupported
                extension, cannot be parsed or is not a mapping
        """
        file_path = Path(path)

        # validation
        if not file_path.exists():
            logger.error("File not found: %s", file_path)
            raise ArgumentLoadError(f"File not found: {file_path}")

        if file_path.suffix.lower() not in ArgumentFileLoader.supported_exts:
            raise ArgumentLoadError(
                f"Unsupported extension '{file_path.suffix}'. "
                f"Supported: {', '.join(sorted(ArgumentFileLoader.supported_exts))}"
            )

        raw_text = file_path.read_text(encoding="utf-8")

        # parse
        try:
            if file_path.suffix.lower() in _YAML_EXTS:
                data: Any = _yaml_parser.load(raw_text)
            elif exact_decimals:
                data = json.loads(raw_text, parse_float=Decimal)
            else:  # .json
                data = json.loads(raw_text)
        except Exception as exc:
            raise ArgumentLoadError(f"Cannot parse {file_path.name}: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ArgumentLoadError("Top-level object must be a mapping")

        logger.debug("Argument file loaded (%d arguments)", len(data))
        return data
