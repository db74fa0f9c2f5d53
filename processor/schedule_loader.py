"""Load and validate the speaker schedule."""
import logging
from pathlib import Path
from typing import Any, List, Union

import yaml
from pydantic import TypeAdapter, ValidationError

from processor.errors import InputValidationError
from processor.models import SpeakerEntry

logger = logging.getLogger(__name__)

SPEAKERS_ADAPTER = TypeAdapter(List[SpeakerEntry])


def load_yaml(path: Union[str, Path]) -> Any:
    """
    Read a YAML file into plain Python data.

    Args:
        path: Location of the YAML file

    Returns:
        Deserialized document

    Raises:
        InputValidationError: If the file cannot be read or parsed
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except OSError as e:
        raise InputValidationError(f"Cannot read schedule file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise InputValidationError(f"Malformed YAML in {path}: {e}") from e


def validate_speakers(data: Any) -> List[SpeakerEntry]:
    """
    Check loaded data against the speaker schema.

    Args:
        data: Deserialized schedule, expected to be a list of mappings

    Returns:
        List of SpeakerEntry objects in file order

    Raises:
        InputValidationError: If any entry does not match the schema
    """
    try:
        return SPEAKERS_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise InputValidationError(f"Invalid speaker schedule: {e}") from e


def load_speakers(path: Union[str, Path]) -> List[SpeakerEntry]:
    """Load speakers.yaml and return validated entries."""
    speakers = validate_speakers(load_yaml(path))
    logger.info(f"Loaded {len(speakers)} speaker entries from {path}")
    return speakers
