"""Rule loaders for reading the check configuration from various sources."""

from collections.abc import Mapping
from pathlib import Path
from urllib.parse import urlparse

import httpx
import yaml
from loguru import logger
from pydantic import ValidationError

from ikesu.inspection.domain.exceptions import ConfigurationError
from ikesu.inspection.domain.models import CheckConfig
from ikesu.inspection.domain.protocols import RuleLoader

NO_SUCH_CONFIG_FILE = "No such config file."
EMPTY_CONFIG_FILE = "The specified config file is empty."


class FileRuleLoader(RuleLoader):
    """Load the configuration from the local filesystem."""

    def load(self, location: str) -> bytes:
        parsed = urlparse(location)
        path = Path(parsed.path if parsed.scheme == "file" else location)

        if not path.exists():
            raise ConfigurationError(f"{NO_SUCH_CONFIG_FILE} ({path})")
        if path.is_dir():
            raise ConfigurationError(NO_SUCH_CONFIG_FILE)

        content = path.read_bytes()
        if not content:
            raise ConfigurationError(EMPTY_CONFIG_FILE)
        return content


class HttpRuleLoader(RuleLoader):
    """Load the configuration over HTTP(S), e.g. a pre-signed object storage URL."""

    def __init__(self, timeout_seconds: float = 30.0, transport: httpx.BaseTransport | None = None):
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    def load(self, location: str) -> bytes:
        try:
            with httpx.Client(timeout=self.timeout_seconds, transport=self.transport) as client:
                response = client.get(location)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise ConfigurationError(f"Failed to download the config file: {e}") from e

        if not response.content:
            raise ConfigurationError(EMPTY_CONFIG_FILE)
        return response.content


class DictRuleLoader(RuleLoader):
    """Simple loader that returns pre-provided configuration documents."""

    def __init__(self, documents: Mapping[str, str | bytes]):
        self.documents = dict(documents)

    def load(self, location: str) -> bytes:
        try:
            document = self.documents[location]
        except KeyError:
            raise ConfigurationError(f"{NO_SUCH_CONFIG_FILE} ({location})") from None
        return document.encode("utf-8") if isinstance(document, str) else document


def default_loaders(timeout_seconds: float = 30.0) -> dict[str, RuleLoader]:
    """Loaders by URI scheme; a location without scheme is a local file."""
    http_loader = HttpRuleLoader(timeout_seconds=timeout_seconds)
    return {
        "file": FileRuleLoader(),
        "http": http_loader,
        "https": http_loader,
    }


def select_loader(location: str, loaders: Mapping[str, RuleLoader]) -> RuleLoader:
    scheme = urlparse(location).scheme or "file"
    # Windows drive letters parse as one-letter schemes
    if len(scheme) == 1:
        scheme = "file"
    try:
        return loaders[scheme]
    except KeyError:
        raise ConfigurationError(f"There is no loader registered for the '{scheme}' scheme.") from None


def parse_check_config(content: bytes | str) -> CheckConfig:
    """
    Parse a YAML check configuration.

    Raises:
        ConfigurationError: on YAML syntax errors or malformed rule fields
    """
    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in the config file: {e}") from e

    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise ConfigurationError("The config file must be a mapping with a 'check' key.")

    try:
        return CheckConfig.model_validate(document)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}" for error in e.errors()
        ]
        raise ConfigurationError.from_errors(errors) from e


def load_check_config(location: str, loaders: Mapping[str, RuleLoader] | None = None) -> CheckConfig:
    """Read and parse the check configuration at `location`."""
    if not location:
        raise ConfigurationError("The path to the config file is not specified.")

    loader = select_loader(location, loaders if loaders is not None else default_loaders())
    config = parse_check_config(loader.load(location))
    logger.info(f"Loaded {len(config.rules)} rules from {location}")
    return config
