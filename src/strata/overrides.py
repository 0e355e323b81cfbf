"""Override resolution: workspace and home stratarc.yml files.

Each layer is read on its own. A missing or unreadable override file just
means the layer is absent; malformed content is reported as a ParseError
for that layer without stopping the other one from being read.
"""

import logging
from pathlib import Path

from strata import codec
from strata.config import OVERRIDE_FILE
from strata.errors import ParseError
from strata.merge import merge_override
from strata.result import Err, Ok, Result
from strata.storage import FileStore
from strata.types import ConfigLocation, PartialConfig, PrecedenceLayer

logger = logging.getLogger(__name__)

LayerResult = Result[PartialConfig | None, ParseError]


class OverrideResolver:
    """Computes the combined override for a workspace.

    Within the override stack a field defined by the workspace file wins
    whole over the home file's value for the same field, lists included.
    Sibling fields the workspace file leaves out still come from home.
    """

    def __init__(
        self,
        file_store: FileStore,
        ws_root: Path | str,
        home_dir: Path | str,
        file_name: str = OVERRIDE_FILE,
    ):
        self.file_store = file_store
        self.locations: dict[PrecedenceLayer, ConfigLocation] = {
            PrecedenceLayer.WORKSPACE: ConfigLocation(Path(ws_root), file_name),
            PrecedenceLayer.HOME: ConfigLocation(Path(home_dir), file_name),
        }

    async def read_layer(self, layer: PrecedenceLayer) -> LayerResult:
        """Read one override file. ``Ok(None)`` when the layer is absent."""
        location = self.locations[layer]
        try:
            if not await self.file_store.exists(location):
                logger.debug(f"No {layer.value} override at {location}")
                return Ok(None)
            text = await self.file_store.read_text(location)
        except OSError as e:
            logger.warning(f"Ignoring unreadable {layer.value} override {location}: {e}")
            return Ok(None)
        except UnicodeDecodeError as e:
            logger.error(f"Override {location} is not valid UTF-8: {e}")
            error = ParseError(location, f"not valid UTF-8: {e}")
            error.__cause__ = e
            return Err(error)

        logger.debug(f"Loaded {layer.value} override from {location}")
        return codec.decode(text, location)

    async def resolve_layers(self) -> dict[PrecedenceLayer, LayerResult]:
        """Read every layer, highest precedence first."""
        results = {}
        for layer in PrecedenceLayer:
            results[layer] = await self.read_layer(layer)
        return results

    async def resolve(self) -> Result[PartialConfig, ParseError]:
        """Merge the override layers into one partial config.

        Returns ``Ok({})`` when no override file exists. When a layer is
        malformed, the error of the highest-precedence failing layer is
        returned after every layer has been attempted.
        """
        layers = await self.resolve_layers()

        errors = [result.error for result in layers.values() if isinstance(result, Err)]
        if errors:
            for error in errors[1:]:
                logger.error(f"Additional override failure: {error}")
            return Err(errors[0])

        combined: PartialConfig = {}
        # lowest precedence first, so each layer is merged over the previous
        for layer in reversed(PrecedenceLayer):
            partial = layers[layer].unwrap()
            if partial is not None:
                combined = merge_override(combined, partial)
        return Ok(combined)
