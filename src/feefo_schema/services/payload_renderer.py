from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from feefo_schema.domain.models import DataLayerPayload
from feefo_schema.services.feefo_cache import FeefoDataCache

_TEMPLATE_DIR = Path(__file__).parent.parent / "templates"
SCRIPT_TEMPLATE = "datalayer_script.html.j2"


class PayloadRenderer:
    """
    Builds the data layer payload from cached values only.

    Rendering performs the three cache reads and nothing else; it never
    fetches and never raises.
    """

    def __init__(self, cache: FeefoDataCache) -> None:
        self._cache = cache
        self.env = Environment(
            loader=FileSystemLoader(_TEMPLATE_DIR),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self) -> DataLayerPayload:
        return DataLayerPayload(
            rating_score=self._cache.read_score(),
            rating_count=self._cache.read_count(),
            reviews=self._cache.read_reviews() or [],
        )

    def render_script(self) -> str:
        """
        Script block for the document head.

        It has to be emitted before the tag manager's own script tag, which
        reads the data layer synchronously on load. ``tojson`` keeps the
        payload from closing the script element.
        """
        template = self.env.get_template(SCRIPT_TEMPLATE)
        return template.render(payload=self.render().to_data_layer())
