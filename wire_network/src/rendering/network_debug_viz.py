"""Debug visualization of a rendered wire network.

Draws every entity of a blueprint together with the wires a
:class:`WiresContainer` currently holds, so the synthesized network and the
wire curves can be inspected without the editor.

Usage:
    visualizer = NetworkVisualizer(container)
    visualizer.render("network.png")
"""

from pathlib import Path
from typing import TYPE_CHECKING, Optional, Tuple, Union

import numpy as np

# Optional dependency for visualization
try:
    import matplotlib

    matplotlib.use("Agg")  # Non-interactive backend
    import matplotlib.pyplot as plt
    from matplotlib.collections import LineCollection
    from matplotlib.patches import Rectangle

    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False
    print("Warning: matplotlib not available, visualization disabled")

if TYPE_CHECKING:
    from wire_network.src.network.wires_container import WiresContainer


# Unit vectors for the even pole directions in screen coordinates
_DIRECTION_ARROWS = {0: (0, -1), 2: (1, 0), 4: (0, 1), 6: (-1, 0)}


def _rgb(color: int) -> Tuple[float, float, float]:
    return ((color >> 16) & 0xFF) / 255, ((color >> 8) & 0xFF) / 255, (color & 0xFF) / 255


class NetworkVisualizer:
    """Renders a wires container's state to an image file."""

    def __init__(
        self,
        container: "WiresContainer",
        figsize: tuple = (10, 10),
        dpi: int = 100,
        samples: int = 24,
    ):
        """Initialize visualizer.

        Args:
            container: The wires container to draw
            figsize: Figure size in inches
            dpi: Resolution for saved images
            samples: Points sampled along each wire curve
        """
        if not HAS_MATPLOTLIB:
            raise RuntimeError("matplotlib is required for visualization")

        self.container = container
        self.figsize = figsize
        self.dpi = dpi
        self.samples = samples

    def render(self, output: Union[str, Path], title: Optional[str] = None) -> Path:
        """Draw entities, pole directions and wires; returns the written path."""
        output = Path(output)
        output.parent.mkdir(parents=True, exist_ok=True)

        bp = self.container.bp
        tile = self.container.config.tile_size
        directions = self.container.pole_directions()

        fig, ax = plt.subplots(figsize=self.figsize)
        try:
            for entity in bp.entities.values():
                width, height = bp.catalog.get_footprint(entity.name)
                x = (entity.position.x - width / 2) * tile
                y = (entity.position.y - height / 2) * tile
                ax.add_patch(
                    Rectangle(
                        (x, y),
                        width * tile,
                        height * tile,
                        facecolor="#5b5b5b" if entity.is_pole else "#9a9a9a",
                        edgecolor="black",
                        alpha=0.6,
                    )
                )
                ax.annotate(
                    str(entity.entity_number),
                    (entity.position.x * tile, entity.position.y * tile),
                    ha="center",
                    va="center",
                    fontsize=7,
                )
                if entity.is_pole:
                    dx, dy = _DIRECTION_ARROWS[directions.get(entity.entity_number, 0)]
                    ax.arrow(
                        entity.position.x * tile,
                        entity.position.y * tile,
                        dx * tile * 0.4,
                        dy * tile * 0.4,
                        width=1.0,
                        color="black",
                    )

            wires = list(self.container.passive_wires.values()) + list(
                self.container.explicit_wires.values()
            )
            if wires:
                segments = [wire.curve.sample(self.samples) for wire in wires]
                colors = [_rgb(wire.curve.color) for wire in wires]
                ax.add_collection(LineCollection(segments, colors=colors, linewidths=1.5))

            points = [
                (e.position.x * tile, e.position.y * tile) for e in bp.entities.values()
            ]
            if points:
                coords = np.array(points)
                margin = tile * 2
                ax.set_xlim(coords[:, 0].min() - margin, coords[:, 0].max() + margin)
                ax.set_ylim(coords[:, 1].max() + margin, coords[:, 1].min() - margin)

            ax.set_aspect("equal")
            ax.set_title(
                title
                or f"{bp.label}: {len(self.container.passive_wires)} passive, "
                f"{len(self.container.explicit_wires)} explicit wires"
            )
            fig.savefig(output, dpi=self.dpi)
        finally:
            plt.close(fig)

        return output
