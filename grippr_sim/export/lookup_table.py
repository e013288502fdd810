"""
Angle lookup table for the embedded controller.

The logical table is the ordered list of whole-degree joint-angle tuples,
one per grid cell in row-major order, together with the grid dimensions and
the table height.  It renders to a C header (what the controller compiles
in) or to JSON (for inspection and tooling).  Rendering is deterministic:
the same targets always produce byte-identical output.

Classes:
    LookupTableRow: One grid cell of the table.
    LookupTable: The full table plus rendering and saving.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

from grippr_sim.scheduling.grid import GridConfig
from grippr_sim.scheduling.targets import TargetPoint
from grippr_sim.utils.constants import NUM_JOINTS

_HEADER_SUFFIXES = (".h", ".c")
_JSON_SUFFIXES = (".json",)


@dataclass(frozen=True)
class LookupTableRow:
    """A single grid cell of the table.

    Attributes:
        grid_index: (ix, iz) cell coordinates.
        x: World X of the cell (mm).
        z: World Z of the cell (mm).
        angles: Whole-degree joint angles.
        solved: False when the solver gave up on this cell.
    """

    grid_index: Tuple[int, int]
    x: float
    z: float
    angles: Tuple[int, ...]
    solved: bool


@dataclass(frozen=True)
class LookupTable:
    """Row-major table of whole-degree angles for every grid cell.

    Attributes:
        rows: One row per grid cell, X varying fastest.
        dimensions: Grid summary (min/max/count per axis, height).
        name: C identifier prefix used by the header renderer.
    """

    rows: Tuple[LookupTableRow, ...]
    dimensions: Dict[str, float]
    name: str = "grippr"

    @classmethod
    def from_targets(
        cls, targets: Sequence[TargetPoint], grid: GridConfig, name: str = "grippr"
    ) -> "LookupTable":
        """Build the table from a finished target sequence.

        Args:
            targets: Every grid target, in grid order and in a terminal state.
            grid: Grid the targets were enumerated from.
            name: C identifier prefix.

        Returns:
            A ``LookupTable``.

        Raises:
            ValueError: If the targets do not cover the grid or any is still
                being solved.
        """
        if len(targets) != grid.total:
            raise ValueError(
                f"Expected {grid.total} targets for the grid, got {len(targets)}"
            )
        pending = [t.grid_index for t in targets if not t.is_done]
        if pending:
            raise ValueError(f"Targets still being solved: {pending[:5]}")
        rows = tuple(
            LookupTableRow(
                grid_index=tuple(t.grid_index),
                x=float(t.initial_pos[0]),
                z=float(t.initial_pos[2]),
                angles=t.whole_angles(),
                solved=t.found,
            )
            for t in targets
        )
        return cls(rows=rows, dimensions=grid.summary(), name=name)

    @property
    def angles(self) -> List[Tuple[int, ...]]:
        """The ordered angle tuples, one per cell."""
        return [row.angles for row in self.rows]

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _define_lines(self) -> List[str]:
        """``#define`` lines describing the grid dimensions."""
        prefix = self.name.upper()
        dims = self.dimensions
        return [
            f"#define {prefix}_MIN_X {dims['min_x']:g}f",
            f"#define {prefix}_MAX_X {dims['max_x']:g}f",
            f"#define {prefix}_COUNT_X {int(dims['count_x'])}",
            f"#define {prefix}_MIN_Z {dims['min_z']:g}f",
            f"#define {prefix}_MAX_Z {dims['max_z']:g}f",
            f"#define {prefix}_COUNT_Z {int(dims['count_z'])}",
            f"#define {prefix}_TARGET_Y {dims['height_y']:g}f",
            f"#define {prefix}_NUM_JOINTS {NUM_JOINTS}",
        ]

    def _row_line(self, row: LookupTableRow, last: bool) -> str:
        """Render one table row as a C initialiser line.

        Args:
            row: Row to render.
            last: Omit the trailing comma when True.

        Returns:
            The formatted line.
        """
        values = ", ".join(f"{a:4d}" for a in row.angles)
        comma = "" if last else ","
        note = "" if row.solved else " unsolved"
        return f"    {{ {values} }}{comma} /* x={row.x:g} z={row.z:g}{note} */"

    def to_c_header(self) -> str:
        """Render the table as a self-contained C header.

        Returns:
            Header text ending in a newline.
        """
        prefix = self.name.upper()
        guard = f"{prefix}_ANGLE_TABLE_H"
        lines = [
            "/* Generated by grippr_sim. Do not edit. */",
            f"#ifndef {guard}",
            f"#define {guard}",
            "",
            "#include <stdint.h>",
            "",
        ]
        lines.extend(self._define_lines())
        lines.append("")
        lines.append(
            f"static const int16_t {self.name}_angles"
            f"[{prefix}_COUNT_Z * {prefix}_COUNT_X][{prefix}_NUM_JOINTS] = {{"
        )
        for idx, row in enumerate(self.rows):
            lines.append(self._row_line(row, last=idx == len(self.rows) - 1))
        lines.extend(["};", "", f"#endif /* {guard} */", ""])
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data form of the table, suitable for JSON."""
        return {
            "name": self.name,
            "dimensions": dict(self.dimensions),
            "rows": [
                {
                    "grid_index": list(row.grid_index),
                    "x": row.x,
                    "z": row.z,
                    "angles": list(row.angles),
                    "solved": row.solved,
                }
                for row in self.rows
            ],
        }

    def to_json(self) -> str:
        """Render the table as indented JSON with sorted keys."""
        return json.dumps(self.to_dict(), indent=2, sort_keys=True) + "\n"

    def render(self, path: str | Path) -> str:
        """Render in the format implied by the suffix of *path*.

        Args:
            path: Destination file name.

        Returns:
            The rendered text.

        Raises:
            ValueError: If the suffix is not ``.h``, ``.c`` or ``.json``.
        """
        suffix = Path(path).suffix.lower()
        if suffix in _HEADER_SUFFIXES:
            return self.to_c_header()
        if suffix in _JSON_SUFFIXES:
            return self.to_json()
        raise ValueError(
            f"Unsupported table format '{suffix}'. "
            f"Use one of {list(_HEADER_SUFFIXES + _JSON_SUFFIXES)}"
        )

    def save(self, path: str | Path) -> Path:
        """Write the table to *path*, creating parent directories.

        Args:
            path: Destination; the suffix selects the format.

        Returns:
            The path written.
        """
        out = Path(path)
        text = self.render(out)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text, encoding="utf-8")
        return out
